"""Configuration commands.

Commands:
    - config show            # Display configuration
    - config set KEY VALUE   # Update one value and save
    - config path            # Print the configuration file location
"""

import click
from pydantic import ValidationError

from pedalhmi.exceptions import wrap_pydantic_error
from pedalhmi.models import AppConfig

from .common import config_path, exit_with_error, load_config


def parse_value(config: AppConfig, key: str, raw: str):
    """Turn a command-line string into a value for ``key``."""
    if isinstance(getattr(config, key), list):
        # Lists are comma-separated
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


@click.group(name="config")
def config():
    """Configure the HMI bridge."""
    pass


@config.command(name="show")
@click.pass_context
def config_show(ctx):
    """Display the current configuration."""
    current = load_config(ctx)
    data = current.model_dump(mode="json")
    width = max(len(key) for key in data)
    for key, value in data.items():
        if isinstance(value, list):
            value = ", ".join(str(item) for item in value)
        click.echo(f"{key.ljust(width)}  {value}")


@config.command(name="set")
@click.pass_context
@click.argument("key")
@click.argument("value")
def config_set(ctx, key: str, value: str):
    """Set KEY to VALUE and save (lists are comma-separated)."""
    current = load_config(ctx)
    if key not in AppConfig.model_fields:
        known = ", ".join(AppConfig.model_fields)
        click.echo(f"Unknown setting '{key}'. Known settings: {known}", err=True)
        ctx.exit(1)

    path = config_path(ctx)
    data = current.model_dump()
    data[key] = parse_value(current, key, value)
    try:
        updated = AppConfig.model_validate(data)
    except ValidationError as e:
        exit_with_error(ctx, wrap_pydantic_error(e, str(path)))

    updated.save(path)
    click.echo(f"{key} = {getattr(updated, key)}")


@config.command(name="path")
@click.pass_context
def config_path_command(ctx):
    """Print the configuration file location."""
    click.echo(str(config_path(ctx)))
