"""Plugin metadata commands."""

import click

from pedalhmi.lv2 import PluginMetadataCache
from pedalhmi.models import PluginDescription

from .common import load_config


def _open_cache(ctx: click.Context) -> PluginMetadataCache:
    config = load_config(ctx)
    return PluginMetadataCache.from_paths(config.cache_path, config.lv2_paths)


def echo_description(description: PluginDescription) -> None:
    click.echo(description.label)
    click.echo(f"    URI: {description.uri}")
    click.echo(f"    Bundle: {description.bundle_path}")
    if description.brand:
        click.echo(f"    Brand: {description.brand}")
    if description.thumbnail_path:
        click.echo(f"    Thumbnail: {description.thumbnail_path}")
    if description.screenshot_path:
        click.echo(f"    Screenshot: {description.screenshot_path}")

    click.echo(f"\nControls ({len(description.control_parameters)}):")
    for param in description.control_parameters:
        flags = [
            flag
            for flag in ("toggle", "integer", "trigger", "enumeration", "output")
            if getattr(param, flag)
        ]
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(
            f"  {param.symbol}: {param.name} "
            f"({param.minimum:g}..{param.maximum:g}, default {param.default:g}){suffix}"
        )
        for point in param.scale_points:
            click.echo(f"      {point.value:g} = {point.label}")

    if description.file_parameters:
        click.echo(f"\nFiles ({len(description.file_parameters)}):")
        for param in description.file_parameters:
            types = ", ".join(param.file_types) or "any"
            click.echo(f"  {param.label}: {param.uri} ({types})")


@click.group(name="plugins")
def plugins_group():
    """Inspect installed LV2 plugins."""
    pass


@plugins_group.command(name="info")
@click.pass_context
@click.argument("uri")
def plugins_info(ctx, uri: str):
    """Show the parameters of one plugin."""
    with _open_cache(ctx) as cache:
        description = cache.get(uri)
    if description is None:
        click.echo(f"Unknown plugin: {uri}", err=True)
        ctx.exit(1)
    echo_description(description)


@plugins_group.command(name="index")
@click.pass_context
@click.option("--rescan", is_flag=True, help="Scan bundle directories even if the cache is warm")
def plugins_index(ctx, rescan: bool):
    """List known plugins and their bundles."""
    with _open_cache(ctx) as cache:
        index = cache.rebuild_index() if rescan else cache.known_plugins()

    if not index:
        click.echo("No LV2 plugins found.")
        return
    for uri in sorted(index):
        click.echo(f"{uri}\n    {index[uri]}")
    click.echo(f"\n{len(index)} plugin(s)")


@plugins_group.command(name="refresh")
@click.pass_context
def plugins_refresh(ctx):
    """Clear the plugin metadata cache."""
    with _open_cache(ctx) as cache:
        cache.refresh()
    click.echo("Plugin cache cleared.")
