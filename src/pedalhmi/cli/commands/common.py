"""Helpers shared by CLI commands."""

import sys
from pathlib import Path

import click

from pedalhmi.exceptions import PedalHmiError, format_error_for_display
from pedalhmi.models import AppConfig
from pedalhmi.models.config import DEFAULT_CONFIG_PATH


def config_path(ctx: click.Context) -> Path:
    """Configuration file selected with the global --config option."""
    obj = ctx.find_root().obj or {}
    return obj.get("config_path") or DEFAULT_CONFIG_PATH


def load_config(ctx: click.Context) -> AppConfig:
    """Load the configuration, exiting with a readable message if it is invalid."""
    try:
        return AppConfig.load_or_default(config_path(ctx))
    except PedalHmiError as e:
        exit_with_error(ctx, e)


def exit_with_error(ctx: click.Context, error: Exception) -> None:
    """Show an error without a traceback and exit with status 1."""
    user_message, recovery_hint = format_error_for_display(error)

    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    log_path = (ctx.find_root().obj or {}).get("log_path")
    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
    sys.exit(1)
