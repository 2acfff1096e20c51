"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path

import click

from pedalhmi import __version__
from pedalhmi.models.config import DEFAULT_CONFIG_DIR

from .commands import banks_group, config, pedalboards_group, plugins_group, serve

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def default_log_path(debug: bool, log_file: Path | None) -> Path:
    if log_file:
        return log_file
    if debug:
        # Debug mode: log to current directory
        return Path.cwd() / "pedalhmi-debug.log"
    return DEFAULT_CONFIG_DIR / "logs" / "pedalhmi.log"


def setup_logging(
    verbose: int,
    debug: bool,
    log_file: Path | None,
    log_level: str,
    console: bool = False,
) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
        console: Also log to stderr (foreground server)

    Returns:
        Path of the log file
    """
    if debug:
        level = logging.DEBUG
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Override with explicit log level if provided
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = default_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    # Rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(max(level, logging.INFO))
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.pass_context
@click.version_option(version=__version__, prog_name="pedalhmi")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ~/.pedalhmi/config.json)",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v: INFO, -vv: DEBUG)")
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode (DEBUG level, logs to ./pedalhmi-debug.log)",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom log file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Log level for file logging (default: INFO)",
)
def cli(
    ctx,
    config_path: Path | None,
    verbose: int,
    debug: bool,
    log_file: Path | None,
    log_level: str,
):
    """
    Pedal HMI bridge - control-plane link between a touchscreen and the audio host.

    \b
    Examples:
      # Run the bridge in the foreground
      pedalhmi serve

      # Show a plugin's parameters
      pedalhmi plugins info http://example.org/plugins/delay

      # List pedalboards in host order
      pedalhmi pedalboards list

      # Change the listening port
      pedalhmi config set port 9999
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    serving = ctx.invoked_subcommand == "serve"
    if serving or verbose or debug or log_file:
        ctx.obj["log_path"] = setup_logging(verbose, debug, log_file, log_level, console=serving)
    else:
        ctx.obj["log_path"] = None


cli.add_command(serve)
cli.add_command(plugins_group)
cli.add_command(pedalboards_group)
cli.add_command(banks_group)
cli.add_command(config)

if __name__ == "__main__":
    cli()
