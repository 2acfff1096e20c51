"""Foreground bridge server."""

import logging
import time

import click

from pedalhmi.exceptions import PedalHmiError

from .common import exit_with_error, load_config

logger = logging.getLogger(__name__)


@click.command()
@click.pass_context
@click.option("--host", type=str, default=None, help="Address to bind (default: from config)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind (default: from config)")
def serve(ctx, host: str | None, port: int | None):
    """Run the HMI bridge until interrupted (Ctrl+C)."""
    from pedalhmi.core import HmiBridge

    config = load_config(ctx)
    updates = {key: value for key, value in (("host", host), ("port", port)) if value is not None}
    if updates:
        config = config.model_copy(update=updates)

    bridge = HmiBridge(config)
    try:
        bridge.start()
        bound_host, bound_port = bridge.server.address
        click.echo(f"HMI bridge listening on {bound_host}:{bound_port} (Ctrl+C to stop)")
        while bridge.is_running:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.info("Bridge interrupted by user")
        click.echo("\nShutting down...", err=True)
    except PedalHmiError as e:
        logger.exception("Error running bridge")
        exit_with_error(ctx, e)
    finally:
        bridge.stop()
