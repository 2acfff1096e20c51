"""Main entry point for pedalhmi."""

from pedalhmi.cli.main import cli

if __name__ == "__main__":
    cli()
