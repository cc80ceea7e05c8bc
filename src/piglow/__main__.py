"""Main entry point for ``python -m piglow``."""

from piglow.cli.main import cli

if __name__ == "__main__":
    cli()
