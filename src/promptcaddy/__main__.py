"""Allow running as ``python -m promptcaddy``."""

from promptcaddy.cli import cli

if __name__ == "__main__":
    cli()
