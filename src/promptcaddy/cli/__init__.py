"""
PromptCaddy CLI entry point.
"""

import click

from promptcaddy import __version__
from promptcaddy.config.app import load_config

from .prompts import call, list_prompts
from .serve import serve
from .utils import setup_logging


@click.group()
@click.option(
    "--dir",
    "prompts_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing prompt files (default: ./prompts)",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to custom configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="promptcaddy")
@click.pass_context
def cli(ctx: click.Context, prompts_dir: str | None, config: str | None, verbose: bool) -> None:
    """PromptCaddy - serve and run Markdown prompts via MCP or the command line."""
    ctx.ensure_object(dict)
    try:
        app_config = load_config(config, cli_overrides={"prompts_dir": prompts_dir})
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj["config"] = app_config
    setup_logging(verbose, app_config.logging)


# Register commands
cli.add_command(serve)
cli.add_command(list_prompts)
cli.add_command(call)
