"""
MCP server command.
"""

import logging
import sys

import click

from promptcaddy.config.app import PromptCaddyConfig
from promptcaddy.prompts.errors import PromptError

logger = logging.getLogger(__name__)


@click.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """
    Start the MCP server on stdio.

    Loads every prompt from the prompt directory, exposes each one as an
    MCP tool and reloads them whenever the directory changes. Runs until
    stdin is closed.

    Example usage:
      claude mcp add --transport stdio prompts -- promptcaddy --dir ./prompts serve
    """
    from promptcaddy.servers.stdio import PromptServer

    config: PromptCaddyConfig = ctx.obj["config"]

    try:
        server = PromptServer.from_config(config)
        logger.info("Starting PromptCaddy MCP server...")
        server.serve()
    except PromptError as e:
        logger.error(f"MCP server failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
