"""
Prompt listing and one-shot rendering commands.
"""

import json
import logging

import click

from promptcaddy.config.app import PromptCaddyConfig
from promptcaddy.prompts.errors import PromptError
from promptcaddy.prompts.render import SELECTION_PARAMETER, render_prompt

from .utils import format_table, load_store, parse_extra_options, parse_param_pairs, read_selection

logger = logging.getLogger(__name__)


@click.command("list")
@click.option("--json", "json_format", is_flag=True, help="Output as JSON")
@click.pass_context
def list_prompts(ctx: click.Context, json_format: bool) -> None:
    """List all prompts with their id, version and title."""
    config: PromptCaddyConfig = ctx.obj["config"]
    store = load_store(config)
    prompts = sorted(store.list(), key=lambda p: p.id)

    if json_format:
        click.echo(json.dumps([p.to_dict() for p in prompts], indent=2))
        return

    if not prompts:
        click.echo(f"No prompts found in {config.prompts_dir}")
        return

    rows = [(p.id, p.version, p.title) for p in prompts]
    click.echo(format_table(["ID", "VERSION", "TITLE"], rows))


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.argument("prompt_id")
@click.option(
    "--param",
    "-p",
    "params",
    multiple=True,
    metavar="KEY=VALUE",
    help="Parameter value (repeatable). Parameters may also be given as --KEY VALUE.",
)
@click.pass_context
def call(ctx: click.Context, prompt_id: str, params: tuple[str, ...]) -> None:
    """
    Render a prompt with the given parameters.

    Piped stdin is bound to the {{selection}} placeholder.

    Examples:
      promptcaddy call greet --name Ada
      git diff | promptcaddy call review -p focus=security
    """
    config: PromptCaddyConfig = ctx.obj["config"]
    store = load_store(config)

    try:
        prompt = store.get(prompt_id)
    except PromptError as e:
        raise click.ClickException(str(e)) from e

    values: dict[str, str] = {}

    selection = read_selection()
    if selection is not None:
        values[SELECTION_PARAMETER] = selection

    supplied = parse_extra_options(ctx.args)
    supplied.update(parse_param_pairs(params))
    for key, value in supplied.items():
        # Empty values count as not supplied
        if value != "":
            values[key] = value

    unknown = [
        key for key in supplied if key != SELECTION_PARAMETER and prompt.parameter(key) is None
    ]
    if unknown:
        logger.warning(f"Ignoring undeclared parameters for '{prompt.id}': {', '.join(unknown)}")

    try:
        result = render_prompt(prompt, values)
    except PromptError as e:
        raise click.ClickException(str(e)) from e

    click.echo(result, nl=False)
