"""Placeholder substitution for prompt bodies.

Rendering is literal text replacement of ``{{name}}`` tokens. There is no
expression language, escaping or recursive expansion.
"""

from __future__ import annotations

from collections.abc import Mapping

from .errors import MissingParameterError
from .models import Prompt

__all__ = ["SELECTION_PARAMETER", "placeholder", "render_prompt"]

SELECTION_PARAMETER = "selection"


def placeholder(name: str) -> str:
    """Return the placeholder token for a parameter name."""
    return "{{" + name + "}}"


def render_prompt(prompt: Prompt, bindings: Mapping[str, str]) -> str:
    """Render a prompt body with bound values.

    Declared parameters are processed in declaration order. A required
    parameter without a binding stops rendering immediately. An optional
    parameter without a binding leaves its placeholder untouched. The
    ``selection`` binding is substituted last, whether or not the prompt
    declares it.

    Args:
        prompt: Prompt to render
        bindings: Parameter name to value

    Returns:
        Rendered text

    Raises:
        MissingParameterError: If a required parameter has no binding
    """
    content = prompt.content

    for spec in prompt.parameters:
        if spec.name not in bindings:
            if spec.required:
                raise MissingParameterError(spec.name)
            continue
        content = content.replace(placeholder(spec.name), bindings[spec.name])

    if SELECTION_PARAMETER in bindings:
        content = content.replace(
            placeholder(SELECTION_PARAMETER), bindings[SELECTION_PARAMETER]
        )

    return content
