"""Prompt data models.

A Prompt is built once from a parsed Markdown file and never mutated
afterwards; every reload produces fresh instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import PromptParseError

__all__ = ["ParameterSpec", "Prompt"]


def _text(value: Any) -> str:
    """Coerce a scalar frontmatter value to text (None becomes "")."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ParameterSpec:
    """One named input a prompt accepts."""

    name: str
    description: str = ""
    type: str = "string"
    required: bool = False

    @classmethod
    def from_dict(cls, data: Any, source_path: str | None = None) -> ParameterSpec:
        """Build a ParameterSpec from one entry of the ``parameters`` list.

        Args:
            data: Mapping with name, description, type and required keys
            source_path: File the entry came from, for error messages

        Returns:
            ParameterSpec instance

        Raises:
            PromptParseError: If the entry is not a mapping, has no name,
                or has a non-boolean ``required`` value
        """
        if not isinstance(data, dict):
            raise PromptParseError(
                f"parameter entry must be a mapping, got {type(data).__name__}", source_path
            )

        name = _text(data.get("name")).strip()
        if not name:
            raise PromptParseError("parameter entry has no name", source_path)

        required = data.get("required", False)
        if required is None:
            required = False
        if not isinstance(required, bool):
            raise PromptParseError(
                f"parameter '{name}' has non-boolean 'required' value {required!r}",
                source_path,
            )

        param_type = _text(data.get("type"))
        return cls(
            name=name,
            description=_text(data.get("description")),
            type=param_type or "string",
            required=required,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "required": self.required,
        }


@dataclass(frozen=True)
class Prompt:
    """A parsed prompt: identity, metadata, parameters and template body."""

    id: str
    title: str = ""
    description: str = ""
    version: str = ""
    parameters: tuple[ParameterSpec, ...] = field(default_factory=tuple)
    content: str = ""
    source_path: str = ""

    @classmethod
    def from_frontmatter(
        cls,
        frontmatter: dict[str, Any],
        content: str,
        source_path: str = "",
    ) -> Prompt:
        """Create a Prompt from parsed frontmatter and the remaining body.

        The body is kept verbatim. Scalar metadata is coerced to text, so a
        frontmatter ``version: 1.0`` becomes ``"1.0"``.

        Raises:
            PromptParseError: If ``parameters`` is malformed or declares the
                same name twice
        """
        raw_params = frontmatter.get("parameters") or []
        if not isinstance(raw_params, list):
            raise PromptParseError("'parameters' must be a list", source_path or None)

        parameters: list[ParameterSpec] = []
        seen: set[str] = set()
        for entry in raw_params:
            spec = ParameterSpec.from_dict(entry, source_path or None)
            if spec.name in seen:
                raise PromptParseError(
                    f"duplicate parameter name '{spec.name}'", source_path or None
                )
            seen.add(spec.name)
            parameters.append(spec)

        return cls(
            id=_text(frontmatter.get("id")).strip(),
            title=_text(frontmatter.get("title")),
            description=_text(frontmatter.get("description")),
            version=_text(frontmatter.get("version")),
            parameters=tuple(parameters),
            content=content,
            source_path=source_path,
        )

    def parameter(self, name: str) -> ParameterSpec | None:
        """Get a declared parameter by name."""
        for spec in self.parameters:
            if spec.name == name:
                return spec
        return None

    @property
    def required_parameters(self) -> list[str]:
        """Names of required parameters, in declaration order."""
        return [spec.name for spec in self.parameters if spec.required]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "version": self.version,
            "parameters": [spec.to_dict() for spec in self.parameters],
            "source_path": self.source_path,
        }
