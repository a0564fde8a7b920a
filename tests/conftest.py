"""Pytest configuration and shared fixtures for PromptCaddy tests."""

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from promptcaddy.config.app import PromptCaddyConfig

PromptWriter = Callable[..., Path]


def render_prompt_file(body: str = "", **frontmatter: Any) -> str:
    """Build prompt file text from frontmatter keys and a body."""
    if not frontmatter:
        return body
    header = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    return f"---\n{header}---\n{body}"


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def prompts_dir(temp_dir: Path) -> Path:
    """Create an empty prompt directory."""
    d = temp_dir / "prompts"
    d.mkdir()
    return d


@pytest.fixture
def write_prompt(prompts_dir: Path) -> PromptWriter:
    """Factory writing a prompt file under prompts_dir.

    Usage:
        write_prompt("greet.md", body="Hello {{name}}!", id="greet")
    """

    def _write(relative_path: str, body: str = "", **frontmatter: Any) -> Path:
        path = prompts_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_prompt_file(body, **frontmatter), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def greet_prompt(write_prompt: PromptWriter) -> Path:
    """The canonical greet prompt: one required 'name' parameter."""
    return write_prompt(
        "greet.md",
        body="Hello {{name}}!",
        id="greet",
        title="Greeting",
        description="Say hello",
        version="1.0",
        parameters=[
            {"name": "name", "description": "Who to greet", "type": "string", "required": True}
        ],
    )


@pytest.fixture
def isolated_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point PROMPTCADDY_HOME at an empty directory so no user config is read."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("PROMPTCADDY_HOME", str(home))
    return home


@pytest.fixture
def default_config(prompts_dir: Path) -> PromptCaddyConfig:
    """Config pointing at prompts_dir with watching disabled."""
    return PromptCaddyConfig(prompts_dir=str(prompts_dir), watch={"enabled": False})
