"""Tests for the list, call and serve CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from promptcaddy.cli import cli

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def quiet_logging(isolated_home: Path):
    """Keep CLI tests from reconfiguring root logging or reading user config."""
    with patch("promptcaddy.cli.setup_logging"):
        yield


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def selection_prompt(write_prompt) -> Path:
    return write_prompt(
        "review.md",
        body="Review for {{focus}}:\n{{selection}}",
        id="review",
        title="Code review",
        version="2.1",
        description="Review a snippet",
        parameters=[{"name": "focus", "description": "What to look at", "required": False}],
    )


class TestListCommand:
    def test_table(self, runner: CliRunner, prompts_dir: Path, greet_prompt, selection_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "list"])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].split() == ["ID", "VERSION", "TITLE"]
        assert lines[1].split() == ["──", "───────", "─────"]
        assert lines[2].split() == ["greet", "1.0", "Greeting"]
        assert lines[3].split() == ["review", "2.1", "Code", "review"]

    def test_columns_align(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "list"])

        header, _, row = result.output.splitlines()[:3]
        assert header.index("VERSION") == row.index("1.0")
        assert header.index("TITLE") == row.index("Greeting")

    def test_empty(self, runner: CliRunner, prompts_dir: Path):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "list"])

        assert result.exit_code == 0
        assert f"No prompts found in {prompts_dir}" in result.output

    def test_json(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "list", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["id"] == "greet"
        assert data[0]["parameters"][0]["required"] is True

    def test_missing_directory(self, runner: CliRunner, temp_dir: Path):
        result = runner.invoke(cli, ["--dir", str(temp_dir / "nope"), "list"])

        assert result.exit_code == 1
        assert "failed to load prompts" in result.output


class TestCallCommand:
    def test_named_option(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "greet", "--name", "Ada"])

        assert result.exit_code == 0, result.output
        assert result.output == "Hello Ada!"

    def test_equals_option(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "greet", "--name=Ada"])

        assert result.exit_code == 0, result.output
        assert result.output == "Hello Ada!"

    def test_param_pairs(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "greet", "-p", "name=Ada"])

        assert result.exit_code == 0, result.output
        assert result.output == "Hello Ada!"

    def test_missing_required_parameter(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "greet"])

        assert result.exit_code == 1
        assert "required parameter missing: name" in result.output

    def test_empty_value_counts_as_missing(
        self, runner: CliRunner, prompts_dir: Path, greet_prompt
    ):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "greet", "--name", ""])

        assert result.exit_code == 1
        assert "required parameter missing: name" in result.output

    def test_unknown_prompt(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "nope"])

        assert result.exit_code == 1
        assert "prompt not found: nope" in result.output

    def test_stdin_binds_selection(self, runner: CliRunner, prompts_dir: Path, selection_prompt):
        result = runner.invoke(
            cli,
            ["--dir", str(prompts_dir), "call", "review", "--focus", "bugs"],
            input="def f(): pass\n",
        )

        assert result.exit_code == 0, result.output
        assert result.output == "Review for bugs:\ndef f(): pass\n"

    def test_optional_parameter_left_as_placeholder(
        self, runner: CliRunner, prompts_dir: Path, selection_prompt
    ):
        result = runner.invoke(
            cli, ["--dir", str(prompts_dir), "call", "review"], input="snippet"
        )

        assert result.exit_code == 0, result.output
        assert result.output == "Review for {{focus}}:\nsnippet"

    def test_bad_param_pair(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "greet", "-p", "oops"])

        assert result.exit_code == 2
        assert "expected KEY=VALUE" in result.output

    def test_stray_argument(self, runner: CliRunner, prompts_dir: Path, greet_prompt):
        result = runner.invoke(cli, ["--dir", str(prompts_dir), "call", "greet", "extra"])

        assert result.exit_code == 2
        assert "Unexpected argument: extra" in result.output


class TestServeCommand:
    def test_serves_until_eof(self, runner: CliRunner, prompts_dir: Path, greet_prompt, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text("watch:\n  enabled: false\n", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["--config", str(config_file), "--dir", str(prompts_dir), "serve"],
            input='{"jsonrpc":"2.0","id":1,"method":"tools/list"}\n',
        )

        assert result.exit_code == 0, result.output
        messages = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
        assert [m["id"] for m in messages] == [0, 1]
        assert messages[1]["result"]["tools"][0]["name"] == "greet"

    def test_missing_directory_fails(self, runner: CliRunner, temp_dir: Path):
        result = runner.invoke(cli, ["--dir", str(temp_dir / "nope"), "serve"], input="")

        assert result.exit_code == 1
        assert "does not exist" in result.output


class TestGroupOptions:
    def test_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_invalid_config(self, runner: CliRunner, temp_dir: Path):
        config_file = temp_dir / "config.yaml"
        config_file.write_text("extension: md\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config_file), "list"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output

    def test_config_file_sets_prompts_dir(
        self, runner: CliRunner, prompts_dir: Path, greet_prompt, isolated_home: Path
    ):
        (isolated_home / "config.yaml").write_text(
            f"prompts_dir: {prompts_dir}\n", encoding="utf-8"
        )

        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0, result.output
        assert "greet" in result.output
