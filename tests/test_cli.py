"""CLI tests for the copy and config commands."""

import os

import pyperclip
import pytest
import yaml
from unittest.mock import patch
from click.testing import CliRunner

from relatedfiles.main import cli

SERVICE = "src/main/java/com/acme/app/Service.java"
HELPER = "src/main/java/com/acme/util/Helper.java"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("RELATED_FILES_"):
            monkeypatch.delenv(name)


@pytest.fixture
def runner():
    """Create Click test runner."""
    return CliRunner()


class TestCopyCommand:
    def test_help(self, runner):
        result = runner.invoke(cli, ["copy", "--help"])

        assert result.exit_code == 0
        assert "Collect ROOT_FILE and its related files" in result.output
        assert "--level" in result.output
        assert "--clipboard" in result.output

    def test_requires_existing_file(self, runner):
        result = runner.invoke(cli, ["copy", "/nonexistent/Service.java"])

        assert result.exit_code == 2
        assert "does not exist" in result.output

    def test_stdout(self, runner, java_repo):
        result = runner.invoke(cli, ["copy", str(java_repo / SERVICE)])

        assert result.exit_code == 0
        assert f"// File: {HELPER}\n" in result.output
        assert f"// File: {SERVICE}\n" in result.output
        assert "Copied 3 files to stdout" in result.output

    def test_strict_level(self, runner, java_repo):
        result = runner.invoke(cli, ["copy", str(java_repo / SERVICE), "--level", "strict"])

        assert result.exit_code == 0
        assert "Copied 2 files to stdout" in result.output
        assert "ServiceImpl" not in result.output.split("Copied")[0]

    def test_output_file(self, runner, java_repo, tmp_path):
        target = tmp_path / "context.txt"

        result = runner.invoke(cli, ["copy", str(java_repo / SERVICE), "-o", str(target)])

        assert result.exit_code == 0
        assert f"to {target}" in result.output
        assert target.read_text().startswith(f"// File: {HELPER}\n")

    @patch("relatedfiles.delivery.pyperclip.copy")
    def test_clipboard(self, mock_copy, runner, java_repo):
        result = runner.invoke(cli, ["copy", str(java_repo / SERVICE), "--clipboard", "--no-prune"])

        assert result.exit_code == 0
        assert "Copied 3 files to clipboard" in result.output
        copied = mock_copy.call_args[0][0]
        assert copied.startswith(f"// File: {HELPER}\npackage com.acme.util;\n\npublic class Helper {{")

    @patch("relatedfiles.delivery.pyperclip.copy", side_effect=pyperclip.PyperclipException("no display"))
    def test_clipboard_unavailable(self, mock_copy, runner, java_repo):
        result = runner.invoke(cli, ["copy", str(java_repo / SERVICE), "-c"])

        assert result.exit_code == 1
        assert "Error: Clipboard unavailable" in result.output

    def test_unsupported_root(self, runner, java_repo):
        result = runner.invoke(cli, ["copy", str(java_repo / "README.md")])

        assert result.exit_code == 1
        assert "Error: No resolver" in result.output

    def test_depth_out_of_range(self, runner, java_repo):
        result = runner.invoke(cli, ["copy", str(java_repo / SERVICE), "--depth", "11"])

        assert result.exit_code == 2

    def test_invalid_policy_file(self, runner, java_repo, tmp_path):
        policy_file = tmp_path / "policy.yaml"
        policy_file.write_text("- not\n- a mapping\n")

        result = runner.invoke(cli, ["copy", str(java_repo / SERVICE), "--config", str(policy_file)])

        assert result.exit_code == 1
        assert "invalid policy" in result.output

    def test_policy_file_with_override(self, runner, java_repo, tmp_path):
        policy_file = tmp_path / "policy.yaml"
        policy_file.write_text("relatedness_level: strict\n")

        result = runner.invoke(
            cli,
            ["copy", str(java_repo / SERVICE), "--config", str(policy_file), "--level", "medium"],
        )

        assert result.exit_code == 0
        assert "Copied 3 files" in result.output


class TestConfigCommand:
    def test_defaults(self, runner):
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["relatedness_level"] == "medium"
        assert data["max_depth"] is None
        assert "java." in data["excluded_packages"]

    def test_environment(self, runner, monkeypatch):
        monkeypatch.setenv("RELATED_FILES_LEVEL", "broad")

        result = runner.invoke(cli, ["config"])

        assert yaml.safe_load(result.output)["relatedness_level"] == "broad"

    def test_policy_file(self, runner, tmp_path):
        policy_file = tmp_path / "policy.yaml"
        policy_file.write_text("package_segments: 3\ninclude_javadoc: false\n")

        result = runner.invoke(cli, ["config", "--config", str(policy_file)])

        data = yaml.safe_load(result.output)
        assert data["package_segments"] == 3
        assert data["include_javadoc"] is False
