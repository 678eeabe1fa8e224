# tests/test_cli.py
"""
Tests for the configset command line.
"""

import json

import pytest
from click.testing import CliRunner

from configset.cli import cli


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "app.yaml").write_text("name: demo\nport: 8080\n")
    return str(tmp_path)


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:

    def test_dump_compact(self, runner, config_dir):
        """An empty indent gives compact JSON."""
        result = runner.invoke(cli, ["-d", config_dir, "--no-env", "dump", "--indent", ""])
        assert result.exit_code == 0
        assert result.output == '{"app":{"name":"demo","port":8080}}\n'

    def test_dump_pretty(self, runner, config_dir):
        """The default indent pretty-prints."""
        result = runner.invoke(cli, ["-d", config_dir, "--no-env", "dump"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"app": {"name": "demo", "port": 8080}}
        assert result.output.endswith("}\n")

    def test_get_with_env_override(self, runner, config_dir, monkeypatch):
        """get prints the overridden value as JSON."""
        monkeypatch.setenv("CONFIGSET.app.port", "9090")
        result = runner.invoke(cli, ["-d", config_dir, "get", "app.port"])
        assert result.exit_code == 0
        assert result.output == "9090\n"

    def test_no_env_ignores_overrides(self, runner, config_dir, monkeypatch):
        """--no-env skips the process environment."""
        monkeypatch.setenv("CONFIGSET.app.port", "9090")
        result = runner.invoke(cli, ["-d", config_dir, "--no-env", "get", "app.port"])
        assert result.output == "8080\n"

    def test_dotenv_overrides(self, runner, config_dir, tmp_path):
        """--dotenv reads overrides from a file."""
        dotenv_file = tmp_path / "local.env"
        dotenv_file.write_text("CONFIGSET.app.name=from_dotenv\n")
        result = runner.invoke(cli, ["-d", config_dir, "--no-env", "--dotenv", str(dotenv_file), "get", "app.name"])
        assert result.exit_code == 0
        assert result.output == '"from_dotenv"\n'

    def test_get_missing(self, runner, config_dir):
        """A missing key exits 1."""
        result = runner.invoke(cli, ["-d", config_dir, "--no-env", "get", "app.missing"])
        assert result.exit_code == 1
        assert "Key not found" in result.output

    def test_exists(self, runner, config_dir):
        """exists prints true or false."""
        assert runner.invoke(cli, ["-d", config_dir, "--no-env", "exists", "app.name"]).output == "true\n"
        missing = runner.invoke(cli, ["-d", config_dir, "--no-env", "exists", "app.nope"])
        assert missing.exit_code == 1
        assert missing.output == "false\n"

    def test_missing_directory(self, runner, tmp_path):
        """Load errors are printed and exit 1."""
        result = runner.invoke(cli, ["-d", str(tmp_path / "nope"), "dump"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_bad_override(self, runner, config_dir, monkeypatch):
        """A bad override names its variable."""
        monkeypatch.setenv("CONFIGSET.app.port", "[")
        result = runner.invoke(cli, ["-d", config_dir, "dump"])
        assert result.exit_code == 1
        assert "CONFIGSET.app.port" in result.output

    def test_help_names_dump_options(self):
        """The group help spells the dump options as dump accepts them."""
        assert "[--line-prefix STR]" in cli.help
        dump_options = {opt for param in cli.commands["dump"].params for opt in param.opts}
        assert dump_options == {"--indent", "--line-prefix"}

    def test_dump_line_prefix(self, runner, config_dir):
        """--line-prefix follows every newline of the dump."""
        result = runner.invoke(cli, ["-d", config_dir, "--no-env", "dump", "--line-prefix", "# "])
        assert result.exit_code == 0
        assert result.output.startswith('{\n#   "app": {\n')
