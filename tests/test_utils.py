# tests/test_utils.py

import pytest

from configset.utils import dotenv_lines, environ_lines, expand_path


class TestExpandPath:

    def test_none_input(self):
        """None passes through."""
        assert expand_path(None) is None

    def test_tilde_expansion(self, monkeypatch):
        """~ expands to $HOME."""
        monkeypatch.setenv("HOME", "/home/testuser")
        assert expand_path("~/etc/myapp") == "/home/testuser/etc/myapp"

    def test_env_var_expansion(self, monkeypatch):
        """$VAR expands to its value."""
        monkeypatch.setenv("MY_DIR", "/opt/config")
        assert expand_path("$MY_DIR/myapp") == "/opt/config/myapp"

    def test_plain_path_unchanged(self):
        """Nothing to expand."""
        assert expand_path("/absolute/path") == "/absolute/path"


class TestEnvironmentLines:

    def test_environ_lines(self, monkeypatch):
        """os.environ is rendered as NAME=VALUE lines."""
        monkeypatch.setenv("CONFIGSET.db.port", "5432")
        assert "CONFIGSET.db.port=5432" in environ_lines()

    def test_dotenv_lines_keep_file_order(self, tmp_path):
        """Comments and bare names are dropped; quotes are removed."""
        f = tmp_path / ".env"
        f.write_text('# comment\nCONFIGSET.b=2\nCONFIGSET.a="quoted value"\nBARE\n')
        assert dotenv_lines(str(f)) == ["CONFIGSET.b=2", "CONFIGSET.a=quoted value"]

    def test_dotenv_missing(self, tmp_path):
        """A missing .env file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            dotenv_lines(str(tmp_path / ".env"))
