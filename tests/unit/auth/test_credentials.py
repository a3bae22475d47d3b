"""Tests for multi-source resolution of connection settings and credentials."""

import logging

import pytest

from wikiapi_core.auth import (
    PASSWORD_ENV,
    PASSWORD_FILE_ENV,
    URL_ENV,
    USERNAME_ENV,
    CredentialResolver,
)
from wikiapi_core.auth.exceptions import CredentialFileError, CredentialNotFoundError


class TestCredentialResolverInit:
    """Test CredentialResolver initialization."""

    def test_init_default(self):
        """Test default initialization."""
        resolver = CredentialResolver()
        assert resolver._dotenv_loaded

    def test_init_skip_dotenv(self):
        """Test initialization with dotenv loading disabled."""
        resolver = CredentialResolver(load_dotenv=False)
        assert not resolver._dotenv_loaded

    def test_dotenv_values_become_visible(self, tmp_path):
        """Values from a .env file are resolved like environment variables."""
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("TEST_WIKI_USER=dotenv-bot\n")

        resolver = CredentialResolver(dotenv_path=str(dotenv_file))

        assert resolver.resolve(env_var_name="TEST_WIKI_USER") == "dotenv-bot"

    def test_dotenv_loading_error_handled_gracefully(self, tmp_path):
        """A .env path that is a directory does not break construction."""
        dotenv_path = tmp_path / "not_a_file"
        dotenv_path.mkdir()

        resolver = CredentialResolver(dotenv_path=str(dotenv_path))

        assert resolver._dotenv_loaded is True
        assert resolver.resolve(value="works") == "works"


class TestCredentialResolverResolve:
    """Test resolution order."""

    def test_explicit_value_overrides_all(self, monkeypatch, resolver):
        monkeypatch.setenv(USERNAME_ENV, "env-bot")

        result = resolver.resolve(value="explicit-bot", env_var_name=USERNAME_ENV, default="default-bot")

        assert result == "explicit-bot"

    def test_environment_overrides_default(self, monkeypatch, resolver):
        monkeypatch.setenv(URL_ENV, "https://env.example.org/w")

        result = resolver.resolve(env_var_name=URL_ENV, default="https://default.example.org/w")

        assert result == "https://env.example.org/w"

    def test_default_used_when_nothing_else_set(self, resolver):
        assert resolver.resolve(env_var_name=URL_ENV, default="fallback") == "fallback"

    def test_returns_none_when_not_found(self, resolver):
        assert resolver.resolve(env_var_name=PASSWORD_ENV) is None

    def test_raises_when_required_and_not_found(self, resolver):
        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolver.resolve(env_var_name=USERNAME_ENV, required=True)

        assert "Required credential not found" in str(exc_info.value)
        assert exc_info.value.env_var_name == USERNAME_ENV


class TestCredentialResolverFromFile:
    """Test file-based credential resolution."""

    def test_explicit_path_is_stripped(self, tmp_path, resolver):
        password_file = tmp_path / "password"
        password_file.write_text("  s3cret  \n")

        assert resolver.resolve_from_file(file_path=str(password_file)) == "s3cret"

    def test_path_from_environment(self, tmp_path, monkeypatch, resolver):
        password_file = tmp_path / "password"
        password_file.write_text("from-env-path")
        monkeypatch.setenv(PASSWORD_FILE_ENV, str(password_file))

        assert resolver.resolve_from_file(env_var_name=PASSWORD_FILE_ENV) == "from-env-path"

    def test_tilde_expansion(self, tmp_path, monkeypatch, resolver):
        fake_home = tmp_path / "home"
        password_file = fake_home / ".config" / "wiki-password"
        password_file.parent.mkdir(parents=True)
        password_file.write_text("home-dir-password")
        monkeypatch.setenv("HOME", str(fake_home))

        assert resolver.resolve_from_file(file_path="~/.config/wiki-password") == "home-dir-password"

    def test_env_var_expansion(self, tmp_path, monkeypatch, resolver):
        (tmp_path / "password").write_text("expanded")
        monkeypatch.setenv("TEST_SECRETS_DIR", str(tmp_path))

        assert resolver.resolve_from_file(file_path="$TEST_SECRETS_DIR/password") == "expanded"

    def test_missing_file(self, resolver):
        assert resolver.resolve_from_file(file_path="/nonexistent/path/to/password") is None

        with pytest.raises(CredentialFileError, match="not found"):
            resolver.resolve_from_file(file_path="/nonexistent/path/to/password", required=True)

    def test_directory_instead_of_file(self, tmp_path, resolver):
        directory = tmp_path / "dir_not_file"
        directory.mkdir()

        assert resolver.resolve_from_file(file_path=str(directory)) is None
        with pytest.raises(CredentialFileError):
            resolver.resolve_from_file(file_path=str(directory), required=True)

    def test_env_var_not_set(self, resolver):
        assert resolver.resolve_from_file(env_var_name=PASSWORD_FILE_ENV) is None

        with pytest.raises(CredentialFileError) as exc_info:
            resolver.resolve_from_file(env_var_name=PASSWORD_FILE_ENV, required=True)
        assert PASSWORD_FILE_ENV in str(exc_info.value)

    def test_no_path_provided(self, resolver):
        assert resolver.resolve_from_file() is None

        with pytest.raises(CredentialFileError, match="No file path provided"):
            resolver.resolve_from_file(required=True)


class TestCredentialMasking:
    """Test that secrets stay out of the logs."""

    def test_value_is_masked(self, caplog, resolver):
        caplog.set_level(logging.DEBUG)

        resolver.resolve(value="super-secret-password", mask_in_logs=True)

        assert "super-secret-password" not in caplog.text
        assert "***" in caplog.text

    def test_masking_can_be_disabled(self, caplog, resolver):
        caplog.set_level(logging.DEBUG)

        resolver.resolve(value="https://wiki.example.org/w", mask_in_logs=False)

        assert "https://wiki.example.org/w" in caplog.text

    def test_file_content_is_masked(self, tmp_path, caplog, resolver):
        caplog.set_level(logging.DEBUG)
        password_file = tmp_path / "password"
        password_file.write_text("file-secret-xyz")

        resolver.resolve_from_file(file_path=str(password_file))

        assert "file-secret-xyz" not in caplog.text
        assert "***" in caplog.text
