"""Tests for configuration loading."""

import json
import os

import pytest
import yaml

from dirmail.config import Settings, load_settings
from dirmail.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run each test against an environment without DIRMAIL_ variables."""
    environ = {k: v for k, v in os.environ.items() if not k.upper().startswith("DIRMAIL_")}
    monkeypatch.setattr(os, "environ", environ)
    return environ


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_any_source(self, temp_root):
        """Test that no config source is required."""
        settings = load_settings(config_dir=temp_root)

        assert settings.transport == "mail"
        assert settings.subject == "attached file"
        assert settings.mail.settle_seconds == 5.0
        assert settings.mail.empty_response_is_success is False
        assert settings.fail_on_error is False

    def test_yaml_config_file(self, temp_root):
        """Test loading values from dirmail.yaml."""
        with open(temp_root / "dirmail.yaml", "w") as f:
            yaml.dump({"transport": "smtp", "smtp": {"host": "smtp.example.com", "port": 587}}, f)

        settings = load_settings(config_dir=temp_root)

        assert settings.transport == "smtp"
        assert settings.smtp.host == "smtp.example.com"
        assert settings.smtp.port == 587

    def test_json_config_file(self, temp_root):
        """Test loading an explicit JSON config file."""
        path = temp_root / "custom.json"
        path.write_text(json.dumps({"subject": "From JSON"}))

        settings = load_settings(config_dir=temp_root, config_file=str(path))

        assert settings.subject == "From JSON"

    def test_environment_overrides_file(self, temp_root, clean_env):
        """Test that environment variables win over the config file."""
        with open(temp_root / "dirmail.yaml", "w") as f:
            yaml.dump({"subject": "From file", "mail": {"settle_seconds": 1}}, f)
        clean_env["DIRMAIL_SUBJECT"] = "From env"
        clean_env["DIRMAIL_MAIL__SETTLE_SECONDS"] = "7.5"

        settings = load_settings(config_dir=temp_root)

        assert settings.subject == "From env"
        assert settings.mail.settle_seconds == 7.5

    def test_env_file(self, temp_root):
        """Test loading variables from a .env file."""
        (temp_root / ".env").write_text("DIRMAIL_TRANSPORT=mock\n")

        settings = load_settings(config_dir=temp_root)

        assert settings.transport == "mock"

    def test_config_file_overrides_env_file(self, temp_root, clean_env):
        """Test that dirmail.yaml wins over .env for the same key."""
        (temp_root / ".env").write_text("DIRMAIL_SUBJECT=from dotenv\nDIRMAIL_TRANSPORT=mock\n")
        with open(temp_root / "dirmail.yaml", "w") as f:
            yaml.dump({"subject": "from yaml"}, f)

        settings = load_settings(config_dir=temp_root)

        assert settings.subject == "from yaml"
        assert settings.transport == "mock"
        assert "DIRMAIL_SUBJECT" not in clean_env

    def test_environment_overrides_env_file(self, temp_root, clean_env):
        """Test that a real environment variable wins over .env."""
        (temp_root / ".env").write_text("DIRMAIL_SMTP__HOST=dotenv.example.com\n")
        clean_env["DIRMAIL_SMTP__HOST"] = "env.example.com"

        settings = load_settings(config_dir=temp_root)

        assert settings.smtp.host == "env.example.com"

    def test_unrelated_prefixed_variable_ignored(self, temp_root, clean_env):
        """Test that an unknown DIRMAIL_ variable is not a configuration error."""
        clean_env["DIRMAIL_HOME"] = "/opt/dirmail"

        settings = load_settings(config_dir=temp_root)

        assert settings.transport == "mail"

    def test_overrides_win(self, temp_root, clean_env):
        """Test that explicit overrides beat every other source."""
        clean_env["DIRMAIL_SUBJECT"] = "From env"

        settings = load_settings(
            config_dir=temp_root,
            subject="From CLI",
            mail={"settle_seconds": 2.0},
            verbose=None,
        )

        assert settings.subject == "From CLI"
        assert settings.mail.settle_seconds == 2.0
        assert settings.mail.attach_timeout == 30.0
        assert settings.verbose is False

    def test_unknown_transport(self, temp_root):
        """Test that an unknown transport is a configuration error."""
        with pytest.raises(ConfigurationError):
            load_settings(config_dir=temp_root, transport="pigeon")

    def test_negative_settle_rejected(self, temp_root):
        """Test that a negative settle duration is rejected."""
        with pytest.raises(ConfigurationError):
            load_settings(config_dir=temp_root, mail={"settle_seconds": -1})

    def test_missing_explicit_config_file(self, temp_root):
        """Test that a named config file must exist."""
        with pytest.raises(ConfigurationError):
            load_settings(config_dir=temp_root, config_file=str(temp_root / "nope.yaml"))

    def test_unsupported_config_format(self, temp_root):
        """Test that unknown config formats are rejected."""
        path = temp_root / "config.toml"
        path.write_text("subject = 'x'\n")

        with pytest.raises(ConfigurationError):
            load_settings(config_dir=temp_root, config_file=str(path))

    def test_transport_name_normalized(self):
        """Test that transport names are case-insensitive."""
        assert Settings(transport="SMTP").transport == "smtp"
