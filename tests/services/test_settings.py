from __future__ import annotations

from pathlib import Path

import pytest

from bunqcli.services.auth import ConfigurationError, JsonFileCredentialStore, KeyringCredentialStore
from bunqcli.services.settings import Settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = Settings.from_env({})
    assert settings.store_backend == "file"
    assert settings.timeout == 30.0
    assert settings.log_level == "WARNING"
    assert settings.debug is False
    assert settings.log_json is False
    assert settings.credentials_path.name == "credentials.json"
    assert settings.credentials_path.parent.name == ".bunq-cli"


def test_overrides(tmp_path):
    settings = Settings.from_env(
        {
            "BUNQ_CLI_HOME": str(tmp_path / "bunq"),
            "BUNQ_CLI_STORE": "KEYRING",
            "BUNQ_CLI_TIMEOUT": "2.5",
            "BUNQ_CLI_LOG_LEVEL": "debug",
            "BUNQ_CLI_DEBUG": "1",
            "BUNQ_CLI_LOG_JSON": "1",
        }
    )
    assert settings.home == Path(tmp_path / "bunq")
    assert settings.store_backend == "keyring"
    assert settings.timeout == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.debug is True
    assert settings.log_json is True
    assert isinstance(settings.open_store(), KeyringCredentialStore)


def test_file_store_location(tmp_path):
    store = Settings.from_env({"BUNQ_CLI_HOME": str(tmp_path)}).open_store()
    assert isinstance(store, JsonFileCredentialStore)
    assert store.path == tmp_path / "credentials.json"


@pytest.mark.parametrize(
    "environ",
    [
        {"BUNQ_CLI_STORE": "sqlite"},
        {"BUNQ_CLI_TIMEOUT": "soon"},
    ],
)
def test_invalid_values(environ):
    with pytest.raises(ConfigurationError):
        Settings.from_env(environ)
