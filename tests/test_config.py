from pathlib import Path

import pytest
from pydantic import ValidationError

from playstore.config import Settings


def test_settings_read_environment(override_settings, monkeypatch):
    monkeypatch.setenv("PLAYSTORE_PUBLIC_KEY", "MIIBIjANBg==")
    monkeypatch.setenv("PLAYSTORE_PACKAGE_NAME", "com.example.app")
    monkeypatch.setenv("PLAYSTORE_HTTP_TIMEOUT_SECONDS", "2.5")

    settings = Settings(_env_file=None)

    assert settings.public_key == "MIIBIjANBg=="
    assert settings.package_name == "com.example.app"
    assert settings.http_timeout_seconds == 2.5
    assert settings.online is False


def test_settings_read_dotenv(temp_dir: Path, override_settings):
    env_file = temp_dir / ".env"
    env_file.write_text("PLAYSTORE_ONLINE=true\nPLAYSTORE_LOG_LEVEL=info\n", encoding="utf-8")

    settings = Settings(_env_file=env_file)

    assert settings.online is True
    assert settings.log_level == "INFO"


def test_service_account_json_from_path(temp_dir: Path, override_settings):
    key_path = temp_dir / "play-api.json"
    key_path.write_bytes(b'{"type": "service_account"}')

    settings = Settings(_env_file=None, service_account_key_path=key_path)

    assert settings.has_service_account() is True
    assert settings.get_service_account_json() == b'{"type": "service_account"}'


def test_inline_service_account_takes_precedence(temp_dir: Path, override_settings):
    key_path = temp_dir / "play-api.json"
    key_path.write_bytes(b'{"from": "file"}')

    settings = Settings(
        _env_file=None,
        service_account_key_path=key_path,
        service_account_json='{"from": "inline"}',
    )

    assert settings.get_service_account_json() == b'{"from": "inline"}'
    assert "inline" not in repr(settings)


def test_missing_service_account_path(temp_dir: Path, override_settings):
    settings = Settings(_env_file=None, service_account_key_path=temp_dir / "missing.json")

    with pytest.raises(FileNotFoundError):
        settings.get_service_account_json()


def test_no_service_account(override_settings):
    settings = Settings(_env_file=None)

    assert settings.has_service_account() is False
    assert settings.get_service_account_json() is None


def test_invalid_values_rejected(override_settings):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, http_timeout_seconds=0)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")
