from __future__ import annotations

import pytest

from partner_auth.config import settings as settings_module
from partner_auth.config.settings import (
    DEFAULT_API_KEY,
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TOKEN_URL,
    SettingsManager,
)
from partner_auth.issuer.errors import ConfigurationError


class _RecordingLogger:
    def __init__(self) -> None:
        self.warnings: list[tuple[str, dict[str, object]]] = []

    def warning(self, event: str, **kwargs: object) -> None:
        self.warnings.append((event, kwargs))


@pytest.fixture
def recorded(monkeypatch: pytest.MonkeyPatch) -> _RecordingLogger:
    recorder = _RecordingLogger()
    monkeypatch.setattr(settings_module, "logger", recorder)
    return recorder


def test_load_reads_environment(monkeypatch: pytest.MonkeyPatch, env_file, recorded) -> None:
    monkeypatch.setenv("PARTNER_TOKEN_URL", "https://issuer.example/partner/token")
    monkeypatch.setenv("PARTNER_API_KEY", "  secret-key  ")
    monkeypatch.setenv("PARTNER_BASE_URL", "https://api.example/partner")
    monkeypatch.setenv("PARTNER_ENVIRONMENT", "production")
    monkeypatch.setenv("PARTNER_REQUEST_TIMEOUT", "7.5")

    settings = SettingsManager(env_file).load()

    assert settings.token_url == "https://issuer.example/partner/token"
    assert settings.api_key == "secret-key"
    assert settings.base_url == "https://api.example/partner"
    assert settings.is_production
    assert settings.request_timeout == 7.5
    assert recorded.warnings == []


def test_load_reads_dotenv_file(tmp_path, recorded) -> None:
    env_file = tmp_path / "settings.env"
    env_file.write_text(
        "PARTNER_TOKEN_URL=https://dotenv.example/token\nPARTNER_API_KEY=from-file\n",
        encoding="utf-8",
    )

    settings = SettingsManager(env_file).load()

    assert settings.token_url == "https://dotenv.example/token"
    assert settings.api_key == "from-file"
    assert recorded.warnings == []


def test_missing_values_fall_back_with_single_warning(env_file, recorded) -> None:
    manager = SettingsManager(env_file)

    first = manager.load()
    second = manager.load()

    for settings in (first, second):
        assert settings.token_url == DEFAULT_TOKEN_URL
        assert settings.api_key == DEFAULT_API_KEY
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.request_timeout == DEFAULT_REQUEST_TIMEOUT
        assert settings.uses_default_api_key

    warned = sorted(str(kwargs["variable"]) for _event, kwargs in recorded.warnings)
    assert warned == ["PARTNER_API_KEY", "PARTNER_BASE_URL", "PARTNER_TOKEN_URL"]


def test_production_fallback_is_silent(
    monkeypatch: pytest.MonkeyPatch, env_file, recorded
) -> None:
    monkeypatch.setenv("PARTNER_ENVIRONMENT", "Production")

    settings = SettingsManager(env_file).load()

    assert settings.api_key == DEFAULT_API_KEY
    assert recorded.warnings == []


def test_strict_mode_refuses_fallback(
    monkeypatch: pytest.MonkeyPatch, env_file, recorded
) -> None:
    monkeypatch.setenv("PARTNER_TOKEN_URL", "https://issuer.example/token")

    with pytest.raises(ConfigurationError, match="PARTNER_API_KEY"):
        SettingsManager(env_file, strict=True).load()


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_timeout_rejected(
    monkeypatch: pytest.MonkeyPatch, env_file, recorded, raw: str
) -> None:
    monkeypatch.setenv("PARTNER_REQUEST_TIMEOUT", raw)

    with pytest.raises(ConfigurationError):
        SettingsManager(env_file).load()


def test_missing_base_url_warns_when_credentials_set(
    monkeypatch: pytest.MonkeyPatch, env_file, recorded
) -> None:
    monkeypatch.setenv("PARTNER_TOKEN_URL", "https://issuer.example/token")
    monkeypatch.setenv("PARTNER_API_KEY", "env-key")

    settings = SettingsManager(env_file).load()

    assert settings.base_url == DEFAULT_BASE_URL
    assert [kwargs["variable"] for _event, kwargs in recorded.warnings] == [
        "PARTNER_BASE_URL"
    ]


def test_strict_mode_requires_base_url(
    monkeypatch: pytest.MonkeyPatch, env_file, recorded
) -> None:
    monkeypatch.setenv("PARTNER_TOKEN_URL", "https://issuer.example/token")
    monkeypatch.setenv("PARTNER_API_KEY", "env-key")

    with pytest.raises(ConfigurationError, match="PARTNER_BASE_URL"):
        SettingsManager(env_file, strict=True).load()


def test_default_env_file_lives_in_config_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path, recorded
) -> None:
    monkeypatch.setattr(settings_module, "user_config_dir", lambda *_a, **_k: str(tmp_path))
    (tmp_path / "settings.env").write_text(
        "PARTNER_TOKEN_URL=https://config-dir.example/token\n", encoding="utf-8"
    )

    manager = SettingsManager()

    assert manager.env_file == tmp_path / "settings.env"
    assert manager.load().token_url == "https://config-dir.example/token"
