from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from partner_auth.config import settings as settings_module
from partner_auth.config.settings import ENV_PREFIX


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip PARTNER_* variables and reset one-time fallback warnings."""

    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)
    settings_module._warned_fallbacks.clear()
    yield
    settings_module._warned_fallbacks.clear()


@pytest.fixture
def env_file(tmp_path):
    """Point settings at an empty dotenv file inside the test sandbox."""

    path = tmp_path / "settings.env"
    path.write_text("", encoding="utf-8")
    return path
