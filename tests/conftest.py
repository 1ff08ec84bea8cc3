from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from trio_relevan import create_app

SETTINGS_ENV_VARS = (
    "APP_ENV",
    "SEARCH_BACKEND",
    "SEARCH_API_BASE_URL",
    "SEARCH_API_TIMEOUT",
    "SEARCH_DEFAULT_K",
    "LOG_LEVEL",
)


class RecordingBackend:
    """Backend double that records calls and returns a fixed payload."""

    name = "recording"

    def __init__(self, payload: Dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.payload = payload or {}
        self.error = error
        self.calls: List[Tuple[str, int]] = []

    def search(self, query: str, k: int) -> Dict[str, Any]:
        self.calls.append((query, k))
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in SETTINGS_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def app():
    app = create_app({"search": {"backend": "mock"}})
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
