from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from app.core.config import Settings
from app.domain import FetchResponse, OracleVariant


class StubFetcher:
    """Returns a canned response and records every requested URL."""

    def __init__(self, status: int = 200, body: bytes | str | dict = b"{}") -> None:
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.status = status
        self.body = body
        self.urls: list[str] = []
        self.closed = False

    def fetch(self, url: str) -> FetchResponse:
        self.urls.append(url)
        return FetchResponse(url=url, status=self.status, body=self.body)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sample_event_payload() -> dict[str, object]:
    path = Path(__file__).parent / "data" / "sample_event.json"
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def test_settings(monkeypatch) -> Settings:
    settings = Settings(_env_file=None, oracle_variant=OracleVariant.EVENT_SLUG)
    monkeypatch.setattr("app.core.config.get_settings", lambda: settings)
    monkeypatch.setattr("app.core.config.settings", settings)
    return settings


@pytest.fixture
def event_id_settings() -> Settings:
    return Settings(_env_file=None, oracle_variant=OracleVariant.EVENT_ID)


@pytest.fixture
def stub_fetcher_factory():
    def _factory(status: int = 200, body: bytes | str | dict = b"{}") -> StubFetcher:
        return StubFetcher(status=status, body=body)

    return _factory
