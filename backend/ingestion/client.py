from __future__ import annotations

from urllib.parse import quote

import httpx
from loguru import logger

from app.core.config import Settings, settings as default_settings
from app.domain import FetchResponse


def build_event_url(identifier: str, settings: Settings | None = None) -> str:
    """Resolve the gamma event URL for ``identifier`` using the variant's path template."""

    active = settings or default_settings
    path = active.event_path_template.format(identifier=quote(identifier, safe=""))
    return str(active.polymarket_base_url).rstrip("/") + "/" + path.lstrip("/")


class GammaEventClient:
    """Single-request wrapper around the Polymarket gamma events endpoints."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else default_settings.http_timeout_seconds
        self.client = httpx.Client(timeout=self.timeout, transport=transport)

    def fetch(self, url: str) -> FetchResponse:
        logger.info("Polymarket GET {}", url)
        try:
            response = self.client.get(url)
        except httpx.HTTPError as exc:
            logger.error("Polymarket request to {} failed: {}", url, exc)
            return FetchResponse(url=url, status=0, body=str(exc).encode("utf-8"))
        return FetchResponse(url=url, status=response.status_code, body=response.content)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "GammaEventClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
