from __future__ import annotations

from typing import Protocol

from app.domain import FetchResponse


class HttpFetcher(Protocol):
    """Capability performing one blocking GET on behalf of the program."""

    def fetch(self, url: str) -> FetchResponse:
        """Return the upstream status and raw body for ``url``."""
        raise NotImplementedError


class OracleProcess(Protocol):
    """Capability exposing program input and terminal output to a phase."""

    def get_inputs(self) -> bytes:
        """Return the raw input bytes supplied by the host."""
        raise NotImplementedError

    def success(self, payload: bytes) -> None:
        """Report the final result."""
        raise NotImplementedError

    def error(self, payload: bytes) -> None:
        """Report a terminal failure with a diagnostic payload."""
        raise NotImplementedError


__all__ = ["HttpFetcher", "OracleProcess"]
