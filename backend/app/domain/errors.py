"""Terminal failures raised by the execution and tally phases."""

from __future__ import annotations


class OracleProgramError(Exception):
    """Terminal failure of a phase; ``message`` is reported to the host verbatim."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputDeserializationError(OracleProgramError):
    """Raised when the execution input does not match the variant's input shape."""


class UpstreamHTTPError(OracleProgramError):
    """Raised when the gamma API answers with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__("Error while fetching PolyMarket event information")
        self.status_code = status_code
        self.body = body


class EventDeserializationError(OracleProgramError):
    """Raised when an upstream payload does not match the raw event schema."""


class EmptyEventError(OracleProgramError):
    """Raised when an event carries no sub-markets."""

    def __init__(self) -> None:
        super().__init__("Event has no markets")


class InvalidMarketError(OracleProgramError):
    """Raised under the strict policy when a market has no outcome prices."""

    def __init__(self, market_title: str) -> None:
        super().__init__(f"Market {market_title} has no outcome prices")
        self.market_title = market_title


class InvalidPriceError(OracleProgramError):
    """Raised when the first outcome price is not a finite decimal."""

    def __init__(self, market_title: str, raw_price: str) -> None:
        super().__init__(f"Invalid price format for market {market_title}")
        self.market_title = market_title
        self.raw_price = raw_price


class RevealCountError(OracleProgramError):
    """Raised when the tally phase does not receive exactly one reveal."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Expected exactly 1 reveal, got {count}")
        self.count = count


class InvalidRevealError(OracleProgramError):
    """Raised when the sole reveal does not decode as the deployment's response."""

    def __init__(self) -> None:
        super().__init__("Invalid response format")


__all__ = [
    "EmptyEventError",
    "EventDeserializationError",
    "InputDeserializationError",
    "InvalidMarketError",
    "InvalidPriceError",
    "InvalidRevealError",
    "OracleProgramError",
    "RevealCountError",
    "UpstreamHTTPError",
]
