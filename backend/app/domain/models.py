"""Typed domain representations shared by the execution and tally phases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OracleVariant(str, Enum):
    """Deployment variant; both phases of one deployment must agree on it."""

    EVENT_SLUG = "event_slug"
    EVENT_ID = "event_id"


class EmptyOutcomePolicy(str, Enum):
    """How a market whose outcome price list is empty is treated."""

    STRICT = "strict"
    LENIENT = "lenient"


_VARIANT_POLICIES: dict[OracleVariant, EmptyOutcomePolicy] = {
    OracleVariant.EVENT_SLUG: EmptyOutcomePolicy.STRICT,
    OracleVariant.EVENT_ID: EmptyOutcomePolicy.LENIENT,
}


def policy_for_variant(variant: OracleVariant) -> EmptyOutcomePolicy:
    return _VARIANT_POLICIES[OracleVariant(variant)]


@dataclass(slots=True, frozen=True)
class FetchResponse:
    """Result of one upstream GET as seen by the program."""

    url: str
    status: int
    body: bytes

    @property
    def is_ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(slots=True, frozen=True)
class RevealBody:
    """Payload reported by one executor node."""

    reveal: bytes
    exit_code: int = 0
    gas_used: int = 0


@dataclass(slots=True, frozen=True)
class RevealRecord:
    """One collected reveal handed to the tally phase."""

    body: RevealBody
    in_consensus: bool = True
