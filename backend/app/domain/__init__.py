"""Domain models representing oracle variants, upstream fetches and reveals."""

from .models import (
    EmptyOutcomePolicy,
    FetchResponse,
    OracleVariant,
    RevealBody,
    RevealRecord,
    policy_for_variant,
)

__all__ = [
    "EmptyOutcomePolicy",
    "FetchResponse",
    "OracleVariant",
    "RevealBody",
    "RevealRecord",
    "policy_for_variant",
]
