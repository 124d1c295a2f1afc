from __future__ import annotations

from typing import Sequence

from loguru import logger
from pydantic import ValidationError

from app.core.config import Settings, get_settings
from app.domain import RevealRecord
from app.domain.errors import InvalidRevealError, RevealCountError
from app.schemas import NormalizedResponse, response_model_for, serialize_response

from .base import OracleProcess


def run_tally_phase(
    process: OracleProcess,
    reveals: Sequence[RevealRecord],
    settings: Settings | None = None,
) -> NormalizedResponse:
    """Forward the single reveal after checking it matches the deployment's schema.

    The program only runs with a replication factor of 1, so any other reveal
    count is reported as an error instead of being aggregated.
    """

    settings = settings or get_settings()
    if len(reveals) != 1:
        logger.error("Tally expects exactly 1 reveal, got {}", len(reveals))
        raise RevealCountError(len(reveals))

    model = response_model_for(settings.oracle_variant)
    try:
        response = model.model_validate_json(reveals[0].body.reveal)
    except ValidationError as exc:
        logger.error("Failed to parse reveal as {}: {}", model.__name__, exc)
        raise InvalidRevealError() from exc

    process.success(serialize_response(response))
    return response


__all__ = ["run_tally_phase"]
