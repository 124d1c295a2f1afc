"""Execution phase: fetch one Polymarket event and emit its normalized prices.

Each executor node runs this independently. The event is fetched with a single
GET, every sub-market contributes its first outcome price, and the whole
normalized response is reported as the node's reveal. Any failure aborts the
phase without a partial result.
"""

from __future__ import annotations

from loguru import logger
from pydantic import ValidationError

from app.core.config import Settings, get_settings
from app.domain import OracleVariant
from app.domain.errors import InputDeserializationError, UpstreamHTTPError
from app.schemas import EventSlugInput, NormalizedResponse, serialize_response
from ingestion.client import build_event_url
from ingestion.normalize import normalize_event, parse_event

from .base import HttpFetcher, OracleProcess


def parse_identifier(raw_inputs: bytes, variant: OracleVariant) -> str:
    """Extract the event slug or event id from the process input bytes."""

    if OracleVariant(variant) is OracleVariant.EVENT_ID:
        try:
            identifier = raw_inputs.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise InputDeserializationError("Event id input is not valid UTF-8") from exc
        if not identifier:
            raise InputDeserializationError("Event id input is empty")
        return identifier

    try:
        return EventSlugInput.model_validate_json(raw_inputs).event_slug
    except ValidationError as exc:
        logger.error("Failed to parse execution input: {}", exc)
        raise InputDeserializationError(
            'Execution input must be a JSON object like {"event_slug": "..."}'
        ) from exc


def fetch_event_body(fetcher: HttpFetcher, url: str) -> bytes:
    response = fetcher.fetch(url)
    if not response.is_ok:
        logger.error(
            "PolyMarket HTTP Response was rejected: {} - {}",
            response.status,
            response.text(),
        )
        raise UpstreamHTTPError(response.status, response.text())
    return response.body


def run_execution_phase(
    process: OracleProcess,
    fetcher: HttpFetcher,
    settings: Settings | None = None,
) -> NormalizedResponse:
    settings = settings or get_settings()
    variant = settings.oracle_variant

    identifier = parse_identifier(process.get_inputs(), variant)
    logger.info(
        "Fetching event data from PolyMarket for event: {} (variant={}, policy={})",
        identifier,
        variant.value,
        settings.empty_outcome_policy.value,
    )
    url = build_event_url(identifier, settings)
    body = fetch_event_body(fetcher, url)

    event = parse_event(body, variant)
    response = normalize_event(event, variant)
    process.success(serialize_response(response))
    return response


__all__ = ["fetch_event_body", "parse_identifier", "run_execution_phase"]
