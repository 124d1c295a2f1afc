from __future__ import annotations

import math
import re
from decimal import Decimal

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from app.domain import EmptyOutcomePolicy, OracleVariant, policy_for_variant
from app.domain.errors import (
    EmptyEventError,
    EventDeserializationError,
    InvalidMarketError,
    InvalidPriceError,
)
from app.schemas import (
    MarketsResponse,
    NormalizedMarket,
    NormalizedResponse,
    PricesResponse,
    RawEvent,
    RawMarket,
    event_model_for,
)

_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_OUTCOME_PRICES = TypeAdapter(list[str], config={"strict": True})


def parse_event(body: bytes, variant: OracleVariant) -> RawEvent:
    """Deserialize an upstream event payload with the variant's raw schema."""

    try:
        return event_model_for(variant).model_validate_json(body)
    except ValidationError as exc:
        logger.error("Failed to parse PolyMarket event payload: {}", exc)
        raise EventDeserializationError(
            f"Invalid PolyMarket event payload: {exc.error_count()} validation error(s)"
        ) from exc


def parse_outcome_prices(market: RawMarket) -> list[str]:
    """Decode the string-encoded ``outcomePrices`` array of a market."""

    try:
        return _OUTCOME_PRICES.validate_json(market.outcome_prices)
    except ValidationError as exc:
        logger.error(
            "Market {} has malformed outcome prices {!r}: {}",
            market.group_item_title,
            market.outcome_prices,
            exc,
        )
        raise EventDeserializationError(
            f"Invalid outcome prices for market {market.group_item_title}"
        ) from exc


def parse_price(raw_price: str, market_title: str) -> float:
    if not _DECIMAL_PATTERN.fullmatch(raw_price):
        logger.error(
            "Failed to parse first outcome price for market {}: {!r}", market_title, raw_price
        )
        raise InvalidPriceError(market_title, raw_price)
    value = float(raw_price)
    if not math.isfinite(value):
        logger.error(
            "First outcome price for market {} is not finite: {!r}", market_title, raw_price
        )
        raise InvalidPriceError(market_title, raw_price)
    return value


def format_price(value: float) -> str:
    """Render the shortest round-trip decimal form, without exponent or trailing zeros."""

    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def extract_yes_price(market: RawMarket, policy: EmptyOutcomePolicy) -> float | None:
    """Return the first outcome price, or None when a lenient policy skips the market."""

    outcome_prices = parse_outcome_prices(market)
    if not outcome_prices:
        if policy is EmptyOutcomePolicy.LENIENT:
            logger.warning(
                "Skipping market {}: no outcome prices", market.group_item_title
            )
            return None
        logger.error("Market {} has no outcome prices", market.group_item_title)
        raise InvalidMarketError(market.group_item_title)

    price = parse_price(outcome_prices[0], market.group_item_title)
    logger.info("Market {} yes price {}", market.group_item_title, price)
    return price


def normalize_event(event: RawEvent, variant: OracleVariant) -> NormalizedResponse:
    """Build the variant's normalized response; raises on the first invalid market."""

    variant = OracleVariant(variant)
    if not event.markets:
        logger.error("Event has no markets available")
        raise EmptyEventError()

    policy = policy_for_variant(variant)
    if variant is OracleVariant.EVENT_ID:
        prices: list[float] = []
        for market in event.markets:
            price = extract_yes_price(market, policy)
            if price is not None:
                prices.append(price)
        logger.info("Collected {} first outcome prices from all markets", len(prices))
        return PricesResponse(
            prices=prices,
            market_status="closed" if event.closed else "open",
        )

    markets: list[NormalizedMarket] = []
    for market in event.markets:
        price = extract_yes_price(market, policy)
        if price is None:
            continue
        markets.append(NormalizedMarket(yes_price=format_price(price), closed=market.closed))
    logger.info("Collected {} first outcome prices from all markets", len(markets))
    return MarketsResponse(markets=markets)
