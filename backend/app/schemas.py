from typing import Literal, Union

from pydantic import BaseModel, Field

from app.domain import OracleVariant


class RawMarket(BaseModel):
    """One sub-market as returned inside a gamma event payload.

    ``outcomePrices`` is a JSON array encoded as a string, e.g. ``'["0.65", "0.35"]'``.
    """

    outcome_prices: str = Field(alias="outcomePrices")
    group_item_title: str = Field(alias="groupItemTitle")
    closed: bool | None = None

    model_config = {"strict": True, "populate_by_name": True}


class RawMarketWithStatus(RawMarket):
    closed: bool


class RawEvent(BaseModel):
    closed: bool
    markets: list[RawMarket]

    model_config = {"strict": True}


class RawEventWithMarketStatus(RawEvent):
    markets: list[RawMarketWithStatus]


class NormalizedMarket(BaseModel):
    yes_price: str
    closed: bool

    model_config = {"strict": True}


class MarketsResponse(BaseModel):
    """Per-market yes prices, emitted by the event_slug variant."""

    markets: list[NormalizedMarket]

    model_config = {"strict": True}


class PricesResponse(BaseModel):
    """Flat price list with event-level status, emitted by the event_id variant."""

    prices: list[float]
    market_status: Literal["open", "closed"]

    model_config = {"strict": True, "allow_inf_nan": False}


class EventSlugInput(BaseModel):
    event_slug: str

    model_config = {"strict": True}


NormalizedResponse = Union[MarketsResponse, PricesResponse]

_EVENT_MODELS: dict[OracleVariant, type[RawEvent]] = {
    OracleVariant.EVENT_SLUG: RawEventWithMarketStatus,
    OracleVariant.EVENT_ID: RawEvent,
}

_RESPONSE_MODELS: dict[OracleVariant, type[BaseModel]] = {
    OracleVariant.EVENT_SLUG: MarketsResponse,
    OracleVariant.EVENT_ID: PricesResponse,
}


def event_model_for(variant: OracleVariant) -> type[RawEvent]:
    return _EVENT_MODELS[OracleVariant(variant)]


def response_model_for(variant: OracleVariant) -> type[BaseModel]:
    return _RESPONSE_MODELS[OracleVariant(variant)]


def serialize_response(response: BaseModel) -> bytes:
    """Compact JSON encoding shared by both phases."""

    return response.model_dump_json().encode("utf-8")
