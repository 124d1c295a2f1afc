from functools import lru_cache

from pydantic import AnyUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain import EmptyOutcomePolicy, OracleVariant, policy_for_variant

LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
_IDENTIFIER_PLACEHOLDER = "{identifier}"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: str = Field(
        default="development",
        description="Runtime environment (development|staging|production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum loguru level written to stderr",
    )
    oracle_variant: OracleVariant = Field(
        default=OracleVariant.EVENT_SLUG,
        description=(
            "Deployment variant shared by both phases: event_slug emits per-market "
            "yes prices, event_id emits a price list with event-level status"
        ),
    )
    polymarket_base_url: AnyUrl = Field(
        default="https://gamma-api.polymarket.com",
        description="Base URL for Polymarket gamma API",
    )
    polymarket_event_slug_path: str = Field(
        default="/events/slug/{identifier}",
        description="Relative path template for fetching an event by slug",
    )
    polymarket_event_id_path: str = Field(
        default="/events/{identifier}",
        description="Relative path template for fetching an event by id",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to the single upstream request",
        gt=0,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = str(value).strip().upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(sorted(LOG_LEVELS))}"
            )
        return normalized

    @field_validator("polymarket_event_slug_path", "polymarket_event_id_path")
    @classmethod
    def _require_identifier_placeholder(cls, value: str) -> str:
        if _IDENTIFIER_PLACEHOLDER not in value:
            raise ValueError(
                f"event path templates must contain {_IDENTIFIER_PLACEHOLDER}"
            )
        return value

    @property
    def event_path_template(self) -> str:
        if self.oracle_variant is OracleVariant.EVENT_ID:
            return self.polymarket_event_id_path
        return self.polymarket_event_slug_path

    @property
    def empty_outcome_policy(self) -> EmptyOutcomePolicy:
        return policy_for_variant(self.oracle_variant)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
