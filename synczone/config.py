from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DEFAULT_REFERENCE_ZONES = (
    "America/Los_Angeles,America/New_York,Europe/London,Asia/Kolkata"
)


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", 0.2))
    openai_api_host: str = os.getenv(
        "OPENAI_API_HOST", "https://api.openai.com/v1"
    )

    llm_provider: str = os.getenv("LLM_PROVIDER", "openai")
    openrouter_api_key: str = os.getenv("OPENROUTER_API_KEY", "")
    openrouter_api_host: str = os.getenv(
        "OPENROUTER_API_HOST", "https://openrouter.ai/api/v1"
    )

    user_timezone: str = os.getenv("USER_TIMEZONE", "Asia/Kolkata")
    counterpart_timezone: str = os.getenv("COUNTERPART_TIMEZONE", "America/New_York")
    reference_timezones: list[str] = Field(
        default=os.getenv("REFERENCE_TIMEZONES", _DEFAULT_REFERENCE_ZONES),
        validate_default=True,
    )
    live_clock_timezone: str = os.getenv("LIVE_CLOCK_TIMEZONE", "Asia/Kolkata")

    tick_interval_seconds: float = float(os.getenv("TICK_INTERVAL_SECONDS", 1.0))
    default_meeting_duration: int = int(os.getenv("DEFAULT_MEETING_DURATION", 30))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @field_validator("reference_timezones", mode="before")
    @classmethod
    def _split_zones(cls, value: object) -> object:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("tick_interval_seconds")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("tick interval must be positive")
        return value

    def model_post_init(self, __context: dict[str, object]) -> None:
        logger = logging.getLogger(__name__)
        provider = (self.llm_provider or "openai").lower()
        if provider == "openai" and not self.openai_api_key:
            logger.warning(
                "OPENAI_API_KEY is not configured. Agenda generation will operate in offline mode."
            )
        if provider == "openrouter" and not (
            self.openrouter_api_key or self.openai_api_key
        ):
            logger.warning(
                "OpenRouter credentials are missing. Agenda generation will operate in offline mode."
            )


settings = Settings()
