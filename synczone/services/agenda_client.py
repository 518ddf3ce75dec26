from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from openai import OpenAI, OpenAIError

from synczone.config import settings
from synczone.models import AgendaResponse
from synczone.prompts import (
    FALLBACK_AGENDA,
    FALLBACK_ETIQUETTE_TIP,
    SYSTEM,
    USER_TEMPLATE,
)

logger = logging.getLogger(__name__)


class AgendaUnavailableError(RuntimeError):
    """Raised when the language model cannot be reached or used."""


def fallback_agenda() -> AgendaResponse:
    return AgendaResponse(agenda=FALLBACK_AGENDA, etiquette_tip=FALLBACK_ETIQUETTE_TIP)


@dataclass(slots=True)
class AgendaContext:
    topic: str
    duration_minutes: int
    user_time: str
    user_zone: str
    client_time: str
    client_zone: str

    def render(self) -> str:
        return USER_TEMPLATE.format(
            topic=self.topic,
            duration=self.duration_minutes,
            user_time=self.user_time,
            user_zone=self.user_zone,
            client_time=self.client_time,
            client_zone=self.client_zone,
        )


@runtime_checkable
class AgendaProvider(Protocol):
    """Common protocol for structured agenda providers."""

    name: str

    def generate(self, ctx: AgendaContext) -> AgendaResponse: ...


class OfflineAgendaProvider:
    """Provider used when credentials are missing."""

    def __init__(self, name: str = "offline") -> None:
        self.name = name

    def generate(self, ctx: AgendaContext) -> AgendaResponse:
        logger.info("Agenda provider '%s' operating in offline mode", self.name)
        raise AgendaUnavailableError(f"provider '{self.name}' is offline")


class OpenAIProvider:
    """Structured generation provider backed by the OpenAI Responses API.

    Subclasses for OpenAI-compatible gateways override ``name``,
    ``default_headers`` and ``credentials``.
    """

    name = "openai"
    default_headers: dict[str, str] = {}

    def __init__(self, client: OpenAI, *, model: str, temperature: float) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature

    @classmethod
    def credentials(cls) -> tuple[str, str]:
        """Return ``(base_url, api_key)`` from the settings."""
        return settings.openai_api_host, settings.openai_api_key

    @classmethod
    def from_settings(cls) -> "OpenAIProvider":
        base_url, api_key = cls.credentials()
        if not api_key:
            raise AgendaUnavailableError(f"no API key configured for {cls.name}")
        client = OpenAI(
            api_key=api_key,
            base_url=base_url or None,
            default_headers=cls.default_headers or None,
        )
        return cls(
            client,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
        )

    def generate(self, ctx: AgendaContext) -> AgendaResponse:
        messages = [
            {"role": "system", "content": SYSTEM},
            {"role": "user", "content": ctx.render()},
        ]
        try:
            response = self._client.responses.parse(
                model=self._model,
                temperature=self._temperature,
                max_output_tokens=600,
                input=messages,
                text_format=AgendaResponse,
            )
        except OpenAIError as exc:  # pragma: no cover - network failure path
            raise AgendaUnavailableError(f"{self.name} request failed: {exc}") from exc

        payload = getattr(response, "output_parsed", None)
        if not isinstance(payload, AgendaResponse):
            logger.warning("%s returned no structured agenda: %s", self.name, response)
            raise AgendaUnavailableError("empty structured payload")

        logger.debug("Received agenda from %s", self.name)
        return payload


class OpenRouterProvider(OpenAIProvider):
    name = "openrouter"
    default_headers = {"X-Title": "SyncZone"}

    @classmethod
    def credentials(cls) -> tuple[str, str]:
        # An OpenAI key is accepted when no OpenRouter key is set
        return (
            settings.openrouter_api_host,
            settings.openrouter_api_key or settings.openai_api_key,
        )


PROVIDERS: dict[str, type[OpenAIProvider]] = {
    provider.name: provider for provider in (OpenAIProvider, OpenRouterProvider)
}


class AgendaClient:
    """Selects a provider at runtime and never lets its failures escape."""

    def __init__(self, provider: AgendaProvider | None = None) -> None:
        self._provider = provider or self._build_provider()
        self._provider_name = getattr(self._provider, "name", "unknown")

    @property
    def provider_name(self) -> str:
        return self._provider_name

    def generate(
        self,
        topic: str,
        duration_minutes: int,
        user_time: str,
        user_zone: str,
        client_time: str,
        client_zone: str,
    ) -> AgendaResponse:
        ctx = AgendaContext(
            topic=topic,
            duration_minutes=duration_minutes,
            user_time=user_time,
            user_zone=user_zone,
            client_time=client_time,
            client_zone=client_zone,
        )
        try:
            return self._provider.generate(ctx)
        except AgendaUnavailableError as exc:
            logger.warning(
                "Agenda provider '%s' unavailable: %s", self._provider_name, exc
            )
        except Exception:
            # Malformed provider output must never reach the caller as a crash
            logger.exception("Agenda provider '%s' failed", self._provider_name)
        return fallback_agenda()

    # ----------------------------------------------------------------- internals
    def _build_provider(self) -> AgendaProvider:
        provider_key = (settings.llm_provider or "openai").lower()
        provider_cls = PROVIDERS.get(provider_key)
        if provider_cls is None:
            logger.warning(
                "Unknown LLM provider '%s'; falling back to offline mode", provider_key
            )
            return OfflineAgendaProvider(provider_key)
        try:
            return provider_cls.from_settings()
        except (AgendaUnavailableError, OpenAIError) as exc:
            logger.warning("Agenda provider '%s' starts offline: %s", provider_key, exc)
            return OfflineAgendaProvider(provider_key)
