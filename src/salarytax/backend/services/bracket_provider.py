"""Sources of tax bracket sets keyed by tax year.

Providers are asynchronous so a calculation session can await a remote fetch;
the local provider simply wraps the cached YAML configuration.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from salarytax.backend.config.year_config import (
    ConfigurationError,
    TaxBracket,
    load_year_brackets,
)

API_BASE_URL_ENV = "SALARYTAX_API_BASE_URL"
BRACKETS_PATH = "/tax-calculator/tax-year/{year}"

_LOGGER = logging.getLogger(__name__)


class BracketProviderError(RuntimeError):
    """Raised when a bracket set cannot be obtained for a tax year."""


class RemoteBracket(BaseModel):
    """Bracket record as served by a remote endpoint; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    min: float
    max: float | None = None
    rate: float

    def to_bracket(self) -> TaxBracket:
        return TaxBracket(min=self.min, max=self.max, rate=self.rate)


class BracketProvider(Protocol):
    """Anything able to return the bracket set for a tax year."""

    async def fetch_brackets(self, year: int) -> list[TaxBracket]:
        ...


def parse_bracket_payload(payload: Any) -> list[TaxBracket]:
    """Parse a ``{"tax_brackets": [...]}`` payload into bracket models."""

    if not isinstance(payload, Mapping):
        raise BracketProviderError("Bracket payload must be a JSON object")

    raw_brackets = payload.get("tax_brackets")
    if not isinstance(raw_brackets, list):
        raise BracketProviderError("Bracket payload must include a 'tax_brackets' list")

    try:
        return [RemoteBracket.model_validate(item).to_bracket() for item in raw_brackets]
    except ValidationError as error:
        raise BracketProviderError(f"Invalid bracket definition: {error}") from error


class LocalBracketProvider:
    """Serve bracket sets from the bundled YAML configuration."""

    async def fetch_brackets(self, year: int) -> list[TaxBracket]:
        return self.get_brackets(year)

    def get_brackets(self, year: int) -> list[TaxBracket]:
        try:
            configuration = load_year_brackets(year)
        except FileNotFoundError as exc:
            raise BracketProviderError(f"No tax brackets configured for {year}") from exc
        return list(configuration.tax_brackets)


class HttpBracketProvider:
    """Fetch bracket sets from ``{base_url}/tax-calculator/tax-year/{year}``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not base_url:
            raise ConfigurationError("A base URL is required for the HTTP bracket provider")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def url_for(self, year: int) -> str:
        return f"{self.base_url}{BRACKETS_PATH.format(year=year)}"

    async def fetch_brackets(self, year: int) -> list[TaxBracket]:
        url = self.url_for(year)
        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BracketProviderError(_error_message(exc.response, exc)) from exc
        except httpx.HTTPError as exc:
            raise BracketProviderError(str(exc) or exc.__class__.__name__) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise BracketProviderError("Bracket endpoint returned invalid JSON") from exc

        brackets = parse_bracket_payload(payload)
        _LOGGER.debug("Received %d brackets for %s from %s", len(brackets), year, url)
        return brackets


def _error_message(response: httpx.Response, error: httpx.HTTPStatusError) -> str:
    """Prefer the ``message`` field of an error body over the status line."""

    try:
        body = response.json()
    except ValueError:
        return str(error)
    if isinstance(body, Mapping):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return str(error)


def provider_from_environment() -> HttpBracketProvider:
    """Build an HTTP provider from ``SALARYTAX_API_BASE_URL``."""

    base_url = os.getenv(API_BASE_URL_ENV, "").strip()
    if not base_url:
        raise ConfigurationError(f"{API_BASE_URL_ENV} environment variable is not defined")
    return HttpBracketProvider(base_url)


__all__ = [
    "API_BASE_URL_ENV",
    "BracketProvider",
    "BracketProviderError",
    "HttpBracketProvider",
    "LocalBracketProvider",
    "RemoteBracket",
    "parse_bracket_payload",
    "provider_from_environment",
]
