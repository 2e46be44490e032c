"""OpenAI client built from the API key handed out by the hub."""

import logging
from collections.abc import Iterable
from typing import Any

import openai

logger = logging.getLogger(__name__)

API_KEY_ENTRY = "apiKey"


class ProviderNotConfiguredError(Exception):
    """No API key was provided, so OpenAI cannot be called."""


def extract_api_key(entries: Any) -> str | None:
    """Find the ``apiKey`` value in the hub's registration result.

    The hub answers ``session.register`` with an ordered list of
    ``{"key": ..., "value": ...}`` pairs. Anything else means no key.
    """
    if not isinstance(entries, Iterable) or isinstance(entries, str | bytes | dict):
        return None
    for entry in entries:
        if isinstance(entry, dict) and entry.get("key") == API_KEY_ENTRY:
            value = entry.get("value")
            return str(value) if value is not None else None
    return None


class OpenAIProvider:
    """Holds the one OpenAI client shared by every method handler.

    Constructed once per hub connection, after registration. When the hub did
    not supply a key the provider still exists so handlers can be registered,
    but every call fails with ProviderNotConfiguredError.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        if client is not None:
            self._client: openai.AsyncOpenAI | None = client
        elif api_key:
            self._client = openai.AsyncOpenAI(api_key=api_key)
        else:
            self._client = None
            logger.warning("openai_api_key_missing")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @property
    def api_key(self) -> str | None:
        return self._client.api_key if self._client is not None else None

    @property
    def client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            raise ProviderNotConfiguredError(
                "OpenAI API key was not provided by the hub"
            )
        return self._client


def dump_result(obj: Any) -> Any:
    """Convert an SDK response (model or page) into JSON-compatible data."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return obj
