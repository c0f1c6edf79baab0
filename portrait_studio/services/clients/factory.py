# portrait_studio/services/clients/factory.py
from __future__ import annotations
from typing import Any

from portrait_studio.data.settings import settings

from .google_ai_client import GoogleGeminiClient
from .mock_ai_client import MockAIClient

_CLIENT_CLASSES: dict[str, type[Any]] = {
    "mock": MockAIClient,
    "google": GoogleGeminiClient,
}


def _create_client_instance(client_name: str) -> Any:
    client_class = _CLIENT_CLASSES.get(client_name)
    if not client_class:
        raise ValueError(f"Unknown client type specified in config: '{client_name}'")
    return client_class()


def get_ai_client(client_name: str | None = None) -> Any:
    """
    Creates an AI client instance for a given client name, defaulting to the configured one.
    """
    client_lower = (client_name or settings.generation.client).lower()
    return _create_client_instance(client_lower)
