"""Centralized AI model factory.

Usage:
    from services.ai.model_factory import get_text_model

    model = get_text_model()  # Returns a pydantic-ai Model
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from core.config import get_settings


if TYPE_CHECKING:
    from httpx import AsyncClient

logger = logging.getLogger(__name__)


def _validate_gemini_credentials() -> bool:
    """Validate that Gemini API key is configured."""
    if not get_settings().GEMINI_API_KEY:
        logger.warning("Gemini API key not configured")
        return False
    return True


def get_text_model(http_client: AsyncClient | None = None) -> Model:
    """Get the text model used for classification and email generation.

    Args:
        http_client: Optional HTTP client for custom transport settings.

    Raises:
        ValueError: If no Gemini API key is configured.
    """
    settings = get_settings()
    if not _validate_gemini_credentials():
        raise ValueError(
            "No LLM provider configured. Set GEMINI_API_KEY to enable email "
            "generation."
        )

    logger.info("Using Gemini text model: %s", settings.GENERATION_MODEL)
    provider = GoogleProvider(api_key=settings.GEMINI_API_KEY, http_client=http_client)
    return cast(Model, GoogleModel(settings.GENERATION_MODEL, provider=provider))
