"""Routes a generation request to the sales or follow-up assistant."""

from __future__ import annotations

import logging

from core.config import get_settings
from schemas.ai import AssistantKind
from services.ai.interfaces import TextGeneratorProtocol
from services.ai.prompts import build_router_prompt


logger = logging.getLogger(__name__)


async def classify(prompt: str, generator: TextGeneratorProtocol) -> AssistantKind:
    """Classify a request; never raises.

    Any response containing ``sales`` selects the sales assistant. Everything
    else, including an empty response or a provider failure, selects
    follow-up.
    """
    try:
        response = await generator.generate(
            build_router_prompt(prompt),
            temperature=get_settings().CLASSIFIER_TEMPERATURE,
        )
    except Exception as exc:
        logger.warning("Classification failed, defaulting to followup: %s", exc)
        return AssistantKind.FOLLOWUP

    text = (response or "").strip().lower()
    if not text:
        logger.warning("Empty classifier response, defaulting to followup")
        return AssistantKind.FOLLOWUP

    kind = AssistantKind.SALES if "sales" in text else AssistantKind.FOLLOWUP
    logger.info("Request classified as %s", kind.value)
    return kind
