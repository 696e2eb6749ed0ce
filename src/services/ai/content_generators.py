"""Non-streaming sales and follow-up email generation."""

from __future__ import annotations

import logging
import re

from core.config import get_settings
from schemas.ai import AssistantKind, EmailDraft
from services.ai.interfaces import TextGeneratorProtocol
from services.ai.prompts import FALLBACK_DRAFTS, build_labelled_prompt


logger = logging.getLogger(__name__)

_SUBJECT_RE = re.compile(r"SUBJECT:\s*(.+)", re.IGNORECASE)
_BODY_RE = re.compile(r"BODY:\s*(.+)", re.IGNORECASE)


def generation_options(kind: AssistantKind) -> dict[str, float | int]:
    """Temperature and output limit for an assistant kind."""
    settings = get_settings()
    if kind is AssistantKind.SALES:
        return {
            "temperature": settings.SALES_TEMPERATURE,
            "max_output_tokens": settings.SALES_MAX_OUTPUT_TOKENS,
        }
    return {
        "temperature": settings.FOLLOWUP_TEMPERATURE,
        "max_output_tokens": settings.FOLLOWUP_MAX_OUTPUT_TOKENS,
    }


def parse_labelled_response(text: str, kind: AssistantKind) -> EmailDraft:
    """Pull the first ``SUBJECT:`` and ``BODY:`` lines out of ``text``.

    A label that is missing, or whose line is blank after trimming, takes the
    canned value for ``kind``.
    """
    fallback = FALLBACK_DRAFTS[kind]
    subject_match = _SUBJECT_RE.search(text)
    body_match = _BODY_RE.search(text)
    subject = subject_match.group(1).strip() if subject_match else ""
    body = body_match.group(1).strip() if body_match else ""
    return EmailDraft(subject=subject or fallback.subject, body=body or fallback.body)


async def generate_complete(
    kind: AssistantKind,
    prompt: str,
    recipient_context: str | None,
    generator: TextGeneratorProtocol,
) -> EmailDraft:
    """Generate a whole draft for ``kind``; falls back instead of raising."""
    request_prompt = build_labelled_prompt(kind, prompt, recipient_context)
    try:
        # Output caps apply to streaming calls only.
        text = await generator.generate(
            request_prompt, temperature=generation_options(kind)["temperature"]
        )
    except Exception as exc:
        logger.warning("%s generation failed, using fallback draft: %s", kind.value, exc)
        return FALLBACK_DRAFTS[kind]

    if not text or not text.strip():
        logger.warning("Empty %s response, using fallback draft", kind.value)
        return FALLBACK_DRAFTS[kind]

    draft = parse_labelled_response(text, kind)
    logger.debug(
        "Generated %s draft subject_len=%d body_len=%d",
        kind.value,
        len(draft.subject),
        len(draft.body),
    )
    return draft
