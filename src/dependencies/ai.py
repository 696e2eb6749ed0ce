"""Generation orchestrator dependency.

The orchestrator is created once per process; the pydantic-ai agent behind it
is only built on first use, so the app starts without a Gemini key. Tests
override `get_email_orchestrator` with one wired to a scripted generator.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from services.ai.orchestrator import EmailGenerationOrchestrator


@lru_cache
def get_email_orchestrator() -> EmailGenerationOrchestrator:
    return EmailGenerationOrchestrator()


Orchestrator = Annotated[EmailGenerationOrchestrator, Depends(get_email_orchestrator)]
