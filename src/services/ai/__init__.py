"""AI email generation services."""

from .extraction import FieldExtractor
from .orchestrator import EmailGenerationOrchestrator, GenerationStream


__all__ = [
    "EmailGenerationOrchestrator",
    "FieldExtractor",
    "GenerationStream",
]
