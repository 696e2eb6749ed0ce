"""Stage records of one generation cycle.

* Classified - request plus the assistant kind chosen for it.
* Generated  - a classified request plus its finished draft; the return
  type of the non-streaming flow.
"""

from __future__ import annotations

from dataclasses import dataclass

from schemas.ai import AssistantKind, EmailDraft, GenerationRequest


@dataclass(frozen=True, slots=True)
class Classified:
    request: GenerationRequest
    kind: AssistantKind


@dataclass(frozen=True, slots=True)
class Generated:
    request: GenerationRequest
    kind: AssistantKind
    draft: EmailDraft
