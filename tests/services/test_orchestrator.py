"""Tests for the classify-then-generate orchestrator and its event stream."""

from __future__ import annotations

import pytest

from schemas.ai import AssistantKind, GenerationRequest, SSEEvent
from services.ai.exceptions import ProviderError
from services.ai.orchestrator import EmailGenerationOrchestrator
from services.ai.prompts import FALLBACK_DRAFTS
from tests.fixtures.ai_fixtures import SALES_LABELLED, FakeTextGenerator


def _request(prompt: str = "Pitch our CRM", recipient: str | None = None) -> GenerationRequest:
    return GenerationRequest(prompt=prompt, recipient_info=recipient)


async def _collect(orchestrator: EmailGenerationOrchestrator, request: GenerationRequest) -> list[SSEEvent]:
    stream = await orchestrator.start_stream(request)
    return [event async for event in stream.events()]


def _pairs(events: list[SSEEvent]) -> list[tuple[str, str | None]]:
    return [(e.type, e.data) for e in events]


@pytest.mark.asyncio
async def test_generate_email_returns_generated_stage():
    generator = FakeTextGenerator(responses=["sales", SALES_LABELLED])
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    generated = await orchestrator.generate_email(_request(recipient="Retail CTO"))

    assert generated.kind is AssistantKind.SALES
    assert generated.draft.subject == "Boost sales with our CRM"
    assert generated.request.recipient_info == "Retail CTO"
    assert 'Recipient context: "Retail CTO"' in generator.generate_calls[1].prompt


@pytest.mark.asyncio
async def test_stream_emits_assistant_type_fields_and_complete():
    generator = FakeTextGenerator(
        responses=["sales"], fragments=['{"su', 'bject":"Hi', '","body":"Yo"}']
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    events = await _collect(orchestrator, _request())

    assert _pairs(events) == [
        ("assistant_type", "sales"),
        ("subject", "Hi"),
        ("body", "Yo"),
        ("complete", None),
    ]
    assert generator.streams[0].closed is True
    # Only the classifier used the non-streaming call
    assert len(generator.generate_calls) == 1


@pytest.mark.asyncio
async def test_stream_uses_kind_specific_prompt_and_limits():
    generator = FakeTextGenerator(
        responses=["followup"], fragments=['{"subject":"A","body":"B"}']
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    await _collect(orchestrator, _request("Check in", recipient="Dana from Acme"))

    (prompt,) = generator.stream_prompts
    assert 'Format the response as JSON with "subject" and "body" fields.' in prompt
    assert 'Recipient context: "Dana from Acme"' in prompt
    assert generator.stream_options[0] == {"temperature": 0.6, "max_output_tokens": 200}


@pytest.mark.asyncio
async def test_unstructured_stream_falls_back_to_one_subject_and_body():
    generator = FakeTextGenerator(
        responses=["sales", SALES_LABELLED],
        fragments=["I'm sorry, ", "I can't format that."],
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    events = await _collect(orchestrator, _request())

    assert _pairs(events) == [
        ("assistant_type", "sales"),
        ("subject", "Boost sales with our CRM"),
        ("body", "Our CRM closes deals faster. Book a demo today."),
        ("complete", None),
    ]
    # Fallback reuses the classified kind instead of classifying again
    assert "Maximum 40 words total in the body" in generator.generate_calls[1].prompt
    assert len(generator.generate_calls) == 2


@pytest.mark.asyncio
async def test_fallback_only_fills_the_missing_field():
    generator = FakeTextGenerator(
        responses=["followup", "SUBJECT: Ignored\nBODY: Filled in"],
        fragments=['{"subject": "Streamed"', ', "body": 12}'],
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    events = await _collect(orchestrator, _request("Check in"))

    assert _pairs(events) == [
        ("assistant_type", "followup"),
        ("subject", "Streamed"),
        ("body", "Filled in"),
        ("complete", None),
    ]


@pytest.mark.asyncio
async def test_fallback_failure_still_completes():
    generator = FakeTextGenerator(
        responses=["followup", ProviderError("down")], fragments=["garbage"]
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    events = await _collect(orchestrator, _request("Check in"))

    canned = FALLBACK_DRAFTS[AssistantKind.FOLLOWUP]
    assert _pairs(events) == [
        ("assistant_type", "followup"),
        ("subject", canned.subject),
        ("body", canned.body),
        ("complete", None),
    ]


@pytest.mark.asyncio
async def test_mid_stream_failure_ends_with_error_event():
    generator = FakeTextGenerator(
        responses=["sales"],
        fragments=['{"subject": "Hi", '],
        stream_error=ProviderError("connection reset"),
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    events = await _collect(orchestrator, _request())

    assert _pairs(events) == [
        ("assistant_type", "sales"),
        ("subject", "Hi"),
        ("error", "Failed to generate email content"),
    ]
    assert generator.streams[0].closed is True


@pytest.mark.asyncio
async def test_stalled_stream_times_out_with_error_event():
    generator = FakeTextGenerator(responses=["sales"], fragments=['{"subj'], hang=True)
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=0.05)

    events = await _collect(orchestrator, _request())

    assert _pairs(events) == [
        ("assistant_type", "sales"),
        ("error", "Email generation timed out"),
    ]
    assert generator.streams[0].closed is True


@pytest.mark.asyncio
async def test_open_failure_propagates_before_any_event():
    generator = FakeTextGenerator(
        responses=["sales"], open_error=ProviderError("invalid api key")
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    with pytest.raises(ProviderError):
        await orchestrator.start_stream(_request())


@pytest.mark.asyncio
async def test_closing_events_early_closes_upstream():
    generator = FakeTextGenerator(
        responses=["sales"], fragments=['{"subject": "Hi"', ', "body": "Yo"}']
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)
    stream = await orchestrator.start_stream(_request())

    events = stream.events()
    first = await anext(events)
    await events.aclose()

    assert first == SSEEvent.assistant_type(AssistantKind.SALES)
    assert generator.streams[0].closed is True


@pytest.mark.asyncio
async def test_stalled_classification_defaults_to_followup():
    generator = FakeTextGenerator(
        hang_first_generate=True, fragments=['{"subject": "Hi", "body": "Yo"}']
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=0.05)

    events = await _collect(orchestrator, _request())

    assert _pairs(events) == [
        ("assistant_type", "followup"),
        ("subject", "Hi"),
        ("body", "Yo"),
        ("complete", None),
    ]
    assert generator.stream_options[0]["temperature"] == 0.6


@pytest.mark.asyncio
async def test_wrapped_stream_output_needs_no_fallback():
    generator = FakeTextGenerator(
        responses=["sales"],
        fragments=['Here you go {draft}:\n{"email": {"subject": "Quick demo?", ', '"body": "Happy to show you."}}'],
    )
    orchestrator = EmailGenerationOrchestrator(generator, timeout_seconds=1)

    events = await _collect(orchestrator, _request())

    assert _pairs(events) == [
        ("assistant_type", "sales"),
        ("subject", "Quick demo?"),
        ("body", "Happy to show you."),
        ("complete", None),
    ]
    assert len(generator.generate_calls) == 1
