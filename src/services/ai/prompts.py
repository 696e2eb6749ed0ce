"""Prompt templates and canned drafts for email generation."""

from schemas.ai import AssistantKind, EmailDraft


FALLBACK_DRAFTS: dict[AssistantKind, EmailDraft] = {
    AssistantKind.SALES: EmailDraft(
        subject="Sales Opportunity",
        body="Thank you for your interest. Let's connect!",
    ),
    AssistantKind.FOLLOWUP: EmailDraft(
        subject="Follow-up",
        body="I wanted to follow up on our previous conversation.",
    ),
}


ROUTER_PROMPT = """Classify this email request. Respond with exactly one word: "sales" or "followup"

Request: "{prompt}"

If it's about selling, pitching, or promoting something, respond: sales
If it's about following up, checking in, or reminding, respond: followup

Answer:"""


SALES_GUIDELINES = """STRICT REQUIREMENTS:
- Maximum 40 words total in the body
- Maximum 7-10 words per sentence
- Focus on value proposition
- Include a clear call-to-action
- Professional but friendly tone"""

FOLLOWUP_GUIDELINES = """Guidelines:
- Polite and respectful tone
- Brief and to the point
- Include context from previous interaction
- Professional closing"""

_INTROS: dict[AssistantKind, str] = {
    AssistantKind.SALES: "Generate a concise sales email",
    AssistantKind.FOLLOWUP: "Generate a polite, professional follow-up email",
}

_GUIDELINES: dict[AssistantKind, str] = {
    AssistantKind.SALES: SALES_GUIDELINES,
    AssistantKind.FOLLOWUP: FOLLOWUP_GUIDELINES,
}

LABELLED_FORMAT = """Format your response EXACTLY like this:
SUBJECT: [your subject line]
BODY: [your email body]"""

JSON_FORMAT = 'Format the response as JSON with "subject" and "body" fields.'


def build_router_prompt(prompt: str) -> str:
    return ROUTER_PROMPT.format(prompt=prompt)


def _context_block(prompt: str, recipient_context: str | None) -> str:
    lines = [f'User request: "{prompt}"']
    if recipient_context:
        lines.append(f'Recipient context: "{recipient_context}"')
    return "\n".join(lines)


def build_labelled_prompt(
    kind: AssistantKind, prompt: str, recipient_context: str | None = None
) -> str:
    """Prompt for a complete draft answered as ``SUBJECT:`` / ``BODY:`` lines."""
    return "\n\n".join(
        [
            f"{_INTROS[kind]} with SUBJECT and BODY based on the user's request.",
            _GUIDELINES[kind],
            LABELLED_FORMAT,
            _context_block(prompt, recipient_context),
        ]
    )


def build_streaming_prompt(
    kind: AssistantKind, prompt: str, recipient_context: str | None = None
) -> str:
    """Prompt for a draft streamed back as a JSON object."""
    return "\n\n".join(
        [
            f"{_INTROS[kind]} based on the user's request.",
            _GUIDELINES[kind],
            _context_block(prompt, recipient_context),
            JSON_FORMAT,
        ]
    )
