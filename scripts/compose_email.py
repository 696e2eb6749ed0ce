"""Draft an email with the streaming generator and optionally save it.

Requires a running API server.

Usage:
  python scripts/compose_email.py "Pitch our new CRM to a retail chain"
  python scripts/compose_email.py "Check in after last week's demo" \
      --recipient "Head of ops at Acme" --to ops@acme.example
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

import httpx

from client.compose import ComposeFormState
from client.emails import EmailsApiClient, EmailsApiError


DEFAULT_BASE_URL = os.getenv("EMAIL_COMPOSER_URL", "http://localhost:3001")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("prompt", help="What the email should be about")
    parser.add_argument("--recipient", help="Context about the recipient")
    parser.add_argument("--to", help="Save the draft addressed to this recipient")
    parser.add_argument("--cc", default="")
    parser.add_argument("--bcc", default="")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Read timeout in seconds"
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    form = ComposeFormState(to=args.to or "", cc=args.cc, bcc=args.bcc)

    timeout = httpx.Timeout(10.0, read=args.timeout)
    async with httpx.AsyncClient(base_url=args.base_url, timeout=timeout) as client:
        await form.generate(client, args.prompt, args.recipient)
        if form.error:
            print(f"Generation failed: {form.error}", file=sys.stderr)
            return 1

        print(f"Assistant: {form.assistant_type}")
        print(f"Subject:   {form.subject}")
        print()
        print(form.body)

        if not args.to:
            return 0

        missing = form.missing_required_fields()
        if missing:
            print(f"Not saved, missing: {', '.join(missing)}", file=sys.stderr)
            return 1
        try:
            saved = await EmailsApiClient(client).create_email(form.to_payload())
        except EmailsApiError as exc:
            print(f"Save failed: {exc.message}", file=sys.stderr)
            return 1
        print(f"\nSaved email {saved.id}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
