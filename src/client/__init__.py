"""Python client for the Email Composer API."""

from .ai_stream import StreamCallbacks, StreamGenerationError, stream_ai_generation
from .compose import ComposeFormState
from .emails import EmailsApiClient, EmailsApiError
from .sse import SSEDecoder


__all__ = [
    "ComposeFormState",
    "EmailsApiClient",
    "EmailsApiError",
    "SSEDecoder",
    "StreamCallbacks",
    "StreamGenerationError",
    "stream_ai_generation",
]
