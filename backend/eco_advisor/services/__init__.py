"""Application services (upstream relay)."""
from eco_advisor.services.relay import (
    SYSTEM_PROMPT,
    PromptValidationError,
    RelayService,
    UpstreamError,
    build_completion_request,
    extract_reply,
    validate_prompt,
)

__all__ = [
    "SYSTEM_PROMPT",
    "PromptValidationError",
    "RelayService",
    "UpstreamError",
    "build_completion_request",
    "extract_reply",
    "validate_prompt",
]
