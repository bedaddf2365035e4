"""Relay API request/response schemas and the upstream chat-completion payload."""
from typing import Literal

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Single-turn chat request from the widget."""

    # Checked by eco_advisor.services.relay.validate_prompt.
    prompt: str | None = Field(None, description="User prompt (non-empty after trimming)")


class ChatResponse(BaseModel):
    """Reply text extracted from the upstream completion."""

    message: str = Field(..., description="Assistant reply text")


class ErrorResponse(BaseModel):
    """Client-safe error body. Never carries upstream detail."""

    error: str = Field(..., description="Human-readable error message")


class CompletionMessage(BaseModel):
    """A single message sent to the upstream completion API."""

    role: Literal["system", "user"] = Field(..., description="Message author")
    content: str = Field(..., description="Message content")


class CompletionRequest(BaseModel):
    """OpenAI-compatible chat-completion request body."""

    model: str = Field(..., description="Upstream model identifier")
    messages: list[CompletionMessage] = Field(..., min_length=2)
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_tokens: int = Field(..., gt=0)
