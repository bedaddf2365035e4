"""Relay to the upstream chat-completion API (OpenRouter, OpenAI-compatible)."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from eco_advisor.config import Settings
from eco_advisor.schemas.chat import CompletionMessage, CompletionRequest

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an AI Environmental Advisor.
Your role is to respond to ALL user inputs (greetings, questions, or statements) with eco-friendly advice.

For every response, include:
1. 🌍 An environmental tip or fact relevant to the context.
2. 🔗 A brief explanation connecting the advice to the user's input.
3. ✅ One clear, actionable suggestion the user can follow.

Guidelines:
- Keep answers concise (1-3 sentences).
- Always frame responses from an eco-conscious perspective.
- For technical or machine-related queries, provide specific recommendations on energy efficiency, sustainable usage, and waste reduction.
- Be practical, positive, and solution-oriented in tone."""


class UpstreamError(Exception):
    """Raised when the completion API call fails or returns an unexpected payload."""
    pass


class PromptValidationError(ValueError):
    """Raised when an incoming prompt is missing, empty, or too long."""
    pass


def validate_prompt(prompt: Any, max_chars: int) -> str:
    """Return the trimmed prompt or raise PromptValidationError."""
    if prompt is None:
        raise PromptValidationError("Prompt is required")
    if not isinstance(prompt, str):
        raise PromptValidationError("Prompt must be a string")
    text = prompt.strip()
    if not text:
        raise PromptValidationError("Prompt must be non-empty")
    if len(text) > max_chars:
        raise PromptValidationError(f"Prompt must be at most {max_chars} characters")
    return text


def build_completion_request(prompt: str, settings: Settings) -> CompletionRequest:
    """Fixed system instruction + the user prompt, with configured sampling params."""
    return CompletionRequest(
        model=settings.chat_model,
        messages=[
            CompletionMessage(role="system", content=SYSTEM_PROMPT),
            CompletionMessage(role="user", content=prompt),
        ],
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )


def extract_reply(payload: Any) -> str:
    """
    Pull choices[0].message.content out of an upstream payload.
    Error payloads, empty/filtered choices and non-string content raise UpstreamError.
    """
    if not isinstance(payload, dict):
        raise UpstreamError(f"Upstream payload is not an object: {type(payload).__name__}")
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        detail = payload.get("error") or "missing or empty choices"
        raise UpstreamError(f"Upstream returned no choices: {detail}")
    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message") if isinstance(first.get("message"), dict) else {}
    content = message.get("content")
    if not isinstance(content, str):
        raise UpstreamError("Upstream choice has no string message content")
    return content


class RelayService:
    """Forwards one prompt per call to the completion API. Holds no per-request state."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.settings.app_referer,
            "X-Title": self.settings.app_title,
        }

    async def relay(self, prompt: str) -> str:
        """
        Issue a single completion request for `prompt` and return the reply text.
        No retry: any transport error, non-2xx status or malformed body raises UpstreamError.
        """
        body = build_completion_request(prompt, self.settings)
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.upstream_timeout,
                transport=self._transport,
            ) as client:
                r = await client.post(
                    self.settings.completions_url,
                    headers=self._headers(),
                    json=body.model_dump(),
                )
            r.raise_for_status()
            payload = r.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Upstream status {e.response.status_code}: {(e.response.text or '')[:500]}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Upstream request failed: {e!s}") from e
        except ValueError as e:
            raise UpstreamError("Upstream returned invalid JSON") from e

        reply = extract_reply(payload)
        logger.debug("Relay: reply of %d chars from %s", len(reply), self.settings.chat_model)
        return reply
