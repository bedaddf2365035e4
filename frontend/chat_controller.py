"""
Chat UI state for the Eco Advisor widget, independent of NiceGUI.

The controller owns the transcript and an Idle/Pending submit state: while a relay call
is outstanding new submissions are rejected, so replies always render in order.
The page in main.py renders `transcript` whenever `on_change` fires.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal

import httpx

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "I'm currently unable to access environmental advice. Please try again later."
THINKING_TEXT = "Analyzing..."


class SubmitState(Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass
class ChatMessage:
    """One transcript entry. `pending` marks the thinking placeholder."""

    role: Literal["user", "bot"]
    text: str
    pending: bool = False


class RelayResponseError(Exception):
    """Raised when the relay answers 2xx without a string `message`."""
    pass


def format_reply(text: str) -> str:
    """Newlines become <br> for display. Nothing else is changed."""
    return text.replace("\n", "<br>")


async def fetch_reply(client: httpx.AsyncClient, chat_api: str, prompt: str) -> str:
    """POST {prompt} to the relay and return its `message`. Non-2xx raises httpx.HTTPStatusError."""
    r = await client.post(chat_api, json={"prompt": prompt})
    r.raise_for_status()
    try:
        data = r.json()
    except ValueError as e:
        raise RelayResponseError("Relay returned invalid JSON") from e
    message = data.get("message") if isinstance(data, dict) else None
    if not isinstance(message, str):
        raise RelayResponseError("Relay response has no message")
    return message


class ChatController:
    def __init__(
        self,
        chat_api: str,
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        on_change: Callable[[], None] | None = None,
    ):
        self.chat_api = chat_api
        self.timeout = timeout
        self.transport = transport
        self.on_change = on_change
        self.transcript: list[ChatMessage] = []
        self.state = SubmitState.IDLE

    @property
    def pending(self) -> bool:
        return self.state is SubmitState.PENDING

    def can_submit(self, text: str | None) -> bool:
        return bool((text or "").strip()) and not self.pending

    def _notify(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change()
        except Exception:
            logger.exception("View update failed")

    def _replace(self, placeholder: ChatMessage, message: ChatMessage) -> None:
        for i, entry in enumerate(self.transcript):
            if entry is placeholder:
                self.transcript[i] = message
                return
        self.transcript.append(message)

    async def submit(self, text: str | None) -> bool:
        """
        Send one prompt through the relay and record the exchange.

        Empty/whitespace input, or a submit while another call is pending, is a no-op
        returning False. Otherwise the user entry and a thinking placeholder are added
        before the call; the placeholder is then replaced by the reply or, on any
        failure, by FALLBACK_MESSAGE. There is no retry.
        """
        prompt = (text or "").strip()
        if not prompt or self.pending:
            return False

        self.transcript.append(ChatMessage(role="user", text=prompt))
        self.state = SubmitState.PENDING
        placeholder = ChatMessage(role="bot", text=THINKING_TEXT, pending=True)
        self.transcript.append(placeholder)
        self._notify()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                reply = await fetch_reply(client, self.chat_api, prompt)
        except httpx.HTTPStatusError as e:
            logger.warning("Relay error %s: %s", e.response.status_code, (e.response.text or "")[:200])
            reply = FALLBACK_MESSAGE
        except Exception:
            logger.warning("Relay call failed", exc_info=True)
            reply = FALLBACK_MESSAGE
        finally:
            self.state = SubmitState.IDLE

        self._replace(placeholder, ChatMessage(role="bot", text=reply))
        self._notify()
        return True
