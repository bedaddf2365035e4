"""Chat controller tests with the relay stubbed by httpx.MockTransport."""
from __future__ import annotations

import asyncio
import json
import os
import unittest
from unittest.mock import patch

import httpx

from chat_controller import (
    FALLBACK_MESSAGE,
    ChatController,
    ChatMessage,
    SubmitState,
    format_reply,
)
from config import Settings

CHAT_API = "http://relay.test/chat"


class ChatControllerTest(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:  # noqa: N802
        self.requests: list[httpx.Request] = []
        self.transcript_at_call: list[ChatMessage] = []
        self.respond = lambda request: httpx.Response(200, json={"message": "Reuse it."})
        self.changes = 0

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            self.transcript_at_call = list(self.controller.transcript)
            return self.respond(request)

        def on_change() -> None:
            self.changes += 1

        self.controller = ChatController(
            CHAT_API,
            transport=httpx.MockTransport(handler),
            on_change=on_change,
        )

    async def test_submit_appends_user_entry_before_relay_call(self) -> None:
        accepted = await self.controller.submit("  Is plastic recyclable?  ")

        self.assertTrue(accepted)
        self.assertEqual(len(self.requests), 1)
        self.assertEqual(json.loads(self.requests[0].content), {"prompt": "Is plastic recyclable?"})
        user_entries = [m for m in self.transcript_at_call if m.role == "user"]
        self.assertEqual(user_entries, [ChatMessage(role="user", text="Is plastic recyclable?")])
        self.assertTrue(self.transcript_at_call[-1].pending)

    async def test_success_replaces_thinking_with_reply(self) -> None:
        await self.controller.submit("hello")

        self.assertEqual(
            self.controller.transcript,
            [ChatMessage(role="user", text="hello"), ChatMessage(role="bot", text="Reuse it.")],
        )
        self.assertIs(self.controller.state, SubmitState.IDLE)
        self.assertEqual(self.changes, 2)

    async def test_blank_input_is_noop(self) -> None:
        for text in ("", "   ", "\n\t", None):
            with self.subTest(text=text):
                accepted = await self.controller.submit(text)
                self.assertFalse(accepted)

        self.assertEqual(self.controller.transcript, [])
        self.assertEqual(self.requests, [])
        self.assertEqual(self.changes, 0)

    async def test_non_2xx_renders_fallback_and_removes_thinking(self) -> None:
        self.respond = lambda request: httpx.Response(500, json={"error": "Internal server error"})

        with self.assertLogs("chat_controller", level="WARNING"):
            await self.controller.submit("hello")

        bot_entries = [m for m in self.controller.transcript if m.role == "bot"]
        self.assertEqual(bot_entries, [ChatMessage(role="bot", text=FALLBACK_MESSAGE)])
        self.assertFalse(any(m.pending for m in self.controller.transcript))
        self.assertIs(self.controller.state, SubmitState.IDLE)

    async def test_network_error_renders_fallback(self) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        self.respond = fail

        with self.assertLogs("chat_controller", level="WARNING"):
            await self.controller.submit("hello")

        self.assertEqual(self.controller.transcript[-1], ChatMessage(role="bot", text=FALLBACK_MESSAGE))
        self.assertEqual(len(self.controller.transcript), 2)

    async def test_response_without_message_renders_fallback(self) -> None:
        self.respond = lambda request: httpx.Response(200, json={"reply": "wrong key"})

        with self.assertLogs("chat_controller", level="WARNING"):
            await self.controller.submit("hello")

        self.assertEqual(self.controller.transcript[-1].text, FALLBACK_MESSAGE)

    async def test_failing_view_update_does_not_leave_controller_pending(self) -> None:
        calls = []

        def broken_view() -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("client disconnected")

        self.controller.on_change = broken_view

        with self.assertLogs("chat_controller", level="ERROR"):
            accepted = await self.controller.submit("hi")

        self.assertTrue(accepted)
        self.assertIs(self.controller.state, SubmitState.IDLE)
        self.assertEqual(
            self.controller.transcript,
            [ChatMessage(role="user", text="hi"), ChatMessage(role="bot", text="Reuse it.")],
        )
        self.assertEqual(len(calls), 2)
        self.assertTrue(await self.controller.submit("again"))

    async def test_submit_while_pending_is_rejected(self) -> None:
        release = asyncio.Event()

        async def slow(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            await release.wait()
            return httpx.Response(200, json={"message": "first"})

        controller = ChatController(CHAT_API, transport=httpx.MockTransport(slow))
        first = asyncio.create_task(controller.submit("first"))
        while not self.requests:
            await asyncio.sleep(0)

        self.assertIs(controller.state, SubmitState.PENDING)
        self.assertFalse(controller.can_submit("second"))
        self.assertFalse(await controller.submit("second"))

        release.set()
        self.assertTrue(await first)
        self.assertEqual([m.text for m in controller.transcript], ["first", "first"])
        self.assertEqual(len(self.requests), 1)
        self.assertTrue(controller.can_submit("second"))


class FormatReplyTest(unittest.TestCase):
    def test_newlines_become_line_breaks(self) -> None:
        rendered = format_reply("Line1\nLine2")

        self.assertEqual(rendered, "Line1<br>Line2")
        self.assertNotIn("\n", rendered)
        self.assertNotIn("\\n", rendered)

    def test_other_text_is_untouched(self) -> None:
        self.assertEqual(format_reply("Save 10% & recycle"), "Save 10% & recycle")


class FrontendSettingsTest(unittest.TestCase):
    def test_chat_api_is_built_from_api_base(self) -> None:
        with patch.dict(os.environ, {"API_BASE": "http://relay.test/"}):
            settings = Settings()

        self.assertEqual(settings.chat_api, "http://relay.test/chat")
        self.assertFalse(hasattr(settings, "api_base"))

    def test_malformed_timeout_raises(self) -> None:
        with patch.dict(os.environ, {"CHAT_TIMEOUT": "soon"}):
            with self.assertRaises(RuntimeError):
                Settings()


if __name__ == "__main__":
    unittest.main()
