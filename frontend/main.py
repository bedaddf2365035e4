"""
NiceGUI frontend for Eco Advisor: a single chat page.
Each message is sent to the backend /chat relay; the transcript lives only in the page.
"""
import html
import logging

from nicegui import ui

from chat_controller import ChatController, ChatMessage, format_reply
from config import settings

logger = logging.getLogger(__name__)


def add_nav():
    """Add navigation bar to current page."""
    with ui.header().classes("items-center gap-4 shadow"):
        ui.label("🌍 Eco Advisor").classes("text-lg font-medium")
        ui.link("Chat", "/chat").classes("text-lg font-medium")


def render_message(message: ChatMessage) -> None:
    if message.role == "user":
        with ui.row().classes("w-full justify-end"):
            with ui.card().classes("max-w-[85%] sm:max-w-[80%] bg-primary text-primary-content"):
                ui.label(message.text).classes("whitespace-pre-wrap break-words").mark("user-message")
        return
    with ui.row().classes("w-full justify-start"):
        with ui.card().classes("max-w-[85%] sm:max-w-[80%] bg-base-200"):
            if message.pending:
                with ui.row().classes("items-center gap-2"):
                    ui.spinner("dots", size="sm")
                    ui.label(message.text).classes("text-gray-500").mark("thinking")
            else:
                # Escaping happens here so format_reply only ever adds <br>.
                ui.html(format_reply(html.escape(message.text)), sanitize=False).classes("break-words").mark("bot-message")


@ui.page("/")
def index():
    add_nav()
    ui.navigate.to("/chat")


@ui.page("/chat")
def chat_page():
    add_nav()

    def on_change():
        transcript_view.refresh()
        sync_controls()
        scroll_area.scroll_to(percent=1.0)

    controller = ChatController(settings.chat_api, timeout=settings.chat_timeout, on_change=on_change)

    @ui.refreshable
    def transcript_view():
        for message in controller.transcript:
            render_message(message)

    def sync_controls():
        message_input.set_enabled(not controller.pending)
        send_button.set_enabled(controller.can_submit(message_input.value))

    async def send_on_enter(e):
        # Shift+Enter is left to the browser, which inserts the newline.
        if isinstance(e.args, dict) and e.args.get("shiftKey"):
            return
        await send_message()

    async def send_message():
        text = message_input.value or ""
        if not controller.can_submit(text):
            return
        message_input.value = ""
        await controller.submit(text)

    # Wrapper: fill viewport below header; column layout so only history scrolls
    page_height = "calc(100vh - 4rem)"
    with ui.column().classes("w-full").style(
        f"height: {page_height}; min-height: 0; display: flex; flex-direction: column;"
    ):
        scroll_area = ui.scroll_area().classes("w-full").style("flex: 1 1 0; min-height: 0;")
        with scroll_area:
            with ui.column().classes("w-full gap-3 pt-4 px-3 sm:px-4 pb-0"):
                transcript_view()
        # Input row: fixed at bottom
        with ui.row().classes("w-full items-end gap-2 px-3 sm:px-4 pb-4 pt-0 bg-gray-100").style(
            "flex-shrink: 0;"
        ):
            message_input = (
                ui.textarea(placeholder="Ask for eco-friendly advice...")
                .classes("flex-1 min-w-0")
                .props("outlined rounded dense autogrow")
                .mark("message-input")
                .on_value_change(lambda _: sync_controls())
            )
            message_input.on(
                "keydown.enter",
                send_on_enter,
                js_handler="(e) => { if (!e.shiftKey) e.preventDefault(); emit({shiftKey: e.shiftKey}); }",
            )
            send_button = ui.button("Send", on_click=send_message).props("rounded flat").mark("send-button")
    sync_controls()


if __name__ in {"__main__", "__mp_main__"}:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ui.run(
        title="Eco Advisor",
        port=settings.port,
        reload=False,
    )
