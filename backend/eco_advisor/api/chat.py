"""Relay API route: single-turn chat forwarded to the upstream completion API."""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from eco_advisor.schemas.chat import ChatRequest, ChatResponse, ErrorResponse
from eco_advisor.services.relay import PromptValidationError, RelayService, UpstreamError, validate_prompt

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR = "Internal server error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_endpoint(body: ChatRequest, request: Request):
    """
    Send `prompt` to the upstream model with the fixed environmental-advisor system prompt.
    Returns `{"message": ...}`. Upstream failures are logged and surface as a generic 500.
    """
    relay: RelayService = request.app.state.relay
    try:
        prompt = validate_prompt(body.prompt, relay.settings.prompt_max_chars)
    except PromptValidationError as e:
        return _error(400, str(e))

    try:
        reply = await relay.relay(prompt)
    except UpstreamError:
        logger.exception("Chat: upstream relay failed")
        return _error(500, INTERNAL_ERROR)
    except Exception:
        logger.exception("Chat: unexpected error")
        return _error(500, INTERNAL_ERROR)
    return ChatResponse(message=reply)
