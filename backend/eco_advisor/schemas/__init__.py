from eco_advisor.schemas.chat import (
    ChatRequest,
    ChatResponse,
    CompletionMessage,
    CompletionRequest,
    ErrorResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "CompletionMessage",
    "CompletionRequest",
    "ErrorResponse",
]
