"""
FastAPI relay backend for the Eco Advisor chat widget.
POST /chat forwards a prompt to the upstream completion API; everything else under GET
is served from the static directory.
"""
import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pythonjsonlogger.json import JsonFormatter

from eco_advisor.api import chat, static
from eco_advisor.config import Settings, get_settings
from eco_advisor.services.relay import RelayService

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    """Configure root logger: JSON format to stderr, level from settings (e.g. LOG_LEVEL=INFO)."""
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(lineno)s  %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _log_routes(app: FastAPI) -> None:
    """Log all registered routes at startup."""
    logger.info("Registered routes:")
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            for method in sorted(route.methods - {"HEAD", "OPTIONS"}):
                logger.info(f"  {method} {route.path}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    _log_routes(app)
    if not settings.api_key:
        logger.warning("OPENROUTER_API_KEY is not set; every /chat call will fail upstream")
    logger.info(f"Server running at http://{settings.host}:{settings.port}")
    yield


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected malformed request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_app(
    settings: Settings | None = None,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app around one Settings instance; `upstream_transport` lets tests stub the upstream API."""
    settings = settings or get_settings()
    _setup_logging(settings.log_level)

    app = FastAPI(
        title="Eco Advisor Relay API",
        description="Relays chat prompts to an upstream LLM with a fixed environmental-advisor system prompt",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.relay = RelayService(settings, transport=upstream_transport)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _invalid_body)

    app.include_router(chat.router, prefix="/chat", tags=["chat"])

    @app.get("/health")
    async def health():
        """Health check for Docker/orchestration."""
        return {"status": "ok"}

    # Catch-all must stay last so it never shadows the API routes.
    app.include_router(static.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("eco_advisor.main:app", host=_settings.host, port=_settings.port)
