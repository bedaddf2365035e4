"""
Application settings loaded from environment variables at startup.
Build one `Settings` via `get_settings()` and pass it to the services that need it
instead of reading os.environ elsewhere.
Raises RuntimeError if a numeric variable is malformed.
"""
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_STATIC_DIR = PACKAGE_DIR / "static"

DEFAULT_UPSTREAM_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_CHAT_MODEL = "openai/gpt-3.5-turbo-0613"


def _optional(key: str, default: str) -> str:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def _optional_int(key: str, default: int) -> int:
    s = _optional(key, str(default))
    try:
        return int(s)
    except ValueError as e:
        raise RuntimeError(f"Environment variable {key} must be an integer: {s!r}") from e


def _optional_float(key: str, default: float) -> float:
    s = _optional(key, str(default))
    try:
        return float(s)
    except ValueError as e:
        raise RuntimeError(f"Environment variable {key} must be a number: {s!r}") from e


class Settings:
    """All environment-derived configuration. Immutable for the process lifetime."""

    def __init__(self) -> None:
        # Upstream completion API (OpenRouter / OpenAI-compatible)
        self.api_key = _optional("OPENROUTER_API_KEY", "")
        self.upstream_base_url = _optional("UPSTREAM_BASE_URL", DEFAULT_UPSTREAM_BASE_URL).rstrip("/")
        self.chat_model = _optional("CHAT_MODEL", DEFAULT_CHAT_MODEL)
        self.temperature = _optional_float("CHAT_TEMPERATURE", 0.7)
        self.max_tokens = _optional_int("CHAT_MAX_TOKENS", 300)
        self.upstream_timeout = _optional_float("UPSTREAM_TIMEOUT", 60.0)
        self.app_referer = _optional("APP_REFERER", "http://localhost:3000")
        self.app_title = _optional("APP_TITLE", "Eco Advisor")

        # Incoming prompts
        self.prompt_max_chars = _optional_int("PROMPT_MAX_CHARS", 2000)

        # HTTP server
        self.static_dir = Path(_optional("STATIC_DIR", str(DEFAULT_STATIC_DIR)))
        self.cors_origins = [o.strip() for o in _optional("CORS_ORIGINS", "*").split(",") if o.strip()]
        self.host = _optional("HOST", "0.0.0.0")
        self.port = _optional_int("PORT", 3000)
        self.log_level = _optional("LOG_LEVEL", "INFO").upper()

    @property
    def completions_url(self) -> str:
        return f"{self.upstream_base_url}/chat/completions"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load .env (if present) and return the process-wide Settings instance."""
    load_dotenv()
    return Settings()
