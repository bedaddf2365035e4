"""
Frontend settings loaded from environment variables at startup.
Import `settings` and use it instead of reading os.environ elsewhere.
Raises RuntimeError if a numeric variable is malformed.
"""
import os

from dotenv import load_dotenv


def _optional(key: str, default: str) -> str:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def _optional_number(key: str, default: float) -> float:
    s = _optional(key, str(default))
    try:
        return float(s)
    except ValueError as e:
        raise RuntimeError(f"Environment variable {key} must be a number: {s!r}") from e


class Settings:
    """All environment-derived configuration. Loaded once at import."""

    def __init__(self) -> None:
        load_dotenv()
        base = _optional("API_BASE", "http://localhost:3000").rstrip("/")
        self.chat_api = f"{base}/chat"
        self.chat_timeout = _optional_number("CHAT_TIMEOUT", 60.0)
        self.port = int(_optional_number("FRONTEND_PORT", 8080))


# Single instance loaded at import
settings = Settings()
