# core/settings.py
import os
from typing import Optional


TOKEN_ENV = "OPENAI_TOKEN"
LEGACY_TOKEN_ENV = "AUTH_TOKEN_OPEN_AI"

MODEL = os.getenv("LINER_NOTES_MODEL", "gpt-3.5-turbo")
API_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
PLAYER_NAME = os.getenv("LINER_NOTES_PLAYER", "Spotify")


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, ""))
    except ValueError:
        return default


REQUEST_TIMEOUT = _env_float("LINER_NOTES_TIMEOUT", 60.0)
POLL_SECONDS = _env_float("LINER_NOTES_POLL_SECONDS", 1.0)


def api_token() -> Optional[str]:
    # Read at call time so a token exported after import still counts.
    token = os.getenv(TOKEN_ENV) or os.getenv(LEGACY_TOKEN_ENV) or ""
    return token.strip() or None
