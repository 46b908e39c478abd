# core/debug.py
import os
from datetime import datetime
from pathlib import Path

from .settings import api_token

_DEBUG = os.getenv("LINER_NOTES_DEBUG") == "1"
LOG_PATH = Path(os.getenv("LINER_NOTES_LOG") or Path(__file__).resolve().parents[1] / "liner_notes_debug.log")


def redact(message: str) -> str:
    token = api_token()
    return message.replace(token, "<redacted>") if token else message


def debug_log(message: str) -> None:
    """Append to the debug log when LINER_NOTES_DEBUG=1.

    Never prints (the terminal belongs to the UI) and never raises.
    """
    if not _DEBUG:
        return

    line = f"[{datetime.now():%Y-%m-%d %H:%M:%S}] {redact(message)}\n"
    try:
        with LOG_PATH.open("a", encoding="utf-8") as f:
            f.write(line)
    except OSError:
        pass
