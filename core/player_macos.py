#core/player_macos.py
import subprocess
from typing import Optional

from .debug import debug_log
from .errors import PlayerError
from .models import NowPlaying
from .settings import PLAYER_NAME

OSASCRIPT_TIMEOUT = 5.0
FALLBACK_PLAYER = "Music"

# Fields are separated by "|"; the id tells tracks apart from episodes and ads.
_SCRIPT = r'''
if application "{app}" is not running then
    return "OK=0"
end if
tell application "{app}"
    set ps to (player state as string)
    if ps is "stopped" then
        return "OK=0"
    end if

    set tName to (name of current track as string)
    set tArtist to (artist of current track as string)
    set tAlbum to (album of current track as string)
    set tId to (id of current track as string)
    set isPlaying to (ps is "playing")

    return "OK=1|" & tName & "|" & tArtist & "|" & tAlbum & "|" & tId & "|" & (isPlaying as string)
end tell
'''


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _query(app_name: str) -> Optional[NowPlaying]:
    script = _SCRIPT.replace("{app}", _escape(app_name))
    try:
        out = subprocess.check_output(
            ["osascript", "-e", script],
            text=True,
            stderr=subprocess.PIPE,
            timeout=OSASCRIPT_TIMEOUT,
        ).strip()
    except FileNotFoundError as e:
        raise PlayerError("osascript is not available on this system") from e
    except subprocess.TimeoutExpired as e:
        raise PlayerError(f"{app_name} did not answer in time") from e
    except subprocess.CalledProcessError as e:
        # Most often the application is not installed at all.
        debug_log(f"osascript failed for {app_name}: {(e.stderr or '').strip()}")
        return None

    if not out.startswith("OK=1|"):
        return None

    parts = out.split("|")
    if len(parts) < 6:
        debug_log(f"Unexpected osascript output from {app_name}: {out!r}")
        return None

    track_id = parts[4].lower()
    artist = parts[2].strip()
    return NowPlaying(
        title=parts[1],
        artists=(artist,) if artist else (),
        album=parts[3],
        playing=parts[5].lower() == "true",
        source=app_name,
        is_music=not (track_id.startswith("spotify:episode:") or track_id.startswith("spotify:ad:")),
    )


def get_now_playing() -> Optional[NowPlaying]:
    np = _query(PLAYER_NAME)
    if np is None and PLAYER_NAME != FALLBACK_PLAYER:
        np = _query(FALLBACK_PLAYER)
    return np
