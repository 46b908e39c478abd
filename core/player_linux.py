# core/player_linux.py
import subprocess
from typing import List, Optional

from .debug import debug_log
from .errors import PlayerError
from .models import NowPlaying
from .settings import PLAYER_NAME

PLAYERCTL_TIMEOUT = 5.0

# Tab separated so titles containing "|" survive.
_FORMAT = "\t".join([
    "{{status}}",
    "{{xesam:title}}",
    "{{xesam:artist}}",
    "{{xesam:album}}",
    "{{mpris:trackid}}",
])


def _playerctl(args: List[str]) -> Optional[str]:
    try:
        proc = subprocess.run(
            ["playerctl", *args, "metadata", "--format", _FORMAT],
            capture_output=True,
            text=True,
            timeout=PLAYERCTL_TIMEOUT,
        )
    except FileNotFoundError as e:
        raise PlayerError("playerctl is required to read the current track on Linux") from e
    except subprocess.TimeoutExpired as e:
        raise PlayerError("playerctl did not answer in time") from e

    if proc.returncode != 0:
        debug_log(f"playerctl {' '.join(args)}: {proc.stderr.strip()}")
        return None
    return proc.stdout.strip("\n")


def parse_metadata(out: str, source: str = "") -> Optional[NowPlaying]:
    parts = out.split("\t")
    if len(parts) < 5:
        return None

    status, title, artist, album, track_id = parts[:5]
    if status.lower() == "stopped":
        return None

    artist = artist.strip()
    return NowPlaying(
        title=title,
        artists=(artist,) if artist else (),
        album=album,
        playing=status.lower() == "playing",
        source=source,
        is_music="/episode/" not in track_id and "/ad/" not in track_id,
    )


def get_now_playing() -> Optional[NowPlaying]:
    player = PLAYER_NAME.lower()
    out = _playerctl([f"--player={player}"])
    source = player
    if out is None:
        # Any MPRIS player will do.
        out = _playerctl([])
        source = "mpris"
    if not out:
        return None
    return parse_metadata(out, source=source)
