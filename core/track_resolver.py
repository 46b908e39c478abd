# core/track_resolver.py
import sys
from typing import Callable, Optional

from .debug import debug_log
from .errors import PlayerError, TrackResolutionError
from .models import NowPlaying, TrackMetadata
from .settings import PLAYER_NAME

# Removed in this order, after lowercasing.
ALBUM_NOISE = (
    "deluxe",
    "expanded edition - remastered",
    "bonus tracks edition",
)

NowPlayingFn = Callable[[], Optional[NowPlaying]]


def normalize_album(album: str) -> str:
    value = album.lower()
    for noise in ALBUM_NOISE:
        value = value.replace(noise, "")
    return value


def platform_backend() -> Optional[NowPlayingFn]:
    if sys.platform == "win32":
        try:
            from .player_windows import get_now_playing
        except Exception:
            return None
        return get_now_playing
    if sys.platform == "darwin":
        from .player_macos import get_now_playing
        return get_now_playing
    if sys.platform.startswith("linux"):
        from .player_linux import get_now_playing
        return get_now_playing
    return None


def resolve_track(get_now_playing: Optional[NowPlayingFn] = None) -> TrackMetadata:
    get_now_playing = get_now_playing or platform_backend()
    if get_now_playing is None:
        raise TrackResolutionError(f"Reading the current track is not supported on {sys.platform}")

    try:
        np = get_now_playing()
    except PlayerError as e:
        raise TrackResolutionError(str(e)) from e
    if np is None:
        raise TrackResolutionError(
            f"Nothing is playing. Seems that the {PLAYER_NAME} desktop app is not installed or not open :("
        )

    if not np.is_music or not np.artists or not np.album.strip():
        raise TrackResolutionError(f"'{np.title or 'Current item'}' is not a music track")

    metadata = TrackMetadata(
        artist=np.artists[0],
        album=normalize_album(np.album),
        track=np.title,
    )
    debug_log(f"Resolved {metadata.artist} / {metadata.album} / {metadata.track} from {np.source or 'player'}")
    return metadata
