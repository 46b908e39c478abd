# core/player_windows.py
import asyncio
import time
from typing import Optional

from .models import NowPlaying
from .debug import debug_log
from .settings import PLAYER_NAME

try:
    from winsdk.windows.media.control import (
        GlobalSystemMediaTransportControlsSessionManager as MediaManager,
        GlobalSystemMediaTransportControlsSessionPlaybackStatus as PlaybackStatus,
    )
    from winsdk.windows.media import MediaPlaybackType
except Exception:  # winsdk not installed or not on Windows
    MediaManager = None
    PlaybackStatus = None
    MediaPlaybackType = None

_last_session_log = 0.0


def _session_app_id(session) -> str:
    try:
        return (session.source_app_user_model_id or "").lower()
    except Exception:
        return ""


def _is_player_session(session, player: str = PLAYER_NAME) -> bool:
    needle = player.lower().replace(" ", "")
    return needle in _session_app_id(session).replace(" ", "")


def _playback_status(session):
    try:
        return session.get_playback_info().playback_status
    except Exception:
        return None


def _is_music(info) -> bool:
    kind = getattr(info, "playback_type", None)
    if kind is None or MediaPlaybackType is None:
        return True
    return kind in (MediaPlaybackType.MUSIC, MediaPlaybackType.UNKNOWN)


def _log_sessions(sessions) -> None:
    global _last_session_log
    now = time.time()
    if now - _last_session_log <= 5:
        return
    _last_session_log = now
    names = [
        f"app_id='{_session_app_id(candidate)}' status='{_playback_status(candidate)}'"
        for candidate in sessions
    ]
    debug_log(f"No {PLAYER_NAME} session. Sessions: " + " | ".join(names))


async def _get_now_playing_async() -> Optional[NowPlaying]:
    if MediaManager is None:
        return None

    manager = await MediaManager.request_async()
    session = None
    try:
        current = manager.get_current_session()
        if current and _is_player_session(current):
            session = current
    except Exception:
        session = None

    if not session:
        try:
            sessions = list(manager.get_sessions())
        except Exception:
            sessions = []

        fallback = None
        for candidate in sessions:
            if not _is_player_session(candidate):
                continue
            if _playback_status(candidate) == PlaybackStatus.PLAYING:
                session = candidate
                break
            if fallback is None:
                fallback = candidate

        session = session or fallback

        if not session and sessions:
            _log_sessions(sessions)

    if not session:
        return None

    status = _playback_status(session)
    if status is None or status == PlaybackStatus.STOPPED:
        return None

    try:
        info = await session.try_get_media_properties_async()
    except Exception as e:
        debug_log(f"Media properties unavailable: {e}")
        return None

    artist = (getattr(info, "artist", "") or "").strip()
    return NowPlaying(
        title=getattr(info, "title", "") or "",
        artists=(artist,) if artist else (),
        album=getattr(info, "album_title", "") or "",
        playing=status == PlaybackStatus.PLAYING,
        source=_session_app_id(session),
        is_music=_is_music(info),
    )


def get_now_playing() -> Optional[NowPlaying]:
    if MediaManager is None:
        return None

    # Callers are plain threads without a running event loop.
    return asyncio.run(_get_now_playing_async())
