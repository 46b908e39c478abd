# core/models.py
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class NowPlaying:
    title: str
    artists: Tuple[str, ...]
    album: str
    playing: bool
    source: str = ""
    is_music: bool = True


@dataclass(frozen=True)
class TrackMetadata:
    artist: str
    album: str  # normalized
    track: str


@dataclass(frozen=True)
class PromptSpec:
    title: str  # markdown heading line
    prompt: str


@dataclass(frozen=True)
class LinkSet:
    video: str
    images: str
    encyclopedia: str
