# core/prompts.py
from typing import List

from .models import PromptSpec, TrackMetadata


def build_prompts(metadata: TrackMetadata) -> List[PromptSpec]:
    artist, album, track = metadata.artist, metadata.album, metadata.track
    return [
        PromptSpec(
            title="## Album info and credits",
            prompt=f"Give me album information and credits of {artist} {album}",
        ),
        PromptSpec(
            title="## Album review",
            prompt=f"Give me a critical review of the album {album} by {artist}",
        ),
        PromptSpec(
            title="## Song info",
            prompt=f"Give me song info (limit 500 characters) of {artist} {track}",
        ),
    ]
