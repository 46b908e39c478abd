# core/links.py
import re

from .models import LinkSet, TrackMetadata

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")

VIDEO_SEARCH_URL = "https://www.youtube.com/results?search_query={artist}+{track}"
IMAGE_SEARCH_URL = "https://www.google.com/search?q={artist}+{album}&tbm=isch"
ENCYCLOPEDIA_SEARCH_URL = "https://www.google.com/search?q=wikipedia+{artist}+{album}"


def sanitize_query(value: str) -> str:
    # The second pass also folds the "+" from the first one into its run.
    return _NON_ALNUM.sub("+", value.replace(" ", "+"))


def build_links(metadata: TrackMetadata) -> LinkSet:
    artist = sanitize_query(metadata.artist)
    album = sanitize_query(metadata.album)
    track = sanitize_query(metadata.track)
    return LinkSet(
        video=VIDEO_SEARCH_URL.format(artist=artist, track=track),
        images=IMAGE_SEARCH_URL.format(artist=artist, album=album),
        encyclopedia=ENCYCLOPEDIA_SEARCH_URL.format(artist=artist, album=album),
    )


def format_links(links: LinkSet) -> str:
    return (
        "\n## Links\n"
        f"- {links.video}\n"
        f"- {links.images}\n"
        f"- {links.encyclopedia}\n"
    )
