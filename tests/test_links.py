import re

from core.links import build_links, format_links, sanitize_query
from core.models import TrackMetadata


def test_sanitize_query():
    assert sanitize_query("AC/DC") == "AC+DC"
    assert sanitize_query("Back In Black") == "Back+In+Black"
    # the "+" from the space joins the run around it
    assert sanitize_query("abbey road ( edition)") == "abbey+road+edition+"
    assert sanitize_query("Guns N' Roses") == "Guns+N+Roses"


def test_build_links(metadata):
    links = build_links(metadata)

    assert links.video == "https://www.youtube.com/results?search_query=AC+DC+Back+In+Black"
    assert links.images == "https://www.google.com/search?q=AC+DC+back+in+black&tbm=isch"
    assert links.encyclopedia == "https://www.google.com/search?q=wikipedia+AC+DC+back+in+black"


def test_tokens_only_hold_alnum_and_single_pluses():
    metadata = TrackMetadata(artist="Sigur Rós", album="( ) // ágætis byrjun", track="Svefn-g-englar")
    for value in (metadata.artist, metadata.album, metadata.track):
        token = sanitize_query(value)
        assert re.fullmatch(r"[A-Za-z0-9+]*", token)
        assert "++" not in token


def test_format_links_section(metadata):
    section = format_links(build_links(metadata))

    lines = section.strip().splitlines()
    assert lines[0] == "## Links"
    assert len(lines) == 4
    assert all(line.startswith("- https://") for line in lines[1:])
