#main.py
import sys

from rich.console import Console
from rich.text import Text

from core.completion_client import CompletionClient
from core.errors import LinerNotesError
from core.pipeline import run_cycle
from core.track_resolver import resolve_track
from ui.main_window import render_document


def main(console: Console = None) -> int:
    """Print the notes for the current track once, without the interactive view."""
    console = console or Console()
    err = Console(stderr=True)

    try:
        metadata = resolve_track()
    except LinerNotesError as e:
        err.print(f"[Liner Notes] {e}", markup=False)
        return 1

    console.print(Text.assemble((metadata.artist, "bold"), f" • {metadata.track} • {metadata.album}"))
    with console.status("Asking about this record…"):
        state = run_cycle(metadata, CompletionClient())

    snap = state.snapshot()
    if snap.last_error:
        err.print(f"⚠ {snap.last_error}", style="yellow", markup=False)
    console.print(render_document(snap.document))
    return 0


if __name__ == "__main__":
    sys.exit(main())
