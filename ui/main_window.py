# ui/main_window.py
from typing import Optional

from rich.markdown import Markdown
from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.timer import Timer
from textual.widgets import ProgressBar, Static
from textual.worker import get_current_worker

from core.aggregator import AggregationState, Snapshot
from core.debug import debug_log
from core.errors import LinerNotesError
from core.models import TrackMetadata
from core.settings import POLL_SECONDS

from .worker import CycleRunner

PRIMARY = "#FF7CCB"
BORDER = "#5f5fd7"
HELP = "#626262"


def render_document(document: str):
    """Rich markdown for the viewport, or plain text when parsing fails."""
    try:
        return Markdown(document, hyperlinks=True)
    except Exception as e:
        debug_log(f"Markdown rendering failed, showing plain text: {e!r}")
        return Text(document)


class NotesApp(App):
    TITLE = "Liner Notes"

    CSS = f"""
    Screen {{
        layout: vertical;
    }}
    #track-line {{
        padding: 0 2;
        text-style: bold;
        color: {PRIMARY};
    }}
    #warning {{
        padding: 0 2;
        color: $warning;
    }}
    #loading {{
        padding: 1 2;
        height: auto;
    }}
    #progress Bar > .bar--bar {{
        color: {PRIMARY};
    }}
    #viewport {{
        border: round {BORDER};
        padding: 0 2 0 0;
        max-width: 124;
    }}
    .help {{
        color: {HELP};
        padding: 0 2;
    }}
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", show=False),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("r", "reload", "Refresh"),
    ]

    def __init__(self, runner: CycleRunner, metadata: TrackMetadata, poll_seconds: float = POLL_SECONDS):
        super().__init__()
        self.runner = runner
        self._initial_metadata = metadata
        self._poll_seconds = poll_seconds
        self._progress_timer: Optional[Timer] = None
        self._cycle_generation = 0
        self._cycle_state: Optional[AggregationState] = None
        self.is_loading = True
        self._refresh_pending = False
        self.rendered_document: Optional[str] = None
        self.warning_text: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield Static("", id="track-line")
        yield Static("", id="warning")
        with Vertical(id="loading"):
            yield ProgressBar(total=100, show_eta=False, id="progress")
            yield Static("Press q to quit", classes="help")
        with VerticalScroll(id="viewport"):
            yield Static("", id="document")
        yield Static("↑/↓: Navigate • r: Refresh • q: Quit", id="help", classes="help")

    def on_mount(self) -> None:
        self._set_warning(None)
        self._start_cycle(self._initial_metadata)

    # ==================================================
    # CYCLE STATE
    # ==================================================

    def _start_cycle(self, metadata: TrackMetadata) -> None:
        generation, state = self.runner.begin(metadata)
        self._enter_loading(generation, state, metadata)
        self._run_cycle(generation, state, metadata)

    @work(thread=True, exclusive=True, group="cycle")
    def _run_cycle(self, generation: int, state: AggregationState, metadata: TrackMetadata) -> None:
        worker = get_current_worker()
        self.runner.run(generation, state, metadata, cancelled=lambda: worker.is_cancelled)

    def _enter_loading(self, generation: int, state: AggregationState, metadata: TrackMetadata) -> None:
        self._cycle_generation = generation
        self._cycle_state = state
        self.is_loading = True
        self.query_one("#track-line", Static).update(f"{metadata.artist} • {metadata.track} • {metadata.album}")
        self.query_one(ProgressBar).update(progress=0)
        self.query_one("#loading").display = True
        self.query_one("#viewport").display = False
        self.query_one("#help").display = False
        self._start_polling()

    def _start_polling(self) -> None:
        if self._progress_timer is None:
            self._progress_timer = self.set_interval(self._poll_seconds, self._poll_progress)
        else:
            self._progress_timer.resume()

    def _stop_polling(self) -> None:
        if self._progress_timer is not None:
            self._progress_timer.pause()

    def _poll_progress(self) -> None:
        if self._cycle_state is None or not self.runner.is_current(self._cycle_generation):
            return

        snap = self._cycle_state.snapshot()
        self.query_one(ProgressBar).update(progress=round(snap.fraction * 100))
        if snap.finished:
            self._stop_polling()
            self._show_document(snap)

    def _show_document(self, snap: Snapshot) -> None:
        self.is_loading = False
        self.rendered_document = snap.document
        self._set_warning(snap.last_error)
        self.query_one("#document", Static).update(render_document(snap.document))
        self.query_one("#loading").display = False
        viewport = self.query_one("#viewport", VerticalScroll)
        viewport.display = True
        viewport.scroll_home(animate=False)
        viewport.focus()
        self.query_one("#help").display = True

    def _set_warning(self, message: Optional[str]) -> None:
        self.warning_text = message
        banner = self.query_one("#warning", Static)
        banner.update(f"⚠ {message}" if message else "")
        banner.display = bool(message)

    # ==================================================
    # REFRESH
    # ==================================================

    @work(thread=True, exclusive=True, group="refresh")
    def _refresh_track(self) -> None:
        worker = get_current_worker()
        try:
            metadata = self.runner.resolve()
        except LinerNotesError as e:
            debug_log(f"Refresh failed: {e}")
            if not worker.is_cancelled:
                self.call_from_thread(self._on_refresh_failed, str(e))
            return
        if not worker.is_cancelled:
            self.call_from_thread(self._on_refresh_resolved, metadata)

    def _on_refresh_resolved(self, metadata: TrackMetadata) -> None:
        # Starting the new cycle cancels the one it replaces.
        self._refresh_pending = False
        self._set_warning(None)
        self._start_cycle(metadata)

    def _on_refresh_failed(self, message: str) -> None:
        self._refresh_pending = False
        self._set_warning(f"Refresh failed: {message}")

    def action_reload(self) -> None:
        if self._refresh_pending:
            return
        self._refresh_pending = True
        self._refresh_track()
