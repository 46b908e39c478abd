# ui/worker.py
import threading
from contextlib import contextmanager
from typing import Callable, Optional, Tuple

from core.aggregator import AggregationState, Completer
from core.debug import debug_log
from core.models import TrackMetadata
from core.pipeline import Cancelled, new_state, run_cycle
from core.track_resolver import resolve_track


class CycleRunner:
    """Bookkeeping for aggregation cycles run by the UI's thread workers.

    Every cycle gets a fresh state and a generation number; the UI only
    polls the newest one. ``in_flight`` stays true while any cycle or track
    lookup is still running, superseded ones included.
    """

    def __init__(self, client: Completer, resolver: Callable[[], TrackMetadata] = resolve_track):
        self.client = client
        self.resolver = resolver
        self._lock = threading.Lock()
        self._generation = 0
        self._state: Optional[AggregationState] = None
        self._active = 0
        self.metadata: Optional[TrackMetadata] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def state(self) -> Optional[AggregationState]:
        with self._lock:
            return self._state

    @contextmanager
    def _busy(self):
        with self._lock:
            self._active += 1
        try:
            yield
        finally:
            with self._lock:
                self._active -= 1

    def in_flight(self) -> bool:
        with self._lock:
            return self._active > 0

    def resolve(self) -> TrackMetadata:
        with self._busy():
            return self.resolver()

    def begin(self, metadata: TrackMetadata) -> Tuple[int, AggregationState]:
        state = new_state(metadata)
        with self._lock:
            self._generation += 1
            self._state = state
            self.metadata = metadata
            generation = self._generation
        debug_log(f"Cycle #{generation} begins")
        return generation, state

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def run(
        self,
        generation: int,
        state: AggregationState,
        metadata: TrackMetadata,
        cancelled: Optional[Cancelled] = None,
    ) -> AggregationState:
        with self._busy():
            run_cycle(metadata, self.client, state, cancelled=cancelled)
        if not self.is_current(generation):
            debug_log(f"Cycle #{generation} ended after being superseded")
        return state
