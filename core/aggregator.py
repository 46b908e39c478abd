# core/aggregator.py
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from .debug import debug_log
from .errors import LinerNotesError
from .models import PromptSpec


class Completer(Protocol):
    def complete(self, prompt: str) -> str: ...


Cancelled = Callable[[], bool]


@dataclass(frozen=True)
class Snapshot:
    fraction: float
    document: str
    last_error: Optional[str]
    finished: bool


class AggregationState:
    """Progress and document of one aggregation cycle.

    Shared between the request workers and the UI poll loop; every read
    and write goes through the lock.
    """

    def __init__(self, total: int):
        self._lock = threading.Lock()
        self._total = total
        self._completed = 0
        self._document = ""
        self._last_error: Optional[str] = None
        self._finished = False

    def _fraction(self) -> float:
        if self._total <= 0:
            return 1.0
        return min(1.0, self._completed / self._total)

    @property
    def fraction(self) -> float:
        with self._lock:
            return self._fraction()

    @property
    def document(self) -> str:
        with self._lock:
            return self._document

    @property
    def last_error(self) -> Optional[str]:
        with self._lock:
            return self._last_error

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                fraction=self._fraction(),
                document=self._document,
                last_error=self._last_error,
                finished=self._finished,
            )

    def record_success(self, title: str, body: str) -> None:
        with self._lock:
            self._document += title + "\n" + body + "\n"
            self._completed += 1

    def record_failure(self, message: str) -> None:
        with self._lock:
            self._last_error = message
            self._completed += 1

    def append(self, text: str) -> None:
        with self._lock:
            self._document += text

    def mark_finished(self) -> None:
        with self._lock:
            self._finished = True


def _heading_text(title: str) -> str:
    return title.lstrip("#").strip()


def _never() -> bool:
    return False


def _run_one(item: PromptSpec, client: Completer, state: AggregationState, cancelled: Cancelled) -> None:
    # A cancelled cycle neither dispatches new calls nor writes late answers.
    if cancelled():
        return
    try:
        body = client.complete(item.prompt)
    except LinerNotesError as e:
        if cancelled():
            return
        debug_log(f"'{_heading_text(item.title)}' failed: {e}")
        state.record_failure(f"Could not load '{_heading_text(item.title)}': {e}")
        return
    except Exception as e:
        if cancelled():
            return
        debug_log(f"'{_heading_text(item.title)}' crashed: {e!r}")
        state.record_failure(f"Could not load '{_heading_text(item.title)}': unexpected {e.__class__.__name__}")
        return
    if not cancelled():
        state.record_success(item.title, body)


def aggregate(
    prompts: Sequence[PromptSpec],
    client: Completer,
    state: AggregationState,
    max_workers: Optional[int] = None,
    cancelled: Optional[Cancelled] = None,
) -> AggregationState:
    """Run one completion call per prompt concurrently and wait for all of them.

    Sections land in the document in completion order. A failed call still
    counts towards the fraction so the batch always reaches 1.0. Once
    ``cancelled`` returns true the state is left alone.
    """
    if not prompts:
        return state

    with ThreadPoolExecutor(max_workers=max_workers or len(prompts)) as executor:
        futures = [executor.submit(_run_one, item, client, state, cancelled or _never) for item in prompts]
        wait(futures)

    debug_log(f"Aggregated {len(prompts)} prompts, fraction={state.fraction:.2f}")
    return state
