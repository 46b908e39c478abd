import threading

from core.aggregator import AggregationState, aggregate
from core.errors import CompletionError
from core.models import PromptSpec

from conftest import FakeClient

PROMPTS = [
    PromptSpec(title="## One", prompt="first question"),
    PromptSpec(title="## Two", prompt="second question"),
    PromptSpec(title="## Three", prompt="third question"),
]


def _headings(document):
    return [line for line in document.splitlines() if line.startswith("## ")]


def test_successful_batch_reaches_one_and_keeps_every_section():
    client = FakeClient(answers={"first": "A", "second": "B", "third": "C"})
    state = AggregationState(total=len(PROMPTS))

    aggregate(PROMPTS, client, state)

    snap = state.snapshot()
    assert snap.fraction == 1.0
    assert snap.last_error is None
    assert sorted(_headings(snap.document)) == ["## One", "## Three", "## Two"]
    assert "## Two\nB\n" in snap.document
    assert sorted(client.prompts) == sorted(p.prompt for p in PROMPTS)


def test_failed_call_still_completes_the_batch():
    client = FakeClient(failures={"second": CompletionError("Completion API returned HTTP 500")})
    state = AggregationState(total=len(PROMPTS))

    aggregate(PROMPTS, client, state)

    snap = state.snapshot()
    assert snap.fraction == 1.0
    assert sorted(_headings(snap.document)) == ["## One", "## Three"]
    assert snap.last_error == "Could not load 'Two': Completion API returned HTTP 500"


def test_unexpected_exceptions_are_recorded_not_raised():
    client = FakeClient(failures={"third": KeyError("choices")})
    state = AggregationState(total=len(PROMPTS))

    aggregate(PROMPTS, client, state)

    assert state.fraction == 1.0
    assert "unexpected KeyError" in state.last_error


def test_every_call_failing_still_reaches_one():
    client = FakeClient(failures={"question": CompletionError("offline")})
    state = AggregationState(total=len(PROMPTS))

    aggregate(PROMPTS, client, state)

    assert state.fraction == 1.0
    assert state.document == ""
    assert state.last_error


def test_calls_are_dispatched_concurrently():
    # Each call waits for its siblings; only a parallel fan-out gets through.
    barrier = threading.Barrier(len(PROMPTS), timeout=5)

    class BarrierClient:
        def complete(self, prompt):
            barrier.wait()
            return "ok"

    state = AggregationState(total=len(PROMPTS))
    aggregate(PROMPTS, BarrierClient(), state)

    assert state.last_error is None
    assert len(_headings(state.document)) == 3


def test_fraction_is_monotonic_while_calls_finish():
    gates = {p.prompt: threading.Event() for p in PROMPTS}
    seen = []

    class GatedClient:
        def complete(self, prompt):
            gates[prompt].wait(5)
            return "ok"

    state = AggregationState(total=len(PROMPTS))
    worker = threading.Thread(target=aggregate, args=(PROMPTS, GatedClient(), state))
    worker.start()
    seen.append(state.fraction)
    for p in PROMPTS:
        gates[p.prompt].set()
        seen.append(state.fraction)
    worker.join(5)
    seen.append(state.fraction)

    assert seen[0] == 0.0
    assert seen == sorted(seen)
    assert seen[-1] == 1.0


def test_empty_batch_is_complete():
    state = AggregationState(total=0)

    aggregate([], FakeClient(), state)

    assert state.fraction == 1.0


def test_new_state_starts_empty():
    snap = AggregationState(total=3).snapshot()

    assert snap.fraction == 0.0
    assert snap.document == ""
    assert snap.last_error is None
    assert snap.finished is False


def test_answers_arriving_after_cancellation_are_dropped():
    cancelled = threading.Event()

    class CancellingClient:
        def complete(self, prompt):
            cancelled.set()
            return "too late"

    state = AggregationState(total=len(PROMPTS))
    aggregate(PROMPTS, CancellingClient(), state, cancelled=cancelled.is_set)

    snap = state.snapshot()
    assert snap.document == ""
    assert snap.fraction == 0.0
