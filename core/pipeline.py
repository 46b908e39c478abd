# core/pipeline.py
from typing import Optional

from .aggregator import AggregationState, Cancelled, Completer, aggregate
from .debug import debug_log
from .links import build_links, format_links
from .models import TrackMetadata
from .prompts import build_prompts


def new_state(metadata: TrackMetadata) -> AggregationState:
    return AggregationState(total=len(build_prompts(metadata)))


def run_cycle(
    metadata: TrackMetadata,
    client: Completer,
    state: Optional[AggregationState] = None,
    cancelled: Optional[Cancelled] = None,
) -> AggregationState:
    """Prompts -> concurrent completions -> links, into ``state``."""
    prompts = build_prompts(metadata)
    if state is None:
        state = AggregationState(total=len(prompts))

    debug_log(f"Cycle start: {metadata.artist} - {metadata.track}")
    aggregate(prompts, client, state, cancelled=cancelled)
    if cancelled is not None and cancelled():
        debug_log("Cycle cancelled")
        return state

    state.append(format_links(build_links(metadata)))
    state.mark_finished()
    debug_log("Cycle finished")
    return state
