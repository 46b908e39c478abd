import asyncio
import os
import sys

from core.completion_client import CompletionClient
from core.errors import LinerNotesError
from ui.main_window import NotesApp
from ui.worker import CycleRunner


def main() -> int:
    runner = CycleRunner(CompletionClient())
    try:
        metadata = runner.resolve()
    except LinerNotesError as e:
        print(f"[Liner Notes] {e}", file=sys.stderr)
        return 1

    app = NotesApp(runner, metadata)
    # Our own loop: asyncio.run would join the worker threads on the way out.
    loop = asyncio.new_event_loop()
    try:
        app.run(loop=loop)
    finally:
        loop.close()

    code = app.return_code or 0
    if runner.in_flight():
        # Outstanding requests, superseded cycles included, are abandoned.
        sys.stdout.flush()
        os._exit(code)
    return code


if __name__ == "__main__":
    sys.exit(main())
