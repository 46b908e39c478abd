import threading

import pytest

from core.models import TrackMetadata


class FakeClient:
    """Stands in for CompletionClient; answers per prompt substring."""

    def __init__(self, answers=None, failures=None):
        self.answers = answers or {}
        self.failures = failures or {}
        self.prompts = []
        self._lock = threading.Lock()

    def complete(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
        for needle, exc in self.failures.items():
            if needle in prompt:
                raise exc
        for needle, answer in self.answers.items():
            if needle in prompt:
                return answer
        return f"answer to: {prompt}"


@pytest.fixture
def metadata():
    return TrackMetadata(artist="AC/DC", album="back in black", track="Back In Black")


@pytest.fixture
def fake_client():
    return FakeClient()
