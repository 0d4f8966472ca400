"""Shared test fixtures for appgen."""

import pytest

from appgen.controller import IterationController
from appgen.core import Usage
from appgen.errors import GenerationFailure, PersistenceFailure, ValidationRejection
from appgen.provider import ArtifactStore, GenerationResult, GenerationService


class FakeGenerationService(GenerationService):
    """Returns scripted results and records every call."""

    name = "fake"

    def __init__(self, responses=None):
        # Each item is an html string, a GenerationResult or an exception.
        self.responses = list(responses or [])
        self.calls: list[dict] = []

    async def generate(self, query, current_html=""):
        self.calls.append({"query": query, "currentHtml": current_html})
        return self._next()

    async def revise(self, current_html, feedback):
        self.calls.append({"currentHtml": current_html, "feedback": feedback})
        return self._next()

    def _next(self):
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, GenerationResult):
            return item
        return GenerationResult(html=item)


class FakeArtifactStore(ArtifactStore):
    """Keeps saved HTML in a dict; can be told to fail."""

    name = "fake"

    def __init__(self):
        self.saved: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail = False

    async def save(self, session_id, version_label, html):
        self.calls.append((session_id, version_label))
        if self.fail:
            raise PersistenceFailure(session_id, version_label, "HTTP 500")
        self.saved[(session_id, version_label)] = html


@pytest.fixture
def generator():
    return FakeGenerationService()


@pytest.fixture
def store():
    return FakeArtifactStore()


@pytest.fixture
def controller(generator, store):
    return IterationController(generator, store, session_id="sess-1")


@pytest.fixture
def rejection():
    return ValidationRejection("unsafe content", "policy")


@pytest.fixture
def failure():
    return GenerationFailure("Failed to generate HTML", status_code=500)


@pytest.fixture
def usage():
    return Usage(total_time=0.5, total_tokens=600)
