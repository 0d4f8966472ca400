"""Iteration controller: query/feedback requests over a branching history.

The controller owns one session. The first successful request switches it
from query mode to feedback mode for good. Every later request revises the
version under the cursor; if the user navigated back first, the versions
ahead of the cursor are dropped when the new one is appended.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Literal, Optional

from .core import MODE_FEEDBACK, MODE_QUERY, Mode, Version
from .errors import GenerationFailure, PersistenceFailure, ValidationRejection
from .history import Direction, HistoryStore
from .prompt import construct_prompt
from .provider import ArtifactStore, GenerationResult, GenerationService

logger = logging.getLogger(__name__)

Status = Literal["ok", "ignored", "busy", "rejected", "failed"]


@dataclass
class Outcome:
    """What happened to a submission."""

    status: Status
    version: Optional[Version] = None
    error: str = ""
    category: str = ""  # only set for rejections
    persisted: bool = False

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class IterationController:
    def __init__(
        self,
        generator: GenerationService,
        store: ArtifactStore,
        session_id: str | None = None,
    ):
        self.generator = generator
        self.store = store
        self._session_id = session_id or str(uuid.uuid4())
        self.history = HistoryStore()
        self.mode: Mode = MODE_QUERY
        self.query = ""
        self.current_html = ""
        self.current_feedback = ""
        self.unpersisted: list[Version] = []
        self._in_flight = False

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def busy(self) -> bool:
        return self._in_flight

    async def submit(self, text: str) -> Outcome:
        """Send ``text`` as a query or as feedback depending on the mode."""
        if self.mode == MODE_QUERY:
            return await self.generate(text)
        return await self.submit_feedback(text)

    async def generate(self, query: str | None = None) -> Outcome:
        """Generate HTML from the query, using the displayed HTML as context."""
        if self._in_flight:
            return Outcome("busy", error="A request is already in progress")
        if query is not None:
            self.query = query

        self._in_flight = True
        try:
            result = await self._call(self.generator.generate(self.query, self.current_html))
            if isinstance(result, Outcome):
                return result

            version = self._append(result, self._session_id)
            self.mode = MODE_FEEDBACK
            persisted = await self._persist(version)
            return Outcome("ok", version=version, persisted=persisted)
        finally:
            self._in_flight = False

    async def submit_feedback(self, feedback: str | None = None) -> Outcome:
        """Revise the version under the cursor.

        Blank feedback is ignored without contacting the service. The trimmed
        feedback is recorded on the cursor entry before the request is sent.
        """
        if self._in_flight:
            return Outcome("busy", error="A request is already in progress")
        if feedback is not None:
            self.current_feedback = feedback
        text = self.current_feedback.strip()
        if not text:
            return Outcome("ignored")

        base = self.history.current()
        if base is None:
            return Outcome("ignored", error="Nothing to revise yet")

        self._in_flight = True
        try:
            base = self.history.update_current(feedback=text)
            result = await self._call(self.generator.revise(base.html, text))
            if isinstance(result, Outcome):
                return result

            version = self._append(result, base.session_id)
            self.current_feedback = ""
            persisted = await self._persist(version)
            return Outcome("ok", version=version, persisted=persisted)
        finally:
            self._in_flight = False

    def navigate(self, direction: Direction) -> Version | None:
        """Step through history without touching the network."""
        entry = self.history.navigate(direction)
        if entry is not None:
            self.current_html = entry.html
            self.current_feedback = entry.feedback or ""
        return entry

    def prompt(self) -> str:
        return construct_prompt(self.query, self.current_feedback, self.current_html)

    def share_reference(self) -> tuple[str, str] | None:
        """Return (session id, version label) of the displayed version, if any."""
        entry = self.history.current()
        if entry is None or not entry.session_id or not entry.version_label:
            return None
        return entry.session_id, entry.version_label

    async def retry_persistence(self) -> int:
        """Try again to store every version whose earlier save failed.

        Versions discarded by a branch are dropped instead of retried.
        """
        pending, self.unpersisted = self.unpersisted, []
        stored = 0
        for version in pending:
            live = self._live_entry(version)
            if live is None:
                logger.info("Dropping save of discarded version %s", version.version_label)
                continue
            if await self._persist(live):
                stored += 1
        return stored

    # ── Private helpers ──────────────────────────────────────────────

    async def _call(self, request) -> GenerationResult | Outcome:
        try:
            return await request
        except ValidationRejection as e:
            logger.warning("Generation rejected (%s): %s", e.category, e.error)
            return Outcome("rejected", error=e.error, category=e.category)
        except GenerationFailure as e:
            logger.error("Generation failed: %s", e)
            return Outcome("failed", error=str(e))

    def _append(self, result: GenerationResult, session_id: str) -> Version:
        # Label comes from the length before truncation, so it can repeat
        # a label that belonged to a discarded branch.
        label = str(len(self.history) + 1)
        version = Version(
            html=result.html,
            session_id=session_id,
            version_label=label,
            usage=result.usage,
        )
        self.history.append(version)
        self.current_html = result.html
        # A reused label supersedes any failed save that still holds it.
        self.unpersisted = [
            v for v in self.unpersisted
            if (v.session_id, v.version_label) != (session_id, label)
        ]
        logger.info("Session %s: added version %s", session_id, label)
        return version

    def _live_entry(self, version: Version) -> Version | None:
        # Feedback may have been attached since the save failed, so match
        # on key and HTML rather than identity.
        for entry in self.history:
            if (
                entry.session_id == version.session_id
                and entry.version_label == version.version_label
                and entry.html == version.html
            ):
                return entry
        return None

    async def _persist(self, version: Version) -> bool:
        try:
            await self.store.save(version.session_id, version.version_label, version.html)
        except PersistenceFailure as e:
            logger.warning("%s", e)
            self.unpersisted.append(version)
            return False
        return True
