"""Abstract base classes for the services the controller talks to."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .core import Usage


@dataclass
class GenerationResult:
    """Successful response from the generation service."""

    html: str
    usage: Optional[Usage] = None


class GenerationService(ABC):
    """Turns a query or a piece of feedback into new HTML.

    Implementations raise ValidationRejection when the service refuses the
    request and GenerationFailure for everything else that goes wrong.
    """

    name: str

    @abstractmethod
    async def generate(self, query: str, current_html: str = "") -> GenerationResult:
        """Create HTML from a free-text description."""
        ...

    @abstractmethod
    async def revise(self, current_html: str, feedback: str) -> GenerationResult:
        """Create a revised copy of ``current_html`` according to ``feedback``."""
        ...


class ArtifactStore(ABC):
    """Stores each generated version under (session id, version label)."""

    name: str

    @abstractmethod
    async def save(self, session_id: str, version_label: str, html: str) -> None:
        """Persist ``html``. Raises PersistenceFailure on error."""
        ...
