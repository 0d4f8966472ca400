"""Core data models for appgen."""

from dataclasses import dataclass
from typing import Literal, Optional

MODE_QUERY = "query"
MODE_FEEDBACK = "feedback"

Mode = Literal["query", "feedback"]


@dataclass(frozen=True)
class Usage:
    """Timing and token counts reported by the generation service."""

    total_time: float  # seconds
    total_tokens: int

    @classmethod
    def from_dict(cls, data: dict | None) -> Optional["Usage"]:
        if not data:
            return None
        return cls(
            total_time=float(data.get("total_time", 0.0)),
            total_tokens=int(data.get("total_tokens", 0)),
        )

    def to_dict(self) -> dict:
        return {"total_time": self.total_time, "total_tokens": self.total_tokens}


@dataclass(frozen=True)
class Version:
    """One generated HTML snapshot within a session."""

    html: str
    session_id: str
    version_label: str  # 1-based ordinal as text, e.g. "3"
    feedback: str = ""  # text that requested the *next* version from this one
    usage: Optional[Usage] = None
