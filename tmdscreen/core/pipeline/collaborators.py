"""
External Collaborators

Interfaces the pipeline consumes.  Implementations live outside the core
(encrypted storage, analytics clients); the pipeline only calls them.

Telemetry events are coarse and PHI-free: never answers, never free text.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol

if TYPE_CHECKING:
    from .result import AssessmentResult

EVENT_STARTED   = "assessment_started"
EVENT_COMPLETED = "assessment_completed"


class AssessmentStore(Protocol):
    def save(self, result: "AssessmentResult") -> str:
        """Persist a completed result and return its reference id."""
        ...


class TelemetrySink(Protocol):
    def emit(self, event: str, properties: Mapping[str, Any]) -> None:
        ...
