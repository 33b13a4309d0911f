"""
Pipeline Layer

The assessment orchestrator, its result aggregate and collaborator interfaces.
"""
from .collaborators import EVENT_COMPLETED, EVENT_STARTED, AssessmentStore, TelemetrySink
from .result import AssessmentResult, QualityMetrics, certainty_for
from .orchestrator import AssessmentPipeline, run_assessment, run_quick_screening

__all__ = [
    "EVENT_COMPLETED",
    "EVENT_STARTED",
    "AssessmentStore",
    "TelemetrySink",
    "AssessmentResult",
    "QualityMetrics",
    "certainty_for",
    "AssessmentPipeline",
    "run_assessment",
    "run_quick_screening",
]
