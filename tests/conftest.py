"""
Pytest Configuration and Fixtures

Shared fixtures for TMD screening pipeline tests.
"""
import pytest
from pathlib import Path
import sys
from typing import Any, Dict, List, Mapping, Tuple

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tmdscreen.config import PipelineConfig
from tmdscreen.core.catalog import AnswerSet, ProtocolVariant
from tmdscreen.core.catalog.questions import BRUXISM_DEFINITE_NOT, SOUND_BOTH, SOUND_NONE


@pytest.fixture
def negative_raw() -> Dict[str, Any]:
    """Every question answered with its zero-point value."""
    answers: Dict[str, Any] = {f"q{i}": False for i in range(1, 27)}
    answers["q7"] = 0
    answers["q11"] = SOUND_NONE
    answers["q24"] = 0
    answers["q25"] = BRUXISM_DEFINITE_NOT
    return answers


@pytest.fixture
def negative_answers(negative_raw) -> AnswerSet:
    return AnswerSet.from_mapping(negative_raw)


@pytest.fixture
def bilateral_locking_raw() -> Dict[str, Any]:
    """Every joint sound positive, bilateral location, closed locking."""
    return {"q8": True, "q9": True, "q10": True, "q11": SOUND_BOTH, "q13": True}


@pytest.fixture
def myofascial_raw() -> Dict[str, Any]:
    """Pain-dominant presentation with muscle tags only."""
    return {"q3": True, "q4": True, "q6": True, "q7": 3}


@pytest.fixture
def lenient_config() -> PipelineConfig:
    return PipelineConfig(
        strict_validation=False,
        minimum_confidence=70,
        include_secondary_codes=True,
        include_differential_diagnosis=True,
        protocol_variant=ProtocolVariant.DC_TMD_AXIS_II,
    )


@pytest.fixture
def strict_config() -> PipelineConfig:
    return PipelineConfig(
        strict_validation=True,
        minimum_confidence=70,
        protocol_variant=ProtocolVariant.DC_TMD_AXIS_II,
    )


class RecordingTelemetry:
    """Telemetry sink that keeps every event it receives."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def emit(self, event: str, properties: Mapping[str, Any]) -> None:
        self.events.append((event, dict(properties)))


class MemoryStore:
    """Persistence collaborator keeping results in a dict."""

    def __init__(self):
        self.saved: Dict[str, Any] = {}

    def save(self, result) -> str:
        reference = f"assessment-{len(self.saved) + 1}"
        self.saved[reference] = result
        return reference


@pytest.fixture
def telemetry() -> RecordingTelemetry:
    return RecordingTelemetry()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()
