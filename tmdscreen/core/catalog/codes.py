"""
Diagnostic Code Catalog

Static ICD-10-CM reference data for TMD presentations.  Each entry carries
the criteria the code mapper scores a clinical profile against.

Declaration order matters: the mapper resolves equal match scores in
favour of the earlier entry.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

from tmdscreen.utils import CatalogIntegrityError, get_logger

logger = get_logger(__name__)


class CodeFamily(str, Enum):
    """Condition family a code belongs to."""
    MUSCLE_DISORDER = "muscle_disorder"
    JOINT_DISORDER  = "joint_disorder"
    DISC_DISORDER   = "disc_disorder"
    OTHER           = "other"


class SeverityBand(str, Enum):
    MILD     = "mild"
    MODERATE = "moderate"
    SEVERE   = "severe"


class Laterality(str, Enum):
    BILATERAL   = "bilateral"
    RIGHT       = "right"
    LEFT        = "left"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class MatchCriteria:
    """
    Criteria a clinical profile is compared against.

    pain_threshold        – pain intensity (0–4) at which the code is fully supported
    functional_threshold  – functional limitation (0–4) at which it is fully supported
    required_tags         – symptom tags the presentation should show
    exclusions            – codes or code families that rule this code out
    """
    pain_threshold: Optional[float] = None
    functional_threshold: Optional[float] = None
    required_tags: Tuple[str, ...] = ()
    exclusions: Tuple[str, ...] = ()

    @property
    def field_count(self) -> int:
        """Number of scorable criteria fields this code declares."""
        return sum((
            self.pain_threshold is not None,
            self.functional_threshold is not None,
            bool(self.required_tags),
        ))


@dataclass(frozen=True)
class DiagnosticCode:
    code: str
    description: str
    category: CodeFamily
    severity_band: SeverityBand
    match_criteria: MatchCriteria
    billable: bool = True
    clinical_notes: str = ""

    @property
    def laterality(self) -> Laterality:
        """Laterality implied by the description wording."""
        text = self.description.lower()
        if "bilateral" in text:
            return Laterality.BILATERAL
        if "right" in text:
            return Laterality.RIGHT
        if "left" in text:
            return Laterality.LEFT
        return Laterality.UNSPECIFIED

    @property
    def is_unilateral(self) -> bool:
        return self.laterality in (Laterality.RIGHT, Laterality.LEFT)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "description": self.description,
            "category": self.category.value,
            "severity": self.severity_band.value,
            "laterality": self.laterality.value,
            "billable": self.billable,
        }


# ── Fallback used when no entry matches convincingly ─────────────────────────
FALLBACK_CODE = "M26.609"
HEADACHE_CODE = "G44.209"
MYALGIA_CODE  = "M79.10"


def _code(code: str, description: str, family: CodeFamily, severity: SeverityBand,
          notes: str = "", **criteria) -> DiagnosticCode:
    if "required_tags" in criteria:
        criteria["required_tags"] = tuple(criteria["required_tags"])
    if "exclusions" in criteria:
        criteria["exclusions"] = tuple(criteria["exclusions"])
    return DiagnosticCode(
        code=code,
        description=description,
        category=family,
        severity_band=severity,
        match_criteria=MatchCriteria(**criteria),
        clinical_notes=notes,
    )


_DISC = CodeFamily.DISC_DISORDER
_JOINT = CodeFamily.JOINT_DISORDER
_MUSCLE = CodeFamily.MUSCLE_DISORDER
_OTHER = CodeFamily.OTHER

CODE_CATALOG: Tuple[DiagnosticCode, ...] = (
    # ── TMJ disorders (disc family) ───────────────────────────────────────
    _code("M26.601", "Right temporomandibular joint disorder, unspecified", _DISC,
          SeverityBand.MODERATE, "Right TMJ disc displacement or dysfunction",
          pain_threshold=2, functional_threshold=2,
          required_tags=["clicking", "popping", "locking", "right_side"]),
    _code("M26.602", "Left temporomandibular joint disorder, unspecified", _DISC,
          SeverityBand.MODERATE, "Left TMJ disc displacement or dysfunction",
          pain_threshold=2, functional_threshold=2,
          required_tags=["clicking", "popping", "locking", "left_side"]),
    _code("M26.603", "Bilateral temporomandibular joint disorder, unspecified", _DISC,
          SeverityBand.SEVERE, "Bilateral TMJ disc displacement or dysfunction",
          pain_threshold=3, functional_threshold=3,
          required_tags=["clicking", "popping", "locking", "bilateral"]),

    # ── Adhesions and ankylosis ───────────────────────────────────────────
    _code("M26.611", "Adhesions and ankylosis of right temporomandibular joint", _DISC,
          SeverityBand.SEVERE, "Severe right TMJ dysfunction with adhesions",
          pain_threshold=3, functional_threshold=4,
          required_tags=["severe_limitation", "locking", "right_side"]),
    _code("M26.612", "Adhesions and ankylosis of left temporomandibular joint", _DISC,
          SeverityBand.SEVERE, "Severe left TMJ dysfunction with adhesions",
          pain_threshold=3, functional_threshold=4,
          required_tags=["severe_limitation", "locking", "left_side"]),
    _code("M26.613", "Adhesions and ankylosis of bilateral temporomandibular joint", _DISC,
          SeverityBand.SEVERE, "Severe bilateral TMJ dysfunction with adhesions",
          pain_threshold=4, functional_threshold=4,
          required_tags=["severe_limitation", "locking", "bilateral"]),

    # ── Articular disc disorders ──────────────────────────────────────────
    _code("M26.631", "Articular disc disorder of right temporomandibular joint", _DISC,
          SeverityBand.MODERATE, "Right TMJ disc displacement",
          pain_threshold=2, functional_threshold=2,
          required_tags=["clicking", "disc_displacement", "right_side"]),
    _code("M26.632", "Articular disc disorder of left temporomandibular joint", _DISC,
          SeverityBand.MODERATE, "Left TMJ disc displacement",
          pain_threshold=2, functional_threshold=2,
          required_tags=["clicking", "disc_displacement", "left_side"]),
    _code("M26.633", "Articular disc disorder of bilateral temporomandibular joint", _DISC,
          SeverityBand.SEVERE, "Bilateral TMJ disc displacement",
          pain_threshold=3, functional_threshold=3,
          required_tags=["clicking", "disc_displacement", "bilateral"]),

    # ── Arthralgia (joint family) ─────────────────────────────────────────
    _code("M26.621", "Arthralgia of right temporomandibular joint", _JOINT,
          SeverityBand.MILD, "Right TMJ pain",
          pain_threshold=1, functional_threshold=1,
          required_tags=["joint_pain", "right_side"]),
    _code("M26.622", "Arthralgia of left temporomandibular joint", _JOINT,
          SeverityBand.MILD, "Left TMJ pain",
          pain_threshold=1, functional_threshold=1,
          required_tags=["joint_pain", "left_side"]),
    _code("M26.623", "Arthralgia of bilateral temporomandibular joint", _JOINT,
          SeverityBand.MODERATE, "Bilateral TMJ pain",
          pain_threshold=2, functional_threshold=2,
          required_tags=["joint_pain", "bilateral"]),

    # ── Muscle disorders ──────────────────────────────────────────────────
    _code("M79.11", "Myalgia of mastication muscle", _MUSCLE,
          SeverityBand.MILD, "Muscle-related TMD pain without joint involvement",
          pain_threshold=2,
          required_tags=["muscle_pain", "muscle_tenderness"],
          exclusions=[_JOINT.value, _DISC.value]),
    _code("M79.10", "Myalgia, unspecified site", _MUSCLE,
          SeverityBand.MILD, "Associated myalgia alongside a joint diagnosis",
          required_tags=["muscle_pain"]),

    # ── Associated conditions ─────────────────────────────────────────────
    _code("G44.209", "Tension-type headache, unspecified, not intractable", _OTHER,
          SeverityBand.MILD, "TMD-associated headache",
          required_tags=["headache"]),

    # ── Fallback ──────────────────────────────────────────────────────────
    _code("M26.609", "Unspecified temporomandibular joint disorder, unspecified side", _OTHER,
          SeverityBand.MILD, "Used when no specific code is adequately supported"),
)


def verify_code_catalog(catalog: Sequence[DiagnosticCode]) -> Mapping[str, DiagnosticCode]:
    """
    Check catalog integrity and return a read-only code → entry index.

    Raises:
        CatalogIntegrityError: duplicate codes, or an exclusion naming
            neither a catalog code nor a code family present in the catalog.
    """
    index: Dict[str, DiagnosticCode] = {}
    for entry in catalog:
        if entry.code in index:
            raise CatalogIntegrityError(
                f"Duplicate diagnostic code '{entry.code}'", catalog="codes"
            )
        index[entry.code] = entry

    families = {entry.category.value for entry in catalog}
    for entry in catalog:
        for exclusion in entry.match_criteria.exclusions:
            if exclusion not in index and exclusion not in families:
                raise CatalogIntegrityError(
                    f"Code '{entry.code}' excludes unknown code or family '{exclusion}'",
                    catalog="codes",
                    details={"code": entry.code, "exclusion": exclusion},
                )
    return MappingProxyType(index)


CODES_BY_ID: Mapping[str, DiagnosticCode] = verify_code_catalog(CODE_CATALOG)

logger.debug(f"Diagnostic code catalog loaded: {len(CODE_CATALOG)} codes")
