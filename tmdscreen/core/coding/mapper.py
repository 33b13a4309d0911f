"""
Diagnostic Code Mapper

Scores every catalog entry against the clinical profile and selects:

    primary     – best match; generic fallback below MATCH_FLOOR
    secondary   – fixed, unscored rules (headache, associated myalgia)
    excluded    – entries ruled out by the primary's code or family

Mapping confidence is a separate 50–95 value built from corroborating
and contradicting signals; it is not the match score.

Usage:
    from tmdscreen.core.coding import DiagnosticCodeMapper

    mapper = DiagnosticCodeMapper()
    mapping = mapper.map_codes(classification, answers, category_scores)
    review = mapper.validate_code_assignment(mapping)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from tmdscreen.core.catalog import (
    CODE_CATALOG,
    AnswerSet,
    Category,
    CodeFamily,
    DiagnosticCode,
    Laterality,
    verify_code_catalog,
)
from tmdscreen.core.catalog.codes import FALLBACK_CODE, HEADACHE_CODE, MYALGIA_CODE
from tmdscreen.core.clinical.base import ClinicalClassification
from tmdscreen.core.scoring.category import CategoryScore
from tmdscreen.utils import CatalogIntegrityError, get_logger
from .profile import ClinicalProfile, build_profile

logger = get_logger(__name__)

# ── Match score weights ─────────────────────────────────────────────────────
PAIN_MATCH_WEIGHT       = 0.4
FUNCTIONAL_MATCH_WEIGHT = 0.3
TAG_MATCH_WEIGHT        = 0.3
LATERALITY_BONUS        = 0.1
MATCH_FLOOR             = 0.3      # Below this the fallback code is used
DIFFERENTIAL_FLOOR      = 0.4
MAX_DIFFERENTIALS       = 3
RANKED_CANDIDATES       = 5

# ── Mapping confidence ──────────────────────────────────────────────────────
CONFIDENCE_BASE  = 70.0
CONFIDENCE_MIN   = 50.0
CONFIDENCE_MAX   = 95.0
REVIEW_CONFIDENCE = 70.0

_JOINT_FAMILIES = (CodeFamily.JOINT_DISORDER, CodeFamily.DISC_DISORDER)

_FAMILY_DIFFERENTIALS: Dict[CodeFamily, Tuple[str, ...]] = {
    CodeFamily.DISC_DISORDER: (
        "Consider disc displacement vs. muscle disorder",
        "Evaluate for degenerative joint disease",
    ),
    CodeFamily.JOINT_DISORDER: (
        "Rule out systemic arthritis",
        "Consider myofascial pain syndrome",
    ),
    CodeFamily.MUSCLE_DISORDER: (
        "Rule out intra-articular joint pathology",
    ),
}


@dataclass(frozen=True)
class CodeMatch:
    code: DiagnosticCode
    score: float

    def to_dict(self) -> dict:
        return {"code": self.code.code, "score": round(self.score, 3)}


@dataclass(frozen=True)
class ExcludedCode:
    code: str
    reason: str
    description: str = ""

    def to_dict(self) -> dict:
        return {"code": self.code, "reason": self.reason, "description": self.description}


@dataclass(frozen=True)
class BillingInfo:
    primary_billable: bool
    total_billable_codes: int
    reimbursement_notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "primary_billable": self.primary_billable,
            "total_billable_codes": self.total_billable_codes,
            "reimbursement_notes": self.reimbursement_notes,
        }


@dataclass(frozen=True)
class MappingResult:
    primary_code: DiagnosticCode
    secondary_codes: Tuple[DiagnosticCode, ...]
    excluded_codes: Tuple[ExcludedCode, ...]
    mapping_confidence: float            # 50–95
    justification: str
    match_score: float
    used_fallback: bool = False
    supporting_evidence: Tuple[str, ...] = ()
    differential_considerations: Tuple[str, ...] = ()
    ranked_candidates: Tuple[CodeMatch, ...] = ()
    billing: Optional[BillingInfo] = None

    @property
    def all_codes(self) -> Tuple[DiagnosticCode, ...]:
        return (self.primary_code,) + self.secondary_codes

    @property
    def excluded_code_ids(self) -> Tuple[str, ...]:
        return tuple(e.code for e in self.excluded_codes)

    def to_dict(self) -> dict:
        return {
            "primary_code": self.primary_code.to_dict(),
            "secondary_codes": [c.to_dict() for c in self.secondary_codes],
            "excluded_codes": [e.to_dict() for e in self.excluded_codes],
            "mapping_confidence": round(self.mapping_confidence, 1),
            "justification": self.justification,
            "match_score": round(self.match_score, 3),
            "used_fallback": self.used_fallback,
            "supporting_evidence": list(self.supporting_evidence),
            "differential_considerations": list(self.differential_considerations),
            "ranked_candidates": [m.to_dict() for m in self.ranked_candidates],
            "billing": self.billing.to_dict() if self.billing else None,
        }


@dataclass(frozen=True)
class CodeAssignmentReview:
    """Outcome of :meth:`DiagnosticCodeMapper.validate_code_assignment`."""
    is_valid: bool
    conflicts: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "conflicts": list(self.conflicts),
            "recommendations": list(self.recommendations),
        }


def match_score(code: DiagnosticCode, profile: ClinicalProfile) -> float:
    """Weighted criteria satisfaction in [0, 1]."""
    criteria = code.match_criteria
    score = 0.0

    if criteria.pain_threshold:
        score += PAIN_MATCH_WEIGHT * min(1.0, profile.pain_intensity / criteria.pain_threshold)
    if criteria.functional_threshold:
        score += FUNCTIONAL_MATCH_WEIGHT * min(
            1.0, profile.functional_limitation / criteria.functional_threshold
        )
    if criteria.required_tags:
        present = sum(1 for tag in criteria.required_tags if profile.has(tag))
        score += TAG_MATCH_WEIGHT * (present / len(criteria.required_tags))

    laterality = code.laterality
    if laterality != Laterality.UNSPECIFIED and laterality == profile.laterality:
        score += LATERALITY_BONUS

    return min(1.0, score)


def satisfied_criteria(code: DiagnosticCode, profile: ClinicalProfile) -> Tuple[int, int]:
    """(satisfied, declared) count over the code's match-criteria fields."""
    criteria = code.match_criteria
    satisfied = 0
    if criteria.pain_threshold is not None and profile.pain_intensity >= criteria.pain_threshold:
        satisfied += 1
    if (criteria.functional_threshold is not None
            and profile.functional_limitation >= criteria.functional_threshold):
        satisfied += 1
    if criteria.required_tags and all(profile.has(t) for t in criteria.required_tags):
        satisfied += 1
    return satisfied, criteria.field_count


def find_conflicts(codes: Sequence[DiagnosticCode]) -> List[str]:
    """Mutually suspicious code combinations; reported, never auto-resolved."""
    conflicts = []
    families = {c.category for c in codes}
    if CodeFamily.JOINT_DISORDER in families and CodeFamily.DISC_DISORDER in families:
        conflicts.append(
            "Joint pain and disc disorder codes may be redundant - verify clinical justification"
        )
    has_bilateral = any(c.laterality == Laterality.BILATERAL for c in codes)
    has_unilateral = any(c.is_unilateral for c in codes)
    if has_bilateral and has_unilateral:
        conflicts.append("Bilateral and unilateral codes present - verify laterality")
    return conflicts


class DiagnosticCodeMapper:
    """
    Maps a classified assessment onto catalog codes.

    The catalog is verified once on construction; the mapper itself keeps
    no per-assessment state.
    """

    def __init__(
        self,
        catalog: Sequence[DiagnosticCode] = CODE_CATALOG,
        fallback_code: str = FALLBACK_CODE,
        include_secondary_codes: bool = True,
        include_differential_diagnosis: bool = True,
    ):
        self._catalog = tuple(catalog)
        self._index = verify_code_catalog(self._catalog)
        if fallback_code not in self._index:
            raise CatalogIntegrityError(
                f"Fallback code '{fallback_code}' is not in the code catalog",
                catalog="codes",
            )
        self._fallback = self._index[fallback_code]
        self.include_secondary_codes = include_secondary_codes
        self.include_differential_diagnosis = include_differential_diagnosis

    @property
    def catalog(self) -> Tuple[DiagnosticCode, ...]:
        return self._catalog

    # ── Public API ────────────────────────────────────────────────────────
    def map_codes(
        self,
        classification: ClinicalClassification,
        answers: AnswerSet,
        category_scores: Mapping[Category, CategoryScore],
    ) -> MappingResult:
        profile = build_profile(answers, category_scores)
        matches = [CodeMatch(code, match_score(code, profile)) for code in self._catalog]

        # Strictly-greater keeps the earliest entry on ties
        best = matches[0]
        for candidate in matches[1:]:
            if candidate.score > best.score:
                best = candidate

        used_fallback = best.score < MATCH_FLOOR
        primary = self._fallback if used_fallback else best.code

        excluded = self._excluded_for(primary)
        excluded_ids = {e.code for e in excluded}
        secondary = self._secondary_for(primary, profile, excluded_ids)

        ranked = tuple(sorted(matches, key=lambda m: -m.score)[:RANKED_CANDIDATES])
        evidence = self._supporting_evidence(profile)
        differentials = self._differentials(primary, matches, secondary, excluded_ids)

        result = MappingResult(
            primary_code=primary,
            secondary_codes=secondary,
            excluded_codes=excluded,
            mapping_confidence=self._mapping_confidence(profile, primary, used_fallback),
            justification=self._justification(classification, primary, best, used_fallback),
            match_score=best.score,
            used_fallback=used_fallback,
            supporting_evidence=evidence,
            differential_considerations=differentials,
            ranked_candidates=ranked,
            billing=self._billing(primary, secondary),
        )
        logger.debug(
            f"DiagnosticCodeMapper: primary={primary.code} match={best.score:.2f} "
            f"secondary={[c.code for c in secondary]} "
            f"confidence={result.mapping_confidence:.0f}"
        )
        return result

    def validate_code_assignment(self, mapping: MappingResult) -> CodeAssignmentReview:
        conflicts = find_conflicts(mapping.all_codes)
        recommendations = []
        if mapping.mapping_confidence < REVIEW_CONFIDENCE:
            recommendations.append("Consider clinical review due to low mapping confidence")
        if (mapping.primary_code.category == CodeFamily.DISC_DISORDER
                and not any(c.code == MYALGIA_CODE for c in mapping.secondary_codes)):
            recommendations.append(
                f"Consider adding myalgia code ({MYALGIA_CODE}) for associated muscle pain"
            )
        return CodeAssignmentReview(
            is_valid=not conflicts,
            conflicts=tuple(conflicts),
            recommendations=tuple(recommendations),
        )

    # ── Internals ─────────────────────────────────────────────────────────
    def _excluded_for(self, primary: DiagnosticCode) -> Tuple[ExcludedCode, ...]:
        excluded = []
        for entry in self._catalog:
            if entry.code == primary.code:
                continue
            exclusions = entry.match_criteria.exclusions
            if primary.code in exclusions:
                reason = f"Excluded due to primary diagnosis {primary.code}"
            elif primary.category.value in exclusions:
                reason = (
                    f"Excluded due to primary diagnosis {primary.code} "
                    f"({primary.category.value.replace('_', ' ')})"
                )
            else:
                continue
            excluded.append(ExcludedCode(entry.code, reason, entry.description))
        return tuple(excluded)

    def _secondary_for(
        self,
        primary: DiagnosticCode,
        profile: ClinicalProfile,
        excluded_ids: set,
    ) -> Tuple[DiagnosticCode, ...]:
        if not self.include_secondary_codes:
            return ()
        wanted = []
        if profile.has("headache"):
            wanted.append(HEADACHE_CODE)
        if primary.category in _JOINT_FAMILIES and profile.has("muscle_pain"):
            wanted.append(MYALGIA_CODE)

        secondary = []
        for code_id in wanted:
            entry = self._index.get(code_id)
            if entry is None or code_id == primary.code or code_id in excluded_ids:
                continue
            secondary.append(entry)
        return tuple(secondary)

    @staticmethod
    def _mapping_confidence(
        profile: ClinicalProfile,
        primary: DiagnosticCode,
        used_fallback: bool,
    ) -> float:
        confidence = CONFIDENCE_BASE
        is_disc = primary.category == CodeFamily.DISC_DISORDER

        if profile.pain_intensity >= 3:
            confidence += 10
        if profile.functional_limitation >= 3:
            confidence += 10
        if profile.has_joint_sounds and is_disc:
            confidence += 10
        if (profile.laterality == Laterality.BILATERAL
                and primary.laterality == Laterality.BILATERAL):
            confidence += 5

        if profile.pain_intensity < 2 and profile.functional_limitation < 2:
            confidence -= 15
        if is_disc and not profile.has_joint_sounds:
            confidence -= 10

        satisfied, declared = satisfied_criteria(primary, profile)
        confidence += 5 * satisfied - 5 * (declared - satisfied)

        if used_fallback:
            confidence -= 10

        return max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, confidence))

    @staticmethod
    def _supporting_evidence(profile: ClinicalProfile) -> Tuple[str, ...]:
        evidence = []
        if profile.pain_intensity >= 2:
            evidence.append(f"Moderate to severe pain intensity ({profile.pain_intensity:.1f}/4)")
        if profile.functional_limitation >= 2:
            evidence.append(
                f"Significant functional limitations ({profile.functional_limitation:.1f}/4)"
            )
        if profile.has_joint_sounds:
            evidence.append("Joint sounds (clicking/popping/grating) present")
        if profile.has_locking:
            evidence.append("Joint locking episodes reported")
        if profile.laterality == Laterality.BILATERAL:
            evidence.append("Bilateral symptom presentation")
        if profile.has("headache"):
            evidence.append("Associated headaches reported")
        return tuple(evidence)

    @staticmethod
    def _justification(
        classification: ClinicalClassification,
        primary: DiagnosticCode,
        best: CodeMatch,
        used_fallback: bool,
    ) -> str:
        pattern = classification.subtype.replace("_", " ")
        if used_fallback:
            return (
                f"No catalog code was adequately supported (best match {best.score:.2f}); "
                f"{primary.description.lower()} assigned for a {pattern} presentation"
            )
        return (
            f"Clinical presentation consistent with {primary.description.lower()} "
            f"({pattern}, {classification.severity.value} severity, "
            f"{best.score:.2f} match) based on pain intensity, functional impact "
            f"and symptom profile"
        )

    def _differentials(
        self,
        primary: DiagnosticCode,
        matches: Sequence[CodeMatch],
        secondary: Sequence[DiagnosticCode],
        excluded_ids: set,
    ) -> Tuple[str, ...]:
        notes = list(_FAMILY_DIFFERENTIALS.get(primary.category, ()))
        if not self.include_differential_diagnosis:
            return tuple(notes)

        taken = {primary.code} | {c.code for c in secondary} | excluded_ids
        runners = [
            m for m in sorted(matches, key=lambda m: -m.score)
            if m.score >= DIFFERENTIAL_FLOOR and m.code.code not in taken
        ]
        for m in runners[:MAX_DIFFERENTIALS]:
            notes.append(f"{m.code.code} {m.code.description} (match {m.score:.2f})")
        return tuple(notes)

    @staticmethod
    def _billing(primary: DiagnosticCode, secondary: Sequence[DiagnosticCode]) -> BillingInfo:
        billable = [c for c in (primary, *secondary) if c.billable]
        notes = None
        if len(billable) > 1:
            notes = "Multiple billable diagnoses - verify payer requirements for combination billing"
        return BillingInfo(
            primary_billable=primary.billable,
            total_billable_codes=len(billable),
            reimbursement_notes=notes,
        )
