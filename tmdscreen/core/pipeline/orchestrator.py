"""
Assessment Pipeline

Sequences one assessment as a single synchronous transaction:

    parse → validate → (strict abort) → category scores → composite
          → confidence → risk tier → classification → code mapping
          → recommendations → AssessmentResult

Usage:
    from tmdscreen import AssessmentPipeline, PipelineConfig

    pipeline = AssessmentPipeline(PipelineConfig(strict_validation=False))
    result = pipeline.run(answers, "DC_TMD_AXIS_II")
    print(result.risk_tier, result.mapping.primary_code.code)

A pipeline holds only its configuration and read-only collaborators, so
one instance may serve concurrent callers; creating one per request is
equally cheap.
"""
from __future__ import annotations

import time
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from tmdscreen.config import PipelineConfig
from tmdscreen.core.catalog import CODE_CATALOG, AnswerSet, DiagnosticCode, ProtocolVariant
from tmdscreen.core.clinical import ClinicalClassifier, RiskClassifier
from tmdscreen.core.coding import DiagnosticCodeMapper
from tmdscreen.core.reports import RecommendationGenerator
from tmdscreen.core.scoring import CompositeResult, assess_confidence, compose, score_all
from tmdscreen.core.screening import QUICK_SCREENING, QuickScreener, QuickScreeningResult
from tmdscreen.core.validation import ProtocolValidator
from tmdscreen.utils import ValidationFailure, get_logger
from .collaborators import EVENT_COMPLETED, EVENT_STARTED, AssessmentStore, TelemetrySink
from .result import AssessmentResult, QualityMetrics, certainty_for

logger = get_logger(__name__)


class AssessmentPipeline:
    """
    Stateless orchestrator for one configuration.

    Args:
        config:      Pipeline switches; defaults come from the environment.
        store:       Optional persistence collaborator used by run_and_store().
        telemetry:   Optional PHI-free event sink.
        code_catalog: Diagnostic code catalog, verified on construction.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        store: Optional[AssessmentStore] = None,
        telemetry: Optional[TelemetrySink] = None,
        code_catalog: Sequence[DiagnosticCode] = CODE_CATALOG,
    ):
        self.config = config or PipelineConfig()
        self.store = store
        self.telemetry = telemetry

        self._validator = ProtocolValidator()
        self._risk = RiskClassifier(self.config.scoring.thresholds)
        self._classifier = ClinicalClassifier()
        self._mapper = DiagnosticCodeMapper(
            code_catalog,
            include_secondary_codes=self.config.include_secondary_codes,
            include_differential_diagnosis=self.config.include_differential_diagnosis,
        )
        self._recommender = RecommendationGenerator()
        self._quick = QuickScreener()

    # ── Public API ────────────────────────────────────────────────────────
    def run(
        self,
        answers: Union[AnswerSet, Mapping[str, Any]],
        protocol_variant: Union[ProtocolVariant, str, None] = None,
    ) -> AssessmentResult:
        """
        Run one assessment.

        Raises:
            InputError:        answers missing or outside their declared domains.
            ValidationFailure: protocol validation failed under strict validation.
        """
        started = time.perf_counter()
        variant = protocol_variant if protocol_variant is not None else self.config.protocol_variant
        variant_name = variant.value if isinstance(variant, ProtocolVariant) else str(variant)

        # Domain errors fail fast, before telemetry or scoring
        answer_set = AnswerSet.from_mapping(answers)
        self._emit(EVENT_STARTED, {"protocol_variant": variant_name})

        # ── 1. Protocol validation ───────────────────────────────────────
        report = self._validator.validate(answer_set, variant)
        if not report.is_valid and self.config.strict_validation:
            failed = [r.rule_id for r in report.failed_errors()]
            logger.warning(f"AssessmentPipeline: strict validation failed ({', '.join(failed)})")
            raise ValidationFailure(
                f"Protocol validation failed: {', '.join(failed)}", report=report
            )

        # ── 2. Scoring ───────────────────────────────────────────────────
        profile = self.config.scoring
        category_scores = score_all(answer_set)
        composite_score = compose(category_scores, profile.category_weights)
        confidence = assess_confidence(answer_set, category_scores, profile)

        # ── 3. Risk and classification ───────────────────────────────────
        risk = self._risk.assess(composite_score, answer_set)
        classification = self._classifier.classify(category_scores, answer_set)
        logger.debug(
            f"AssessmentPipeline: composite={composite_score:.1f} "
            f"tier={risk.risk_tier.value} class={classification.category.value}"
        )

        # ── 4. Coding and recommendations ────────────────────────────────
        mapping = self._mapper.map_codes(classification, answer_set, category_scores)
        code_review = self._mapper.validate_code_assignment(mapping)
        recommendation_set = self._recommender.generate(risk, category_scores, mapping)

        reasons = self._review_reasons(confidence.confidence, mapping.mapping_confidence)
        if reasons:
            logger.warning(f"AssessmentPipeline: manual review required: {'; '.join(reasons)}")

        result = AssessmentResult(
            answers=answer_set,
            protocol_variant=report.protocol_variant,
            validation=report,
            category_scores=category_scores,
            composite=CompositeResult(
                composite_score=composite_score,
                risk_tier=risk.risk_tier,
                confidence=confidence.confidence,
            ),
            confidence=confidence,
            risk=risk,
            classification=classification,
            mapping=mapping,
            code_review=code_review,
            recommendations=recommendation_set.recommendations,
            follow_up=recommendation_set.follow_up,
            prognosis=recommendation_set.prognosis,
            quality_metrics=QualityMetrics(
                data_completeness=confidence.completeness,
                response_consistency=confidence.consistency,
                guideline_compliance=report.axis_compliance.overall,
                diagnostic_confidence=mapping.mapping_confidence,
                diagnostic_certainty=certainty_for(mapping.mapping_confidence),
            ),
            manual_review_required=bool(reasons),
            review_reasons=tuple(reasons),
        )

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info("AssessmentPipeline: completed", extra={"context": {
            "tier": risk.risk_tier.value,
            "primary": mapping.primary_code.code,
            "duration_ms": round(duration_ms, 1),
        }})
        self._emit(EVENT_COMPLETED, {
            "risk_tier": risk.risk_tier.value,
            "duration_ms": round(duration_ms, 1),
        })
        return result

    def run_and_store(
        self,
        answers: Union[AnswerSet, Mapping[str, Any]],
        protocol_variant: Union[ProtocolVariant, str, None] = None,
    ) -> Tuple[str, AssessmentResult]:
        """Run an assessment and hand the result to the persistence collaborator."""
        if self.store is None:
            raise RuntimeError("AssessmentPipeline has no store configured")
        result = self.run(answers, protocol_variant)
        reference = self.store.save(result)
        logger.info(f"AssessmentPipeline: result stored as {reference}")
        return reference, result

    def quick_screen(self, answers: Optional[Mapping[str, Any]]) -> QuickScreeningResult:
        """
        Score the seven-item quick screening.

        Raises:
            InputError: answers missing, unknown ids or non-boolean values.
        """
        started = time.perf_counter()
        result = self._quick.screen(answers)
        self._emit(EVENT_STARTED, {"protocol_variant": QUICK_SCREENING})

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info("AssessmentPipeline: quick screening completed", extra={"context": {
            "tier": result.risk_tier.value,
            "duration_ms": round(duration_ms, 1),
        }})
        self._emit(EVENT_COMPLETED, {
            "risk_tier": result.risk_tier.value,
            "duration_ms": round(duration_ms, 1),
        })
        return result

    # ── Internals ─────────────────────────────────────────────────────────
    def _review_reasons(self, confidence: float, mapping_confidence: float) -> List[str]:
        minimum = self.config.minimum_confidence
        reasons = []
        if mapping_confidence < minimum:
            reasons.append(
                f"Mapping confidence {mapping_confidence:.0f} below minimum {minimum:.0f}"
            )
        if confidence < minimum:
            reasons.append(f"Overall confidence {confidence:.0f} below minimum {minimum:.0f}")
        return reasons

    def _emit(self, event: str, properties: Mapping[str, Any]) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry.emit(event, dict(properties))
        except Exception as exc:
            # Telemetry is best-effort; it must never fail an assessment
            logger.error(f"AssessmentPipeline: telemetry emit '{event}' failed: {exc}", exc_info=True)


def run_assessment(
    answers: Union[AnswerSet, Mapping[str, Any]],
    protocol_variant: Union[ProtocolVariant, str, None] = None,
    config: Optional[PipelineConfig] = None,
) -> AssessmentResult:
    """Convenience wrapper: build a pipeline for ``config`` and run once."""
    return AssessmentPipeline(config).run(answers, protocol_variant)


def run_quick_screening(
    answers: Optional[Mapping[str, Any]],
    config: Optional[PipelineConfig] = None,
) -> QuickScreeningResult:
    """Convenience wrapper: build a pipeline for ``config`` and quick-screen once."""
    return AssessmentPipeline(config).quick_screen(answers)
