"""
Answer Sets

An AnswerSet is the immutable, domain-checked set of responses for one
assessment.  It is created wholesale from whatever the presentation layer
submits; an update means building a new AnswerSet.
"""
from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from tmdscreen.utils import InputError
from .base import AnswerValue, Question
from .questions import QUESTION_CATALOG, QUESTIONS_BY_ID


@dataclass(frozen=True)
class Response:
    """A single answer.  ``value`` is None when the question was skipped."""
    question_id: str
    value: Optional[AnswerValue] = None

    @property
    def answered(self) -> bool:
        return self.value is not None


class AnswerSet(MappingABC):
    """
    Read-only mapping of question id → answer value, in catalog order.

    Every catalog question is present; unanswered ones map to None.
    Build instances with :meth:`from_mapping`.
    """

    __slots__ = ("_responses", "_index")

    def __init__(self, responses: Tuple[Response, ...]):
        self._responses = responses
        self._index = {r.question_id: i for i, r in enumerate(responses)}

    # ── Construction ──────────────────────────────────────────────────────
    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "AnswerSet":
        """
        Validate raw answers against the question catalog.

        Raises:
            InputError: ``raw`` is missing, names an unknown question, or
                carries a value outside the question's declared domain.
        """
        if raw is None:
            raise InputError("Assessment answers are required")
        if isinstance(raw, AnswerSet):
            return raw
        if not isinstance(raw, MappingABC):
            raise InputError(
                f"Assessment answers must be a mapping, got {type(raw).__name__}"
            )

        unknown = sorted(str(k) for k in raw if k not in QUESTIONS_BY_ID)
        if unknown:
            raise InputError(
                f"Unknown question id(s): {', '.join(unknown)}",
                question_id=unknown[0],
            )

        responses = []
        for question in QUESTION_CATALOG:
            value = raw.get(question.id)
            if value is not None:
                _check_domain(question, value)
            responses.append(Response(question.id, value))
        return cls(tuple(responses))

    @classmethod
    def empty(cls) -> "AnswerSet":
        return cls(tuple(Response(q.id) for q in QUESTION_CATALOG))

    # ── Mapping protocol ──────────────────────────────────────────────────
    def __getitem__(self, question_id: str) -> Optional[AnswerValue]:
        return self._responses[self._index[question_id]].value

    def __iter__(self) -> Iterator[str]:
        return (r.question_id for r in self._responses)

    def __len__(self) -> int:
        return len(self._responses)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AnswerSet):
            return self._responses == other._responses
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._responses)

    def __repr__(self) -> str:
        return f"AnswerSet(answered={self.answered_count}/{len(self)})"

    # ── Convenience ───────────────────────────────────────────────────────
    @property
    def responses(self) -> Tuple[Response, ...]:
        return self._responses

    def response(self, question_id: str) -> Response:
        return self._responses[self._index[question_id]]

    def is_answered(self, question_id: str) -> bool:
        return self[question_id] is not None

    def is_true(self, question_id: str) -> bool:
        return self[question_id] is True

    def is_false(self, question_id: str) -> bool:
        return self[question_id] is False

    @property
    def answered_count(self) -> int:
        return sum(1 for r in self._responses if r.answered)

    def to_dict(self) -> Dict[str, Optional[AnswerValue]]:
        return {r.question_id: r.value for r in self._responses}


def _check_domain(question: Question, value: Any) -> None:
    if not question.domain.accepts(value):
        raise InputError(
            f"Answer {value!r} for question '{question.id}' is outside its "
            f"declared domain ({question.domain.describe()})",
            question_id=question.id,
            details={"value": value if isinstance(value, (bool, int, float, str)) else repr(value)},
        )
