"""
Question Catalog — Base Types

Defines the immutable question definitions every downstream component
reads.  A question owns its answer domain, its category, its point weight
and the symptom tags it contributes to the clinical profile.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

AnswerValue = Union[bool, int, str]


class Category(str, Enum):
    """Clinical grouping of related questions, in declaration order."""
    PAIN         = "pain"
    FUNCTION     = "function"
    JOINT_SOUNDS = "joint_sounds"
    ASSOCIATED   = "associated"
    HISTORY      = "history"


class DomainKind(str, Enum):
    BOOLEAN = "boolean"
    SCALE   = "scale"
    ENUM    = "enum"


@dataclass(frozen=True)
class AnswerDomain:
    """
    Declared value domain of a question.

    BOOLEAN – True / False
    SCALE   – integer in [minimum, maximum]
    ENUM    – one of ``options``; each option carries its own point value
    """
    kind: DomainKind
    minimum: int = 0
    maximum: int = 0
    options: Tuple[Tuple[str, float], ...] = ()

    @classmethod
    def boolean(cls) -> "AnswerDomain":
        return cls(DomainKind.BOOLEAN)

    @classmethod
    def scale(cls, minimum: int, maximum: int) -> "AnswerDomain":
        return cls(DomainKind.SCALE, minimum=minimum, maximum=maximum)

    @classmethod
    def choice(cls, options: Dict[str, float]) -> "AnswerDomain":
        return cls(DomainKind.ENUM, options=tuple(options.items()))

    def option_points(self, option: str) -> float:
        for name, points in self.options:
            if name == option:
                return points
        raise KeyError(option)

    @property
    def option_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.options)

    def accepts(self, value: AnswerValue) -> bool:
        """Return True if ``value`` lies inside this domain."""
        if self.kind == DomainKind.BOOLEAN:
            return isinstance(value, bool)
        if self.kind == DomainKind.SCALE:
            # bool is an int subclass; True must not pass as 1
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            return self.minimum <= value <= self.maximum
        return isinstance(value, str) and value in self.option_names

    def describe(self) -> str:
        if self.kind == DomainKind.BOOLEAN:
            return "boolean"
        if self.kind == DomainKind.SCALE:
            return f"integer {self.minimum}-{self.maximum}"
        return "one of " + ", ".join(repr(o) for o in self.option_names)


@dataclass(frozen=True)
class Question:
    """
    One questionnaire item.

    ``point_weight`` is the full contribution of the item: booleans add it
    when True, scales add ``value / maximum * point_weight`` and enums add
    the point value configured for the chosen option (``point_weight`` is
    then the largest option value).
    """
    id: str
    text: str
    label: str                       # Short factor label used in reports
    category: Category
    domain: AnswerDomain
    point_weight: float
    tags: Tuple[str, ...] = ()
    # Enum questions: option → tags contributed when that option is chosen
    option_tags: Dict[str, Tuple[str, ...]] = field(default_factory=dict, hash=False, compare=False)

    def contribution(self, value: Optional[AnswerValue]) -> float:
        """Points this answer contributes to its category's raw score."""
        if value is None:
            return 0.0
        kind = self.domain.kind
        if kind == DomainKind.BOOLEAN:
            return float(self.point_weight) if value is True else 0.0
        if kind == DomainKind.SCALE:
            if self.domain.maximum == 0:
                return 0.0
            return value / self.domain.maximum * self.point_weight
        return float(self.domain.option_points(value))

    def is_positive(self, value: Optional[AnswerValue]) -> bool:
        """Return True when the answer reports a symptom."""
        if value is None:
            return False
        return self.contribution(value) > 0

    def tags_for(self, value: Optional[AnswerValue]) -> Tuple[str, ...]:
        """Symptom tags this answer contributes to the clinical profile."""
        if value is None:
            return ()
        if self.domain.kind == DomainKind.ENUM:
            return self.option_tags.get(value, ())
        if self.domain.kind == DomainKind.BOOLEAN and value is True:
            return self.tags
        return ()


class ProtocolVariant(str, Enum):
    """
    Questionnaire protocol the respondent was administered.

    SCREENING       – pain items only
    DC_TMD_AXIS_I   – pain + joint sounds
    DC_TMD_AXIS_II  – pain + joint sounds + jaw function
    """
    SCREENING      = "SCREENING"
    DC_TMD_AXIS_I  = "DC_TMD_AXIS_I"
    DC_TMD_AXIS_II = "DC_TMD_AXIS_II"
