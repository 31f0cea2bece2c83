"""Data models for safety evaluation results."""
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from brand_safety.errors import ValidationError

MAX_CONTENT_LENGTH = 10_000
LONG_FORM_THRESHOLD = 500

_WHITESPACE = re.compile(r"\s+")


class RiskLevel(str, Enum):
    """Totally ordered risk scale. Compare by rank, never by string value."""
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def rank(self) -> int:
        return _RANK[self]

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank

    def step_down(self) -> "RiskLevel":
        """One tier lower, never below NONE."""
        return _ORDER[max(self.rank - 1, 0)]

    @classmethod
    def parse(cls, value) -> "RiskLevel":
        """Accept a RiskLevel or any-case name like 'very_high'."""
        if isinstance(value, RiskLevel):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_").replace(" ", "_")
            if key in cls.__members__:
                return cls[key]
        raise ValidationError(f"unknown risk level {value!r}", field="risk_level")


_ORDER: Tuple[RiskLevel, ...] = (
    RiskLevel.NONE,
    RiskLevel.LOW,
    RiskLevel.MEDIUM,
    RiskLevel.HIGH,
    RiskLevel.VERY_HIGH,
)
_RANK = {level: i for i, level in enumerate(_ORDER)}


@dataclass(frozen=True)
class Content:
    """Text under evaluation. Build with Content.from_text()."""
    text: str
    normalized: str
    length: int

    @classmethod
    def from_text(cls, text) -> "Content":
        if not isinstance(text, str):
            raise ValidationError("content must be a string", field="content")
        if not text.strip():
            raise ValidationError("content must not be empty", field="content")
        if len(text) > MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"content exceeds {MAX_CONTENT_LENGTH} characters", field="content"
            )
        normalized = _WHITESPACE.sub(" ", text.strip()).casefold()
        return cls(text=text, normalized=normalized, length=len(text))

    @property
    def is_long_form(self) -> bool:
        return self.length > LONG_FORM_THRESHOLD


@dataclass(frozen=True)
class CategoryEvaluation:
    """Risk verdict for a single safety category."""
    category: str
    risk_level: RiskLevel
    explanation: str


class ContextualVerdict(str, Enum):
    SAFE_IN_CONTEXT = "safe_in_context"
    BORDERLINE = "borderline_contextual_risk"
    UNSAFE = "unsafe_due_to_context"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ContextualAssessment:
    """Judgment from the external contextual oracle."""
    verdict: ContextualVerdict
    explanation: str
    suggested_risk: Optional[RiskLevel] = None

    @classmethod
    def unavailable(cls) -> "ContextualAssessment":
        return cls(verdict=ContextualVerdict.UNKNOWN, explanation="analysis unavailable")


class SentimentPolarity(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class SentimentSignal:
    polarity: SentimentPolarity
    confidence: float = 0.0


@dataclass(frozen=True)
class SafetyEvaluation:
    """Complete safety verdict. Built in one step, never partially populated."""
    content: Content
    overall_risk: RiskLevel
    category_evaluations: Tuple[CategoryEvaluation, ...]
    summary: str
    contextual_assessment: Optional[ContextualAssessment] = None
    tolerance_breaches: Tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: str = "safety"

    @property
    def is_safe(self) -> bool:
        return self.overall_risk <= RiskLevel.LOW

    @property
    def significant_risks(self) -> List[CategoryEvaluation]:
        return [c for c in self.category_evaluations if c.risk_level >= RiskLevel.MEDIUM]
