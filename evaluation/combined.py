"""
Combined scorer: blend the safety verdict and the compliance score.

The safety level maps to a number through RISK_SCORES. With both parts
present the blend is a weighted mean; with one part the result is that
part's own score and compliance flag.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from brand_compliance.models import ComplianceEvaluation, GuidelineNotConfigured
from brand_safety.errors import ValidationError
from brand_safety.models import RiskLevel, SafetyEvaluation

RISK_SCORES = {
    RiskLevel.NONE: 100,
    RiskLevel.LOW: 80,
    RiskLevel.MEDIUM: 60,
    RiskLevel.HIGH: 30,
    RiskLevel.VERY_HIGH: 0,
}

COMBINED_THRESHOLD = 70
MIN_WEIGHT = 1.0
MAX_WEIGHT = 5.0
DEFAULT_SAFETY_WEIGHT = 1.0
DEFAULT_BRAND_WEIGHT = 2.0


@dataclass(frozen=True)
class Weights:
    safety: float = DEFAULT_SAFETY_WEIGHT
    brand: float = DEFAULT_BRAND_WEIGHT

    @classmethod
    def from_input(cls, value: Union["Weights", Mapping[str, Any], None]) -> "Weights":
        """Build weights from caller input, clamping each to [1.0, 5.0]."""
        if value is None:
            return cls()
        if isinstance(value, Weights):
            return cls(safety=_clamp(value.safety, "safety"), brand=_clamp(value.brand, "brand"))
        if not isinstance(value, Mapping):
            raise ValidationError("weights must be an object", field="weights")
        unknown = set(value) - {"safety", "brand"}
        if unknown:
            raise ValidationError(f"unknown weight keys {sorted(unknown)}", field="weights")
        safety = value.get("safety")
        brand = value.get("brand")
        return cls(
            safety=DEFAULT_SAFETY_WEIGHT if safety is None else _clamp(safety, "safety"),
            brand=DEFAULT_BRAND_WEIGHT if brand is None else _clamp(brand, "brand"),
        )


def _clamp(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        raise ValidationError("weight must be a number", field=f"weights.{name}")
    return float(min(max(value, MIN_WEIGHT), MAX_WEIGHT))


@dataclass(frozen=True)
class CombinedEvaluationResult:
    safety: Optional[SafetyEvaluation]
    compliance: Optional[ComplianceEvaluation]
    combined_score: Optional[float]
    weights: Weights
    is_compliant: bool
    summary: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: str = "combined"


EvaluationResult = Union[
    SafetyEvaluation,
    ComplianceEvaluation,
    CombinedEvaluationResult,
    GuidelineNotConfigured,
]


def safety_score(evaluation: SafetyEvaluation) -> int:
    return RISK_SCORES[evaluation.overall_risk]


def combine(
    safety: Optional[SafetyEvaluation],
    compliance: Optional[ComplianceEvaluation],
    weights: Optional[Weights] = None,
) -> CombinedEvaluationResult:
    """
    Blend whichever evaluations are present.

    Raises:
        ValidationError: neither evaluation was given.
    """
    weights = weights or Weights()

    if safety is not None and compliance is not None:
        total = safety_score(safety) * weights.safety + compliance.score * weights.brand
        score = round(total / (weights.safety + weights.brand), 1)
        is_compliant = score >= COMBINED_THRESHOLD
    elif safety is not None:
        score = float(safety_score(safety))
        is_compliant = safety.is_safe
    elif compliance is not None:
        score = float(compliance.score)
        is_compliant = compliance.is_compliant
    else:
        raise ValidationError("at least one of safety or brand evaluation is required", field="include")

    verdict = "COMPLIANT" if is_compliant else "NON-COMPLIANT"
    return CombinedEvaluationResult(
        safety=safety,
        compliance=compliance,
        combined_score=score,
        weights=weights,
        is_compliant=is_compliant,
        summary=f"{verdict}: Content achieves a combined score of {score:g}.",
    )
