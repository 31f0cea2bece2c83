"""
Risk aggregator: fold category verdicts and the two signals into one level.

Order matters:
  1. baseline = max over every non-contextual evaluation (sentiment included)
  2. two or more keyword categories at exactly MEDIUM escalate baseline to HIGH
  3. the contextual verdict is applied last, against the fixed baseline

A safe_in_context verdict may lower the result but never below MEDIUM when
the baseline was HIGH or worse, and never above the baseline.
"""
from typing import Iterable, Optional

from brand_safety.models import (
    CategoryEvaluation,
    ContextualAssessment,
    ContextualVerdict,
    RiskLevel,
)
from brand_safety.sentiment import SENTIMENT_CATEGORY


def baseline_risk(evaluations: Iterable[CategoryEvaluation]) -> RiskLevel:
    """Lattice join of all levels plus the two-MEDIUM escalation."""
    evaluations = list(evaluations)
    baseline = max((e.risk_level for e in evaluations), default=RiskLevel.NONE)

    medium_categories = [
        e for e in evaluations
        if e.risk_level == RiskLevel.MEDIUM and e.category != SENTIMENT_CATEGORY
    ]
    if len(medium_categories) >= 2:
        baseline = max(baseline, RiskLevel.HIGH)
    return baseline


def apply_context(baseline: RiskLevel, assessment: Optional[ContextualAssessment]) -> RiskLevel:
    """Apply a contextual verdict to an already fixed baseline."""
    if assessment is None:
        return baseline

    suggested = assessment.suggested_risk
    verdict = assessment.verdict

    if verdict == ContextualVerdict.UNSAFE:
        return max(baseline, RiskLevel.HIGH, suggested or RiskLevel.HIGH)

    if verdict == ContextualVerdict.BORDERLINE:
        return max(baseline, RiskLevel.MEDIUM, suggested or RiskLevel.MEDIUM)

    if verdict == ContextualVerdict.SAFE_IN_CONTEXT:
        # Without a suggestion the claim is worth one tier.
        target = suggested if suggested is not None else baseline.step_down()
        floor = RiskLevel.MEDIUM if baseline >= RiskLevel.HIGH else RiskLevel.NONE
        return min(baseline, max(target, floor))

    return max(baseline, suggested or baseline)


def aggregate(
    evaluations: Iterable[CategoryEvaluation],
    assessment: Optional[ContextualAssessment] = None,
) -> RiskLevel:
    return apply_context(baseline_risk(evaluations), assessment)
