"""Compliance evaluator: score content against a brand guideline."""
import logging
from typing import Optional, Sequence

from brand_compliance.checks import CHECKS
from brand_compliance.models import (
    COMPLIANT_THRESHOLD,
    GENERAL_CONTEXT,
    BrandGuideline,
    ComplianceEvaluation,
    ComplianceIssue,
    IssueSeverity,
)
from brand_safety.models import Content
from observability.tracing import evaluation_span

logger = logging.getLogger(__name__)

NEEDS_IMPROVEMENT_THRESHOLD = 60

_SEVERITY_ORDER = {IssueSeverity.HIGH: 0, IssueSeverity.MEDIUM: 1, IssueSeverity.LOW: 2}


def compliance_score(issues: Sequence[ComplianceIssue]) -> int:
    """100 minus 20/10/5 per high/medium/low issue, floored at 0."""
    return max(0, 100 - sum(issue.severity.penalty for issue in issues))


def compliance_summary(brand: str, score: int) -> str:
    if score >= COMPLIANT_THRESHOLD:
        return f"Content is compliant with {brand} brand guidelines ({score}/100)."
    if score >= NEEDS_IMPROVEMENT_THRESHOLD:
        return f"Content needs improvement to fully comply with {brand} brand guidelines ({score}/100)."
    return f"Content has significant compliance issues with {brand} brand guidelines ({score}/100)."


class ComplianceEvaluator:
    def evaluate(
        self,
        content: Content,
        guideline: BrandGuideline,
        context: Optional[str] = None,
    ) -> ComplianceEvaluation:
        """
        Run the tone, voice and terminology checks.

        Args:
            content: Validated content
            guideline: Brand guideline (context overrides applied here)
            context: Context tag, e.g. "social-media"; defaults to "general"

        Returns:
            ComplianceEvaluation with issues ordered high to low severity.
        """
        context = (context or GENERAL_CONTEXT).strip().lower() or GENERAL_CONTEXT
        with evaluation_span("compliance.evaluate", guideline=guideline.name, context=context) as span:
            effective = guideline.for_context(context)

            issues = []
            for check in CHECKS:
                issues.extend(check(content.text, effective, context))
            issues.sort(key=lambda issue: _SEVERITY_ORDER[issue.severity])

            score = compliance_score(issues)
            span.record(score=score, issues=len(issues))
            logger.info(
                f"Compliance evaluated for {guideline.name} ({context}): "
                f"score={score}, issues={len(issues)}"
            )
            return ComplianceEvaluation(
                content=content,
                guideline_name=guideline.name,
                score=score,
                issues=tuple(issues),
                summary=compliance_summary(guideline.name, score),
                context=context,
            )
