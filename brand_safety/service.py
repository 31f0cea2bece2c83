"""
Safety evaluator: runs every enabled category, the sentiment signal and the
optional contextual oracle, then aggregates.

The category tables and sentiment oracle are fixed at construction. The
config snapshot is passed per call so callers decide which snapshot applies.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from brand_safety.aggregator import aggregate
from brand_safety.categories import DEFAULT_CATEGORIES, CategoryDefinition
from brand_safety.classifier import classify
from brand_safety.config import SafetyConfig
from brand_safety.contextual import ContextualOracle, assess_safely
from brand_safety.models import (
    CategoryEvaluation,
    Content,
    ContextualAssessment,
    RiskLevel,
    SafetyEvaluation,
)
from brand_safety.sentiment import LexiconSentimentOracle, SentimentOracle, sentiment_contribution
from observability.tracing import evaluation_span

logger = logging.getLogger(__name__)

_SUMMARY_LABELS = {
    RiskLevel.VERY_HIGH: ("UNSAFE", "extreme risk"),
    RiskLevel.HIGH: ("HIGH RISK", "significant risk"),
    RiskLevel.MEDIUM: ("CAUTION", "moderate risk"),
    RiskLevel.LOW: ("LOW RISK", "minor concerns"),
}


def summarize(overall: RiskLevel, evaluations: Sequence[CategoryEvaluation]) -> str:
    if overall == RiskLevel.NONE:
        return "SAFE: No safety concerns detected."
    tag, phrase = _SUMMARY_LABELS[overall]
    flagged = [e.category for e in evaluations if e.risk_level >= RiskLevel.MEDIUM]
    if not flagged:
        flagged = [e.category for e in evaluations if e.risk_level == overall]
    if not flagged:
        return f"{tag}: Contextual analysis raised the overall risk."
    return f"{tag}: Content contains {phrase} in {', '.join(flagged)}."


class SafetyEvaluator:
    def __init__(
        self,
        categories: Iterable[CategoryDefinition] = DEFAULT_CATEGORIES,
        sentiment: Optional[SentimentOracle] = None,
        oracle: Optional[ContextualOracle] = None,
        oracle_timeout: Optional[float] = None,
    ):
        self.categories = tuple(categories)
        self.sentiment = sentiment or LexiconSentimentOracle()
        self.oracle = oracle
        self.oracle_timeout = oracle_timeout

    @property
    def category_names(self) -> List[str]:
        return [c.name for c in self.categories]

    def classify_all(self, content: Content, config: SafetyConfig) -> List[CategoryEvaluation]:
        """Keyword categories in table order, then the sentiment entry."""
        enabled = set(config.categories)
        evaluations = [
            classify(content.normalized, category, config)
            for category in self.categories
            if category.name in enabled
        ]
        evaluations.append(sentiment_contribution(self.sentiment, content.text))
        return evaluations

    async def evaluate(self, content: Content, config: SafetyConfig) -> SafetyEvaluation:
        with evaluation_span(
            "safety.evaluate", content_length=content.length, categories=len(config.categories)
        ) as span:
            evaluations = self.classify_all(content, config)

            assessment: Optional[ContextualAssessment] = None
            if self.oracle is not None:
                assessment = await assess_safely(self.oracle, content.text, self.oracle_timeout)

            overall = aggregate(evaluations, assessment)
            breaches = tuple(
                e.category for e in evaluations
                if config.tolerance_for(e.category) is not None
                and e.risk_level > config.tolerance_for(e.category)
            )
            span.record(overall_risk=overall, breaches=len(breaches))

            logger.info(
                f"Safety evaluated '{content.text[:50]}...' -> {overall.value} "
                f"(context={assessment.verdict.value if assessment else 'none'})"
            )
            return SafetyEvaluation(
                content=content,
                overall_risk=overall,
                category_evaluations=tuple(evaluations),
                contextual_assessment=assessment,
                summary=summarize(overall, evaluations),
                tolerance_breaches=breaches,
            )
