"""
Per-category keyword classifier.

classify() is a pure function of (text, category table, config). First match
wins: blocked topic, then sensitive keyword, then the category's own tiers
from the highest severity down.
"""
from typing import Iterable, Optional

from brand_safety.categories import CategoryDefinition, term_pattern
from brand_safety.config import SafetyConfig
from brand_safety.models import CategoryEvaluation, RiskLevel


def find_term(text: str, terms: Iterable[str]) -> Optional[str]:
    """First term that appears in text as a whole word, or None."""
    for term in terms:
        if term.strip() and term_pattern(term).search(text):
            return term
    return None


def classify(text: str, category: CategoryDefinition, config: SafetyConfig) -> CategoryEvaluation:
    """
    Classify normalized text against one safety category.

    A category hit is mitigated one tier (never below LOW) when the text also
    mentions one of the brand's allowed topics. Blocked topics and sensitive
    keywords are never mitigated.
    """
    blocked = find_term(text, config.blocked_topics)
    if blocked:
        return CategoryEvaluation(
            category=category.name,
            risk_level=RiskLevel.VERY_HIGH,
            explanation=f'Content contains blocked topic: "{blocked}"',
        )

    sensitive = find_term(text, config.sensitive_keywords)
    if sensitive:
        return CategoryEvaluation(
            category=category.name,
            risk_level=RiskLevel.HIGH,
            explanation=f'Content contains brand-sensitive keyword: "{sensitive}"',
        )

    for tier in category.tiers:
        matched = tier.first_match(text)
        if matched is None:
            continue

        level = tier.level
        explanation = f'{category.label}: matched "{matched}"'
        allowed = find_term(text, config.allowed_topics)
        if allowed:
            level = max(level.step_down(), RiskLevel.LOW)
            explanation += f'; mitigated by allowed topic "{allowed}"'
        return CategoryEvaluation(category=category.name, risk_level=level, explanation=explanation)

    return CategoryEvaluation(
        category=category.name,
        risk_level=RiskLevel.NONE,
        explanation=f"No {category.label.lower()} concerns detected.",
    )
