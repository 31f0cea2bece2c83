"""
Sentiment signal.

Any object with analyze(text) -> SentimentSignal can stand in for the
lexicon oracle. sentiment_contribution() is the boundary: whatever the oracle
does, the evaluator gets a CategoryEvaluation back.
"""
import logging
import re
from typing import Protocol

from brand_safety.models import (
    CategoryEvaluation,
    RiskLevel,
    SentimentPolarity,
    SentimentSignal,
)

logger = logging.getLogger(__name__)

SENTIMENT_CATEGORY = "sentiment"

_WORD = re.compile(r"[a-z']+")

POSITIVE_WORDS = frozenset({
    "great", "excellent", "amazing", "wonderful", "fantastic", "love", "best", "happy",
    "delighted", "perfect",
})
NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "horrible", "worst", "hate", "angry", "sad",
    "disgusting", "useless",
})
NEUTRAL_WORDS = frozenset({"okay", "ok", "fine", "average", "normal", "regular"})

_RISK_BY_POLARITY = {
    SentimentPolarity.POSITIVE: RiskLevel.NONE,
    SentimentPolarity.NEUTRAL: RiskLevel.LOW,
    SentimentPolarity.NEGATIVE: RiskLevel.MEDIUM,
}


class SentimentOracle(Protocol):
    def analyze(self, text: str) -> SentimentSignal:
        ...


class LexiconSentimentOracle:
    """Word-list polarity. Score is (positive - negative) / matched * 100."""

    def __init__(self, threshold: float = 30.0):
        self.threshold = threshold

    def analyze(self, text: str) -> SentimentSignal:
        words = _WORD.findall(text.lower())
        positive = sum(1 for w in words if w in POSITIVE_WORDS)
        negative = sum(1 for w in words if w in NEGATIVE_WORDS)
        neutral = sum(1 for w in words if w in NEUTRAL_WORDS)
        matched = positive + negative + neutral

        if matched == 0:
            return SentimentSignal(polarity=SentimentPolarity.NEUTRAL, confidence=0.0)

        score = (positive - negative) / matched * 100
        if score > self.threshold:
            polarity = SentimentPolarity.POSITIVE
        elif score < -self.threshold:
            polarity = SentimentPolarity.NEGATIVE
        else:
            polarity = SentimentPolarity.NEUTRAL
        return SentimentSignal(polarity=polarity, confidence=min(matched / 5, 1.0))


def sentiment_contribution(oracle: SentimentOracle, text: str) -> CategoryEvaluation:
    """Map the oracle's polarity to a risk level; degrade to neutral/LOW on failure."""
    try:
        signal = oracle.analyze(text)
        polarity = SentimentPolarity(signal.polarity)
        confidence = signal.confidence
    except Exception as e:
        logger.error(f"Sentiment analysis failed: {e}, treating as neutral")
        polarity, confidence = SentimentPolarity.NEUTRAL, 0.0

    return CategoryEvaluation(
        category=SENTIMENT_CATEGORY,
        risk_level=_RISK_BY_POLARITY[polarity],
        explanation=f"Sentiment is {polarity.value} (confidence {confidence:.2f}).",
    )
