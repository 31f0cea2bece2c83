"""Unit tests for the sentiment signal."""
import pytest

from brand_safety.models import RiskLevel, SentimentPolarity, SentimentSignal
from brand_safety.sentiment import (
    SENTIMENT_CATEGORY,
    LexiconSentimentOracle,
    sentiment_contribution,
)


class _BrokenOracle:
    def analyze(self, text: str) -> SentimentSignal:
        raise RuntimeError("model crashed")


class _GarbageOracle:
    def analyze(self, text: str):
        return SentimentSignal(polarity="ecstatic", confidence=2.0)


@pytest.mark.parametrize("text,polarity", [
    ("What a wonderful, amazing day", SentimentPolarity.POSITIVE),
    ("Terrible service, the worst", SentimentPolarity.NEGATIVE),
    ("It was okay, pretty average", SentimentPolarity.NEUTRAL),
    ("Great food but awful wait", SentimentPolarity.NEUTRAL),
    ("Nothing here to score", SentimentPolarity.NEUTRAL),
])
def test_lexicon_polarity(text, polarity):
    assert LexiconSentimentOracle().analyze(text).polarity == polarity


def test_confidence_grows_with_matches_and_caps():
    oracle = LexiconSentimentOracle()
    assert oracle.analyze("no signal words").confidence == 0.0
    assert oracle.analyze("great").confidence == pytest.approx(0.2)
    assert oracle.analyze("great " * 12).confidence == 1.0


@pytest.mark.parametrize("text,level", [
    ("I love it, best ever", RiskLevel.NONE),
    ("fine", RiskLevel.LOW),
    ("I hate this, horrible", RiskLevel.MEDIUM),
])
def test_contribution_maps_polarity_to_risk(text, level):
    result = sentiment_contribution(LexiconSentimentOracle(), text)
    assert result.category == SENTIMENT_CATEGORY
    assert result.risk_level == level


@pytest.mark.parametrize("oracle", [_BrokenOracle(), _GarbageOracle()])
def test_failing_oracle_degrades_to_neutral_low(oracle):
    result = sentiment_contribution(oracle, "anything")
    assert result.risk_level == RiskLevel.LOW
    assert "neutral" in result.explanation
