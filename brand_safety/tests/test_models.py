"""Unit tests for the shared safety data model."""
import dataclasses

import pytest

from brand_safety.errors import ValidationError
from brand_safety.models import MAX_CONTENT_LENGTH, Content, RiskLevel


def test_risk_levels_are_totally_ordered():
    ordered = [RiskLevel.NONE, RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.VERY_HIGH]
    assert sorted(reversed(ordered)) == ordered
    assert max(ordered) == RiskLevel.VERY_HIGH
    # String order would put HIGH before LOW; rank order must win.
    assert RiskLevel.HIGH > RiskLevel.LOW


def test_step_down_stops_at_none():
    assert RiskLevel.HIGH.step_down() == RiskLevel.MEDIUM
    assert RiskLevel.NONE.step_down() == RiskLevel.NONE


@pytest.mark.parametrize("raw,expected", [
    ("high", RiskLevel.HIGH),
    ("very-high", RiskLevel.VERY_HIGH),
    (" Very_High ", RiskLevel.VERY_HIGH),
    (RiskLevel.LOW, RiskLevel.LOW),
])
def test_parse_risk_level(raw, expected):
    assert RiskLevel.parse(raw) == expected


@pytest.mark.parametrize("raw", ["severe", "", None, 3])
def test_parse_rejects_unknown(raw):
    with pytest.raises(ValidationError):
        RiskLevel.parse(raw)


def test_content_normalizes_whitespace_and_case():
    content = Content.from_text("  Hello\n\tBIG   World  ")
    assert content.normalized == "hello big world"
    assert content.text == "  Hello\n\tBIG   World  "
    assert content.length == len(content.text)


def test_content_is_immutable():
    content = Content.from_text("hello")
    with pytest.raises(dataclasses.FrozenInstanceError):
        content.text = "changed"


@pytest.mark.parametrize("raw", ["", "   \n", None, 42, "x" * (MAX_CONTENT_LENGTH + 1)])
def test_content_rejects_invalid_text(raw):
    with pytest.raises(ValidationError) as exc_info:
        Content.from_text(raw)
    assert exc_info.value.field == "content"


def test_long_form_threshold():
    assert not Content.from_text("x" * 500).is_long_form
    assert Content.from_text("x" * 501).is_long_form
