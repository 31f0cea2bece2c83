"""Unit tests for the contextual oracle boundary - all API calls mocked."""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from brand_safety.contextual import (
    AnthropicContextualOracle,
    ContextualOracle,
    OpenAIContextualOracle,
    assess_safely,
    oracle_from_env,
    parse_assessment,
)
from brand_safety.errors import OracleFailure
from brand_safety.models import ContextualAssessment, ContextualVerdict, RiskLevel


def _make_anthropic_response(text: str) -> MagicMock:
    """Create a mock Anthropic API response."""
    content = MagicMock()
    content.text = text
    response = MagicMock()
    response.content = [content]
    return response


def _make_openai_response(text: str) -> MagicMock:
    message = MagicMock()
    message.content = text
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _reply(verdict: str, suggested=None) -> str:
    return json.dumps({"verdict": verdict, "explanation": "because", "suggested_risk": suggested})


class _SlowOracle(ContextualOracle):
    async def assess(self, text: str) -> ContextualAssessment:
        await asyncio.sleep(5)
        return ContextualAssessment(verdict=ContextualVerdict.SAFE_IN_CONTEXT, explanation="late")


def test_parse_assessment_reads_fenced_json():
    raw = "Sure:\n```json\n" + _reply("unsafe_due_to_context", "very_high") + "\n```"
    result = parse_assessment(raw)
    assert result.verdict == ContextualVerdict.UNSAFE
    assert result.suggested_risk == RiskLevel.VERY_HIGH
    assert result.explanation == "because"


@pytest.mark.parametrize("raw", [
    "",
    "no json here",
    '{"verdict": "totally_fine"}',
    '{"verdict": "safe_in_context", "suggested_risk": "EXTREME"}',
    "{not json}",
])
def test_parse_assessment_rejects_malformed(raw):
    with pytest.raises(OracleFailure):
        parse_assessment(raw)


@pytest.mark.asyncio
async def test_anthropic_oracle_parses_reply():
    mock_client = AsyncMock()
    mock_client.messages.create = AsyncMock(
        return_value=_make_anthropic_response(_reply("safe_in_context", "LOW"))
    )
    oracle = AnthropicContextualOracle(client=mock_client)

    result = await assess_safely(oracle, "A history of the war", timeout=1)

    assert result.verdict == ContextualVerdict.SAFE_IN_CONTEXT
    assert result.suggested_risk == RiskLevel.LOW
    kwargs = mock_client.messages.create.call_args.kwargs
    assert kwargs["messages"][0]["content"] == "A history of the war"


@pytest.mark.asyncio
async def test_openai_oracle_parses_reply():
    mock_client = AsyncMock()
    mock_client.chat.completions.create = AsyncMock(
        return_value=_make_openai_response(_reply("borderline_contextual_risk"))
    )
    oracle = OpenAIContextualOracle(client=mock_client)

    result = await assess_safely(oracle, "text", timeout=1)

    assert result.verdict == ContextualVerdict.BORDERLINE
    assert result.suggested_risk is None


@pytest.mark.asyncio
async def test_provider_exception_becomes_unknown():
    mock_client = AsyncMock()
    mock_client.messages.create = AsyncMock(side_effect=Exception("API error"))
    oracle = AnthropicContextualOracle(client=mock_client)

    result = await assess_safely(oracle, "text", timeout=1)

    assert result.verdict == ContextualVerdict.UNKNOWN
    assert result.explanation == "analysis unavailable"
    assert result.suggested_risk is None


@pytest.mark.asyncio
async def test_malformed_reply_becomes_unknown():
    mock_client = AsyncMock()
    mock_client.messages.create = AsyncMock(return_value=_make_anthropic_response("I think it's fine"))
    oracle = AnthropicContextualOracle(client=mock_client)

    result = await assess_safely(oracle, "text", timeout=1)

    assert result == ContextualAssessment.unavailable()


@pytest.mark.asyncio
async def test_timeout_becomes_unknown():
    result = await assess_safely(_SlowOracle(), "text", timeout=0.01)
    assert result.verdict == ContextualVerdict.UNKNOWN
    assert result.explanation == "analysis unavailable"


@pytest.mark.asyncio
async def test_wrong_return_type_becomes_unknown():
    oracle = MagicMock(spec=ContextualOracle)
    oracle.assess = AsyncMock(return_value={"verdict": "safe_in_context"})

    result = await assess_safely(oracle, "text", timeout=1)

    assert result.verdict == ContextualVerdict.UNKNOWN


@pytest.mark.parametrize("provider,expected", [
    ("anthropic", AnthropicContextualOracle),
    ("OpenAI", OpenAIContextualOracle),
])
def test_oracle_from_env(provider, expected):
    with patch.dict("os.environ", {"CONTEXTUAL_PROVIDER": provider}):
        assert isinstance(oracle_from_env(), expected)


@pytest.mark.parametrize("provider", ["none", "", "bogus"])
def test_oracle_from_env_disabled(provider):
    with patch.dict("os.environ", {"CONTEXTUAL_PROVIDER": provider}):
        assert oracle_from_env() is None
