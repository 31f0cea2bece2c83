"""
Contextual signal: an external LLM judges whether flagged-looking content is
actually fine (or actually worse) given its intent.

CRITICAL: The oracle is untrusted. Use assess_safely() at every call site.
Timeouts, provider errors and malformed replies all become verdict=unknown
with explanation "analysis unavailable". Nothing raised here may escape.
"""
import asyncio
import json
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Literal, Optional

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI
from pydantic import BaseModel, field_validator

from brand_safety.errors import OracleFailure
from brand_safety.models import ContextualAssessment, ContextualVerdict, RiskLevel
from observability.tracing import evaluation_span

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

SYSTEM_PROMPT = """You are a brand-safety reviewer for an advertising platform.
Given a piece of content, decide whether its surrounding intent or purpose
changes how risky it is to publish next to a brand.

Answer with ONE JSON object and nothing else:
{"verdict": "<verdict>", "explanation": "<one sentence>", "suggested_risk": "<level or null>"}

verdict is exactly one of:
- safe_in_context: risky-looking words are harmless here (news, education, medical, fiction)
- borderline_contextual_risk: could reasonably be read as harmful
- unsafe_due_to_context: the intent is harmful even if the words look clean
- unknown: you cannot tell

suggested_risk is one of NONE, LOW, MEDIUM, HIGH, VERY_HIGH, or null."""

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class OracleReply(BaseModel):
    """Shape the model must answer with."""
    verdict: Literal[
        "safe_in_context",
        "borderline_contextual_risk",
        "unsafe_due_to_context",
        "unknown",
    ]
    explanation: str = ""
    suggested_risk: Optional[str] = None

    @field_validator("suggested_risk")
    @classmethod
    def _known_level(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value.strip().lower() in ("", "null", "none_given"):
            return None
        key = value.strip().upper()
        if key not in RiskLevel.__members__:
            raise ValueError(f"unknown risk level {value!r}")
        return key


def parse_assessment(raw: str) -> ContextualAssessment:
    """
    Parse a model reply into a ContextualAssessment.

    Tolerates prose or code fences around the JSON object.

    Raises:
        OracleFailure: no JSON object, or one that doesn't fit OracleReply.
    """
    match = _JSON_OBJECT.search(raw or "")
    if not match:
        raise OracleFailure(f"no JSON object in oracle reply: {raw[:80]!r}")
    try:
        reply = OracleReply.model_validate(json.loads(match.group(0)))
    except Exception as e:
        raise OracleFailure(f"malformed oracle reply: {e}") from e

    return ContextualAssessment(
        verdict=ContextualVerdict(reply.verdict),
        explanation=reply.explanation or "No explanation given.",
        suggested_risk=RiskLevel[reply.suggested_risk] if reply.suggested_risk else None,
    )


class ContextualOracle(ABC):
    """Fallible external judgment. Implementations may raise anything."""

    @abstractmethod
    async def assess(self, text: str) -> ContextualAssessment:
        ...


class AnthropicContextualOracle(ContextualOracle):
    def __init__(
        self,
        client: AsyncAnthropic | None = None,
        model: str = "claude-haiku-4-5-20251001",
    ):
        self._client = client
        self.model = model

    async def assess(self, text: str) -> ContextualAssessment:
        if self._client is None:
            self._client = AsyncAnthropic()
        response = await self._client.messages.create(
            model=self.model,
            max_tokens=300,
            temperature=0.1,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": text}],
        )
        return parse_assessment(response.content[0].text)


class OpenAIContextualOracle(ContextualOracle):
    def __init__(self, client: AsyncOpenAI | None = None, model: str = "gpt-4o-mini"):
        self._client = client
        self.model = model

    async def assess(self, text: str) -> ContextualAssessment:
        if self._client is None:
            self._client = AsyncOpenAI()
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            temperature=0.1,
            max_tokens=300,
            response_format={"type": "json_object"},
        )
        return parse_assessment(response.choices[0].message.content or "")


def oracle_from_env() -> Optional[ContextualOracle]:
    """Pick a provider from CONTEXTUAL_PROVIDER (anthropic, openai or none)."""
    provider = os.environ.get("CONTEXTUAL_PROVIDER", "none").strip().lower()
    if provider == "anthropic":
        return AnthropicContextualOracle()
    if provider == "openai":
        return OpenAIContextualOracle()
    if provider not in ("", "none"):
        logger.warning(f"Unknown CONTEXTUAL_PROVIDER {provider!r}, contextual analysis disabled")
    return None


async def assess_safely(
    oracle: ContextualOracle,
    text: str,
    timeout: Optional[float] = None,
) -> ContextualAssessment:
    """
    Ask the oracle, bounded by a timeout.

    Returns:
        The oracle's assessment, or ContextualAssessment.unavailable() on
        timeout, exception or malformed reply.
    """
    limit = DEFAULT_TIMEOUT_SECONDS if timeout is None else timeout
    with evaluation_span("contextual.assess", oracle=type(oracle).__name__, timeout_seconds=limit) as span:
        try:
            assessment = await asyncio.wait_for(oracle.assess(text), timeout=limit)
            if not isinstance(assessment, ContextualAssessment):
                raise OracleFailure(f"oracle returned {type(assessment).__name__}")
        except asyncio.TimeoutError:
            logger.error(f"Contextual analysis timed out after {limit}s")
            assessment = ContextualAssessment.unavailable()
        except Exception as e:
            logger.error(f"Contextual analysis failed: {e}")
            assessment = ContextualAssessment.unavailable()
        span.record(verdict=assessment.verdict)
        return assessment
