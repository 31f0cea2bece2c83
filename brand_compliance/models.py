"""
Brand guideline document and compliance result models.

Guidelines arrive as camelCase JSON documents from whoever owns the brand
profile, so they are pydantic models (frozen, read-only once loaded).
Results are plain dataclasses like the rest of the evaluation pipeline.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from brand_safety.models import Content

COMPLIANT_THRESHOLD = 80
GENERAL_CONTEXT = "general"


class _GuidelineModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ToneGuidelines(_GuidelineModel):
    primary_tone: str = ""
    secondary_tones: Tuple[str, ...] = ()
    avoided_tones: Tuple[str, ...] = ()


class PronounUsage(_GuidelineModel):
    first_person: bool = True
    second_person: bool = True


class VoiceGuidelines(_GuidelineModel):
    personality: str = ""
    uses_contractions: bool = True
    uses_pronoun: PronounUsage = PronounUsage()


class TermRule(_GuidelineModel):
    """Either a preferred/alternatives rule or a term/avoidInContexts rule."""
    preferred: Optional[str] = None
    alternatives: Tuple[str, ...] = ()
    contexts: Tuple[str, ...] = ()
    term: Optional[str] = None
    avoid_in_contexts: Tuple[str, ...] = ()
    notes: str = ""

    def applies_in(self, context: str) -> bool:
        return not self.contexts or context in self.contexts


class TerminologyGuidelines(_GuidelineModel):
    avoided_global_terms: Tuple[str, ...] = ()
    terms: Tuple[TermRule, ...] = ()


class VoiceOverride(_GuidelineModel):
    personality: Optional[str] = None
    uses_contractions: Optional[bool] = None
    uses_pronoun: Optional[PronounUsage] = None


class AdjustmentRules(_GuidelineModel):
    tone: Optional[str] = None
    voice: Optional[VoiceOverride] = None


class ContextualAdjustment(_GuidelineModel):
    contexts: Tuple[str, ...] = ()
    apply_rules: AdjustmentRules = AdjustmentRules()


class BrandGuideline(_GuidelineModel):
    name: str
    description: str = ""
    tone_guidelines: ToneGuidelines = ToneGuidelines()
    voice_guidelines: VoiceGuidelines = VoiceGuidelines()
    terminology_guidelines: TerminologyGuidelines = TerminologyGuidelines()
    contextual_adjustments: Tuple[ContextualAdjustment, ...] = ()

    def for_context(self, context: str) -> "BrandGuideline":
        """
        Guideline with the context's tone and voice overrides applied.

        Every adjustment listing the context applies, in document order, so a
        later adjustment wins on a conflicting key.
        """
        tone = self.tone_guidelines
        voice = self.voice_guidelines
        for adjustment in self.contextual_adjustments:
            if context not in adjustment.contexts:
                continue
            rules = adjustment.apply_rules
            if rules.tone:
                tone = tone.model_copy(update={"primary_tone": rules.tone})
            if rules.voice:
                overrides = rules.voice.model_dump(exclude_none=True)
                if rules.voice.uses_pronoun is not None:
                    overrides["uses_pronoun"] = rules.voice.uses_pronoun
                voice = voice.model_copy(update=overrides)
        return self.model_copy(update={"tone_guidelines": tone, "voice_guidelines": voice})


class IssueType(str, Enum):
    TONE = "tone"
    VOICE = "voice"
    TERMINOLOGY = "terminology"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def penalty(self) -> int:
        return {"low": 5, "medium": 10, "high": 20}[self.value]


@dataclass(frozen=True)
class ComplianceIssue:
    type: IssueType
    severity: IssueSeverity
    description: str
    suggestion: str


@dataclass(frozen=True)
class ComplianceEvaluation:
    """Compliance verdict against one guideline in one context."""
    content: Content
    guideline_name: str
    score: int
    issues: Tuple[ComplianceIssue, ...]
    summary: str
    context: str = GENERAL_CONTEXT
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: str = "compliance"

    @property
    def is_compliant(self) -> bool:
        return self.score >= COMPLIANT_THRESHOLD

    def issues_of(self, issue_type: IssueType) -> List[ComplianceIssue]:
        return [i for i in self.issues if i.type == issue_type]


@dataclass(frozen=True)
class GuidelineNotConfigured:
    """Returned instead of a ComplianceEvaluation when no guideline is loaded."""
    message: str = "Brand guideline not configured; compliance evaluation unavailable."
    context: str = GENERAL_CONTEXT
    kind: str = "guideline_not_configured"
