"""
Tone, voice and terminology checks.

Each check takes the raw text, the context-adjusted guideline and the context
tag, and returns its issues. Checks are independent of each other.
"""
import re
from typing import Dict, List, Tuple

from brand_compliance.models import (
    BrandGuideline,
    ComplianceIssue,
    IssueSeverity,
    IssueType,
)
from brand_safety.categories import term_pattern
from brand_safety.models import LONG_FORM_THRESHOLD

TECHNICAL_CONTEXTS = frozenset({
    "technical-documentation",
    "api-reference",
    "developer-guide",
    "product-specs",
    "technical-specs",
    "feature-description",
    "technical-support",
    "code-example",
    "implementation-guide",
    "technical",
    "developer",
})

# Terms a brand may ban in marketing copy but which are unavoidable in docs.
TECHNICAL_TERMS = frozenset({
    "api", "sdk", "ui", "ux", "http", "https", "rest", "json", "xml", "yaml",
    "database", "server", "client", "endpoint", "backend", "frontend", "fullstack",
    "framework", "library", "cache", "latency", "throughput", "leverage",
    "machine learning", "artificial intelligence", "ai", "cloud", "deployment",
})

TONE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "confident": ("proven", "guarantee", "ensure", "definitely", "certainly", "expert"),
    "friendly": ("welcome", "glad", "happy", "pleased", "enjoy", "wonderful"),
    "professional": ("professional", "expertise", "experience", "qualified", "standards"),
    "casual": ("hey", "cool", "awesome", "great", "nice", "fun"),
    "authoritative": ("must", "should", "required", "essential", "critical", "important"),
    "optimistic": ("exciting", "opportunity", "bright", "future", "better", "improve"),
    "pessimistic": ("unfortunately", "sadly", "difficult", "challenging", "problems", "issues"),
    "condescending": ("obviously", "clearly", "simply", "merely", "of course", "even you"),
    "overly technical": (
        "instantiate", "parameterize", "serialization", "idempotent", "polymorphism",
        "asynchronous",
    ),
}

_CONTRACTION = re.compile(r"\b\w+['’](?:s|re|ve|ll|d|t|m)\b", re.IGNORECASE)
_FIRST_PERSON = re.compile(r"\b(?:we|us|our|ours)\b", re.IGNORECASE)
_SECOND_PERSON = re.compile(r"\b(?:you|your|yours)\b", re.IGNORECASE)


def is_technical_context(context: str) -> bool:
    return context in TECHNICAL_CONTEXTS


def has_tone(text: str, tone: str) -> bool:
    """True when any keyword for the tone appears. Unknown tones never match."""
    keywords = TONE_KEYWORDS.get(tone.strip().lower(), ())
    return any(term_pattern(k).search(text) for k in keywords)


def check_tone(text: str, guideline: BrandGuideline, context: str) -> List[ComplianceIssue]:
    if is_technical_context(context):
        return []

    rules = guideline.tone_guidelines
    issues = []
    for tone in rules.avoided_tones:
        if has_tone(text, tone):
            issues.append(ComplianceIssue(
                type=IssueType.TONE,
                severity=IssueSeverity.MEDIUM,
                description=f"Content uses avoided tone: {tone}",
                suggestion=f"Rephrase to avoid a {tone} tone"
                + (f" and aim for a {rules.primary_tone} tone." if rules.primary_tone else "."),
            ))

    primary = rules.primary_tone
    if primary and len(text) > LONG_FORM_THRESHOLD and not has_tone(text, primary):
        issues.append(ComplianceIssue(
            type=IssueType.TONE,
            severity=IssueSeverity.LOW,
            description=f"Content does not clearly express the brand's primary tone: {primary}",
            suggestion=f"Adjust the content to sound {primary}.",
        ))
    return issues


def check_voice(text: str, guideline: BrandGuideline, context: str) -> List[ComplianceIssue]:
    voice = guideline.voice_guidelines
    issues = []

    contractions = _CONTRACTION.findall(text)
    if voice.uses_contractions and not contractions and len(text) > 50:
        issues.append(ComplianceIssue(
            type=IssueType.VOICE,
            severity=IssueSeverity.LOW,
            description="Content does not use contractions, which the brand voice favors",
            suggestion='Use contractions such as "we\'re" or "you\'ll" for a more natural voice.',
        ))
    elif not voice.uses_contractions and contractions:
        issues.append(ComplianceIssue(
            type=IssueType.VOICE,
            severity=IssueSeverity.MEDIUM,
            description=f"Content uses contractions ({', '.join(contractions[:3])}), "
                        f"which the brand voice avoids",
            suggestion='Expand contractions, e.g. "we\'re" to "we are".',
        ))

    if not voice.uses_pronoun.first_person and _FIRST_PERSON.search(text):
        issues.append(ComplianceIssue(
            type=IssueType.VOICE,
            severity=IssueSeverity.MEDIUM,
            description="Content uses first-person pronouns, which the brand voice avoids",
            suggestion="Rephrase without we, us or our.",
        ))

    if not voice.uses_pronoun.second_person and _SECOND_PERSON.search(text):
        issues.append(ComplianceIssue(
            type=IssueType.VOICE,
            severity=IssueSeverity.MEDIUM,
            description="Content uses second-person pronouns, which the brand voice avoids",
            suggestion="Rephrase without you or your.",
        ))
    return issues


def check_terminology(text: str, guideline: BrandGuideline, context: str) -> List[ComplianceIssue]:
    rules = guideline.terminology_guidelines
    technical = is_technical_context(context)
    issues = []

    for term in rules.avoided_global_terms:
        if technical and term.strip().lower() in TECHNICAL_TERMS:
            continue
        if term_pattern(term).search(text):
            issues.append(ComplianceIssue(
                type=IssueType.TERMINOLOGY,
                severity=IssueSeverity.HIGH,
                description=f'Content uses prohibited term: "{term}"',
                suggestion=f'Remove or replace "{term}".',
            ))

    for rule in rules.terms:
        if rule.preferred and rule.alternatives and rule.applies_in(context):
            if term_pattern(rule.preferred).search(text):
                continue
            for alternative in rule.alternatives:
                if term_pattern(alternative).search(text):
                    issues.append(ComplianceIssue(
                        type=IssueType.TERMINOLOGY,
                        severity=IssueSeverity.MEDIUM,
                        description=f'Content uses "{alternative}" instead of the preferred '
                                    f'term "{rule.preferred}"',
                        suggestion=rule.notes or f'Use "{rule.preferred}" instead.',
                    ))
                    break

        if rule.term and context in rule.avoid_in_contexts and term_pattern(rule.term).search(text):
            issues.append(ComplianceIssue(
                type=IssueType.TERMINOLOGY,
                severity=IssueSeverity.MEDIUM,
                description=f'Content uses "{rule.term}", which should be avoided in {context} content',
                suggestion=rule.notes or f'Remove "{rule.term}".',
            ))
    return issues


CHECKS = (check_tone, check_voice, check_terminology)
