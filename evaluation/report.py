"""Markdown reports for every result kind."""
from collections import defaultdict
from typing import List, Union

from brand_compliance.models import ComplianceEvaluation, GuidelineNotConfigured, IssueSeverity
from brand_safety.models import RiskLevel, SafetyEvaluation
from evaluation.batch import BatchResult
from evaluation.combined import CombinedEvaluationResult

RISK_LABELS = {
    RiskLevel.NONE: "✅ SAFE",
    RiskLevel.LOW: "🟢 LOW RISK",
    RiskLevel.MEDIUM: "🟡 CAUTION",
    RiskLevel.HIGH: "🔴 HIGH RISK",
    RiskLevel.VERY_HIGH: "⛔ UNSAFE",
}

SEVERITY_MARKS = {
    IssueSeverity.HIGH: "🔴",
    IssueSeverity.MEDIUM: "🟡",
    IssueSeverity.LOW: "🟢",
}

Renderable = Union[
    SafetyEvaluation,
    ComplianceEvaluation,
    CombinedEvaluationResult,
    GuidelineNotConfigured,
    BatchResult,
]


def _safety_section(evaluation: SafetyEvaluation, heading: str = "#") -> List[str]:
    lines = [
        f"{heading} Brand Safety Evaluation",
        "",
        f"{heading}# Overall Assessment: {RISK_LABELS[evaluation.overall_risk]}",
        "",
        evaluation.summary,
        "",
    ]
    concerns = evaluation.significant_risks
    if concerns:
        lines += [f"{heading}# Areas of Concern", ""]
        for category in concerns:
            lines += [f"{heading}## {category.category}: {RISK_LABELS[category.risk_level]}", category.explanation, ""]

    if evaluation.contextual_assessment is not None:
        ctx = evaluation.contextual_assessment
        lines += [f"*Contextual analysis: {ctx.verdict.value}. {ctx.explanation}*", ""]

    safe = [c.category for c in evaluation.category_evaluations if c.risk_level <= RiskLevel.LOW]
    if safe:
        lines += [f"{heading}# Safe Categories", ""] + [f"- {name}" for name in safe] + [""]
    return lines


def _compliance_section(evaluation: ComplianceEvaluation, heading: str = "#") -> List[str]:
    if evaluation.is_compliant:
        status = "✅ COMPLIANT"
    elif evaluation.score >= 60:
        status = "🟡 NEEDS IMPROVEMENT"
    else:
        status = "❌ NON-COMPLIANT"

    lines = [
        f"{heading} Brand Compliance Evaluation",
        "",
        f"{heading}# Overall Assessment: {status} (Score: {evaluation.score}/100)",
        "",
        evaluation.summary,
        "",
    ]
    if evaluation.issues:
        grouped = defaultdict(list)
        for issue in evaluation.issues:
            grouped[issue.type.value].append(issue)
        lines += [f"{heading}# Issues Found", ""]
        for issue_type, issues in grouped.items():
            lines += [f"{heading}## {issue_type.capitalize()} Issues", ""]
            for issue in issues:
                lines += [
                    f"{SEVERITY_MARKS[issue.severity]} **{issue.description}**",
                    f"   - Suggestion: {issue.suggestion}",
                    "",
                ]
    else:
        lines += [f"✅ No issues found. Content is fully compliant with {evaluation.guideline_name} brand guidelines.", ""]

    if evaluation.context != "general":
        lines += [f"*Evaluation context: {evaluation.context}*", ""]
    return lines


def _combined_section(result: CombinedEvaluationResult) -> List[str]:
    verdict = "✅ COMPLIANT" if result.is_compliant else "❌ NON-COMPLIANT"
    lines = [
        "# Combined Brand Evaluation",
        "",
        f"## Overall Assessment: {verdict} (Score: {result.combined_score:g}/100)",
        "",
        result.summary,
        "",
        f"*Weights: safety {result.weights.safety:g}, brand {result.weights.brand:g}*",
        "",
    ]
    if result.safety is not None:
        lines += _safety_section(result.safety, heading="##")
    if result.compliance is not None:
        lines += _compliance_section(result.compliance, heading="##")
    return lines


def _batch_section(batch: BatchResult) -> List[str]:
    summary = batch.summary
    lines = [
        "# Batch Evaluation",
        "",
        f"- Batch: `{batch.batch_id}` ({batch.evaluation_type.value})",
        f"- Items: {batch.total_items} ({batch.success_count} succeeded, {batch.error_count} failed)",
        f"- Success rate: {summary.success_rate:g}%",
        f"- Average processing time: {summary.average_processing_time_ms:g} ms",
        f"- High risk items: {summary.high_risk_count}",
        f"- Compliant items: {summary.compliant_count}",
    ]
    if summary.average_compliance_score is not None:
        lines.append(f"- Average score: {summary.average_compliance_score:g}/100")
    lines.append("")

    if summary.common_issues:
        lines += ["## Most Common Issues", ""]
        lines += [f"{i}. [{f.type}] {f.description} ({f.count}x)" for i, f in enumerate(summary.common_issues, 1)]
        lines.append("")

    if batch.errors:
        lines += ["## Failed Items", ""]
        lines += [f"- `{e.id}`: {e.error} (\"{e.content}\")" for e in batch.errors]
        lines.append("")
    return lines


def render(result: Renderable) -> str:
    """Render any evaluation result as a markdown report."""
    if isinstance(result, SafetyEvaluation):
        lines = _safety_section(result)
    elif isinstance(result, ComplianceEvaluation):
        lines = _compliance_section(result)
    elif isinstance(result, CombinedEvaluationResult):
        lines = _combined_section(result)
    elif isinstance(result, BatchResult):
        lines = _batch_section(result)
    elif isinstance(result, GuidelineNotConfigured):
        lines = ["# Brand Compliance Evaluation", "", f"⚠️ {result.message}", ""]
    else:
        raise TypeError(f"cannot render {type(result).__name__}")

    if not isinstance(result, GuidelineNotConfigured):
        lines.append(f"*Evaluated at: {result.timestamp.isoformat()}*")
    return "\n".join(lines).rstrip() + "\n"
