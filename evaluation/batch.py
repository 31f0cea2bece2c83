"""
Batch runner.

Items run in fixed windows: every item in a window starts together and the
next window starts only after the whole window has finished. An item that
raises becomes an ItemFailure; its siblings are unaffected.
"""
import asyncio
import logging
import time
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence, Tuple

from brand_compliance.models import ComplianceEvaluation
from brand_safety.errors import ItemFailure, ValidationError
from brand_safety.models import RiskLevel, SafetyEvaluation
from evaluation.combined import CombinedEvaluationResult, EvaluationResult
from observability.tracing import evaluation_span

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100
DEFAULT_WINDOW_SIZE = 10
ERROR_CONTENT_PREVIEW = 50
TOP_ISSUES = 5


class EvaluationType(str, Enum):
    SAFETY = "safety"
    COMPLIANCE = "compliance"
    COMBINED = "combined"

    @classmethod
    def parse(cls, value) -> "EvaluationType":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"evaluation type must be one of {[t.value for t in cls]}",
                field="evaluation_type",
            ) from None


@dataclass(frozen=True)
class BatchItem:
    id: str
    content: str
    context: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class BatchItemResult:
    id: str
    result: EvaluationResult
    processing_time_ms: float
    metadata: Mapping[str, Any] = field(default_factory=dict)
    status: str = "success"


@dataclass(frozen=True)
class IssueFrequency:
    type: str
    description: str
    count: int


@dataclass
class BatchSummary:
    success_rate: float
    average_processing_time_ms: float
    average_compliance_score: Optional[float]
    high_risk_count: int
    compliant_count: int
    common_issues: List[IssueFrequency]


@dataclass
class BatchResult:
    batch_id: str
    evaluation_type: EvaluationType
    total_items: int
    success_count: int
    error_count: int
    processing_time_ms: float
    results: List[BatchItemResult]
    errors: List[ItemFailure]
    summary: BatchSummary
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: str = "batch"


def build_items(raw_items: Sequence[Any]) -> List[BatchItem]:
    """
    Validate the batch shape before any work starts.

    Items may be BatchItem instances or mappings with a string "content" and
    optional "id", "context" and "metadata". Missing ids become item_<n>.
    Content emptiness and length are checked per item later, so one bad text
    fails only its own item.

    Raises:
        ValidationError: not a list, empty, over MAX_BATCH_SIZE, or a
            structurally malformed item.
    """
    if isinstance(raw_items, (str, bytes, Mapping)) or not isinstance(raw_items, Sequence):
        raise ValidationError("items must be a list", field="items")
    if not raw_items:
        raise ValidationError("batch must contain at least one item", field="items")
    if len(raw_items) > MAX_BATCH_SIZE:
        raise ValidationError(
            f"batch size {len(raw_items)} exceeds maximum of {MAX_BATCH_SIZE}", field="items"
        )

    items = []
    for index, raw in enumerate(raw_items):
        if isinstance(raw, BatchItem):
            items.append(raw)
            continue
        where = f"items[{index}]"
        if not isinstance(raw, Mapping):
            raise ValidationError("item must be an object", field=where)
        content = raw.get("content")
        if not isinstance(content, str):
            raise ValidationError("content must be a string", field=f"{where}.content")
        context = raw.get("context")
        if context is not None and not isinstance(context, str):
            raise ValidationError("context must be a string", field=f"{where}.context")
        metadata = raw.get("metadata") or {}
        if not isinstance(metadata, Mapping):
            raise ValidationError("metadata must be an object", field=f"{where}.metadata")
        items.append(BatchItem(
            id=str(raw.get("id") or f"item_{index}"),
            content=content,
            context=context,
            metadata=dict(metadata),
        ))
    return items


def _preview(text: str) -> str:
    if len(text) <= ERROR_CONTENT_PREVIEW:
        return text
    return text[:ERROR_CONTENT_PREVIEW] + "..."


async def _timed(evaluate_one, item: BatchItem) -> Tuple[EvaluationResult, float]:
    started = time.perf_counter()
    result = await evaluate_one(item)
    return result, (time.perf_counter() - started) * 1000


async def run_windows(
    items: Sequence[BatchItem],
    evaluate_one: Callable[[BatchItem], Awaitable[EvaluationResult]],
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> Tuple[List[BatchItemResult], List[ItemFailure]]:
    """Run items window by window. Results and errors keep item order."""
    if window_size < 1:
        raise ValueError(f"window size must be at least 1, got {window_size}")

    results: List[BatchItemResult] = []
    errors: List[ItemFailure] = []

    for start in range(0, len(items), window_size):
        window = items[start:start + window_size]
        with evaluation_span("batch.window", window_start=start, window_items=len(window)) as span:
            outcomes = await asyncio.gather(
                *(_timed(evaluate_one, item) for item in window),
                return_exceptions=True,
            )
            span.record(failed=sum(isinstance(o, Exception) for o in outcomes))

        for item, outcome in zip(window, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Batch item {item.id} failed: {outcome}")
                errors.append(ItemFailure(id=item.id, error=str(outcome), content=_preview(item.content)))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result, elapsed_ms = outcome
                results.append(BatchItemResult(
                    id=item.id,
                    result=result,
                    processing_time_ms=round(elapsed_ms, 2),
                    metadata=item.metadata,
                ))

    return results, errors


def _safety_part(result: EvaluationResult) -> Optional[SafetyEvaluation]:
    if isinstance(result, SafetyEvaluation):
        return result
    if isinstance(result, CombinedEvaluationResult):
        return result.safety
    return None


def _compliance_part(result: EvaluationResult) -> Optional[ComplianceEvaluation]:
    if isinstance(result, ComplianceEvaluation):
        return result
    if isinstance(result, CombinedEvaluationResult):
        return result.compliance
    return None


def _score(result: EvaluationResult) -> Optional[float]:
    if isinstance(result, ComplianceEvaluation):
        return float(result.score)
    if isinstance(result, CombinedEvaluationResult):
        return result.combined_score
    return None


def _is_compliant(result: EvaluationResult) -> bool:
    if isinstance(result, SafetyEvaluation):
        return result.is_safe
    if isinstance(result, (ComplianceEvaluation, CombinedEvaluationResult)):
        return result.is_compliant
    return False


def summarize_batch(
    results: Sequence[BatchItemResult],
    errors: Sequence[ItemFailure],
    elapsed_ms: float,
) -> BatchSummary:
    processed = len(results) + len(errors)
    scores = [s for s in (_score(r.result) for r in results) if s is not None]

    issue_counts: Counter = Counter()
    for item in results:
        compliance = _compliance_part(item.result)
        if compliance is not None:
            for issue in compliance.issues:
                issue_counts[(issue.type.value, issue.description)] += 1

    high_risk = 0
    for item in results:
        safety = _safety_part(item.result)
        if safety is not None and safety.overall_risk >= RiskLevel.HIGH:
            high_risk += 1

    return BatchSummary(
        success_rate=round(len(results) / processed * 100, 1) if processed else 0.0,
        average_processing_time_ms=round(elapsed_ms / processed, 2) if processed else 0.0,
        average_compliance_score=round(sum(scores) / len(scores), 1) if scores else None,
        high_risk_count=high_risk,
        compliant_count=sum(1 for r in results if _is_compliant(r.result)),
        common_issues=[
            IssueFrequency(type=issue_type, description=description, count=count)
            for (issue_type, description), count in issue_counts.most_common(TOP_ISSUES)
        ],
    )


async def run_batch(
    items: Sequence[BatchItem],
    evaluation_type: EvaluationType,
    evaluate_one: Callable[[BatchItem], Awaitable[EvaluationResult]],
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> BatchResult:
    """Run validated items and assemble the BatchResult with its summary."""
    batch_id = f"batch_{uuid.uuid4().hex[:12]}"
    started = time.perf_counter()

    results, errors = await run_windows(items, evaluate_one, window_size)

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"Batch {batch_id} ({evaluation_type.value}) finished: "
        f"{len(results)} ok, {len(errors)} failed in {elapsed_ms}ms"
    )
    return BatchResult(
        batch_id=batch_id,
        evaluation_type=evaluation_type,
        total_items=len(items),
        success_count=len(results),
        error_count=len(errors),
        processing_time_ms=elapsed_ms,
        results=results,
        errors=errors,
        summary=summarize_batch(results, errors, elapsed_ms),
    )
