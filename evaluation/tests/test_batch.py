"""Unit tests for the windowed batch runner."""
import asyncio

import pytest

from brand_compliance.models import (
    ComplianceEvaluation,
    ComplianceIssue,
    IssueSeverity,
    IssueType,
)
from brand_safety.errors import ValidationError
from brand_safety.models import Content, RiskLevel, SafetyEvaluation
from evaluation.batch import (
    MAX_BATCH_SIZE,
    BatchItem,
    BatchItemResult,
    EvaluationType,
    build_items,
    run_batch,
    run_windows,
    summarize_batch,
)
from evaluation.combined import combine

_CONTENT = Content.from_text("Sample copy")


def _items(count: int):
    return [BatchItem(id=str(n), content=f"item number {n}") for n in range(1, count + 1)]


def _safety(level: RiskLevel) -> SafetyEvaluation:
    return SafetyEvaluation(content=_CONTENT, overall_risk=level, category_evaluations=(), summary="")


def _compliance(score: int, *descriptions: str) -> ComplianceEvaluation:
    issues = tuple(
        ComplianceIssue(type=IssueType.TERMINOLOGY, severity=IssueSeverity.HIGH, description=d, suggestion="")
        for d in descriptions
    )
    return ComplianceEvaluation(content=_CONTENT, guideline_name="Acme", score=score, issues=issues, summary="")


@pytest.mark.asyncio
async def test_twelve_items_run_as_two_windows_with_isolated_failure():
    """Item #5 fails alone; item 11 starts only after all of window one ends."""
    events = []

    async def evaluate_one(item):
        events.append(("start", item.id))
        await asyncio.sleep(0.01 if item.id != "3" else 0.03)
        events.append(("end", item.id))
        if item.id == "5":
            raise RuntimeError("boom")
        return _safety(RiskLevel.NONE)

    results, errors = await run_windows(_items(12), evaluate_one, window_size=10)

    assert [r.id for r in results] == ["1", "2", "3", "4", "6", "7", "8", "9", "10", "11", "12"]
    assert [(e.id, e.error, e.status) for e in errors] == [("5", "boom", "error")]
    assert len(results) + len(errors) == 12

    second_window_start = events.index(("start", "11"))
    for n in range(1, 11):
        assert events.index(("end", str(n))) < second_window_start
    # window one really ran concurrently
    assert events.index(("start", "10")) < events.index(("end", "1"))


@pytest.mark.asyncio
async def test_error_record_truncates_content():
    async def evaluate_one(item):
        raise ValueError("bad item")

    item = BatchItem(id="long", content="x" * 80)
    _, errors = await run_windows([item], evaluate_one)

    assert errors[0].content == "x" * 50 + "..."
    assert errors[0].error == "bad item"


@pytest.mark.asyncio
async def test_cancellation_is_not_swallowed():
    async def evaluate_one(item):
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await run_windows(_items(2), evaluate_one)


@pytest.mark.asyncio
async def test_invalid_window_size_is_rejected():
    async def evaluate_one(item):
        return _safety(RiskLevel.NONE)

    with pytest.raises(ValueError):
        await run_windows(_items(1), evaluate_one, window_size=0)


def test_build_items_defaults_ids_by_position():
    items = build_items([{"content": "a"}, {"id": "custom", "content": "b", "context": "social-media"}])
    assert [i.id for i in items] == ["item_0", "custom"]
    assert items[1].context == "social-media"


@pytest.mark.parametrize("raw", [[], [{"content": "x"}] * (MAX_BATCH_SIZE + 1), "text", {"content": "x"}])
def test_build_items_rejects_bad_batch_shape(raw):
    with pytest.raises(ValidationError) as exc_info:
        build_items(raw)
    assert exc_info.value.field == "items"


@pytest.mark.parametrize("raw", [
    ["just text"],
    [{"id": "a"}],
    [{"content": 12}],
    [{"content": "x", "context": 3}],
    [{"content": "x", "metadata": "tags"}],
])
def test_build_items_rejects_malformed_items(raw):
    with pytest.raises(ValidationError):
        build_items(raw)


def test_build_items_accepts_exactly_max():
    assert len(build_items([{"content": "x"}] * MAX_BATCH_SIZE)) == MAX_BATCH_SIZE


@pytest.mark.parametrize("raw,expected", [
    ("Safety", EvaluationType.SAFETY),
    ("combined", EvaluationType.COMBINED),
    (EvaluationType.COMPLIANCE, EvaluationType.COMPLIANCE),
])
def test_evaluation_type_parse(raw, expected):
    assert EvaluationType.parse(raw) == expected


def test_evaluation_type_parse_rejects_unknown():
    with pytest.raises(ValidationError):
        EvaluationType.parse("sentiment")


def test_summary_statistics():
    results = [
        BatchItemResult(id="a", result=_compliance(80, "uses synergy"), processing_time_ms=1),
        BatchItemResult(id="b", result=_compliance(60, "uses synergy", "uses leverage"), processing_time_ms=1),
        BatchItemResult(id="c", result=_safety(RiskLevel.VERY_HIGH), processing_time_ms=1),
        BatchItemResult(
            id="d",
            result=combine(_safety(RiskLevel.HIGH), _compliance(100, "uses synergy")),
            processing_time_ms=1,
        ),
    ]
    errors = []

    summary = summarize_batch(results, errors, elapsed_ms=40.0)

    assert summary.success_rate == 100.0
    assert summary.average_processing_time_ms == 10.0
    # 80, 60 and the combined (30 + 200) / 3 = 76.7
    assert summary.average_compliance_score == round((80 + 60 + 76.7) / 3, 1)
    assert summary.high_risk_count == 2
    assert summary.compliant_count == 2
    assert summary.common_issues[0].description == "uses synergy"
    assert summary.common_issues[0].count == 3
    assert summary.common_issues[1].count == 1


def test_summary_keeps_top_five_issues():
    descriptions = [f"issue {n}" for n in range(7)]
    results = [
        BatchItemResult(id=str(n), result=_compliance(0, *descriptions[: n + 1]), processing_time_ms=1)
        for n in range(7)
    ]
    summary = summarize_batch(results, [], elapsed_ms=7.0)
    assert [f.description for f in summary.common_issues] == descriptions[:5]


@pytest.mark.asyncio
async def test_run_batch_assembles_result():
    async def evaluate_one(item):
        if item.id == "2":
            raise RuntimeError("nope")
        return _safety(RiskLevel.LOW)

    batch = await run_batch(_items(3), EvaluationType.SAFETY, evaluate_one)

    assert batch.batch_id.startswith("batch_")
    assert batch.total_items == 3
    assert batch.success_count == 2
    assert batch.error_count == 1
    assert batch.summary.success_rate == 66.7
    assert batch.summary.average_compliance_score is None
    assert batch.summary.compliant_count == 2
