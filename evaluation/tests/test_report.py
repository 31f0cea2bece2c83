"""Unit tests for markdown report rendering."""
import pytest

from brand_compliance.models import GuidelineNotConfigured
from brand_compliance.profiles import sample_guideline
from evaluation.report import render
from evaluation.service import BrandEvaluator


@pytest.fixture
def evaluator():
    return BrandEvaluator(guideline_loader=sample_guideline)


@pytest.mark.asyncio
async def test_safety_report_lists_concerns(evaluator):
    report = render(await evaluator.evaluate_safety("This crap beer"))

    assert report.startswith("# Brand Safety Evaluation")
    assert "## Overall Assessment: 🔴 HIGH RISK" in report
    assert "### profanity: 🟡 CAUTION" in report
    assert "## Safe Categories" in report
    assert "*Evaluated at:" in report


@pytest.mark.asyncio
async def test_compliance_report_groups_issues(evaluator):
    result = await evaluator.evaluate_compliance("Unfortunately our synergy is a paradigm shift.", "marketing")
    report = render(result)

    assert "(Score: 60/100)" in report
    assert "### Terminology Issues" in report
    assert "### Tone Issues" in report
    assert '🔴 **Content uses prohibited term: "synergy"**' in report
    assert "*Evaluation context: marketing*" in report


@pytest.mark.asyncio
async def test_clean_compliance_report(evaluator):
    report = render(await evaluator.evaluate_compliance("We're proud of it."))
    assert "No issues found. Content is fully compliant with TechFuture" in report


@pytest.mark.asyncio
async def test_combined_report_nests_sections(evaluator):
    report = render(await evaluator.evaluate_combined("We're proud of it."))

    assert report.startswith("# Combined Brand Evaluation")
    assert "## Brand Safety Evaluation" in report
    assert "## Brand Compliance Evaluation" in report
    assert "*Weights: safety 1, brand 2*" in report


@pytest.mark.asyncio
async def test_batch_report_lists_failures(evaluator):
    batch = await evaluator.evaluate_batch(
        [{"id": "good", "content": "Our synergy"}, {"id": "bad", "content": ""}], "compliance"
    )
    report = render(batch)

    assert "# Batch Evaluation" in report
    assert "(1 succeeded, 1 failed)" in report
    assert "## Most Common Issues" in report
    assert "- `bad`: content: content must not be empty" in report


def test_guideline_not_configured_report():
    report = render(GuidelineNotConfigured())
    assert "not configured" in report


def test_unknown_result_type_is_rejected():
    with pytest.raises(TypeError):
        render({"kind": "safety"})
