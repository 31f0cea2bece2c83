"""
Evaluation endpoints.

POST /evaluate/safety      → SafetyEvaluation
POST /evaluate/compliance  → ComplianceEvaluation (409 without a guideline)
POST /evaluate/combined    → CombinedEvaluationResult
POST /evaluate/batch       → BatchResult

Every endpoint accepts ?format=markdown for a rendered report instead of JSON.
"""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from backend.limits import BATCH_LIMIT, EVALUATE_LIMIT, limiter
from backend.schemas import BatchRequest, CombinedRequest, EvaluationRequest, serialize
from backend.services.evaluator import get_evaluator
from brand_compliance.models import GuidelineNotConfigured
from evaluation.report import render
from evaluation.service import BrandEvaluator

router = APIRouter(prefix="/evaluate", tags=["evaluate"])
logger = logging.getLogger(__name__)

ReportFormat = Literal["json", "markdown"]


def _respond(result, format: ReportFormat):
    if isinstance(result, GuidelineNotConfigured):
        return JSONResponse(
            status_code=409,
            content={"detail": result.message, "kind": result.kind, "context": result.context},
        )
    if format == "markdown":
        return Response(render(result), media_type="text/markdown")
    return serialize(result)


@router.post("/safety")
@limiter.limit(EVALUATE_LIMIT)
async def evaluate_safety(
    request: Request,
    req: EvaluationRequest,
    format: ReportFormat = "json",
    evaluator: BrandEvaluator = Depends(get_evaluator),
):
    result = await evaluator.evaluate_safety(req.content, req.context)
    logger.info(f"Safety evaluation: {result.overall_risk.value}")
    return _respond(result, format)


@router.post("/compliance")
@limiter.limit(EVALUATE_LIMIT)
async def evaluate_compliance(
    request: Request,
    req: EvaluationRequest,
    format: ReportFormat = "json",
    evaluator: BrandEvaluator = Depends(get_evaluator),
):
    result = await evaluator.evaluate_compliance(req.content, req.context)
    return _respond(result, format)


@router.post("/combined")
@limiter.limit(EVALUATE_LIMIT)
async def evaluate_combined(
    request: Request,
    req: CombinedRequest,
    format: ReportFormat = "json",
    evaluator: BrandEvaluator = Depends(get_evaluator),
):
    result = await evaluator.evaluate_combined(
        req.content,
        context=req.context,
        weights=req.weights.as_mapping() if req.weights else None,
        include_safety=req.include_safety,
        include_brand=req.include_brand,
    )
    return _respond(result, format)


@router.post("/batch")
@limiter.limit(BATCH_LIMIT)
async def evaluate_batch(
    request: Request,
    req: BatchRequest,
    format: ReportFormat = "json",
    evaluator: BrandEvaluator = Depends(get_evaluator),
):
    """Evaluate 1-100 items. Item failures are reported inside the result, not as HTTP errors."""
    items = [item.model_dump() for item in req.items]
    result = await evaluator.evaluate_batch(items, req.evaluation_type, req.options_mapping())
    logger.info(
        f"Batch {result.batch_id}: {result.success_count} succeeded, {result.error_count} failed"
    )
    return _respond(result, format)
