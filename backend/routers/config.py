"""
Safety configuration endpoints.

GET   /config → current configuration
PATCH /config → partial update; omitted keys keep their values
"""
import logging

from fastapi import APIRouter, Depends

from backend.schemas import ConfigUpdate
from backend.services.evaluator import get_evaluator
from evaluation.service import BrandEvaluator

router = APIRouter(prefix="/config", tags=["config"])
logger = logging.getLogger(__name__)


@router.get("")
async def read_config(evaluator: BrandEvaluator = Depends(get_evaluator)) -> dict:
    return evaluator.get_config().to_dict()


@router.patch("")
async def update_config(
    req: ConfigUpdate,
    evaluator: BrandEvaluator = Depends(get_evaluator),
) -> dict:
    config = evaluator.update_config(req.model_dump(exclude_unset=True))
    return config.to_dict()
