"""Request bodies and response serialization for the HTTP API."""
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from brand_compliance.models import ComplianceEvaluation
from brand_safety.models import SafetyEvaluation
from evaluation.batch import BatchResult
from evaluation.combined import CombinedEvaluationResult


class WeightsIn(BaseModel):
    safety: Optional[float] = None
    brand: Optional[float] = None

    def as_mapping(self) -> Dict[str, float]:
        return self.model_dump(exclude_none=True)


class EvaluationRequest(BaseModel):
    content: str
    context: Optional[str] = None


class CombinedRequest(EvaluationRequest):
    weights: Optional[WeightsIn] = None
    include_safety: bool = True
    include_brand: bool = True


class BatchItemIn(BaseModel):
    id: Optional[str] = None
    content: str
    context: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class BatchOptions(BaseModel):
    context: Optional[str] = None
    weights: Optional[WeightsIn] = None
    include_safety: bool = True
    include_brand: bool = True


class BatchRequest(BaseModel):
    items: List[BatchItemIn]
    evaluation_type: str = "combined"
    options: Optional[BatchOptions] = None

    def options_mapping(self) -> Dict[str, Any]:
        if self.options is None:
            return {}
        options = self.options.model_dump(exclude_none=True, exclude={"weights"})
        if self.options.weights is not None:
            options["weights"] = self.options.weights.as_mapping()
        return options


class ConfigUpdate(BaseModel):
    sensitive_keywords: Optional[List[str]] = None
    allowed_topics: Optional[List[str]] = None
    blocked_topics: Optional[List[str]] = None
    risk_tolerances: Optional[Dict[str, str]] = None
    categories: Optional[List[str]] = None


def serialize(result) -> Dict[str, Any]:
    """JSON-ready dict of any result, with the derived verdict flags included."""
    data = jsonable_encoder(result)
    _add_flags(result, data)
    return data


def _add_flags(result, data: Dict[str, Any]) -> None:
    if isinstance(result, SafetyEvaluation):
        data["is_safe"] = result.is_safe
    elif isinstance(result, ComplianceEvaluation):
        data["is_compliant"] = result.is_compliant
    elif isinstance(result, CombinedEvaluationResult):
        if result.safety is not None:
            _add_flags(result.safety, data["safety"])
        if result.compliance is not None:
            _add_flags(result.compliance, data["compliance"])
    elif isinstance(result, BatchResult):
        for item, item_data in zip(result.results, data["results"]):
            _add_flags(item.result, item_data["result"])
