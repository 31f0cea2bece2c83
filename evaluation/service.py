"""
BrandEvaluator: the one object a front end talks to.

Holds the current SafetyConfig snapshot and a guideline loader. Every public
operation captures the config and the guideline once on entry and passes
them down explicitly, so a config update during a batch never reaches items
of that batch.

With a ResultCache set, single-item results are reused until they expire.
The cache is bypassed whenever a contextual oracle is configured, and
batches never use it.
"""
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from brand_compliance.models import BrandGuideline, ComplianceEvaluation, GuidelineNotConfigured
from brand_compliance.service import ComplianceEvaluator
from brand_safety.config import SafetyConfig
from brand_safety.errors import EvaluationError, ValidationError
from brand_safety.models import Content, SafetyEvaluation
from brand_safety.service import SafetyEvaluator
from evaluation.batch import (
    DEFAULT_WINDOW_SIZE,
    BatchItem,
    BatchResult,
    EvaluationType,
    build_items,
    run_batch,
)
from evaluation.cache import CacheKey, ResultCache
from evaluation.combined import CombinedEvaluationResult, EvaluationResult, Weights, combine

logger = logging.getLogger(__name__)

GuidelineLoader = Callable[[], Optional[BrandGuideline]]

_BATCH_OPTIONS = {"context", "weights", "include_safety", "include_brand"}


def _check_context(context: Any) -> Optional[str]:
    if context is None:
        return None
    if not isinstance(context, str):
        raise ValidationError("context must be a string", field="context")
    return context.strip() or None


def _check_flag(options: Mapping[str, Any], key: str) -> bool:
    value = options.get(key, True)
    if not isinstance(value, bool):
        raise ValidationError("must be true or false", field=f"options.{key}")
    return value


class BrandEvaluator:
    def __init__(
        self,
        safety: Optional[SafetyEvaluator] = None,
        compliance: Optional[ComplianceEvaluator] = None,
        config: Optional[SafetyConfig] = None,
        guideline_loader: Optional[GuidelineLoader] = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
        cache: Optional[ResultCache] = None,
    ):
        self.safety = safety or SafetyEvaluator()
        self.compliance = compliance or ComplianceEvaluator()
        self._config = config or SafetyConfig()
        self._guideline_loader = guideline_loader
        if window_size < 1:
            raise ValueError(f"window size must be at least 1, got {window_size}")
        self.window_size = window_size
        self.cache = cache

    # --- configuration ---

    def get_config(self) -> SafetyConfig:
        return self._config

    def update_config(self, partial: Mapping[str, Any]) -> SafetyConfig:
        """Validate and apply a partial update; the new snapshot replaces the old one."""
        self._config = self._config.update(partial, known_categories=self.safety.category_names)
        return self._config

    def load_guideline(self) -> Optional[BrandGuideline]:
        """Current guideline, or None when no loader is set or loading fails."""
        if self._guideline_loader is None:
            return None
        try:
            return self._guideline_loader()
        except Exception as e:
            logger.warning(f"Brand guideline unavailable: {e}")
            return None

    # --- single-item operations ---

    @property
    def caching(self) -> bool:
        """Results are cached only with a cache set and no contextual oracle in play."""
        return self.cache is not None and getattr(self.safety, "oracle", None) is None

    async def _cached(
        self,
        make_key: Callable[[], CacheKey],
        compute: Callable[[], Awaitable[EvaluationResult]],
    ) -> EvaluationResult:
        if not self.caching:
            return await compute()
        key = make_key()
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        result = await compute()
        if not isinstance(result, GuidelineNotConfigured):
            self.cache.set(key, result)
        return result

    async def evaluate_safety(self, text: str, context: Optional[str] = None) -> SafetyEvaluation:
        _check_context(context)
        content = Content.from_text(text)
        config = self._config
        return await self._cached(
            lambda: ResultCache.key("safety", content.text, None, config, None),
            lambda: self.safety.evaluate(content, config),
        )

    async def evaluate_compliance(
        self,
        text: str,
        context: Optional[str] = None,
    ) -> Union[ComplianceEvaluation, GuidelineNotConfigured]:
        context = _check_context(context)
        content = Content.from_text(text)
        guideline = self.load_guideline()
        if guideline is None:
            return GuidelineNotConfigured(context=context or "general")
        config = self._config

        async def compute():
            return self.compliance.evaluate(content, guideline, context)

        return await self._cached(
            lambda: ResultCache.key("compliance", content.text, context, config, guideline),
            compute,
        )

    async def evaluate_combined(
        self,
        text: str,
        context: Optional[str] = None,
        weights: Union[Weights, Mapping[str, Any], None] = None,
        include_safety: bool = True,
        include_brand: bool = True,
    ) -> Union[CombinedEvaluationResult, GuidelineNotConfigured]:
        """
        Safety and/or compliance blended into one score.

        Returns GuidelineNotConfigured only when brand alone was requested
        and no guideline is loaded. With both requested and no guideline the
        result carries the safety part alone.
        """
        context = _check_context(context)
        weights = Weights.from_input(weights)
        if not include_safety and not include_brand:
            raise ValidationError("at least one of safety or brand must be included", field="include")
        content = Content.from_text(text)
        config = self._config
        guideline = self.load_guideline() if include_brand else None
        return await self._cached(
            lambda: ResultCache.key(
                "combined", content.text, context, config, guideline,
                weights, include_safety, include_brand,
            ),
            lambda: self._combined(
                content, context, weights, include_safety, include_brand, config, guideline,
            ),
        )

    async def _combined(
        self,
        content: Content,
        context: Optional[str],
        weights: Weights,
        include_safety: bool,
        include_brand: bool,
        config: SafetyConfig,
        guideline: Optional[BrandGuideline],
    ) -> Union[CombinedEvaluationResult, GuidelineNotConfigured]:
        if include_brand and not include_safety and guideline is None:
            return GuidelineNotConfigured(context=context or "general")

        safety = await self.safety.evaluate(content, config) if include_safety else None
        compliance = None
        if include_brand and guideline is not None:
            compliance = self.compliance.evaluate(content, guideline, context)
        return combine(safety, compliance, weights)

    # --- batch ---

    async def evaluate_batch(
        self,
        items: Sequence[Union[BatchItem, Mapping[str, Any]]],
        evaluation_type: Union[EvaluationType, str] = EvaluationType.COMBINED,
        options: Optional[Mapping[str, Any]] = None,
    ) -> BatchResult:
        """
        Evaluate 1-100 items with bounded concurrency.

        Args:
            items: BatchItem instances or {"id", "content", "context", "metadata"} mappings
            evaluation_type: "safety", "compliance" or "combined"
            options: defaults for every item: context, weights,
                include_safety, include_brand

        Raises:
            ValidationError: before any item runs, for a malformed batch.
        """
        batch_items = build_items(items)
        kind = EvaluationType.parse(evaluation_type)

        options = dict(options or {})
        unknown = set(options) - _BATCH_OPTIONS
        if unknown:
            raise ValidationError(f"unknown batch options {sorted(unknown)}", field="options")
        default_context = _check_context(options.get("context"))
        weights = Weights.from_input(options.get("weights"))
        include_safety = _check_flag(options, "include_safety")
        include_brand = _check_flag(options, "include_brand")
        if kind == EvaluationType.COMBINED and not include_safety and not include_brand:
            raise ValidationError("at least one of safety or brand must be included", field="options")

        config = self._config
        guideline = self.load_guideline() if kind != EvaluationType.SAFETY else None

        async def evaluate_one(item: BatchItem) -> EvaluationResult:
            content = Content.from_text(item.content)
            context = _check_context(item.context) or default_context

            if kind == EvaluationType.SAFETY:
                return await self.safety.evaluate(content, config)

            if kind == EvaluationType.COMPLIANCE:
                if guideline is None:
                    raise EvaluationError(GuidelineNotConfigured().message)
                return self.compliance.evaluate(content, guideline, context)

            result = await self._combined(
                content, context, weights, include_safety, include_brand, config, guideline,
            )
            if isinstance(result, GuidelineNotConfigured):
                raise EvaluationError(result.message)
            return result

        return await run_batch(batch_items, kind, evaluate_one, self.window_size)
