"""
Process-wide BrandEvaluator, built lazily from the environment.

    BRAND_PROFILE               "techfuture" (default) or "none" to run without compliance
    CONTEXTUAL_PROVIDER         anthropic, openai or none (default)
    CONTEXTUAL_TIMEOUT_SECONDS  oracle timeout, default 10
    BATCH_WINDOW_SIZE           items evaluated together, default 10
    RESULT_CACHE_TTL_SECONDS    single-item result cache TTL, default 3600; 0 disables

Malformed numeric values are logged and replaced by their defaults.
"""
import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from brand_compliance.profiles import sample_guideline
from brand_safety.contextual import DEFAULT_TIMEOUT_SECONDS, oracle_from_env
from brand_safety.service import SafetyEvaluator
from evaluation.batch import DEFAULT_WINDOW_SIZE
from evaluation.cache import DEFAULT_TTL_SECONDS, ResultCache
from evaluation.service import BrandEvaluator

logger = logging.getLogger(__name__)

_evaluator: Optional[BrandEvaluator] = None
_settings: Optional["EvaluatorSettings"] = None


def _env_number(name: str, default, cast, minimum):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default
    if math.isnan(value) or value < minimum:
        logger.warning(f"{name}={raw!r} is below {minimum}, using {default}")
        return default
    return value


@dataclass(frozen=True)
class EvaluatorSettings:
    brand_profile: str = "techfuture"
    contextual_provider: str = "none"
    contextual_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    batch_window_size: int = DEFAULT_WINDOW_SIZE
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS

    @classmethod
    def from_env(cls) -> "EvaluatorSettings":
        return cls(
            brand_profile=os.environ.get("BRAND_PROFILE", "techfuture").strip().lower(),
            contextual_provider=os.environ.get("CONTEXTUAL_PROVIDER", "none").strip().lower() or "none",
            contextual_timeout_seconds=_env_number(
                "CONTEXTUAL_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, float, 0.001
            ),
            batch_window_size=_env_number("BATCH_WINDOW_SIZE", DEFAULT_WINDOW_SIZE, int, 1),
            cache_ttl_seconds=_env_number("RESULT_CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS, float, 0),
        )

    def trace_attributes(self) -> Dict[str, Any]:
        """Resource attributes describing this deployment's evaluation setup."""
        return {
            "brand.profile": self.brand_profile,
            "contextual.provider": self.contextual_provider,
            "contextual.timeout_seconds": self.contextual_timeout_seconds,
            "batch.window_size": self.batch_window_size,
            "cache.ttl_seconds": self.cache_ttl_seconds,
        }


def build_evaluator(settings: Optional[EvaluatorSettings] = None) -> BrandEvaluator:
    settings = settings or get_settings()
    loader = None if settings.brand_profile == "none" else sample_guideline
    oracle = oracle_from_env()
    cache = ResultCache(ttl_seconds=settings.cache_ttl_seconds) if settings.cache_ttl_seconds > 0 else None
    logger.info(
        f"Brand evaluator ready (profile={settings.brand_profile}, "
        f"contextual={'on' if oracle else 'off'}, window={settings.batch_window_size}, "
        f"cache={'on' if cache else 'off'})"
    )
    return BrandEvaluator(
        safety=SafetyEvaluator(oracle=oracle, oracle_timeout=settings.contextual_timeout_seconds),
        guideline_loader=loader,
        window_size=settings.batch_window_size,
        cache=cache,
    )


def get_settings() -> EvaluatorSettings:
    """Environment settings, read and validated once per process."""
    global _settings
    if _settings is None:
        _settings = EvaluatorSettings.from_env()
    return _settings


def get_evaluator() -> BrandEvaluator:
    global _evaluator
    if _evaluator is None:
        _evaluator = build_evaluator()
    return _evaluator


def reset_evaluator() -> None:
    """Drop the cached evaluator and settings; the next call re-reads the environment."""
    global _evaluator, _settings
    _evaluator = None
    _settings = None
