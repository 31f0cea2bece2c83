"""
Brand-level safety configuration.

SafetyConfig is immutable. update() never mutates: it validates a partial
update and returns a new snapshot, so a batch that captured the old snapshot
keeps scoring against it.
"""
import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

from brand_safety.categories import DEFAULT_CATEGORY_NAMES
from brand_safety.errors import ValidationError
from brand_safety.models import RiskLevel

logger = logging.getLogger(__name__)

DEFAULT_RISK_TOLERANCES: Mapping[str, RiskLevel] = MappingProxyType({
    "sexual_content": RiskLevel.LOW,
    "violence": RiskLevel.LOW,
    "hate_speech": RiskLevel.NONE,
    "harassment": RiskLevel.NONE,
    "self_harm": RiskLevel.NONE,
    "illegal_activities": RiskLevel.NONE,
    "profanity": RiskLevel.LOW,
    "alcohol_tobacco": RiskLevel.MEDIUM,
    "political": RiskLevel.MEDIUM,
    "religion": RiskLevel.MEDIUM,
})

_LIST_FIELDS = ("sensitive_keywords", "allowed_topics", "blocked_topics")


@dataclass(frozen=True)
class SafetyConfig:
    sensitive_keywords: Tuple[str, ...] = ()
    allowed_topics: Tuple[str, ...] = ()
    blocked_topics: Tuple[str, ...] = ()
    risk_tolerances: Mapping[str, RiskLevel] = field(default_factory=lambda: DEFAULT_RISK_TOLERANCES)
    categories: Tuple[str, ...] = DEFAULT_CATEGORY_NAMES

    def tolerance_for(self, category: str) -> Optional[RiskLevel]:
        return self.risk_tolerances.get(category)

    def update(
        self,
        partial: Mapping[str, Any],
        known_categories: Iterable[str] = DEFAULT_CATEGORY_NAMES,
    ) -> "SafetyConfig":
        """
        Shallow-merge a partial update into a new config.

        risk_tolerances is merged one level deep: keys not named in the
        update keep their current tolerance.

        Raises:
            ValidationError: unknown key, empty term, unknown risk level or
                unknown category name.
        """
        if not isinstance(partial, Mapping):
            raise ValidationError("config update must be an object", field="config")

        known = set(known_categories)
        changes: dict = {}

        for key, value in partial.items():
            if key in _LIST_FIELDS:
                changes[key] = _clean_terms(key, value)
            elif key == "risk_tolerances":
                if not isinstance(value, Mapping):
                    raise ValidationError("must be an object", field=key)
                merged = dict(self.risk_tolerances)
                for category, level in value.items():
                    if category not in known:
                        raise ValidationError(f"unknown category {category!r}", field=key)
                    merged[category] = RiskLevel.parse(level)
                changes[key] = MappingProxyType(merged)
            elif key == "categories":
                names = _clean_terms(key, value, lower=True)
                unknown = [n for n in names if n not in known]
                if unknown:
                    raise ValidationError(f"unknown categories {unknown}", field=key)
                changes[key] = names
            else:
                raise ValidationError(f"unknown config key {key!r}", field=key)

        updated = replace(self, **changes)
        logger.info(f"Safety config updated: {sorted(changes)}")
        return updated

    def to_dict(self) -> dict:
        return {
            "sensitive_keywords": list(self.sensitive_keywords),
            "allowed_topics": list(self.allowed_topics),
            "blocked_topics": list(self.blocked_topics),
            "risk_tolerances": {k: v.value for k, v in self.risk_tolerances.items()},
            "categories": list(self.categories),
        }


def _clean_terms(key: str, value: Any, lower: bool = False) -> Tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValidationError("must be a list of strings", field=key)
    cleaned = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError("entries must be non-empty strings", field=key)
        cleaned.append(item.strip().lower() if lower else item.strip())
    return tuple(cleaned)
