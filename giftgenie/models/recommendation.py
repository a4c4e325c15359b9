"""Gift recommendation data models.

Pure data structures for recommendation requests and results. Records are
exchanged with the model and with favorites storage in camelCase form.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import Any


# Content fields every item in a model response must carry
REQUIRED_GIFT_FIELDS = (
    "giftName",
    "whyItFits",
    "budgetCategory",
    "alternatives",
    "type",
    "targetAudience",
)


@dataclass
class RecommendationRequest:
    """Prompt plus the output schema handed to the model."""
    prompt: str
    response_schema: dict[str, Any] = dataclass_field(default_factory=dict)


@dataclass
class GiftRecommendation:
    """A single gift suggestion, also the unit of favoriting."""
    id: str
    gift_name: str
    why_it_fits: str
    budget_category: str
    type: str
    target_audience: str
    alternatives: list[str] = dataclass_field(default_factory=list)

    @property
    def is_sentimental(self) -> bool:
        return "sentimental" in self.type.lower()

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire form."""
        return {
            "id": self.id,
            "giftName": self.gift_name,
            "whyItFits": self.why_it_fits,
            "budgetCategory": self.budget_category,
            "alternatives": list(self.alternatives),
            "type": self.type,
            "targetAudience": self.target_audience,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GiftRecommendation":
        """Create from the camelCase wire form.

        Raises:
            ValueError: If ``id`` or any content field is missing or mistyped
        """
        if not isinstance(data, dict):
            raise ValueError(f"Gift record must be an object, got {type(data).__name__}")
        return cls(
            id=_require_str(data, "id"),
            gift_name=_require_str(data, "giftName"),
            why_it_fits=_require_str(data, "whyItFits"),
            budget_category=_require_str(data, "budgetCategory"),
            type=_require_str(data, "type"),
            target_audience=_require_str(data, "targetAudience"),
            alternatives=_require_str_list(data, "alternatives"),
        )


def _require_str(data: dict[str, Any], key: str) -> str:
    if key not in data:
        raise ValueError(f"Field '{key}' is required")
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string")
    return value


def _require_str_list(data: dict[str, Any], key: str) -> list[str]:
    if key not in data:
        raise ValueError(f"Field '{key}' is required")
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Field '{key}' must be a list of strings")
    return list(value)
