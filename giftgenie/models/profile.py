"""Recipient profile data model.

Pure data structure with no business logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


PROFILE_FIELDS = ("age", "occasion", "hobbies", "budget")


@dataclass(frozen=True)
class UserProfile:
    """The four free-text attributes describing a gift recipient."""
    age: str
    occasion: str
    hobbies: str
    budget: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "age": self.age,
            "occasion": self.occasion,
            "hobbies": self.hobbies,
            "budget": self.budget,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        """Create from dictionary. Missing fields become empty strings."""
        return cls(
            age=_as_text(data.get("age")),
            occasion=_as_text(data.get("occasion")),
            hobbies=_as_text(data.get("hobbies")),
            budget=_as_text(data.get("budget")),
        )

    def missing_fields(self) -> list[str]:
        """Names of the fields that are blank."""
        return [name for name in PROFILE_FIELDS if not getattr(self, name).strip()]


def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()
