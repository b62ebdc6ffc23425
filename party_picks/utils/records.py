"""
Typed records exchanged between the store and the scoring engine.

Rows read from the datastore are converted here, with field presence and
type checks, before anything downstream relies on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from party_picks.errors import ConstraintViolation


def _require_str(row: Mapping[str, Any], field: str, kind: str) -> str:
    value = row.get(field)
    if not isinstance(value, str) or not value:
        raise ConstraintViolation(f"Malformed {kind} row: missing '{field}'")
    return value


@dataclass(frozen=True)
class PredictionRecord:
    user_id: str
    category: str
    selection: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PredictionRecord":
        return cls(
            user_id=_require_str(row, "user_id", "prediction"),
            category=_require_str(row, "category", "prediction"),
            selection=_require_str(row, "selection", "prediction"),
        )


@dataclass(frozen=True)
class ResultRecord:
    category: str
    selection: str
    announced_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ResultRecord":
        announced_at = row.get("announced_at")
        if announced_at is not None and not isinstance(announced_at, str):
            announced_at = announced_at.isoformat()
        return cls(
            category=_require_str(row, "category", "result"),
            selection=_require_str(row, "selection", "result"),
            announced_at=announced_at,
        )

    def to_dict(self):
        return {
            "category": self.category,
            "selection": self.selection,
            "announced_at": self.announced_at,
        }


@dataclass
class LeaderboardEntry:
    user_id: str
    display_name: str
    score: int = 0
    total: int = 0

    def to_dict(self, rank: Optional[int] = None):
        data = {
            "user_id": self.user_id,
            "display_name": self.display_name,
            "score": self.score,
            "total": self.total,
        }
        if rank is not None:
            data["rank"] = rank
        return data
