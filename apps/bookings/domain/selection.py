"""
Unit Selection

Picks one unit from a free pool. Preferences are honoured as a priority
cascade, not a score: the first preference that is set AND matches at
least one unit decides. Floor beats view, view beats accessibility.
With no usable preference the first unit of the pool is chosen.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

ACCESSIBLE_TAG = "accessible"


@dataclass(frozen=True)
class GuestPreferences:
    floor: str = ""
    view: str = ""
    accessibility: bool = False
    # Recorded on the booking only, not used for selection
    smoking: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> "GuestPreferences":
        data = data or {}
        floor = data.get("floor")
        return cls(
            floor="" if floor in (None, "") else str(floor).strip(),
            view=str(data.get("view") or "").strip(),
            accessibility=bool(data.get("accessibility")),
            smoking=bool(data.get("smoking")),
        )

    def as_dict(self) -> dict:
        return {
            "floor": self.floor,
            "view": self.view,
            "accessibility": self.accessibility,
            "smoking": self.smoking,
        }


def select_unit(pool: Sequence, preferences: GuestPreferences | None = None):
    """Return the chosen unit, or None for an empty pool."""

    if not pool:
        return None
    preferences = preferences or GuestPreferences()

    if preferences.floor:
        on_floor = [unit for unit in pool if str(unit.floor or "").strip() == preferences.floor]
        if on_floor:
            return on_floor[0]

    if preferences.view:
        with_view = [unit for unit in pool if unit.has_feature(preferences.view)]
        if with_view:
            return with_view[0]

    if preferences.accessibility:
        accessible = [unit for unit in pool if unit.has_feature(ACCESSIBLE_TAG)]
        if accessible:
            return accessible[0]

    return pool[0]
