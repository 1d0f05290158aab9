"""Domain entities for the manager dashboard."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(slots=True)
class ReasonCount:
    """How often one issue tag was reported, with its display label."""

    label: str
    count: int


@dataclass(slots=True)
class StaffPerformance:
    name: str
    total_rooms: int
    made_rate: int


@dataclass(slots=True)
class StatusSlice:
    name: str
    value: int


@dataclass(slots=True)
class DashboardStats:
    """Aggregated compliance figures for a snapshot of inspections."""

    total: int = 0
    made_count: int = 0
    unmade_count: int = 0
    made_rate: int = 0
    reason_frequency: list[ReasonCount] = field(default_factory=list)
    per_staff_stats: list[StaffPerformance] = field(default_factory=list)
    status_breakdown: list[StatusSlice] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "madeCount": self.made_count,
            "unmadeCount": self.unmade_count,
            "madeRate": self.made_rate,
            "reasonFrequency": [asdict(item) for item in self.reason_frequency],
            "perStaffStats": [
                {"name": item.name, "totalRooms": item.total_rooms, "madeRate": item.made_rate}
                for item in self.per_staff_stats
            ],
            "statusBreakdown": [asdict(item) for item in self.status_breakdown],
        }
