from __future__ import annotations

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from linenguard.core.schema import ClassificationRecord
from linenguard.domain import DashboardStats, ReasonCount, StaffPerformance, StatusSlice


def format_reason(reason: str) -> str:
    """Display label for an issue tag, e.g. ``bedsheet_wrinkles`` -> ``BEDSHEET WRINKLES``."""

    return reason.replace("_", " ").upper()


def percentage(part: int, total: int) -> int:
    """Whole percentage rounded half up; 0 when there is nothing to divide."""

    if total <= 0:
        return 0
    value = Decimal(part * 100) / Decimal(total)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def reason_frequency(records: Iterable[ClassificationRecord]) -> list[ReasonCount]:
    counts: Counter[str] = Counter()
    for record in records:
        counts.update(record.reasons)
    # Counter keeps first-seen order and sorted() is stable, so ties stay in that order.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [ReasonCount(label=format_reason(reason), count=count) for reason, count in ranked]


def staff_performance(records: Iterable[ClassificationRecord]) -> list[StaffPerformance]:
    totals: dict[str, list[int]] = {}
    for record in records:
        entry = totals.setdefault(record.housekeeper_name, [0, 0])
        entry[0] += 1
        if record.status == "MADE":
            entry[1] += 1

    stats = [
        StaffPerformance(name=name, total_rooms=total, made_rate=percentage(made, total))
        for name, (total, made) in totals.items()
    ]
    stats.sort(key=lambda item: item.made_rate, reverse=True)
    return stats


def compute_dashboard_stats(records: Iterable[ClassificationRecord]) -> DashboardStats:
    """Summarise a snapshot of inspections for the manager dashboard."""

    snapshot = list(records)
    total = len(snapshot)
    made_count = sum(1 for record in snapshot if record.status == "MADE")
    unmade_count = total - made_count

    return DashboardStats(
        total=total,
        made_count=made_count,
        unmade_count=unmade_count,
        made_rate=percentage(made_count, total),
        reason_frequency=reason_frequency(snapshot),
        per_staff_stats=staff_performance(snapshot),
        status_breakdown=[
            StatusSlice(name="Made", value=made_count),
            StatusSlice(name="Unmade", value=unmade_count),
        ],
    )
