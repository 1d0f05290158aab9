"""Domain layer definitions."""

from .dashboard import DashboardStats, ReasonCount, StaffPerformance, StatusSlice

__all__ = [
    "DashboardStats",
    "ReasonCount",
    "StaffPerformance",
    "StatusSlice",
]
