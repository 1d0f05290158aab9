"""Application services."""

from .inspections import (
    InspectionService,
    configure_inspection_service,
    get_inspection_service,
    reset_inspection_state,
)

__all__ = [
    "InspectionService",
    "configure_inspection_service",
    "get_inspection_service",
    "reset_inspection_state",
]
