from __future__ import annotations

from fastapi import APIRouter

from linenguard.application import get_inspection_service

router = APIRouter(prefix="/dashboard", tags=["manager"])


@router.get("/stats")
async def get_dashboard_stats() -> dict:
    return get_inspection_service().get_dashboard_stats().to_json()
