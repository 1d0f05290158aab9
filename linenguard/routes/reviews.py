from __future__ import annotations

from fastapi import APIRouter, HTTPException

from linenguard.application import get_inspection_service
from linenguard.core.review import ReviewDecision

router = APIRouter(prefix="/reviews", tags=["supervisor"])


@router.get("/pending")
async def list_pending_reviews() -> dict:
    service = get_inspection_service()
    items = [record.to_json() for record in service.list_pending_reviews()]
    return {"items": items, "count": len(items)}


@router.post("/{record_id}")
async def submit_review(record_id: str, payload: dict) -> dict:
    raw_decision = str(payload.get("decision") or "").strip().upper()
    try:
        decision = ReviewDecision(raw_decision)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="decision must be APPROVE or REJECT") from exc

    reviewer = str(payload.get("reviewer") or "").strip() or None
    service = get_inspection_service()
    try:
        record = service.set_review_decision(record_id, decision, reviewer=reviewer)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="inspection not found") from exc
    return record.to_json()
