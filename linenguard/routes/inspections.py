from __future__ import annotations

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse, RedirectResponse

from linenguard.application import get_inspection_service
from linenguard.core.errors import (
    AuthenticationError,
    ClassificationError,
    DuplicateSubmissionError,
    InvalidSubmissionError,
    MissingCredentialsError,
    RateLimitedError,
    ResponseSchemaError,
    ServiceUnavailableError,
)
from linenguard.core.images import decode_data_url

router = APIRouter(prefix="/inspections", tags=["housekeeper"])


def _classification_http_error(exc: ClassificationError) -> HTTPException:
    if isinstance(exc, MissingCredentialsError):
        return HTTPException(status_code=503, detail=f"Classifier not configured: {exc}")
    if isinstance(exc, RateLimitedError):
        return HTTPException(status_code=429, detail=str(exc))
    if isinstance(exc, ServiceUnavailableError):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, (AuthenticationError, ResponseSchemaError)):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=502, detail=f"Analysis Error: {exc}")


@router.post("")
async def create_inspection(
    room_number: str = Form(...),
    housekeeper_name: str = Form(...),
    file: UploadFile | None = File(default=None),
    image_data: str | None = Form(default=None),
) -> dict:
    """Classify an uploaded bed photo and record the result."""
    mime_type: str | None = None
    try:
        if file is not None:
            image = await file.read()
            mime_type = file.content_type
        elif image_data:
            image, mime_type = decode_data_url(image_data)
        else:
            raise HTTPException(status_code=400, detail="An image file or image_data must be provided")
    except InvalidSubmissionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        if file is not None:
            await file.close()

    service = get_inspection_service()
    try:
        record = await service.inspect(
            image,
            room_number=room_number,
            housekeeper_name=housekeeper_name,
            mime_type=mime_type,
        )
    except InvalidSubmissionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DuplicateSubmissionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ClassificationError as exc:
        raise _classification_http_error(exc) from exc
    return record.to_json()


@router.get("")
async def list_inspections() -> dict:
    service = get_inspection_service()
    return {"items": [record.to_json() for record in service.list_records()]}


@router.get("/{record_id}")
async def get_inspection(record_id: str) -> dict:
    record = get_inspection_service().get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="inspection not found")
    return record.to_json()


@router.get("/{record_id}/image", response_model=None)
async def get_inspection_image(record_id: str) -> FileResponse | RedirectResponse:
    service = get_inspection_service()
    record = service.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="inspection not found")
    if record.image_url.startswith(("http://", "https://")):
        return RedirectResponse(record.image_url)
    path = service.get_image_file(record_id)
    if path is None:
        raise HTTPException(status_code=404, detail="inspection image not found")
    return FileResponse(path)
