"""Photo endpoints: listing, upload, lookup, edit and removal."""

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from ...error_handling import ValidationError
from ...logging_config import get_logger, log_user_action
from ...services.auth import ADMIN_USER_ID
from ...services.gallery import GalleryService
from ...services.photos import PhotoRepository
from ..dependencies import get_gallery, get_repository, require_admin

logger = get_logger(__name__)

router = APIRouter(prefix="/api/photos", tags=["Photos"])


def _query_int(request: Request, name: str) -> int | None:
    """Integer query parameter, or None when absent or not an integer."""
    value = request.query_params.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@router.get("")
def list_photos(request: Request, gallery: GalleryService = Depends(get_gallery)) -> dict[str, Any]:
    page = _query_int(request, "page")
    page_size = _query_int(request, "pageSize")

    result = gallery.list_photos(page=1 if page is None else page, page_size=page_size)
    return result.to_dict()


@router.get("/{photo_id}")
def read_photo(photo_id: str, repository: PhotoRepository = Depends(get_repository)) -> dict[str, Any]:
    return {"metadata": repository.read(photo_id).to_dict()}


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def upload_photo(
    file: UploadFile | None = File(None),
    title: str | None = Form(None),
    description: str | None = Form(None),
    repository: PhotoRepository = Depends(get_repository),
) -> JSONResponse:
    if file is None:
        raise ValidationError("No file uploaded", code="missing_file")

    file_data = file.file.read()
    record = repository.create(
        file_data=file_data,
        mime_type=file.content_type or "application/octet-stream",
        original_name=file.filename or "",
        title=title or None,
        description=description,
    )

    log_user_action(ADMIN_USER_ID, "upload_photo", photo_id=record.id, size=record.size)
    return JSONResponse(
        status_code=201,
        content={"success": True, "photoId": record.id, "metadata": record.to_dict()},
    )


@router.put("/{photo_id}", dependencies=[Depends(require_admin)])
def update_photo(
    photo_id: str,
    payload: Any = Body(None),
    repository: PhotoRepository = Depends(get_repository),
) -> dict[str, Any]:
    record = repository.update_from_payload(photo_id, payload)
    log_user_action(ADMIN_USER_ID, "update_photo", photo_id=photo_id)
    return {"success": True, "metadata": record.to_dict()}


@router.delete("/{photo_id}", dependencies=[Depends(require_admin)])
def delete_photo(photo_id: str, repository: PhotoRepository = Depends(get_repository)) -> dict[str, Any]:
    repository.delete(photo_id)
    log_user_action(ADMIN_USER_ID, "delete_photo", photo_id=photo_id)
    return {"success": True}
