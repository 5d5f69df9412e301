from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError

from cv_catalog.api.deps import get_app_settings, get_file_store, get_store
from cv_catalog.core.config import Settings
from cv_catalog.core.exceptions import FileValidationError
from cv_catalog.models import CvRecord
from cv_catalog.schemas.cv import CvDetail, CvFields, CvSummary, CvUpdate, MessageResponse
from cv_catalog.services.files import FileStore, accept_upload
from cv_catalog.services.store import CvStore

router = APIRouter(prefix="/cvs", tags=["CVs"])
logger = structlog.get_logger(__name__)


def _detail(record: CvRecord, file_store: FileStore) -> CvDetail:
    detail = CvDetail.model_validate(record)
    detail.file_content = file_store.public_content(record.file_content)
    return detail


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error['msg']}" if field else error["msg"]


def _check_nationality(nationality: str, settings: Settings) -> None:
    if not settings.is_known_nationality(nationality):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid nationality. Must be one of: {', '.join(settings.NATIONALITIES)}"
        )


@router.get("", response_model=list[CvSummary])
async def list_cvs(
    nationality: Optional[str] = None,
    store: CvStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """List CVs newest first, optionally for one nationality."""
    if nationality and nationality.strip().lower() != "all":
        _check_nationality(nationality, settings)
        records = await store.list_by_nationality(nationality.strip().lower())
    else:
        records = await store.list_all()
    return [CvSummary.model_validate(r) for r in records]


@router.get("/counts", response_model=dict[str, int])
async def count_cvs(
    store: CvStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Number of CVs per nationality, plus the total under "all"."""
    counts = await store.count_by_nationality()
    result = {"all": sum(counts.values())}
    for nationality in settings.NATIONALITIES:
        result[nationality] = counts.get(nationality.lower(), 0)
    return result


@router.get("/{cv_id}", response_model=CvDetail)
async def get_cv(
    cv_id: str,
    store: CvStore = Depends(get_store),
    file_store: FileStore = Depends(get_file_store),
):
    record = await store.get(cv_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CV not found")
    return _detail(record, file_store)


@router.post("", response_model=CvDetail, status_code=status.HTTP_201_CREATED)
async def upload_cv(
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    age: Optional[str] = Form(None),
    nationality: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    store: CvStore = Depends(get_store),
    file_store: FileStore = Depends(get_file_store),
    settings: Settings = Depends(get_app_settings),
):
    """Upload a CV file together with its metadata."""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if not all([name, age, nationality, experience]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name, age, nationality, and experience are required"
        )

    try:
        fields = CvFields(name=name, age=age, nationality=nationality, experience=experience)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_first_error(e))
    _check_nationality(fields.nationality, settings)

    # One byte past the limit is enough to know it is too big
    data = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    try:
        upload = accept_upload(data, file.filename, file.content_type, settings.MAX_UPLOAD_BYTES)
    except FileValidationError as e:
        logger.info("upload_rejected", filename=file.filename, reason=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        file_content = file_store.save(upload)
    except OSError as e:
        logger.error("upload_save_failed", filename=upload.file_name, error=str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save file")

    try:
        record = await store.create({
            **fields.model_dump(),
            "file_name": upload.file_name,
            "file_type": upload.file_type,
            "file_content": file_content,
        })
    except Exception as e:
        file_store.discard(file_content)
        logger.exception("cv_create_failed", error=str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to upload CV")

    logger.info("cv_created", cv_id=record.id, file_type=record.file_type, size=len(upload.data))
    return _detail(record, file_store)


@router.put("/{cv_id}", response_model=CvDetail)
async def update_cv(
    cv_id: str,
    payload: CvUpdate,
    store: CvStore = Depends(get_store),
    file_store: FileStore = Depends(get_file_store),
    settings: Settings = Depends(get_app_settings),
):
    """Update any of name, age, nationality and experience."""
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("nationality") is not None:
        _check_nationality(update_data["nationality"], settings)

    record = await store.update(cv_id, update_data)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CV not found")

    logger.info("cv_updated", cv_id=record.id, fields=sorted(update_data))
    return _detail(record, file_store)


@router.delete("/{cv_id}", response_model=MessageResponse)
async def delete_cv(
    cv_id: str,
    store: CvStore = Depends(get_store),
    file_store: FileStore = Depends(get_file_store),
):
    record = await store.get(cv_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CV not found")

    if not await store.delete(record.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CV not found")
    file_store.discard(record.file_content)

    logger.info("cv_deleted", cv_id=record.id)
    return MessageResponse(message="CV deleted successfully")
