from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from cv_catalog.api.deps import get_file_store, get_store
from cv_catalog.models import FileType
from cv_catalog.services.files import FileStore
from cv_catalog.services.store import CvStore

router = APIRouter(prefix="/files", tags=["Files"])


def _inline_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "replace").decode("ascii")
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    disposition = f'inline; filename="{fallback}"'
    if not filename.isascii():
        # RFC 5987 form carries the real name
        disposition += f"; filename*=utf-8''{quote(filename)}"
    return disposition


@router.get("/{cv_id}")
async def get_cv_file(
    cv_id: str,
    store: CvStore = Depends(get_store),
    file_store: FileStore = Depends(get_file_store),
):
    """Serve a CV's file for inline preview or download."""
    record = await store.get(cv_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CV not found")

    data = file_store.read(record.file_content)
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    return Response(
        content=data,
        media_type=FileType.media_type(record.file_type),
        headers={"Content-Disposition": _inline_disposition(record.file_name)},
    )
