import base64
import binascii
import os
import re
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

from cv_catalog.core.config import Settings
from cv_catalog.core.exceptions import FileValidationError
from cv_catalog.models import FileType

logger = structlog.get_logger(__name__)

ALLOWED_EXTENSIONS = {".pdf", ".jpg", ".jpeg", ".png"}
ALLOWED_CONTENT_TYPES = {"application/pdf", "image/jpeg", "image/jpg", "image/png"}

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


@dataclass
class AcceptedUpload:
    """An upload that passed size and type checks."""
    file_name: str
    file_type: str
    content_type: str
    data: bytes


def accept_upload(
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str],
    max_bytes: int,
) -> AcceptedUpload:
    """Validate an uploaded file and classify it as pdf or image.

    Both the extension of the original name and the declared MIME type
    must be in the allow-list.
    """
    if not filename:
        raise FileValidationError("No file uploaded")
    if len(data) > max_bytes:
        raise FileValidationError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)} MB"
        )
    if not data:
        raise FileValidationError("Uploaded file is empty")

    ext = os.path.splitext(filename)[1].lower()
    mime = (content_type or "").split(";")[0].strip().lower()
    if ext not in ALLOWED_EXTENSIONS or mime not in ALLOWED_CONTENT_TYPES:
        raise FileValidationError("Only PDF and image files are allowed")

    return AcceptedUpload(
        file_name=filename,
        file_type=FileType.from_content_type(mime),
        content_type=mime,
        data=data,
    )


def sanitize_filename(filename: str) -> str:
    name = _UNSAFE_CHARS.sub("_", os.path.basename(filename))
    return name.lstrip(".") or "upload"


class FileStore(ABC):
    """Where accepted file bytes live; the record keeps the returned reference."""

    @abstractmethod
    def save(self, upload: AcceptedUpload) -> str:
        """Persist the upload and return the value stored as file content."""
        pass

    @abstractmethod
    def read(self, content: str) -> Optional[bytes]:
        """Return the file bytes, or None when the backing content is gone."""
        pass

    @abstractmethod
    def discard(self, content: str) -> bool:
        """Best-effort removal. Returns True when something was removed."""
        pass

    @abstractmethod
    def public_content(self, content: str) -> Optional[str]:
        """The file content as exposed to API clients, if at all."""
        pass


class FilesystemFileStore(FileStore):
    """Writes each upload to its own generated file under the upload root."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _stored_name(self, filename: str) -> str:
        return f"{int(time.time() * 1000)}_{uuid.uuid4().hex}_{sanitize_filename(filename)}"

    def _resolve(self, content: str) -> Optional[Path]:
        if not content:
            return None
        path = Path(content).resolve()
        if path.parent != self.root:
            return None
        return path

    def save(self, upload: AcceptedUpload) -> str:
        path = self.root / self._stored_name(upload.file_name)
        # "xb" refuses to clobber an existing file
        with open(path, "xb") as buffer:
            buffer.write(upload.data)
        return str(path)

    def read(self, content: str) -> Optional[bytes]:
        path = self._resolve(content)
        if path is None or not path.is_file():
            return None
        return path.read_bytes()

    def discard(self, content: str) -> bool:
        path = self._resolve(content)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("file_discard_failed", path=str(path), error=str(e))
            return False
        return True

    def public_content(self, content: str) -> Optional[str]:
        return None


class InlineFileStore(FileStore):
    """Keeps the file inside the record as base64 text."""

    def save(self, upload: AcceptedUpload) -> str:
        return base64.b64encode(upload.data).decode("ascii")

    def read(self, content: str) -> Optional[bytes]:
        if not content:
            return None
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError):
            return None

    def discard(self, content: str) -> bool:
        # Nothing outside the record to remove
        return False

    def public_content(self, content: str) -> Optional[str]:
        return content


def create_file_store(settings: Settings) -> FileStore:
    """Factory function to create the file store from settings."""

    if settings.FILE_STORAGE == "filesystem":
        return FilesystemFileStore(settings.UPLOAD_DIR)
    elif settings.FILE_STORAGE == "inline":
        return InlineFileStore()
    else:
        raise ValueError(f"Unsupported file storage: {settings.FILE_STORAGE}")
