from cv_catalog.services.files import (
    AcceptedUpload,
    FileStore,
    FilesystemFileStore,
    InlineFileStore,
    accept_upload,
    create_file_store,
)
from cv_catalog.services.store import CvStore, create_cv_store

__all__ = [
    "AcceptedUpload",
    "FileStore",
    "FilesystemFileStore",
    "InlineFileStore",
    "accept_upload",
    "create_file_store",
    "CvStore",
    "create_cv_store",
]
