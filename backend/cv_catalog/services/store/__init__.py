from cv_catalog.services.store.base import CvStore, parse_id
from cv_catalog.services.store.factory import create_cv_store
from cv_catalog.services.store.memory import MemoryCvStore
from cv_catalog.services.store.sql import SqlCvStore

__all__ = [
    "CvStore",
    "parse_id",
    "create_cv_store",
    "MemoryCvStore",
    "SqlCvStore",
]
