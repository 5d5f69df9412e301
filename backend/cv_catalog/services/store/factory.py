from cv_catalog.core.config import Settings
from cv_catalog.services.store.base import CvStore
from cv_catalog.services.store.memory import MemoryCvStore
from cv_catalog.services.store.sql import SqlCvStore


def create_cv_store(settings: Settings) -> CvStore:
    """Factory function to create the record store from settings."""

    if settings.STORE_BACKEND == "memory":
        return MemoryCvStore(default_limit=settings.LIST_LIMIT)
    elif settings.STORE_BACKEND == "sql":
        return SqlCvStore(
            settings.DATABASE_URL,
            default_limit=settings.LIST_LIMIT,
            echo=settings.DB_ECHO,
        )
    else:
        raise ValueError(f"Unsupported store backend: {settings.STORE_BACKEND}")
