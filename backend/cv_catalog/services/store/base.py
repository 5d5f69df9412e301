from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Union

from cv_catalog.models import CvRecord, UserRecord, MUTABLE_FIELDS

CvId = Union[int, str]

# Largest value a signed 64-bit INTEGER column holds
MAX_ID = 2 ** 63 - 1


def parse_id(cv_id: CvId) -> Optional[int]:
    """Coerce an id from a path or caller into an int; malformed ids map to None.

    Only plain ASCII digit strings are ids, so "1_0", "+5" and " 5" are not.
    """
    if isinstance(cv_id, bool):
        return None
    if isinstance(cv_id, int):
        value = cv_id
    elif isinstance(cv_id, str) and cv_id.isascii() and cv_id.isdigit():
        value = int(cv_id)
    else:
        return None
    if not 1 <= value <= MAX_ID:
        return None
    return value


def mutable_subset(fields: Mapping[str, Any]) -> dict:
    return {k: v for k, v in fields.items() if k in MUTABLE_FIELDS and v is not None}


class CvStore(ABC):
    """Persistence for CV records and the admin user shell.

    Listing is newest-first. ``limit`` falls back to the store's default cap;
    a cap of ``None`` or ``0`` means no cap.
    """

    def __init__(self, default_limit: Optional[int] = None):
        self.default_limit = default_limit

    def _effective_limit(self, limit: Optional[int]) -> Optional[int]:
        value = self.default_limit if limit is None else limit
        return value or None

    async def start(self) -> None:
        """Prepare backend resources."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def list_all(self, limit: Optional[int] = None) -> list[CvRecord]:
        pass

    @abstractmethod
    async def list_by_nationality(self, nationality: str, limit: Optional[int] = None) -> list[CvRecord]:
        pass

    @abstractmethod
    async def count_by_nationality(self) -> dict[str, int]:
        pass

    @abstractmethod
    async def get(self, cv_id: CvId) -> Optional[CvRecord]:
        pass

    @abstractmethod
    async def create(self, fields: Mapping[str, Any]) -> CvRecord:
        """Persist a new CV. ``fields`` holds everything but id and upload_date."""
        pass

    @abstractmethod
    async def update(self, cv_id: CvId, fields: Mapping[str, Any]) -> Optional[CvRecord]:
        """Apply the subset of name/age/nationality/experience present in ``fields``."""
        pass

    @abstractmethod
    async def delete(self, cv_id: CvId) -> bool:
        pass

    @abstractmethod
    async def clear(self) -> int:
        """Remove every CV and return how many were removed."""
        pass

    @abstractmethod
    async def get_user(self, user_id: CvId) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def create_user(self, username: str, hashed_password: str) -> UserRecord:
        pass
