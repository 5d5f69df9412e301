import asyncio
import itertools
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from cv_catalog.core.exceptions import DuplicateUserError
from cv_catalog.models import CvRecord, UserRecord
from cv_catalog.services.store.base import CvStore, CvId, parse_id, mutable_subset


class MemoryCvStore(CvStore):
    """In-process store. Each instance owns its maps and id sequences."""

    def __init__(self, default_limit: Optional[int] = None):
        super().__init__(default_limit)
        self._cvs: dict[int, CvRecord] = {}
        self._users: dict[int, UserRecord] = {}
        self._cv_ids = itertools.count(1)
        self._user_ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def _newest_first(self, records, limit: Optional[int]) -> list[CvRecord]:
        ordered = sorted(records, key=lambda r: (r.upload_date, r.id), reverse=True)
        limit = self._effective_limit(limit)
        return ordered[:limit] if limit else ordered

    async def list_all(self, limit: Optional[int] = None) -> list[CvRecord]:
        return self._newest_first(self._cvs.values(), limit)

    async def list_by_nationality(self, nationality: str, limit: Optional[int] = None) -> list[CvRecord]:
        return self._newest_first(
            (r for r in self._cvs.values() if r.nationality == nationality), limit
        )

    async def count_by_nationality(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for record in self._cvs.values():
            counts[record.nationality] = counts.get(record.nationality, 0) + 1
        return counts

    async def get(self, cv_id: CvId) -> Optional[CvRecord]:
        key = parse_id(cv_id)
        if key is None:
            return None
        return self._cvs.get(key)

    async def create(self, fields: Mapping[str, Any]) -> CvRecord:
        async with self._lock:
            record = CvRecord(
                id=next(self._cv_ids),
                name=fields["name"],
                age=fields["age"],
                nationality=fields["nationality"],
                experience=fields["experience"],
                file_name=fields["file_name"],
                file_type=fields["file_type"],
                file_content=fields["file_content"],
                upload_date=datetime.now(timezone.utc),
            )
            self._cvs[record.id] = record
        return record

    async def update(self, cv_id: CvId, fields: Mapping[str, Any]) -> Optional[CvRecord]:
        key = parse_id(cv_id)
        async with self._lock:
            current = self._cvs.get(key) if key is not None else None
            if current is None:
                return None
            updated = replace(current, **mutable_subset(fields))
            self._cvs[key] = updated
        return updated

    async def delete(self, cv_id: CvId) -> bool:
        key = parse_id(cv_id)
        async with self._lock:
            return self._cvs.pop(key, None) is not None

    async def clear(self) -> int:
        async with self._lock:
            removed = len(self._cvs)
            self._cvs.clear()
        return removed

    async def get_user(self, user_id: CvId) -> Optional[UserRecord]:
        key = parse_id(user_id)
        return self._users.get(key) if key is not None else None

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def create_user(self, username: str, hashed_password: str) -> UserRecord:
        async with self._lock:
            if any(u.username == username for u in self._users.values()):
                raise DuplicateUserError(f"Username already exists: {username}")
            user = UserRecord(id=next(self._user_ids), username=username, hashed_password=hashed_password)
            self._users[user.id] = user
        return user
