from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import select, delete, desc, func
from sqlalchemy.exc import IntegrityError

from cv_catalog.core.database import create_engine, create_session_factory, init_models
from cv_catalog.core.exceptions import DuplicateUserError
from cv_catalog.models import Cv, User, CvRecord, UserRecord
from cv_catalog.services.store.base import CvStore, CvId, parse_id, mutable_subset


class SqlCvStore(CvStore):
    """Relational store over an async SQLAlchemy engine, one session per call."""

    def __init__(self, database_url: str, default_limit: Optional[int] = None, echo: bool = False):
        super().__init__(default_limit)
        self.engine = create_engine(database_url, echo=echo)
        self.session_factory = create_session_factory(self.engine)

    async def start(self) -> None:
        await init_models(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()

    async def _list(self, nationality: Optional[str], limit: Optional[int]) -> list[CvRecord]:
        query = select(Cv).order_by(desc(Cv.upload_date), desc(Cv.id))
        if nationality is not None:
            query = query.where(Cv.nationality == nationality)
        limit = self._effective_limit(limit)
        if limit:
            query = query.limit(limit)
        async with self.session_factory() as db:
            result = await db.execute(query)
            return [row.to_record() for row in result.scalars().all()]

    async def list_all(self, limit: Optional[int] = None) -> list[CvRecord]:
        return await self._list(None, limit)

    async def list_by_nationality(self, nationality: str, limit: Optional[int] = None) -> list[CvRecord]:
        return await self._list(nationality, limit)

    async def count_by_nationality(self) -> dict[str, int]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(Cv.nationality, func.count(Cv.id)).group_by(Cv.nationality)
            )
            return {nationality: count for nationality, count in result.all()}

    async def get(self, cv_id: CvId) -> Optional[CvRecord]:
        key = parse_id(cv_id)
        if key is None:
            return None
        async with self.session_factory() as db:
            row = await db.get(Cv, key)
            return row.to_record() if row else None

    async def create(self, fields: Mapping[str, Any]) -> CvRecord:
        row = Cv(
            name=fields["name"],
            age=fields["age"],
            nationality=fields["nationality"],
            experience=fields["experience"],
            file_name=fields["file_name"],
            file_type=fields["file_type"],
            file_content=fields["file_content"],
            upload_date=datetime.now(timezone.utc),
        )
        async with self.session_factory() as db:
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return row.to_record()

    async def update(self, cv_id: CvId, fields: Mapping[str, Any]) -> Optional[CvRecord]:
        key = parse_id(cv_id)
        if key is None:
            return None
        async with self.session_factory() as db:
            row = await db.get(Cv, key)
            if not row:
                return None
            for name, value in mutable_subset(fields).items():
                setattr(row, name, value)
            await db.commit()
            await db.refresh(row)
            return row.to_record()

    async def delete(self, cv_id: CvId) -> bool:
        key = parse_id(cv_id)
        if key is None:
            return False
        async with self.session_factory() as db:
            result = await db.execute(delete(Cv).where(Cv.id == key))
            await db.commit()
            return result.rowcount == 1

    async def clear(self) -> int:
        async with self.session_factory() as db:
            result = await db.execute(delete(Cv))
            await db.commit()
            return result.rowcount or 0

    async def get_user(self, user_id: CvId) -> Optional[UserRecord]:
        key = parse_id(user_id)
        if key is None:
            return None
        async with self.session_factory() as db:
            row = await db.get(User, key)
            return row.to_record() if row else None

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        async with self.session_factory() as db:
            result = await db.execute(select(User).where(User.username == username).limit(1))
            row = result.scalar_one_or_none()
            return row.to_record() if row else None

    async def create_user(self, username: str, hashed_password: str) -> UserRecord:
        row = User(username=username, hashed_password=hashed_password)
        async with self.session_factory() as db:
            db.add(row)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise DuplicateUserError(f"Username already exists: {username}") from e
            await db.refresh(row)
            return row.to_record()
