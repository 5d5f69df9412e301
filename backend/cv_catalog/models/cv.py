from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text
from cv_catalog.core.database import Base


class FileType:
    """Derived file categories stored on a CV."""
    PDF = "pdf"
    IMAGE = "image"

    @classmethod
    def from_content_type(cls, content_type: str) -> str:
        return cls.PDF if "pdf" in (content_type or "").lower() else cls.IMAGE

    @classmethod
    def media_type(cls, file_type: str) -> str:
        return "application/pdf" if file_type == cls.PDF else "image/jpeg"


# Fields an update may touch; file data, id and upload date are fixed at creation
MUTABLE_FIELDS = ("name", "age", "nationality", "experience")


@dataclass(frozen=True)
class CvRecord:
    """A stored CV, independent of the backend that holds it."""
    id: int
    name: str
    age: int
    nationality: str
    experience: str
    file_name: str
    file_type: str
    file_content: str
    upload_date: datetime


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: str
    hashed_password: str


class Cv(Base):
    __tablename__ = "cvs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
    nationality = Column(String(50), nullable=False, index=True)
    experience = Column(Text, nullable=False)
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(10), nullable=False)
    file_content = Column(Text, nullable=False)  # path or base64, depending on FILE_STORAGE
    upload_date = Column(DateTime(timezone=True), nullable=False, index=True)

    def to_record(self) -> CvRecord:
        return CvRecord(
            id=self.id,
            name=self.name,
            age=self.age,
            nationality=self.nationality,
            experience=self.experience,
            file_name=self.file_name,
            file_type=self.file_type,
            file_content=self.file_content,
            upload_date=_as_utc(self.upload_date),
        )


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(80), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    def to_record(self) -> UserRecord:
        return UserRecord(id=self.id, username=self.username, hashed_password=self.hashed_password)
