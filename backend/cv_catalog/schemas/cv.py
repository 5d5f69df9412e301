from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CvFields(CamelModel):
    """Editable CV metadata, as submitted with an upload."""
    name: str = Field(..., min_length=1, max_length=255)
    age: int = Field(..., ge=1, le=100)
    nationality: str = Field(..., min_length=1)
    experience: str = Field(..., min_length=1)

    @field_validator("name", "experience", "nationality", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("nationality")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.lower()


class CvUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    age: Optional[int] = Field(None, ge=1, le=100)
    nationality: Optional[str] = Field(None, min_length=1)
    experience: Optional[str] = Field(None, min_length=1)

    @field_validator("name", "experience", "nationality", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("nationality")
    @classmethod
    def _lower(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value is not None else None


class CvSummary(CamelModel):
    id: int
    name: str
    age: int
    nationality: str
    experience: str
    file_name: str
    file_type: str
    upload_date: datetime


class CvDetail(CvSummary):
    # Only populated when files are stored inline
    file_content: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
