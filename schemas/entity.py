"""Dynamic entity schemas"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class EntityStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class DynamicEntity(BaseModel):
    """
    One stored record of a content type.

    Field values live in ``fields``; typed access goes through
    ``services.entity_accessor.EntityAccessor`` which knows the schema.
    """
    id: Optional[int] = None
    content_type: str = Field(..., frozen=True)
    slug: Optional[str] = None
    status: EntityStatus = EntityStatus.DRAFT
    published_at: Optional[datetime] = None
    author_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    fields: dict[str, Any] = Field(default_factory=dict)

    def get_field(self, key: str) -> Any:
        return self.fields.get(key)

    def set_field(self, key: str, value: Any) -> None:
        self.fields = {**self.fields, key: value}

    @property
    def is_published(self) -> bool:
        if self.status != EntityStatus.PUBLISHED or self.published_at is None:
            return False
        published_at = self.published_at
        if published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)
        return published_at <= datetime.now(timezone.utc)


class EntitySubmission(BaseModel):
    """Raw form/API submission for creating or updating an entity"""
    slug: Optional[str] = Field(None, max_length=255)
    status: Optional[str] = None
    published_at: Optional[datetime] = None
    author_id: Optional[int] = None
    fields: dict[str, Any] = Field(default_factory=dict)


class EntityRead(BaseModel):
    """Entity plus its formatted field values"""
    id: int
    content_type: str
    slug: str
    status: EntityStatus
    published_at: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    url: Optional[str] = None
    fields: dict[str, Any]
    display: dict[str, str]
