"""Content Type Migration model - history of storage materializations"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class ContentTypeMigration(Base):
    """
    ContentTypeMigration records one materialization attempt.

    Each record:
    - Has the DDL that was executed
    - Tracks status (applied, failed)
    - Has a version number per content type
    """
    __tablename__ = "content_type_migrations"

    content_type_slug: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    table_name: Mapped[str] = mapped_column(String(100), nullable=False)

    migration_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False
    )  # create_table, add_columns

    migration_sql: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(50),
        default="applied",
        nullable=False
    )  # applied, failed

    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    applied_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self):
        return (
            f"<ContentTypeMigration(content_type='{self.content_type_slug}', "
            f"type='{self.migration_type}', status='{self.status}', version={self.version})>"
        )
