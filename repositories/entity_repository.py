"""Entity Repository - CRUD for the materialized content type tables"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy import JSON, Date, DateTime, Engine, Table, and_, delete, func, select, update

from field_types.date import parse_date, parse_datetime
from schemas.content_type import ContentTypeSchema
from schemas.entity import DynamicEntity, EntityStatus
from services.content_type_registry import ContentTypeRegistry
from services.schema_materializer import SchemaMaterializer

BASE_COLUMNS = ("id", "slug", "status", "published_at", "author_id", "created_at", "updated_at")

ORDERABLE_COLUMNS = ("id", "slug", "status", "published_at", "created_at", "updated_at")


class EntityRepository:
    """
    Repository for one content type table.

    Rows are converted to DynamicEntity objects: base columns become
    attributes, every declared field column goes into ``fields``.
    """

    def __init__(self, engine: Engine, schema: ContentTypeSchema, table: Table):
        self.engine = engine
        self.schema = schema
        self.table = table
        self.field_columns = [name for name in schema.field_names if name in table.c]

    # Conversion

    def _to_entity(self, row) -> DynamicEntity:
        mapping = row._mapping
        return DynamicEntity(
            id=mapping["id"],
            content_type=self.schema.slug,
            slug=mapping["slug"],
            status=mapping["status"],
            published_at=mapping["published_at"],
            author_id=mapping["author_id"],
            created_at=mapping["created_at"],
            updated_at=mapping["updated_at"],
            fields={name: mapping[name] for name in self.field_columns},
        )

    def _to_row(self, entity: DynamicEntity) -> dict[str, Any]:
        row = {
            "slug": entity.slug,
            "status": EntityStatus(entity.status).value,
            "published_at": entity.published_at,
            "author_id": entity.author_id,
        }
        for name in self.field_columns:
            if name in entity.fields:
                row[name] = self._to_column_value(name, entity.fields[name])
        return row

    def _to_column_value(self, name: str, value: Any) -> Any:
        if value is None:
            return None
        column_type = self.table.c[name].type
        if isinstance(column_type, JSON):
            return jsonable_encoder(value)
        if isinstance(column_type, DateTime) and isinstance(value, str):
            return parse_datetime(value)
        if isinstance(column_type, Date) and isinstance(value, str):
            return parse_date(value)
        return value

    # Reads

    def get_by_id(self, entity_id: int) -> Optional[DynamicEntity]:
        with self.engine.connect() as conn:
            row = conn.execute(select(self.table).where(self.table.c.id == entity_id)).fetchone()
        return self._to_entity(row) if row else None

    def get_by_slug(self, slug: str) -> Optional[DynamicEntity]:
        with self.engine.connect() as conn:
            row = conn.execute(select(self.table).where(self.table.c.slug == slug)).fetchone()
        return self._to_entity(row) if row else None

    def get_many(self, ids: list[int]) -> list[DynamicEntity]:
        """Entities for the given ids, in the order of ``ids``; missing ids are skipped"""
        if not ids:
            return []
        with self.engine.connect() as conn:
            rows = conn.execute(select(self.table).where(self.table.c.id.in_(ids))).fetchall()
        by_id = {row._mapping["id"]: self._to_entity(row) for row in rows}
        return [by_id[entity_id] for entity_id in ids if entity_id in by_id]

    def get_all(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        order_by: str = "created_at",
        order_direction: str = "DESC",
    ) -> list[DynamicEntity]:
        if order_by not in ORDERABLE_COLUMNS and order_by not in self.field_columns:
            order_by = "created_at"
        column = self.table.c[order_by]
        ordering = column.asc() if order_direction.upper() == "ASC" else column.desc()

        stmt = select(self.table).order_by(ordering, self.table.c.id)
        if status is not None:
            stmt = stmt.where(self.table.c.status == EntityStatus(status).value)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        with self.engine.connect() as conn:
            return [self._to_entity(row) for row in conn.execute(stmt).fetchall()]

    def get_published(self) -> list[DynamicEntity]:
        """Published entries whose publication date has passed"""
        now = datetime.now(timezone.utc)
        stmt = (
            select(self.table)
            .where(and_(
                self.table.c.status == EntityStatus.PUBLISHED.value,
                self.table.c.published_at.is_not(None),
                self.table.c.published_at <= now,
            ))
            .order_by(self.table.c.published_at.desc(), self.table.c.id)
        )
        with self.engine.connect() as conn:
            return [self._to_entity(row) for row in conn.execute(stmt).fetchall()]

    def count(self, status: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(self.table)
        if status is not None:
            stmt = stmt.where(self.table.c.status == EntityStatus(status).value)
        with self.engine.connect() as conn:
            return conn.execute(stmt).scalar_one()

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(self.table.c.id).where(self.table.c.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(self.table.c.id != exclude_id)
        with self.engine.connect() as conn:
            return conn.execute(stmt.limit(1)).first() is not None

    # Writes

    def insert(self, entity: DynamicEntity) -> DynamicEntity:
        """Insert a new row; a duplicate slug surfaces as IntegrityError"""
        with self.engine.begin() as conn:
            result = conn.execute(self.table.insert().values(**self._to_row(entity)))
            entity_id = result.inserted_primary_key[0]
            row = conn.execute(select(self.table).where(self.table.c.id == entity_id)).fetchone()
        return self._to_entity(row)

    def update(self, entity: DynamicEntity) -> DynamicEntity:
        values = self._to_row(entity)
        values["updated_at"] = datetime.now(timezone.utc)

        with self.engine.begin() as conn:
            conn.execute(update(self.table).where(self.table.c.id == entity.id).values(**values))
            row = conn.execute(select(self.table).where(self.table.c.id == entity.id)).fetchone()
        return self._to_entity(row) if row else None

    def delete(self, entity_id: int) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(delete(self.table).where(self.table.c.id == entity_id))
        return result.rowcount > 0


class RegistryEntityResolver:
    """Resolves related entities for taxonomy and reference fields through the registry"""

    def __init__(self, engine: Engine, registry: ContentTypeRegistry, materializer: SchemaMaterializer):
        self.engine = engine
        self.registry = registry
        self.materializer = materializer

    def repository(self, schema_slug: str) -> Optional[EntityRepository]:
        schema = self.registry.find(schema_slug)
        if schema is None:
            return None
        return EntityRepository(self.engine, schema, self.materializer.table_for(schema))

    def find_one(self, schema_slug: str, entity_id: int) -> Optional[DynamicEntity]:
        repository = self.repository(schema_slug)
        return repository.get_by_id(entity_id) if repository else None

    def find_many(self, schema_slug: str, ids: list[int]) -> list[DynamicEntity]:
        repository = self.repository(schema_slug)
        return repository.get_many(ids) if repository else []

    def find_all(self, schema_slug: str) -> list[DynamicEntity]:
        repository = self.repository(schema_slug)
        return repository.get_all(order_by="id", order_direction="ASC") if repository else []


def get_entity_repository(
    engine: Engine,
    materializer: SchemaMaterializer,
    schema: ContentTypeSchema,
) -> EntityRepository:
    """Repository for a schema's table"""
    return EntityRepository(engine, schema, materializer.table_for(schema))
