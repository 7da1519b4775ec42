"""Schema Materializer - ensures a storage table exists for every content type"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Engine,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    func,
    inspect,
    select,
    text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.schema import CreateColumn, CreateTable

from core.exceptions import MaterializationError
from core.logging_config import get_logger
from models import ContentTypeMigration
from schemas.content_type import ContentTypeSchema
from schemas.entity import EntityStatus
from schemas.field_definition import FieldDefinition
from services.content_type_registry import ContentTypeRegistry

logger = get_logger(__name__)

JSON_TYPE = JSON().with_variant(JSONB(), "postgresql")
STRING_ARRAY_TYPE = JSON().with_variant(ARRAY(Text), "postgresql")

VIRTUAL_TYPES = frozenset({"has_many"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MaterializationResult:
    content_type: str
    table_name: str
    created: bool = False
    added_columns: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.created or bool(self.added_columns)


class SchemaMaterializer:
    """
    Builds SQLAlchemy tables for content type schemas and creates them.

    Each table gets the standard columns:
    - id (INTEGER PRIMARY KEY)
    - slug (unique), status, published_at, author_id
    - created_at / updated_at

    Plus one column per declared field based on its type tag.
    """

    def __init__(
        self,
        engine: Engine,
        registry: Optional[ContentTypeRegistry] = None,
        session_factory: Optional[Callable[[], Session]] = None,
        metadata: Optional[MetaData] = None,
    ):
        self.engine = engine
        self.registry = registry
        self.session_factory = session_factory
        self.metadata = metadata or MetaData()
        self._tables: dict[str, tuple[ContentTypeSchema, Table]] = {}
        self._in_progress: set[str] = set()

    # Table definitions

    def table_for(self, schema: ContentTypeSchema) -> Table:
        cached = self._tables.get(schema.slug)
        if cached is not None and cached[0] is schema:
            return cached[1]

        # Schema was replaced: rebuild the table definition
        if schema.table_name in self.metadata.tables:
            self.metadata.remove(self.metadata.tables[schema.table_name])

        table = Table(schema.table_name, self.metadata, *self._columns_for(schema))
        self._tables[schema.slug] = (schema, table)
        return table

    def _columns_for(self, schema: ContentTypeSchema) -> list[Column]:
        columns = [
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("slug", String(255), nullable=False, unique=True, index=True),
            Column(
                "status",
                String(20),
                nullable=False,
                default=EntityStatus.DRAFT.value,
                server_default=EntityStatus.DRAFT.value,
                index=True,
            ),
            Column("published_at", DateTime(timezone=True), nullable=True),
            Column("author_id", Integer, nullable=True, index=True),
        ]

        for definition in schema.fields:
            column = self.column_for(definition, schema)
            if column is not None:  # Skip virtual fields (has_many)
                columns.append(column)

        columns += [
            Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
            Column("updated_at", DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow),
        ]
        return columns

    def column_for(self, definition: FieldDefinition, schema: ContentTypeSchema) -> Optional[Column]:
        """Column for one field, or None for fields without storage"""
        field_type = definition.type

        if field_type in VIRTUAL_TYPES:
            return None

        args = []
        kwargs = {"nullable": True, "unique": definition.unique}

        if field_type in ("string", "select", "image"):
            column_type = String(255)
        elif field_type in ("text", "textarea", "rich_text"):
            column_type = Text()
        elif field_type == "integer":
            column_type = Integer()
        elif field_type == "number":
            column_type = Float()
        elif field_type == "decimal":
            column_type = Numeric(precision=definition.precision, scale=definition.scale)
        elif field_type in ("boolean", "checkbox"):
            column_type = Boolean()
        elif field_type == "date":
            column_type = Date()
        elif field_type == "datetime":
            column_type = DateTime(timezone=True)
        elif field_type in ("json", "repeater", "reference", "images"):
            column_type = JSON_TYPE
        elif field_type == "array":
            column_type = STRING_ARRAY_TYPE
        elif field_type == "taxonomy":
            column_type = Integer()
            kwargs["index"] = True
        elif field_type == "belongs_to":
            column_type = Integer()
            kwargs["index"] = True
            target = self._target_table(definition, schema)
            if target is not None:
                args.append(ForeignKey(f"{target}.id", ondelete="SET NULL"))
        else:
            logger.warning_ctx(
                f"Unknown field type '{field_type}', storing as text",
                content_type=schema.slug,
                field=definition.name,
            )
            column_type = Text()

        default = definition.default
        if default is not None and not isinstance(default, (list, dict)):
            kwargs["default"] = default

        return Column(definition.name, column_type, *args, **kwargs)

    def _target_table(self, definition: FieldDefinition, schema: ContentTypeSchema) -> Optional[str]:
        if not definition.target_schema or self.registry is None:
            return None
        if definition.target_schema == schema.slug:
            return schema.table_name
        target = self.registry.find(definition.target_schema)
        if target is None:
            return None
        # Referenced table must share the metadata for the foreign key to resolve
        self.table_for(target)
        return target.table_name

    # Materialization

    def ensure_storage_exists(self, schema: ContentTypeSchema) -> MaterializationResult:
        """
        Create the table for a schema if it does not exist yet.

        Idempotent: an existing table only gets columns for newly declared
        fields. Columns are never dropped.
        """
        if schema.slug in self._in_progress:
            return MaterializationResult(content_type=schema.slug, table_name=schema.table_name)

        self._in_progress.add(schema.slug)
        try:
            self._ensure_dependencies(schema)
            table = self.table_for(schema)

            if not inspect(self.engine).has_table(table.name):
                return self._create_table(schema, table)
            return self._add_missing_columns(schema, table)
        finally:
            self._in_progress.discard(schema.slug)

    def _ensure_dependencies(self, schema: ContentTypeSchema) -> None:
        if self.registry is None:
            return
        for definition in schema.fields:
            if definition.type != "belongs_to" or not definition.target_schema:
                continue
            target = self.registry.find(definition.target_schema)
            if target is not None and target.slug != schema.slug:
                self.ensure_storage_exists(target)

    def _create_table(self, schema: ContentTypeSchema, table: Table) -> MaterializationResult:
        result = MaterializationResult(content_type=schema.slug, table_name=table.name)
        ddl = str(CreateTable(table).compile(dialect=self.engine.dialect)).strip()

        try:
            table.create(self.engine, checkfirst=True)
        except SQLAlchemyError as e:
            # Another process may have won the race between the check and the create
            if inspect(self.engine).has_table(table.name):
                logger.warning_ctx(
                    f"Table '{table.name}' was created concurrently",
                    content_type=schema.slug,
                )
                return result

            self._record(schema, "create_table", ddl, error=str(e))
            raise MaterializationError(schema.slug, str(e)) from e

        self._record(schema, "create_table", ddl)
        logger.info_ctx(f"Created table '{table.name}'", content_type=schema.slug)
        result.created = True
        return result

    def _add_missing_columns(self, schema: ContentTypeSchema, table: Table) -> MaterializationResult:
        result = MaterializationResult(content_type=schema.slug, table_name=table.name)

        existing_columns = {column["name"] for column in inspect(self.engine).get_columns(table.name)}
        expected_columns = set(table.columns.keys())

        removed = existing_columns - expected_columns
        if removed:
            logger.warning_ctx(
                f"Columns exist in '{table.name}' but not in the schema: {sorted(removed)}; they are kept",
                content_type=schema.slug,
            )

        missing = [column for column in table.columns if column.name not in existing_columns]
        if not missing:
            logger.debug(f"Table '{table.name}' is up to date")
            return result

        preparer = self.engine.dialect.identifier_preparer
        statements = [
            f"ALTER TABLE {preparer.format_table(table)} "
            f"ADD COLUMN {CreateColumn(column).compile(dialect=self.engine.dialect)}"
            for column in missing
        ]
        migration_sql = ";\n".join(statements) + ";"

        try:
            with self.engine.begin() as conn:
                for statement in statements:
                    conn.execute(text(statement))
        except SQLAlchemyError as e:
            self._record(schema, "add_columns", migration_sql, error=str(e))
            raise MaterializationError(schema.slug, str(e)) from e

        result.added_columns = [column.name for column in missing]
        self._record(schema, "add_columns", migration_sql)
        logger.info_ctx(
            f"Added {len(missing)} column(s) to '{table.name}': {', '.join(result.added_columns)}",
            content_type=schema.slug,
        )
        return result

    def _record(self, schema: ContentTypeSchema, migration_type: str, sql: str, error: Optional[str] = None) -> None:
        if self.session_factory is None:
            return

        with self.session_factory() as session:
            last_version = session.scalar(
                select(func.max(ContentTypeMigration.version))
                .where(ContentTypeMigration.content_type_slug == schema.slug)
            )
            migration = ContentTypeMigration(
                content_type_slug=schema.slug,
                table_name=schema.table_name,
                migration_type=migration_type,
                migration_sql=sql,
                description=f"{migration_type.replace('_', ' ')} for '{schema.display_name}'",
                status="failed" if error else "applied",
                error_message=error,
                applied_at=None if error else _utcnow(),
                version=(last_version or 0) + 1,
            )
            session.add(migration)
            session.commit()

    def migration_history(self, slug: str) -> list[ContentTypeMigration]:
        if self.session_factory is None:
            return []
        with self.session_factory() as session:
            return list(session.scalars(
                select(ContentTypeMigration)
                .where(ContentTypeMigration.content_type_slug == slug)
                .order_by(ContentTypeMigration.version)
            ).all())
