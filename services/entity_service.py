"""Entity Service - validated create/update/publish of dynamic entities"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError

from core.exceptions import EntityNotFoundError, FieldValidationError, SubmissionValidationError
from core.logging_config import get_logger
from field_types import is_blank
from repositories.entity_repository import EntityRepository, RegistryEntityResolver, get_entity_repository
from schemas.content_type import ContentTypeSchema
from schemas.entity import DynamicEntity, EntityRead, EntityStatus, EntitySubmission
from schemas.input_spec import InputSpec
from services.content_type_registry import ContentTypeRegistry
from services.entity_accessor import EntityAccessor
from services.field_type_registry import FieldTypeRegistry, get_field_type_registry
from services.schema_materializer import SchemaMaterializer
from services.slug_service import SlugGenerator, slugify

logger = get_logger(__name__)

# Field types whose columns can carry a unique constraint
UNIQUE_CHECKABLE_TYPES = frozenset({
    "string", "text", "textarea", "select", "integer", "number", "decimal", "date", "datetime",
})


class EntityService:
    """
    Entry point for working with entities of any registered content type.

    Submissions are validated field by field through the field strategies;
    nothing is written when any field fails.
    """

    def __init__(
        self,
        engine: Engine,
        registry: ContentTypeRegistry,
        materializer: SchemaMaterializer,
        field_types: Optional[FieldTypeRegistry] = None,
        slug_max_attempts: int = 100,
    ):
        self.engine = engine
        self.registry = registry
        self.materializer = materializer
        self.field_types = field_types or get_field_type_registry()
        self.resolver = RegistryEntityResolver(engine, registry, materializer)
        self.slugs = SlugGenerator(max_attempts=slug_max_attempts)

    # Collaborators

    def schema(self, content_type: str) -> ContentTypeSchema:
        return self.registry.get(content_type)

    def repository(self, content_type: str) -> EntityRepository:
        return get_entity_repository(self.engine, self.materializer, self.schema(content_type))

    def accessor(self, content_type: str) -> EntityAccessor:
        return EntityAccessor(self.schema(content_type), field_types=self.field_types, resolver=self.resolver)

    # Reads

    def get(self, content_type: str, entity_id: int) -> DynamicEntity:
        entity = self.repository(content_type).get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(content_type, entity_id)
        return entity

    def get_by_slug(self, content_type: str, slug: str, published_only: bool = False) -> DynamicEntity:
        entity = self.repository(content_type).get_by_slug(slug)
        if entity is None or (published_only and not entity.is_published):
            raise EntityNotFoundError(content_type, slug)
        return entity

    def list_entries(
        self,
        content_type: str,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[DynamicEntity]:
        if status is not None and status not in EntityStatus.values():
            raise SubmissionValidationError({"status": f"must be one of: {', '.join(EntityStatus.values())}"})
        return self.repository(content_type).get_all(status=status, limit=limit, offset=offset)

    def count(self, content_type: str, status: Optional[str] = None) -> int:
        return self.repository(content_type).count(status=status)

    def list_published(self, content_type: str) -> list[DynamicEntity]:
        return self.repository(content_type).get_published()

    def display(self, entity: DynamicEntity) -> dict[str, str]:
        return self.accessor(entity.content_type).display(entity)

    def describe_form(self, content_type: str, entity: Optional[DynamicEntity] = None) -> list[InputSpec]:
        specs = []
        for field in self.accessor(content_type).fields():
            current = field.get_value(entity) if entity is not None else field.definition.default
            specs.append(field.describe_input(current))
        return specs

    def url_for(self, entity: DynamicEntity) -> Optional[str]:
        return self.schema(entity.content_type).routes.single_path(entity.slug)

    def to_read(self, entity: DynamicEntity) -> EntityRead:
        return EntityRead(
            id=entity.id,
            content_type=entity.content_type,
            slug=entity.slug,
            status=entity.status,
            published_at=entity.published_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            url=self.url_for(entity),
            fields=entity.fields,
            display=self.display(entity),
        )

    # Writes

    def build(self, content_type: str, submission: EntitySubmission) -> DynamicEntity:
        """Validate a submission into an unsaved entity, applying declared defaults"""
        accessor = self.accessor(content_type)
        errors: dict[str, str] = {}

        status = self._validate_status(submission.status or EntityStatus.DRAFT.value, errors)
        values = self._validate_fields(accessor, submission.fields, errors)

        defaults = accessor.defaults()
        for field in accessor.fields():
            if values.get(field.name) is not None:
                continue
            if field.name in defaults:
                values[field.name] = field.normalize(defaults[field.name])
            else:
                values[field.name] = field.blank_value()

        slug = None
        if submission.slug is not None:
            slug = slugify(submission.slug)
            if not slug:
                errors["slug"] = "must contain letters or digits"

        if errors:
            raise SubmissionValidationError(errors)

        return DynamicEntity(
            content_type=content_type,
            slug=slug,
            status=status,
            published_at=submission.published_at,
            author_id=submission.author_id,
            fields=values,
        )

    def create(self, content_type: str, submission: EntitySubmission) -> DynamicEntity:
        schema = self.schema(content_type)
        entity = self.build(content_type, submission)
        repository = self.repository(content_type)

        errors: dict[str, str] = {}
        self._check_publishable(schema, entity, errors)
        self._check_unique(schema, repository, entity, errors)
        if entity.slug and repository.slug_exists(entity.slug):
            errors["slug"] = "has already been taken"
        if errors:
            raise SubmissionValidationError(errors)

        if entity.slug:
            created = self._insert_with_slug(repository, entity, entity.slug)
        else:
            created = self._insert_with_generated_slug(schema, repository, entity)

        logger.info_ctx("Created entry", content_type=content_type, entity_id=created.id, slug=created.slug)
        return created

    def update(self, content_type: str, entity_id: int, submission: EntitySubmission) -> DynamicEntity:
        schema = self.schema(content_type)
        repository = self.repository(content_type)
        current = self.get(content_type, entity_id)
        accessor = self.accessor(content_type)

        # Work on a copy so a failed validation leaves the stored entity untouched
        candidate = current.model_copy(deep=True)
        errors: dict[str, str] = {}

        values = self._validate_fields(accessor, submission.fields, errors)
        candidate.fields = {**candidate.fields, **values}

        provided = submission.model_fields_set
        if "status" in provided and submission.status is not None:
            candidate.status = self._validate_status(submission.status, errors)
        if "published_at" in provided:
            candidate.published_at = submission.published_at
        if "author_id" in provided:
            candidate.author_id = submission.author_id
        if "slug" in provided and submission.slug is not None:
            slug = slugify(submission.slug)
            if not slug:
                errors["slug"] = "must contain letters or digits"
            elif repository.slug_exists(slug, exclude_id=entity_id):
                errors["slug"] = "has already been taken"
            else:
                candidate.slug = slug

        self._check_publishable(schema, candidate, errors)
        self._check_unique(schema, repository, candidate, errors)
        if errors:
            raise SubmissionValidationError(errors)

        updated = repository.update(candidate)
        logger.info_ctx("Updated entry", content_type=content_type, entity_id=entity_id)
        return updated

    def publish(self, content_type: str, entity_id: int, published_at: Optional[datetime] = None) -> DynamicEntity:
        return self._transition(content_type, entity_id, EntityStatus.PUBLISHED, published_at)

    def archive(self, content_type: str, entity_id: int) -> DynamicEntity:
        return self._transition(content_type, entity_id, EntityStatus.ARCHIVED)

    def unpublish(self, content_type: str, entity_id: int) -> DynamicEntity:
        return self._transition(content_type, entity_id, EntityStatus.DRAFT)

    def delete(self, content_type: str, entity_id: int) -> None:
        if not self.repository(content_type).delete(entity_id):
            raise EntityNotFoundError(content_type, entity_id)
        logger.info_ctx("Deleted entry", content_type=content_type, entity_id=entity_id)

    # Internals

    def _transition(
        self,
        content_type: str,
        entity_id: int,
        status: EntityStatus,
        published_at: Optional[datetime] = None,
    ) -> DynamicEntity:
        candidate = self.get(content_type, entity_id).model_copy(deep=True)
        candidate.status = status
        if published_at is not None:
            candidate.published_at = published_at

        errors: dict[str, str] = {}
        self._check_publishable(self.schema(content_type), candidate, errors)
        if errors:
            raise SubmissionValidationError(errors)
        return self.repository(content_type).update(candidate)

    def _validate_status(self, status: Any, errors: dict[str, str]) -> EntityStatus:
        try:
            return EntityStatus(status)
        except ValueError:
            errors["status"] = f"must be one of: {', '.join(EntityStatus.values())}"
            return EntityStatus.DRAFT

    def _validate_fields(
        self,
        accessor: EntityAccessor,
        raw_fields: dict[str, Any],
        errors: dict[str, str],
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, raw in raw_fields.items():
            if name not in accessor.field_names():
                logger.debug(f"Ignoring undeclared field '{name}' on {accessor.schema.slug}")
                continue
            try:
                values[name] = accessor.field(name).validate(raw)
            except FieldValidationError as e:
                errors[name] = e.message
        return values

    def _check_publishable(self, schema: ContentTypeSchema, entity: DynamicEntity, errors: dict[str, str]) -> None:
        """Required fields must be filled before an entity may be published"""
        if entity.status != EntityStatus.PUBLISHED:
            return
        for definition in schema.required_fields():
            if is_blank(entity.get_field(definition.name)):
                errors.setdefault(definition.name, f"{definition.label} is required to publish")
        if entity.published_at is None:
            entity.published_at = datetime.now(timezone.utc)

    def _check_unique(
        self,
        schema: ContentTypeSchema,
        repository: EntityRepository,
        entity: DynamicEntity,
        errors: dict[str, str],
    ) -> None:
        table = repository.table
        for definition in schema.fields:
            if not definition.unique or definition.type not in UNIQUE_CHECKABLE_TYPES:
                continue
            value = entity.get_field(definition.name)
            if is_blank(value):
                continue
            stmt = select(table.c.id).where(table.c[definition.name] == value)
            if entity.id is not None:
                stmt = stmt.where(table.c.id != entity.id)
            with self.engine.connect() as conn:
                if conn.execute(stmt.limit(1)).first() is not None:
                    errors.setdefault(definition.name, "has already been taken")

    def _insert_with_slug(self, repository: EntityRepository, entity: DynamicEntity, slug: str) -> DynamicEntity:
        try:
            return repository.insert(entity)
        except IntegrityError:
            if repository.slug_exists(slug):
                raise SubmissionValidationError({"slug": "has already been taken"})
            raise

    def _insert_with_generated_slug(
        self,
        schema: ContentTypeSchema,
        repository: EntityRepository,
        entity: DynamicEntity,
    ) -> DynamicEntity:
        title_field = schema.title_field_name
        title = entity.get_field(title_field) if title_field else None
        base_slug = self.slugs.base_slug(None if is_blank(title) else str(title))

        for candidate in self.slugs.candidates(base_slug):
            if repository.slug_exists(candidate):
                continue
            entity.slug = candidate
            try:
                return repository.insert(entity)
            except IntegrityError:
                # Lost a race for this slug against a concurrent insert; try the next suffix
                if not repository.slug_exists(candidate):
                    raise
                logger.warning_ctx("Slug taken concurrently", content_type=schema.slug, slug=candidate)

        raise self.slugs.exhausted(base_slug)
