"""Bootstrap Service - discovery, registration and materialization at startup"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy import Engine

from core.exceptions import ContentEngineError
from core.logging_config import LogContext, get_logger
from core.settings import Settings, settings as default_settings
from db.session import build_session_factory
from models import Base
from repositories.entity_repository import RegistryEntityResolver
from services.content_type_loader_service import ContentTypeLoader
from services.content_type_registry import ContentTypeRegistry
from services.entity_service import EntityService
from services.field_type_registry import FieldTypeRegistry, get_field_type_registry
from services.route_manager import RouteEntry, RouteManager
from services.schema_materializer import MaterializationResult, SchemaMaterializer

logger = get_logger(__name__)


@dataclass
class ContentEngine:
    """Everything the HTTP layer and the CLI need after startup"""
    registry: ContentTypeRegistry
    field_types: FieldTypeRegistry
    materializer: SchemaMaterializer
    resolver: RegistryEntityResolver
    entity_service: EntityService
    routes: list[RouteEntry] = field(default_factory=list)
    materialized: list[MaterializationResult] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)


def bootstrap(
    engine: Engine,
    settings: Optional[Settings] = None,
    packages: Optional[Iterable[str]] = None,
    registry: Optional[ContentTypeRegistry] = None,
    field_types: Optional[FieldTypeRegistry] = None,
) -> ContentEngine:
    """
    Discover content types, register them, create their storage and seal the registry.

    A schema whose storage cannot be materialized is logged, dropped from the
    registry and reported in ``failures``; the remaining types keep working.
    """
    settings = settings or default_settings
    registry = registry if registry is not None else ContentTypeRegistry()
    field_types = field_types or get_field_type_registry()

    session_factory = None
    if settings.RECORD_MIGRATIONS:
        Base.metadata.create_all(engine)
        session_factory = build_session_factory(engine)

    loader = ContentTypeLoader(packages if packages is not None else settings.content_type_packages)
    loader.load_into(registry)

    materializer = SchemaMaterializer(engine, registry=registry, session_factory=session_factory)
    materialized: list[MaterializationResult] = []
    failures: dict[str, str] = {}

    if settings.MATERIALIZE_ON_STARTUP:
        # Taxonomies first so content tables can point at them
        ordered = registry.taxonomies() + registry.content_types()
        for schema in ordered:
            with LogContext(content_type=schema.slug):
                try:
                    materialized.append(materializer.ensure_storage_exists(schema))
                except ContentEngineError as e:
                    logger.error(f"Failed to materialize content type '{schema.slug}': {e.message}")
                    failures[schema.slug] = e.message

        for slug in failures:
            registry.unregister(slug)

    registry.seal()

    entity_service = EntityService(
        engine,
        registry,
        materializer,
        field_types=field_types,
        slug_max_attempts=settings.SLUG_MAX_ATTEMPTS,
    )
    routes = RouteManager.routes(registry)

    logger.info(
        f"Content engine ready: {len(registry)} content types, "
        f"{len(routes)} routes, {len(failures)} failures"
    )

    return ContentEngine(
        registry=registry,
        field_types=field_types,
        materializer=materializer,
        resolver=entity_service.resolver,
        entity_service=entity_service,
        routes=routes,
        materialized=materialized,
        failures=failures,
    )
