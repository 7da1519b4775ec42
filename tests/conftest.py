from typing import Generator
import pytest
from unittest.mock import Mock
from sqlalchemy import Engine
from fastapi.testclient import TestClient
from faker import Faker

from core.settings import Settings
from db.session import build_engine, build_session_factory
from models.base import Base
from schemas.content_type import ContentTypeSchema, RouteDescriptor
from schemas.entity import DynamicEntity
from schemas.field_definition import field
from services.content_type_registry import ContentTypeRegistry
from services.entity_service import EntityService
from services.field_type_registry import FieldTypeRegistry
from services.schema_materializer import SchemaMaterializer

fake = Faker()


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        CONTENT_TYPE_PACKAGES="content_types",
        SLUG_MAX_ATTEMPTS=5,
        MATERIALIZE_ON_STARTUP=True,
        RECORD_MIGRATIONS=True,
    )


@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory SQLite database per test."""
    engine = build_engine("sqlite://")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def field_types() -> FieldTypeRegistry:
    return FieldTypeRegistry()


# Sample schemas


@pytest.fixture
def category_schema() -> ContentTypeSchema:
    return ContentTypeSchema(
        slug="categories",
        display_name="Category",
        kind="taxonomy",
        fields=[field("description", "text")],
    )


@pytest.fixture
def vendor_schema() -> ContentTypeSchema:
    return ContentTypeSchema(
        slug="vendors",
        display_name="Vendor",
        fields=[field("title", "string", required=True)],
    )


@pytest.fixture
def faq_schema() -> ContentTypeSchema:
    return ContentTypeSchema(
        slug="faqs",
        display_name="FAQ",
        routes=RouteDescriptor(archive_path="/help/faqs"),
        fields=[
            field("question", "string", required=True),
            field("answer", "text", required=True),
            field("category", "select", choices=["General", "Billing", "Technical"]),
            field("display_order", "integer", default=0),
        ],
    )


@pytest.fixture
def product_schema() -> ContentTypeSchema:
    return ContentTypeSchema(
        slug="products",
        display_name="Product",
        routes=RouteDescriptor(archive_path="/shop", single_pattern="/shop/:slug"),
        fields=[
            field("name", "string", required=True),
            field("price", "decimal", precision=10, scale=2, required=True),
            field("sku", "string", unique=True, required=True),
            field("stock_quantity", "integer", default=0),
            field("vendor", "belongs_to", model_class="vendors"),
            field("vendor_ids", "reference", model_class="vendors"),
            field(
                "specifications",
                "repeater",
                fields=[
                    field("label", "string", required=True),
                    field("value", "string"),
                ],
            ),
        ],
    )


@pytest.fixture
def article_schema() -> ContentTypeSchema:
    return ContentTypeSchema(
        slug="articles",
        display_name="Article",
        routes=RouteDescriptor(archive_path="/articles", single_pattern="/articles/:slug"),
        fields=[
            field("title", "string", required=True),
            field("body", "text"),
            field("topic", "taxonomy", taxonomy_type="categories"),
            field("published_on", "date"),
            field("featured", "boolean", default=False),
        ],
    )


@pytest.fixture
def gadget_schema() -> ContentTypeSchema:
    """Schema made of storage-only field tags"""
    return ContentTypeSchema(
        slug="gadgets",
        display_name="Gadget",
        fields=[
            field("title", "string", required=True),
            field("dimensions", "json"),
            field("tags", "array", of="string"),
            field("gallery", "images"),
            field("maker", "belongs_to", model_class="vendors"),
        ],
    )


@pytest.fixture
def registry(
    category_schema, vendor_schema, faq_schema, product_schema, article_schema, gadget_schema
) -> ContentTypeRegistry:
    registry = ContentTypeRegistry()
    for schema in (category_schema, vendor_schema, faq_schema, product_schema, article_schema, gadget_schema):
        registry.register(schema.slug, schema)
    return registry


@pytest.fixture
def materializer(engine: Engine, registry: ContentTypeRegistry) -> SchemaMaterializer:
    Base.metadata.create_all(engine)
    return SchemaMaterializer(
        engine,
        registry=registry,
        session_factory=build_session_factory(engine),
    )


@pytest.fixture
def entity_service(engine, registry, materializer, field_types) -> EntityService:
    """Entity service over fully materialized sample schemas."""
    for schema in registry.taxonomies() + registry.content_types():
        materializer.ensure_storage_exists(schema)
    registry.seal()
    return EntityService(engine, registry, materializer, field_types=field_types, slug_max_attempts=5)


@pytest.fixture
def mock_resolver() -> Mock:
    """Resolver with no related entities; tests set return values as needed."""
    resolver = Mock()
    resolver.find_one.return_value = None
    resolver.find_many.return_value = []
    resolver.find_all.return_value = []
    return resolver


@pytest.fixture
def make_entity():
    """Factory for unsaved entities with an id."""
    def _make(content_type: str, entity_id: int, **fields) -> DynamicEntity:
        return DynamicEntity(
            id=entity_id,
            content_type=content_type,
            slug=f"{content_type}-{entity_id}",
            fields=fields,
        )
    return _make


@pytest.fixture
def client(engine: Engine, test_settings: Settings) -> Generator[TestClient, None, None]:
    """Test client for an app bootstrapped from the bundled content types."""
    from main import create_app

    app = create_app(settings=test_settings, engine=engine, packages=["content_types"])
    with TestClient(app) as test_client:
        yield test_client
