import pytest
from unittest.mock import patch
from sqlalchemy import Table, inspect
from sqlalchemy.exc import OperationalError

from core.exceptions import MaterializationError
from schemas.content_type import ContentTypeSchema
from schemas.field_definition import field
from services.schema_materializer import SchemaMaterializer


@pytest.mark.unit
class TestSchemaMaterializer:

    def test_creates_table_with_base_and_field_columns(self, engine, materializer, faq_schema):
        result = materializer.ensure_storage_exists(faq_schema)

        columns = {column["name"] for column in inspect(engine).get_columns("faqs")}
        assert result.created is True
        assert result.changed is True
        assert columns == {
            "id", "slug", "status", "published_at", "author_id", "created_at", "updated_at",
            "question", "answer", "category", "display_order",
        }

    def test_is_idempotent(self, materializer, faq_schema):
        materializer.ensure_storage_exists(faq_schema)

        second = materializer.ensure_storage_exists(faq_schema)

        assert second.created is False
        assert second.added_columns == []
        assert second.changed is False

    def test_adds_columns_for_new_fields(self, engine, materializer, registry, faq_schema):
        materializer.ensure_storage_exists(faq_schema)
        extended = ContentTypeSchema(
            slug="faqs",
            display_name="FAQ",
            fields=list(faq_schema.fields) + [field("helpful_votes", "integer")],
        )

        result = materializer.ensure_storage_exists(extended)

        assert result.added_columns == ["helpful_votes"]
        assert "helpful_votes" in {column["name"] for column in inspect(engine).get_columns("faqs")}

    def test_removed_fields_keep_their_columns(self, engine, materializer, faq_schema):
        materializer.ensure_storage_exists(faq_schema)
        reduced = ContentTypeSchema(slug="faqs", display_name="FAQ", fields=[field("question")])

        result = materializer.ensure_storage_exists(reduced)

        assert result.changed is False
        assert "answer" in {column["name"] for column in inspect(engine).get_columns("faqs")}

    def test_records_migration_history(self, materializer, faq_schema):
        materializer.ensure_storage_exists(faq_schema)
        materializer.ensure_storage_exists(ContentTypeSchema(
            slug="faqs",
            display_name="FAQ",
            fields=list(faq_schema.fields) + [field("helpful_votes", "integer")],
        ))

        history = materializer.migration_history("faqs")

        assert [(entry.migration_type, entry.version, entry.status) for entry in history] == [
            ("create_table", 1, "applied"),
            ("add_columns", 2, "applied"),
        ]
        assert "CREATE TABLE" in history[0].migration_sql
        assert "ADD COLUMN" in history[1].migration_sql

    def test_column_types_follow_field_types(self, materializer, product_schema):
        table = materializer.table_for(product_schema)

        assert table.c.price.type.precision == 10
        assert table.c.price.type.scale == 2
        assert table.c.sku.unique is True
        assert table.c.stock_quantity.default.arg == 0
        assert "vendors.id" in {fk.target_fullname for fk in table.c.vendor.foreign_keys}

    def test_virtual_fields_have_no_column(self, materializer):
        schema = ContentTypeSchema(
            slug="shelves",
            display_name="Shelf",
            fields=[field("title"), field("books", "has_many")],
        )

        assert "books" not in materializer.table_for(schema).c

    def test_unknown_types_are_stored_as_text(self, materializer):
        schema = ContentTypeSchema(slug="widgets", display_name="Widget", fields=[field("payload", "mystery")])

        column = materializer.table_for(schema).c.payload

        assert column.type.__class__.__name__ == "Text"

    def test_belongs_to_target_is_materialized_first(self, engine, materializer, product_schema):
        materializer.ensure_storage_exists(product_schema)

        tables = inspect(engine).get_table_names()
        assert "vendors" in tables
        assert "products" in tables

    def test_failed_create_is_recorded_and_raised(self, materializer, faq_schema):
        error = OperationalError("CREATE TABLE faqs", {}, Exception("disk full"))

        with patch.object(Table, "create", side_effect=error):
            with pytest.raises(MaterializationError) as exc_info:
                materializer.ensure_storage_exists(faq_schema)

        assert exc_info.value.content_type == "faqs"
        history = materializer.migration_history("faqs")
        assert history[0].status == "failed"
        assert "disk full" in history[0].error_message

    def test_works_without_migration_history(self, engine, faq_schema):
        materializer = SchemaMaterializer(engine)

        result = materializer.ensure_storage_exists(faq_schema)

        assert result.created is True
        assert materializer.migration_history("faqs") == []
