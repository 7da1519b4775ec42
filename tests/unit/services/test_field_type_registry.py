import logging

import pytest

from field_types import ArrayField, BelongsToField, Field, JsonField, NumberField, StringField, TextField
from schemas.entity import DynamicEntity
from schemas.field_definition import FieldKind, field
from services.field_type_registry import FieldTypeRegistry, get_field_type_registry


class ColorField(Field):
    type_tag = "color"
    input_kind = "color"


@pytest.mark.unit
class TestFieldTypeRegistry:

    def test_every_field_kind_has_a_strategy(self):
        registry = FieldTypeRegistry()

        for kind in FieldKind:
            assert registry.is_known(kind.value)

    def test_variants_share_strategies(self):
        registry = FieldTypeRegistry()

        assert type(registry.build(field("body", "rich_text"))) is TextField
        assert type(registry.build(field("stock", "integer"))) is NumberField

    def test_unknown_tag_falls_back_to_string(self, caplog):
        registry = FieldTypeRegistry()

        with caplog.at_level(logging.WARNING):
            built = registry.build(field("payload", "mystery"))

        assert type(built) is StringField
        assert built.name == "payload"
        assert "Unknown field type 'mystery'" in caplog.text

    def test_unknown_tag_renders_plain_text(self):
        built = FieldTypeRegistry().build(field("payload", "mystery"))
        entity = DynamicEntity(content_type="widgets", fields={"payload": "  raw <b>value</b>"})

        spec = built.describe_input("current")

        assert spec.kind == "text"
        assert spec.value == "current"
        assert spec.choices == []
        assert built.format_for_display(entity) == "  raw <b>value</b>"

    def test_storage_tags_keep_structured_values(self, caplog):
        registry = FieldTypeRegistry()

        with caplog.at_level(logging.WARNING):
            dimensions = registry.build(field("dimensions", "json"))
            gallery = registry.build(field("gallery", "images"))
            tags = registry.build(field("tags", "array", of="string"))
            maker = registry.build(field("maker", "belongs_to", model_class="vendors"))

        assert isinstance(dimensions, JsonField)
        assert isinstance(gallery, JsonField)
        assert isinstance(tags, ArrayField)
        assert isinstance(maker, BelongsToField)
        assert dimensions.validate({"w": 10}) == {"w": 10}
        assert tags.validate(["red", 2]) == ["red", "2"]
        assert maker.validate("7") == 7
        assert "Unknown field type" not in caplog.text

    def test_virtual_tags_fall_back_quietly(self, caplog):
        registry = FieldTypeRegistry()

        with caplog.at_level(logging.WARNING):
            built = registry.build(field("categories", "has_many", model_class="categories"))

        assert type(built) is StringField
        assert "Unknown field type" not in caplog.text

    def test_register_custom_strategy(self):
        registry = FieldTypeRegistry()
        registry.register("color", ColorField)

        assert "color" in registry.type_tags()
        assert isinstance(registry.build(field("accent", "color")), ColorField)

    def test_empty_registry_builds_fallbacks(self):
        registry = FieldTypeRegistry(include_defaults=False)

        assert registry.type_tags() == []
        assert type(registry.build(field("stock", "integer"))) is StringField

    def test_build_all_passes_resolver(self, mock_resolver):
        registry = FieldTypeRegistry()

        built = registry.build_all([field("title"), field("topic", "taxonomy")], resolver=mock_resolver)

        assert [item.name for item in built] == ["title", "topic"]
        assert all(item.resolver is mock_resolver for item in built)

    def test_process_wide_instance(self):
        assert get_field_type_registry() is get_field_type_registry()
