import pytest

from core.exceptions import UnknownFieldError
from field_types import ReferenceField
from schemas.entity import DynamicEntity
from services.entity_accessor import EntityAccessor


@pytest.mark.unit
class TestEntityAccessor:

    def test_reference_values_are_lists_on_read_and_write(self, product_schema, field_types):
        accessor = EntityAccessor(product_schema, field_types=field_types)
        entity = DynamicEntity(content_type="products")

        assert accessor.get(entity, "vendor_ids") == []

        accessor.set(entity, "vendor_ids", 5)
        assert entity.fields["vendor_ids"] == [5]
        assert accessor.get(entity, "vendor_ids") == [5]

    def test_unknown_field(self, faq_schema, field_types):
        accessor = EntityAccessor(faq_schema, field_types=field_types)

        with pytest.raises(UnknownFieldError) as exc_info:
            accessor.get(DynamicEntity(content_type="faqs"), "priority")

        assert exc_info.value.field == "priority"

    def test_fields_follow_declaration_order(self, product_schema, field_types):
        accessor = EntityAccessor(product_schema, field_types=field_types)

        assert accessor.field_names() == product_schema.field_names
        assert isinstance(accessor.field("vendor_ids"), ReferenceField)

    def test_defaults(self, faq_schema, field_types):
        assert EntityAccessor(faq_schema, field_types=field_types).defaults() == {"display_order": 0}

    def test_display_formats_every_field(self, faq_schema, field_types):
        accessor = EntityAccessor(faq_schema, field_types=field_types)
        entity = DynamicEntity(
            content_type="faqs",
            fields={"question": "Can I pay by invoice?", "category": "Billing", "display_order": 2},
        )

        assert accessor.display(entity) == {
            "question": "Can I pay by invoice?",
            "answer": "-",
            "category": "Billing",
            "display_order": "2",
        }

    def test_display_errors_fall_back_to_raw_value(self, product_schema, field_types):
        accessor = EntityAccessor(product_schema, field_types=field_types)
        entity = DynamicEntity(content_type="products", fields={"price": "lots"})

        assert accessor.display(entity)["price"] == "lots"
