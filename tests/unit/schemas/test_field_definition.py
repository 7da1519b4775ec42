import pytest
from pydantic import ValidationError

from core.exceptions import SchemaDefinitionError
from schemas.field_definition import FieldDefinition, FieldKind, field, humanize


@pytest.mark.unit
class TestFieldDefinition:

    def test_label_defaults_to_humanized_name(self):
        definition = field("display_order", "integer")

        assert definition.label == "Display order"

    def test_explicit_label_is_kept(self):
        definition = field("linkedin_url", "string", label="LinkedIn URL")

        assert definition.label == "LinkedIn URL"

    def test_humanize_drops_id_suffix(self):
        assert humanize("author_id") == "Author"
        assert humanize("vendor_ids") == "Vendor ids"

    def test_unknown_options_are_kept_in_options(self):
        definition = field("tags", "array", of="string")

        assert definition.options == {"of": "string"}

    def test_model_class_sets_target_schema(self):
        definition = field("vendor_ids", "reference", model_class="vendors")

        assert definition.target_schema == "vendors"

    def test_plain_choices_are_normalized_to_label_value_pairs(self):
        definition = field("category", "select", choices=["General", ("Paid plans", "billing")])

        assert definition.choices == (("General", "General"), ("Paid plans", "billing"))
        assert definition.choice_values == ["General", "billing"]
        assert definition.choice_label("billing") == "Paid plans"

    def test_kind_is_none_for_unknown_tags(self):
        assert field("title").kind == FieldKind.STRING
        assert field("payload", "mystery").kind is None

    def test_select_without_choices_is_rejected(self):
        with pytest.raises(SchemaDefinitionError, match="must declare choices"):
            field("category", "select")

    def test_repeater_requires_sub_fields(self):
        with pytest.raises(SchemaDefinitionError, match="must declare sub fields"):
            field("gallery", "repeater")

    def test_repeater_cannot_nest_repeaters(self):
        inner = field("rows", "repeater", fields=[field("caption")])

        with pytest.raises(SchemaDefinitionError, match="cannot contain repeater"):
            field("gallery", "repeater", fields=[inner])

    def test_repeater_sub_field_names_are_unique(self):
        with pytest.raises(SchemaDefinitionError, match="twice"):
            field("gallery", "repeater", fields=[field("caption"), field("caption")])

    def test_only_repeaters_take_sub_fields(self):
        with pytest.raises(SchemaDefinitionError, match="Only repeater fields"):
            field("caption", "string", fields=[field("x")])

    def test_invalid_name_is_rejected(self):
        with pytest.raises(ValidationError):
            field("Display Order", "integer")

    def test_definitions_are_immutable(self):
        definition = field("title")

        with pytest.raises(ValidationError):
            definition.required = True
