"""
Unit Tests for Document Normalizer
==================================

Tests for canonical/legacy document normalization and persisted shape validation.
"""

import pytest

from email_builder.core.documents import DocumentShapeValidator, normalize_document, normalize_instance
from email_builder.models.schemas import TemplateDocument

from tests.utils.assertions import assert_canonical_document
from tests.utils.data_generators import DocumentDataGenerator


class TestNormalizeInstance:
    """Test instance normalization."""

    def test_canonical_instance(self):
        """Test that canonical fields are read."""
        instance = normalize_instance({"id": "a", "componentId": "text", "overrides": {"text": "x"}})

        assert instance.id == "a"
        assert instance.component_id == "text"
        assert instance.overrides == {"text": "x"}

    def test_legacy_instance(self):
        """Test that legacy fields are mapped to canonical ones."""
        instance = normalize_instance({"id": "a", "componentType": "text", "props": {"text": "x"}})

        assert instance.component_id == "text"
        assert instance.overrides == {"text": "x"}

    def test_canonical_names_win(self):
        """Test that canonical names take precedence over legacy names."""
        instance = normalize_instance(
            {
                "id": "a",
                "componentId": "button",
                "componentType": "text",
                "overrides": {"label": "Go"},
                "props": {"text": "x"},
            }
        )

        assert instance.component_id == "button"
        assert instance.overrides == {"label": "Go"}

    @pytest.mark.parametrize("component_id", [None, "", "  ", 7, {"id": "text"}])
    def test_unusable_component_id_becomes_empty(self, component_id):
        """Test that unusable references normalize to an empty id."""
        instance = normalize_instance({"id": "a", "componentId": component_id})
        assert instance.component_id == ""

    @pytest.mark.parametrize("overrides", [None, "text", ["text"], 3])
    def test_unusable_overrides_become_empty(self, overrides):
        """Test that non-mapping overrides normalize to an empty map."""
        instance = normalize_instance({"id": "a", "componentId": "text", "overrides": overrides})
        assert instance.overrides == {}

    def test_children_are_dropped(self):
        """Test that nested legacy children are not carried over."""
        instance = normalize_instance(
            {
                "id": "a",
                "componentType": "text",
                "props": {},
                "children": [{"id": "b", "componentType": "text", "props": {}}],
            }
        )

        assert instance.model_dump(by_alias=True) == {
            "id": "a",
            "componentId": "text",
            "overrides": {},
        }


class TestNormalizeDocument:
    """Test document normalization."""

    def test_document_model_passes_through(self):
        """Test that an already canonical model is returned unchanged."""
        document = TemplateDocument(id="d", name="n")
        assert normalize_document(document) is document

    def test_legacy_document(self):
        """Test that a legacy document converts to the canonical shape."""
        legacy = DocumentDataGenerator.generate_legacy(
            [DocumentDataGenerator.legacy_instance("a", "text", {"text": "Hi"})]
        )
        canonical = DocumentDataGenerator.generate_canonical(
            [DocumentDataGenerator.canonical_instance("a", "text", {"text": "Hi"})]
        )

        assert normalize_document(legacy) == normalize_document(canonical)
        assert_canonical_document(normalize_document(legacy))

    def test_instances_win_over_root(self):
        """Test that a canonical instance list takes precedence over root."""
        data = {
            "id": "d",
            "name": "n",
            "instances": [DocumentDataGenerator.canonical_instance("a", "text")],
            "root": [DocumentDataGenerator.legacy_instance("b", "button")],
        }

        assert [i.id for i in normalize_document(data).instances] == ["a"]

    def test_non_mapping_entries_dropped(self):
        """Test that entries which are not objects are dropped."""
        data = {
            "id": "d",
            "name": "n",
            "instances": [None, "text", DocumentDataGenerator.canonical_instance("a", "text")],
        }

        assert [i.id for i in normalize_document(data).instances] == ["a"]

    @pytest.mark.parametrize("data", [None, [], "document", 1])
    def test_non_mapping_document(self, data):
        """Test that non-object data normalizes to an empty document."""
        document = normalize_document(data)
        assert document == TemplateDocument()

    def test_missing_fields_default_to_empty(self):
        """Test that missing or mistyped fields fall back to empty values."""
        document = normalize_document({"id": 3, "instances": "nope"})

        assert document.id == ""
        assert document.name == ""
        assert document.instances == []

    def test_input_not_mutated(self):
        """Test that normalization does not modify its input."""
        data = DocumentDataGenerator.generate_legacy(
            [DocumentDataGenerator.legacy_instance("a", "text", {"text": "Hi"})]
        )
        snapshot = repr(data)

        normalize_document(data)

        assert repr(data) == snapshot


class TestDocumentShapeValidator:
    """Test strict validation of persisted documents."""

    @pytest.fixture
    def validator(self):
        """Create shape validator."""
        return DocumentShapeValidator()

    def test_canonical_document_valid(self, validator):
        """Test that a canonical document is valid."""
        data = DocumentDataGenerator.generate_newsletter()
        assert validator.validate(data) == []
        assert validator.is_valid(data)

    def test_legacy_document_valid(self, validator):
        """Test that a legacy document is valid."""
        data = DocumentDataGenerator.generate_legacy(
            [DocumentDataGenerator.legacy_instance("a", "text", {"text": "Hi"})]
        )
        assert validator.is_valid(data)

    def test_legacy_children_valid(self, validator):
        """Test that legacy documents may carry nested children."""
        instance = DocumentDataGenerator.legacy_instance("a", "text")
        instance["children"] = [DocumentDataGenerator.legacy_instance("b", "text")]
        assert validator.is_valid(DocumentDataGenerator.generate_legacy([instance]))

    def test_unknown_fields_allowed(self, validator):
        """Test that extra fields do not fail validation."""
        data = DocumentDataGenerator.generate_canonical([])
        data["updatedAt"] = "2024-05-01T12:00:00Z"
        assert validator.is_valid(data)

    def test_missing_name_invalid(self, validator):
        """Test that a document without a name is invalid."""
        errors = validator.validate({"id": "d", "instances": []})
        assert any(error.startswith("name") for error in errors)

    def test_wrong_instance_field_type_invalid(self, validator):
        """Test that nested field errors are reported with their path."""
        data = DocumentDataGenerator.generate_canonical(
            [{"id": "a", "componentId": 42, "overrides": {}}]
        )

        errors = validator.validate(data)

        assert errors
        assert any("componentId" in error for error in errors)

    @pytest.mark.parametrize("data", [None, [], "document"])
    def test_non_object_invalid(self, validator, data):
        """Test that non-object data is invalid."""
        assert validator.validate(data) == [f"Document must be an object, got {type(data).__name__}"]
