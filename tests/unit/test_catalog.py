"""
Unit Tests for Component Catalog
================================

Tests for catalog construction, lookup and YAML loading.
"""

import pytest

from email_builder.core.catalog import CatalogError, ComponentCatalog, load_catalog
from email_builder.core.catalog.catalog import BUILTIN_CATALOG_PATH
from email_builder.models.schemas import ComponentDefinition, SettingKind

from tests.utils.data_generators import CatalogDataGenerator


class TestCatalogError:
    """Test catalog error handling."""

    def test_catalog_error_creation(self):
        """Test creating catalog error."""
        error = CatalogError("Duplicate component id: text")
        assert str(error) == "Duplicate component id: text"
        assert isinstance(error, Exception)


class TestComponentCatalog:
    """Test in-memory catalog behavior."""

    def test_lookup(self, text_catalog):
        """Test looking up a definition by id."""
        definition = text_catalog.get("text")
        assert definition is not None
        assert definition.template == "<p>{{text}}</p>"

    def test_lookup_unknown_returns_none(self, text_catalog):
        """Test that unknown ids are absent, not errors."""
        assert text_catalog.get("missing") is None
        assert "missing" not in text_catalog
        assert "text" in text_catalog

    def test_list_preserves_order(self):
        """Test that definitions keep their declared order."""
        definitions = [
            ComponentDefinition(id=component_id, template="")
            for component_id in ("b", "a", "c")
        ]
        catalog = ComponentCatalog(definitions)

        assert [d.id for d in catalog.list()] == ["b", "a", "c"]
        assert [d.id for d in catalog] == ["b", "a", "c"]
        assert len(catalog) == 3

    def test_list_returns_copy(self, text_catalog):
        """Test that callers cannot mutate the catalog through list()."""
        text_catalog.list().clear()
        assert len(text_catalog) == 1

    def test_duplicate_ids_rejected(self):
        """Test that duplicate component ids are rejected."""
        definition = ComponentDefinition(id="text", template="")
        with pytest.raises(CatalogError, match="Duplicate component id"):
            ComponentCatalog([definition, definition])

    def test_duplicate_setting_keys_rejected(self):
        """Test that duplicate setting keys are rejected."""
        data = CatalogDataGenerator.text_definition()
        data["settings"] = data["settings"] * 2
        with pytest.raises(CatalogError, match="index 0"):
            ComponentCatalog.from_data([data])

    def test_from_data_accepts_mapping(self):
        """Test building from a mapping with a components list."""
        catalog = ComponentCatalog.from_data({"components": [CatalogDataGenerator.text_definition()]})
        assert catalog.get("text") is not None

    @pytest.mark.parametrize("data", [None, "text", {"components": "text"}, {}])
    def test_from_data_rejects_non_list(self, data):
        """Test that data without a component list is rejected."""
        with pytest.raises(CatalogError):
            ComponentCatalog.from_data(data)

    def test_unknown_setting_kind_rejected(self):
        """Test that setting kinds outside the closed set are rejected."""
        data = CatalogDataGenerator.text_definition()
        data["settings"][0]["type"] = "richtext"
        with pytest.raises(CatalogError):
            ComponentCatalog.from_data([data])


class TestEffectiveDefaults:
    """Test default resolution of component definitions."""

    def test_defaults_map_wins(self):
        """Test that the defaults map wins over a setting default."""
        definition = ComponentDefinition.model_validate(
            {
                "id": "c",
                "settings": [
                    {"key": "a", "label": "A", "type": "text", "defaultValue": "setting"},
                    {"key": "b", "label": "B", "type": "text", "defaultValue": "fallback"},
                    {"key": "c", "label": "C", "type": "text"},
                ],
                "defaults": {"a": "map"},
            }
        )

        assert definition.effective_defaults() == {"a": "map", "b": "fallback"}

    def test_defaults_outside_settings_are_kept(self):
        """Test that default keys without a setting still resolve."""
        definition = ComponentDefinition(id="c", defaults={"extra": 1})
        assert definition.effective_defaults() == {"extra": 1}


class TestBuiltinCatalog:
    """Test the built-in catalog shipped with the package."""

    def test_builtin_components(self, catalog):
        """Test that the four built-in components are present in order."""
        assert [d.id for d in catalog] == ["text", "button", "divider", "image"]

    def test_builtin_defaults(self, catalog):
        """Test selected built-in defaults."""
        assert catalog.get("text").effective_defaults()["text"] == "Sample text"
        assert catalog.get("divider").effective_defaults()["thickness"] == 1
        assert catalog.get("button").effective_defaults()["openInNewTab"] is False

    def test_builtin_setting_kinds(self, catalog):
        """Test that built-in settings use the expected value kinds."""
        settings = catalog.get("button").setting_map()
        assert settings["label"].type is SettingKind.TEXT
        assert settings["url"].type is SettingKind.URL
        assert settings["backgroundColor"].type is SettingKind.COLOR
        assert settings["openInNewTab"].type is SettingKind.BOOLEAN

        align = catalog.get("text").setting_map()["align"]
        assert align.type is SettingKind.CHOICE
        assert [option.value for option in align.options] == ["left", "center", "right"]

    def test_every_builtin_placeholder_is_declared(self, catalog):
        """Test that built-in templates only use declared setting keys."""
        from email_builder.core.rendering.renderer import find_placeholders

        for definition in catalog:
            declared = set(definition.setting_map())
            assert set(find_placeholders(definition.template)) <= declared, definition.id


class TestLoadCatalog:
    """Test loading catalogs from YAML files."""

    def test_load_builtin_file(self):
        """Test loading the packaged catalog file."""
        catalog = load_catalog(BUILTIN_CATALOG_PATH)
        assert len(catalog) == 4

    def test_load_custom_file(self, tmp_path):
        """Test loading a custom catalog file."""
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "components:\n"
            "  - id: spacer\n"
            "    name: Spacer\n"
            "    template: '<div style=\"height: {{height}}px;\"></div>'\n"
            "    settings:\n"
            "      - {key: height, label: Height, type: number, defaultValue: 24}\n",
            encoding="utf-8",
        )

        catalog = load_catalog(path)

        assert catalog.get("spacer").effective_defaults() == {"height": 24}

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises CatalogError."""
        with pytest.raises(CatalogError, match="Cannot load catalog"):
            load_catalog(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that unparsable YAML raises CatalogError."""
        path = tmp_path / "broken.yaml"
        path.write_text("components: [unclosed", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)
