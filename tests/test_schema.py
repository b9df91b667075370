"""Tests for registry schema and format checks."""

import json

from regcheck.domain import RegistryKind
from regcheck.services import SchemaValidator
from regcheck.services.schema import format_registry_text


def plugin_item(**overrides):
    item = {
        "id": "p", "name": "P", "author": "A", "version": "1.0",
        "description": "d", "repo": "https://github.com/o/p",
    }
    item.update(overrides)
    return item


def theme_item(**overrides):
    item = plugin_item(id="t", repo="https://github.com/o/t", modes=["dark"])
    item.update(overrides)
    return item


class TestSchemaValidator:
    """Tests for SchemaValidator."""

    def test_valid_plugins(self, write_registry, tmp_path):
        write_registry("plugins.json", [plugin_item(), plugin_item(id="q")])
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)

        assert verdict.ok
        assert verdict.diagnostics[-1].message == "plugins.json is valid (2 entries)"

    def test_missing_file(self, tmp_path):
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.THEMES)
        assert not verdict.ok
        assert verdict.errors[0].message == "File not found: themes.json"

    def test_invalid_json(self, tmp_path):
        (tmp_path / "plugins.json").write_text("[{", encoding="utf-8")
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)
        assert not verdict.ok
        assert verdict.errors[0].message.startswith("Invalid JSON in plugins.json")

    def test_root_must_be_array(self, write_registry, tmp_path):
        write_registry("plugins.json", {"id": "p"})
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)
        assert verdict.errors[0].message == "Root element in plugins.json must be an array."

    def test_missing_and_empty_fields(self, write_registry, tmp_path):
        item = plugin_item(description="  ")
        del item["author"]
        write_registry("plugins.json", [item])

        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)

        assert [d.message for d in verdict.errors] == [
            'Item at index 0 missing required field: "author"',
            'Item at index 0 has empty field: "description"',
        ]

    def test_non_object_item(self, write_registry, tmp_path):
        write_registry("plugins.json", [plugin_item(), "oops"])
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)
        assert verdict.errors[0].message == "Item at index 1 must be an object"

    def test_duplicate_ids(self, write_registry, tmp_path):
        write_registry("plugins.json", [plugin_item(), plugin_item()])
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)
        assert verdict.errors[0].message == 'Duplicate ID found: "p"'

    def test_themes_require_modes(self, write_registry, tmp_path):
        item = theme_item()
        del item["modes"]
        write_registry("themes.json", [item])
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.THEMES)
        assert verdict.errors[0].message == 'Item at index 0 missing required field: "modes"'

    def test_theme_modes_checked(self, write_registry, tmp_path):
        write_registry("themes.json", [theme_item(modes=["dark", "sepia"]), theme_item(id="u", modes="dark")])
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.THEMES)

        messages = [d.message for d in verdict.errors]
        assert any('unsupported mode "sepia"' in m for m in messages)
        assert 'Item at index 1 field "modes" must be an array' in messages

    def test_reformats_file(self, tmp_path):
        path = tmp_path / "plugins.json"
        path.write_text(json.dumps([plugin_item()]), encoding="utf-8")

        SchemaValidator(tmp_path, fix_format=True).validate(RegistryKind.PLUGINS)

        assert path.read_text(encoding="utf-8") == format_registry_text([plugin_item()])

    def test_no_format_leaves_file_alone(self, tmp_path):
        path = tmp_path / "plugins.json"
        original = json.dumps([plugin_item()])
        path.write_text(original, encoding="utf-8")

        SchemaValidator(tmp_path, fix_format=False).validate(RegistryKind.PLUGINS)

        assert path.read_text(encoding="utf-8") == original

    def test_format_file_reports_change(self, tmp_path):
        path = tmp_path / "plugins.json"
        path.write_text(format_registry_text([]), encoding="utf-8")
        assert SchemaValidator(tmp_path).format_file(path) is False


class TestFormatRegistryText:
    """Tests for canonical formatting."""

    def test_non_ascii_is_kept(self):
        assert "Café" in format_registry_text([{"name": "Café"}])

    def test_trailing_newline(self):
        assert format_registry_text([]).endswith("\n")


class TestMalformedContent:
    """Content that cannot be read as a registry is reported, not raised."""

    def test_invalid_utf8(self, tmp_path):
        (tmp_path / "plugins.json").write_bytes(b'[{"id": "\xff"}]')
        verdict = SchemaValidator(tmp_path, fix_format=True).validate(RegistryKind.PLUGINS)

        assert not verdict.ok
        assert verdict.errors[0].message.startswith("Invalid encoding in plugins.json")

    def test_duplicate_numeric_ids(self, write_registry, tmp_path):
        write_registry("plugins.json", [plugin_item(id=7), plugin_item(id=7)])
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)
        assert [d.message for d in verdict.errors] == ['Duplicate ID found: "7"']

    def test_numeric_and_string_ids_collide(self, write_registry, tmp_path):
        write_registry("plugins.json", [plugin_item(id=7), plugin_item(id="7")])
        verdict = SchemaValidator(tmp_path).validate(RegistryKind.PLUGINS)
        assert not verdict.ok
