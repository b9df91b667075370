"""Tests for registry snapshots and change set resolution."""

import json
from unittest.mock import MagicMock

import pytest

from regcheck.domain import RegistryEntry
from regcheck.exceptions import ParseError, ReferenceUnavailable
from regcheck.infra import GitClient
from regcheck.services import (
    ChangeSetResolver, RegistrySnapshot, SCAN_FIELDS, parse_registry, resolve_changes,
)


def entries(*pairs):
    return [RegistryEntry.from_dict({"id": i, "version": v}) for i, v in pairs]


class TestResolveChanges:
    """Tests for the id/version comparison."""

    def test_unchanged_entry_is_excluded(self):
        """An entry present in base with the same version is not a change."""
        base = entries(("foo", "1.0"))
        current = entries(("foo", "1.0"))
        assert resolve_changes(current, base) == []

    def test_new_entry_is_included(self):
        base = entries(("foo", "1.0"))
        current = entries(("foo", "1.0"), ("bar", "2.0"))
        changed = resolve_changes(current, base)
        assert [e.id for e in changed] == ["bar"]

    def test_version_bump_is_included(self):
        changed = resolve_changes(entries(("foo", "1.1")), entries(("foo", "1.0")))
        assert [e.version for e in changed] == ["1.1"]

    def test_version_compare_is_textual(self):
        """1.0 and 1.0.0 are different versions."""
        changed = resolve_changes(entries(("foo", "1.0.0")), entries(("foo", "1.0")))
        assert len(changed) == 1

    def test_other_field_changes_are_ignored(self):
        base = [RegistryEntry.from_dict({"id": "foo", "version": "1.0", "description": "old"})]
        current = [RegistryEntry.from_dict({"id": "foo", "version": "1.0", "description": "new"})]
        assert resolve_changes(current, base) == []

    def test_no_base_means_everything_changed(self):
        current = entries(("a", "1"), ("b", "2"))
        assert resolve_changes(current, None) == current

    def test_removed_entries_are_not_reported(self):
        assert resolve_changes([], entries(("gone", "1.0"))) == []

    def test_order_follows_current(self):
        current = entries(("z", "1"), ("a", "1"), ("m", "1"))
        assert [e.id for e in resolve_changes(current, [])] == ["z", "a", "m"]


class TestParseRegistry:
    """Tests for registry text parsing."""

    def test_parse_valid(self):
        result = parse_registry('[{"id": "a", "version": "1.0"}]')
        assert result[0].id == "a"

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            parse_registry("{not json")

    def test_root_must_be_array(self):
        with pytest.raises(ParseError, match="must be an array"):
            parse_registry('{"id": "a"}', source="plugins.json")

    def test_item_must_be_object(self):
        with pytest.raises(ParseError, match=r"plugins.json\[1\]"):
            parse_registry('[{"id": "a"}, 3]', source="plugins.json")


class TestRegistrySnapshot:
    """Tests for RegistrySnapshot with a mocked git client."""

    def test_current_reads_working_copy(self, write_registry, tmp_path):
        write_registry("plugins.json", [{"id": "a", "version": "1.0"}])
        snapshot = RegistrySnapshot(tmp_path, "plugins.json", git_client=MagicMock(spec=GitClient))
        assert snapshot.exists()
        assert [e.id for e in snapshot.current()] == ["a"]

    def test_current_missing_file_raises(self, tmp_path):
        snapshot = RegistrySnapshot(tmp_path, "plugins.json", git_client=MagicMock(spec=GitClient))
        assert not snapshot.exists()
        with pytest.raises(FileNotFoundError):
            snapshot.current()

    def test_load_ref_uses_git_show(self, tmp_path):
        git = MagicMock(spec=GitClient)
        git.show_file.return_value = json.dumps([{"id": "a", "version": "0.9"}])
        snapshot = RegistrySnapshot(tmp_path, "plugins.json", git_client=git)

        base = snapshot.load_ref("origin/main")

        git.show_file.assert_called_once_with("origin/main", "plugins.json")
        assert base[0].version == "0.9"

    def test_load_ref_unavailable_raises(self, tmp_path):
        git = MagicMock(spec=GitClient)
        git.show_file.return_value = None
        snapshot = RegistrySnapshot(tmp_path, "plugins.json", git_client=git)
        with pytest.raises(ReferenceUnavailable):
            snapshot.load_ref("origin/main")

    def test_at_ref_fails_open(self, tmp_path):
        git = MagicMock(spec=GitClient)
        git.show_file.return_value = "garbage"
        snapshot = RegistrySnapshot(tmp_path, "plugins.json", git_client=git)
        assert snapshot.at_ref("origin/main") is None


class TestChangeSetResolver:
    """Tests for ChangeSetResolver."""

    def test_resolve(self, write_registry, tmp_path):
        write_registry("plugins.json", [
            {"id": "foo", "version": "1.0"},
            {"id": "bar", "version": "2.0"},
        ])
        git = MagicMock(spec=GitClient)
        git.show_file.return_value = json.dumps([{"id": "foo", "version": "1.0"}])

        resolver = ChangeSetResolver(RegistrySnapshot(tmp_path, "plugins.json", git_client=git))

        assert [e.id for e in resolver.resolve()] == ["bar"]

    def test_resolve_without_history_returns_all(self, write_registry, tmp_path):
        write_registry("themes.json", [{"id": "t1", "version": "1"}, {"id": "t2", "version": "1"}])
        git = MagicMock(spec=GitClient)
        git.show_file.return_value = None

        resolver = ChangeSetResolver(RegistrySnapshot(tmp_path, "themes.json", git_client=git))

        assert [e.id for e in resolver.resolve()] == ["t1", "t2"]


class TestScanFields:
    """Change resolution over the scan fields also watches `repo`."""

    def test_repo_change_without_version_bump(self):
        base = [RegistryEntry.from_dict({"id": "foo", "version": "1.0", "repo": "o/foo"})]
        current = [RegistryEntry.from_dict({"id": "foo", "version": "1.0", "repo": "evil/foo"})]

        assert resolve_changes(current, base) == []
        assert [e.repo for e in resolve_changes(current, base, SCAN_FIELDS)] == ["evil/foo"]

    def test_resolver_reads_snapshots_once(self, write_registry, tmp_path):
        write_registry("plugins.json", [{"id": "foo", "version": "1.0", "repo": "evil/foo"}])
        git = MagicMock(spec=GitClient)
        git.show_file.return_value = json.dumps([{"id": "foo", "version": "1.0", "repo": "o/foo"}])
        resolver = ChangeSetResolver(RegistrySnapshot(tmp_path, "plugins.json", git_client=git))

        assert resolver.resolve() == []
        assert [e.id for e in resolver.resolve(SCAN_FIELDS)] == ["foo"]
        git.show_file.assert_called_once()


class TestMalformedEntries:
    """Malformed items surface as ParseError."""

    @pytest.mark.parametrize("modes", [5, True, {"dark": True}])
    def test_non_array_modes(self, modes):
        with pytest.raises(ParseError, match=r"plugins.json\[0\]"):
            parse_registry(json.dumps([{"id": "t", "modes": modes}]), source="plugins.json")

    def test_invalid_utf8_working_copy(self, tmp_path):
        (tmp_path / "plugins.json").write_bytes(b'[{"id": "\xff"}]')
        snapshot = RegistrySnapshot(tmp_path, "plugins.json", git_client=MagicMock(spec=GitClient))
        with pytest.raises(ParseError, match="not valid UTF-8"):
            snapshot.current()
