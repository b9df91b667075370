"""Tests for pull request classification."""

import pytest

from regcheck.domain import ChangeClassification
from regcheck.services import ChangeClassifier


class TestChangeClassifier:
    """Tests for ChangeClassifier."""

    @pytest.mark.parametrize("paths,expected", [
        (["plugins.json"], ChangeClassification.PLUGINS_ONLY),
        (["themes.json", "README.md"], ChangeClassification.THEMES_ONLY),
        (["README.md", "scripts/validate.py"], ChangeClassification.NEITHER),
        ([], ChangeClassification.NEITHER),
        (["plugins.json", "themes.json"], ChangeClassification.BOTH),
    ])
    def test_classify(self, paths, expected):
        assert ChangeClassifier().classify(paths) is expected

    def test_substring_match_counts_nested_paths(self):
        classifier = ChangeClassifier()
        assert classifier.classify(["docs/old-plugins.json.bak"]) is ChangeClassification.PLUGINS_ONLY

    def test_basename_match_is_exact(self):
        classifier = ChangeClassifier(match="basename")
        assert classifier.classify(["docs/old-plugins.json.bak"]) is ChangeClassification.NEITHER
        assert classifier.classify(["registry/plugins.json"]) is ChangeClassification.PLUGINS_ONLY

    def test_custom_file_names(self):
        classifier = ChangeClassifier(plugins_file="data/extensions.json", themes_file="data/skins.json")
        assert classifier.classify(["data/skins.json"]) is ChangeClassification.THEMES_ONLY

    def test_accepts_any_iterable(self):
        paths = iter(["plugins.json", "themes.json"])
        assert ChangeClassifier().classify(paths) is ChangeClassification.BOTH

    def test_unknown_match_mode(self):
        with pytest.raises(ValueError):
            ChangeClassifier(match="regex")
