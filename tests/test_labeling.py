"""Tests for pull request labeling."""

from unittest.mock import MagicMock

from regcheck.domain import ChangeClassification
from regcheck.infra import GitHubClient
from regcheck.services import PullRequestLabeler, plan_labels


class TestPlanLabels:
    """Tests for plan_labels."""

    def test_plugins_passed(self):
        assert plan_labels(ChangeClassification.PLUGINS_ONLY, True) == (
            ["plugin", "waiting-for-review"], ["validation-error"]
        )

    def test_themes_failed(self):
        assert plan_labels(ChangeClassification.THEMES_ONLY, False) == (
            ["theme", "validation-error"], ["waiting-for-review"]
        )

    def test_custom_label_names(self):
        to_add, to_remove = plan_labels(ChangeClassification.PLUGINS_ONLY, True, "ready", "broken")
        assert to_add == ["plugin", "ready"]
        assert to_remove == ["broken"]


class TestPullRequestLabeler:
    """Tests for PullRequestLabeler with a mocked GitHub client."""

    def test_apply(self):
        github = MagicMock(spec=GitHubClient)
        github.add_labels.return_value = True
        github.remove_labels.return_value = True

        assert PullRequestLabeler(github).apply(42, ChangeClassification.PLUGINS_ONLY, True)

        github.add_labels.assert_called_once_with(42, ["plugin", "waiting-for-review"])
        github.remove_labels.assert_called_once_with(42, ["validation-error"])

    def test_partial_failure_still_removes(self):
        github = MagicMock(spec=GitHubClient)
        github.add_labels.return_value = False
        github.remove_labels.return_value = True

        assert not PullRequestLabeler(github).apply("7", ChangeClassification.THEMES_ONLY, False)
        github.remove_labels.assert_called_once_with("7", ["waiting-for-review"])
