"""
Pull request labeling for regcheck.

Runs once, after the pipeline verdict is final. Labeling failures are logged
and never change the verdict.
"""

import logging
from typing import List, Optional, Tuple, Union

from ..domain import ChangeClassification, RegistryKind
from ..infra import GitHubClient

logger = logging.getLogger(__name__)

LABEL_PASSED = "waiting-for-review"
LABEL_FAILED = "validation-error"


def plan_labels(
    classification: ChangeClassification,
    ok: bool,
    passed_label: str = LABEL_PASSED,
    failed_label: str = LABEL_FAILED,
) -> Tuple[List[str], List[str]]:
    """
    Labels to add and remove for a verdict.

    Returns:
        (labels_to_add, labels_to_remove)
    """
    to_add = []
    if classification is ChangeClassification.PLUGINS_ONLY:
        to_add.append(RegistryKind.PLUGINS.label)
    elif classification is ChangeClassification.THEMES_ONLY:
        to_add.append(RegistryKind.THEMES.label)

    if ok:
        to_add.append(passed_label)
        to_remove = [failed_label]
    else:
        to_add.append(failed_label)
        to_remove = [passed_label]
    return to_add, to_remove


class PullRequestLabeler:
    """Applies the verdict labels to a pull request."""

    def __init__(
        self,
        github_client: Optional[GitHubClient] = None,
        passed_label: str = LABEL_PASSED,
        failed_label: str = LABEL_FAILED,
    ):
        self.github = github_client or GitHubClient()
        self.passed_label = passed_label
        self.failed_label = failed_label

    def apply(self, pr: Union[int, str], classification: ChangeClassification, ok: bool) -> bool:
        """
        Add and remove labels on `pr`.

        Returns:
            True if every label call succeeded
        """
        to_add, to_remove = plan_labels(classification, ok, self.passed_label, self.failed_label)
        logger.info(f"--- Labeling PR #{pr} ---")

        success = True
        if to_add:
            logger.info(f"Adding labels: {', '.join(to_add)}")
            success = self.github.add_labels(pr, to_add) and success
        if to_remove:
            logger.info(f"Removing labels: {', '.join(to_remove)}")
            success = self.github.remove_labels(pr, to_remove) and success

        if not success:
            logger.warning(f"Labeling PR #{pr} did not fully succeed")
        return success
