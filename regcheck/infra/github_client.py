"""
GitHub client infrastructure for regcheck.

Used only to label pull requests once a pipeline verdict is final:
- Uses `gh` CLI when available and authenticated
- Falls back to the REST API through requests with a token
"""

import subprocess
import os
import logging
from typing import Optional, List, Union
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


class GitHubClient:
    """
    GitHub pull request labeling.

    Label calls return a bool and never raise: a labeling failure must not
    change a pipeline verdict.

    Example:
        client = GitHubClient(repository="owner/registry")
        client.add_labels(42, ["plugin", "waiting-for-review"])
    """

    def __init__(
        self,
        token: Optional[str] = None,
        repository: Optional[str] = None,
        timeout: int = 30,
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token (defaults to REGCHECK_GITHUB_TOKEN or GITHUB_TOKEN env var)
            repository: "owner/name" of the registry repo (defaults to GITHUB_REPOSITORY)
            timeout: Timeout in seconds for gh and REST calls
        """
        self.token = token or os.environ.get('REGCHECK_GITHUB_TOKEN') or os.environ.get('GITHUB_TOKEN')
        self.repository = repository or os.environ.get('GITHUB_REPOSITORY')
        self.timeout = timeout
        self._use_gh_cli: Optional[bool] = None

    @property
    def use_gh_cli(self) -> bool:
        if self._use_gh_cli is None:
            self._use_gh_cli = self._check_gh_cli()
        return self._use_gh_cli

    def _check_gh_cli(self) -> bool:
        """Check if gh CLI is available and authenticated."""
        try:
            result = subprocess.run(
                ['gh', 'auth', 'status'],
                capture_output=True,
                text=True,
                timeout=10
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def _gh_pr_edit(self, pr: Union[int, str], flag: str, labels: List[str]) -> bool:
        """Run `gh pr edit <pr> --add-label/--remove-label a,b`."""
        cmd = ['gh', 'pr', 'edit', str(pr), flag, ','.join(labels)]
        if self.repository:
            cmd += ['--repo', self.repository]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except (subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.warning(f"gh pr edit failed: {e}")
            return False
        if result.returncode != 0:
            logger.warning(f"gh pr edit failed: {result.stderr.strip()}")
            return False
        return True

    def _headers(self) -> dict:
        return {
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'regcheck',
            'Authorization': f'token {self.token}',
        }

    def _can_use_api(self) -> bool:
        if not self.token or not self.repository:
            logger.warning("Cannot label via GitHub API: token or repository not configured")
            return False
        return True

    def add_labels(self, pr: Union[int, str], labels: List[str]) -> bool:
        """Add labels to a pull request."""
        if not labels:
            return True
        if self.use_gh_cli:
            return self._gh_pr_edit(pr, '--add-label', labels)
        if not self._can_use_api():
            return False

        url = f"{GITHUB_API}/repos/{self.repository}/issues/{pr}/labels"
        try:
            response = requests.post(url, headers=self._headers(), json={'labels': labels}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"GitHub API request failed: {e}")
            return False
        if response.status_code >= 300:
            logger.warning(f"GitHub API error {response.status_code} adding labels to #{pr}")
            return False
        return True

    def remove_labels(self, pr: Union[int, str], labels: List[str]) -> bool:
        """Remove labels from a pull request; labels that are not set are ignored."""
        if not labels:
            return True
        if self.use_gh_cli:
            return self._gh_pr_edit(pr, '--remove-label', labels)
        if not self._can_use_api():
            return False

        success = True
        for label in labels:
            url = f"{GITHUB_API}/repos/{self.repository}/issues/{pr}/labels/{quote(label)}"
            try:
                response = requests.delete(url, headers=self._headers(), timeout=self.timeout)
            except requests.RequestException as e:
                logger.warning(f"GitHub API request failed: {e}")
                success = False
                continue
            # 404 means the label was not on the PR
            if response.status_code >= 300 and response.status_code != 404:
                logger.warning(f"GitHub API error {response.status_code} removing '{label}' from #{pr}")
                success = False
        return success
