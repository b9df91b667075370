"""
Infrastructure layer for regcheck.

Contains abstractions for external systems:
- GitClient: git command execution under an explicit root
- HttpClient: release asset probing and JSON fetches
- GitHubClient: pull request labeling

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient
from .http_client import HttpClient
from .github_client import GitHubClient

__all__ = [
    'GitClient',
    'HttpClient',
    'GitHubClient',
]
