"""Shared fixtures and fakes for regcheck tests."""

import json

import pytest

from regcheck.config import get_default_config


class FakeHttp:
    """
    Dict-backed stand-in for HttpClient.

    `assets` maps URL -> JSON document (or None for a non-JSON file).
    Every call is recorded so tests can assert exactly what was probed.
    """

    def __init__(self, assets=None):
        self.assets = dict(assets or {})
        self.calls = []

    def exists(self, url):
        self.calls.append(('HEAD', url))
        return url in self.assets

    def fetch_json(self, url):
        self.calls.append(('GET', url))
        return self.assets.get(url)


def release_url(repo, tag, asset):
    return f"https://github.com/{repo}/releases/download/{tag}/{asset}"


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def config():
    return get_default_config()


@pytest.fixture
def write_registry(tmp_path):
    """Write a registry file under tmp_path and return its path."""
    def _write(name, entries):
        path = tmp_path / name
        path.write_text(json.dumps(entries, indent=2) + '\n', encoding='utf-8')
        return path
    return _write
