"""
Registry entry domain objects for regcheck.

RegistryEntry is one record of plugins.json or themes.json, normalized once
when it is read so that every check sees the same defaults. RepoRef is the
parsed form of an entry's repository URL.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Tuple

from ..exceptions import ParseError


DEFAULT_MODES: Tuple[str, ...] = ("dark",)
SUPPORTED_MODES: Tuple[str, ...] = ("dark", "light")

GITHUB_HOST = "github.com"

# Keys that RegistryEntry models explicitly; everything else lands in `extra`
_KNOWN_KEYS = {
    'id', 'name', 'author', 'version', 'description', 'repo', 'modes',
    'homepage', 'screenshot',
}


class RegistryKind(Enum):
    """The two registries guarded by the pipeline."""
    PLUGINS = "plugins"
    THEMES = "themes"

    @property
    def default_file(self) -> str:
        return f"{self.value}.json"

    @property
    def required_asset(self) -> str:
        """Release asset whose presence identifies a usable release tag."""
        return "main.js" if self is RegistryKind.PLUGINS else "theme.json"

    @property
    def label(self) -> str:
        """Pull request label for this kind."""
        return "plugin" if self is RegistryKind.PLUGINS else "theme"

    @property
    def singular(self) -> str:
        return "Plugin" if self is RegistryKind.PLUGINS else "Theme"

    @property
    def required_fields(self) -> Tuple[str, ...]:
        base = ('id', 'name', 'author', 'version', 'description', 'repo')
        if self is RegistryKind.THEMES:
            return base + ('modes',)
        return base


@dataclass(frozen=True)
class RepoRef:
    """
    A GitHub repository reference parsed from a registry entry's `repo` URL.

    Accepted forms:
        https://github.com/owner/name
        http://github.com/owner/name/
        https://github.com/owner/name.git
        git@github.com:owner/name.git
        owner/name
    """
    owner: str
    name: str
    host: str = GITHUB_HOST

    _URL_RE = re.compile(
        r'^(?:(?:https?://)?(?:www\.)?github\.com/|git@github\.com:)?'
        r'(?P<owner>[A-Za-z0-9_.-]+)/(?P<name>[A-Za-z0-9_.-]+?)(?:\.git)?(?:/.*)?$'
    )

    @classmethod
    def parse(cls, url: Optional[str]) -> 'RepoRef':
        """
        Parse a repository URL into owner and name.

        Raises:
            ParseError: If the value is empty, points at another host,
                or has no owner/name pair.
        """
        if not url or not isinstance(url, str):
            raise ParseError("Repository URL is missing", source=str(url))

        value = url.strip()
        host_match = re.match(r'^(?:https?://)?(?:www\.)?([^/:@]+\.[^/:@]+)/', value)
        if host_match and host_match.group(1).lower() != GITHUB_HOST:
            raise ParseError(
                f"Unsupported repository host '{host_match.group(1)}' in {url}",
                source=url,
            )

        match = cls._URL_RE.match(value)
        if not match:
            raise ParseError(f"Cannot parse repository reference: {url}", source=url)

        return cls(owner=match.group('owner'), name=match.group('name'))

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def html_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.name}"

    def release_download_url(self, tag: str, asset: str = "") -> str:
        """URL of a release asset, or the download prefix when asset is empty."""
        return f"{self.html_url}/releases/download/{tag}/{asset}"

    def __str__(self) -> str:
        return self.slug


def _normalize_modes(raw: Any) -> Tuple[str, ...]:
    """Absent modes mean dark-only; an explicit empty list stays empty."""
    if raw is None:
        return DEFAULT_MODES
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise ParseError(f"'modes' must be an array, got {type(raw).__name__}")
    modes = []
    for mode in raw:
        mode = str(mode).strip().lower()
        if mode and mode not in modes:
            modes.append(mode)
    return tuple(modes)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class RegistryEntry:
    """
    One record of a registry file.

    `id` is the identity key. Comparisons between snapshots are always by id,
    and version comparison is plain string equality.
    """
    id: str
    name: str = ""
    author: str = ""
    version: Optional[str] = None
    description: str = ""
    repo: Optional[str] = None
    modes: Tuple[str, ...] = DEFAULT_MODES
    homepage: Optional[str] = None
    screenshot: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegistryEntry':
        """
        Build an entry from one element of a registry JSON array.

        Raises:
            ParseError: If the element is not a JSON object.
        """
        if not isinstance(data, dict):
            raise ParseError(f"Registry item must be an object, got {type(data).__name__}")

        return cls(
            id=str(data.get('id') or ''),
            name=str(data.get('name') or ''),
            author=str(data.get('author') or ''),
            version=_optional_str(data.get('version')),
            description=str(data.get('description') or ''),
            repo=_optional_str(data.get('repo')),
            modes=_normalize_modes(data.get('modes')),
            homepage=_optional_str(data.get('homepage')),
            screenshot=_optional_str(data.get('screenshot')),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def repo_ref(self) -> RepoRef:
        """Parse `repo`; raises ParseError when it is not a GitHub reference."""
        return RepoRef.parse(self.repo)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'name': self.name,
            'author': self.author,
            'version': self.version,
            'description': self.description,
            'repo': self.repo,
            'modes': list(self.modes),
        }
        if self.homepage:
            result['homepage'] = self.homepage
        if self.screenshot:
            result['screenshot'] = self.screenshot
        result.update(self.extra)
        return result
