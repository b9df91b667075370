"""
Registry snapshot loading for regcheck.

A snapshot is the parsed list of entries of one registry file at one point
in time: the working copy under the repository root, or the copy at the
base reference as reported by `git show`.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from ..domain import RegistryEntry
from ..exceptions import ParseError, ReferenceUnavailable
from ..infra import GitClient

logger = logging.getLogger(__name__)


def parse_registry(content: str, source: str = "registry") -> List[RegistryEntry]:
    """
    Parse registry JSON text into entries.

    Raises:
        ParseError: If the text is not JSON, the root is not an array, or an
            item is not an object.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse {source}: {e}", source=source) from e

    if not isinstance(data, list):
        raise ParseError(f"Root element in {source} must be an array", source=source)

    entries = []
    for index, item in enumerate(data):
        try:
            entries.append(RegistryEntry.from_dict(item))
        except (ParseError, TypeError, ValueError) as e:
            raise ParseError(f"{source}[{index}]: {e}", source=source) from e
    return entries


class RegistrySnapshot:
    """
    Loads one registry file at the working copy and at a base reference.

    Example:
        snapshot = RegistrySnapshot("/repo", "plugins.json", git_client=GitClient("/repo"))
        current = snapshot.current()
        base = snapshot.at_ref("origin/main")  # None when unavailable
    """

    def __init__(
        self,
        root: Union[str, Path],
        path: str,
        git_client: Optional[GitClient] = None,
    ):
        """
        Initialize RegistrySnapshot.

        Args:
            root: Registry repository root
            path: Registry file path relative to root
            git_client: Git client bound to the same root (creates default if None)
        """
        self.root = Path(root)
        self.path = path
        self.git = git_client or GitClient(self.root)

    @property
    def file_path(self) -> Path:
        return self.root / self.path

    def exists(self) -> bool:
        return self.file_path.is_file()

    def current(self) -> List[RegistryEntry]:
        """
        Entries in the working copy.

        Raises:
            FileNotFoundError: If the registry file does not exist.
            ParseError: If it is not UTF-8 or cannot be parsed.
        """
        try:
            content = self.file_path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise ParseError(f"{self.path} is not valid UTF-8: {e}", source=self.path) from e
        return parse_registry(content, source=self.path)

    def load_ref(self, ref: str) -> List[RegistryEntry]:
        """
        Entries at a git reference.

        Raises:
            ReferenceUnavailable: If git cannot produce the file at `ref`.
            ParseError: If the base copy cannot be parsed.
        """
        content = self.git.show_file(ref, self.path)
        if content is None:
            raise ReferenceUnavailable(ref, self.path)
        return parse_registry(content, source=f"{ref}:{self.path}")

    def at_ref(self, ref: str) -> Optional[List[RegistryEntry]]:
        """
        Entries at a git reference, or None when they cannot be read.

        Unavailable or unparseable base content degrades to None so that
        change resolution fails open.
        """
        try:
            return self.load_ref(ref)
        except ReferenceUnavailable as e:
            logger.warning(f"{e}. Assuming all entries need validation.")
        except ParseError as e:
            logger.warning(f"{e}. Assuming all entries need validation.")
        return None
