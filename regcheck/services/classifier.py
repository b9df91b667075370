"""
Pull request classification for regcheck.

Maps the set of changed paths onto exactly one ChangeClassification.
"""

import posixpath
from typing import Iterable

from ..domain import ChangeClassification

MATCH_SUBSTRING = "substring"
MATCH_BASENAME = "basename"


class ChangeClassifier:
    """
    Decides which registries a pull request touches.

    By default a path touches a registry when the registry's file name occurs
    anywhere in it, so `apps/community/plugins.json` counts as plugins.json.
    With match="basename" only an exact file-name match counts.

    Example:
        classifier = ChangeClassifier()
        classifier.classify(["plugins.json", "README.md"])
        # ChangeClassification.PLUGINS_ONLY
    """

    def __init__(
        self,
        plugins_file: str = "plugins.json",
        themes_file: str = "themes.json",
        match: str = MATCH_SUBSTRING,
    ):
        if match not in (MATCH_SUBSTRING, MATCH_BASENAME):
            raise ValueError(f"Unknown match mode: {match}")
        self.plugins_name = posixpath.basename(plugins_file)
        self.themes_name = posixpath.basename(themes_file)
        self.match = match

    def _touches(self, path: str, filename: str) -> bool:
        if self.match == MATCH_BASENAME:
            return posixpath.basename(path.strip()) == filename
        return filename in path

    def touches_plugins(self, paths: Iterable[str]) -> bool:
        return any(self._touches(p, self.plugins_name) for p in paths)

    def touches_themes(self, paths: Iterable[str]) -> bool:
        return any(self._touches(p, self.themes_name) for p in paths)

    def classify(self, changed_paths: Iterable[str]) -> ChangeClassification:
        paths = list(changed_paths)
        plugins = self.touches_plugins(paths)
        themes = self.touches_themes(paths)

        if plugins and themes:
            return ChangeClassification.BOTH
        if plugins:
            return ChangeClassification.PLUGINS_ONLY
        if themes:
            return ChangeClassification.THEMES_ONLY
        return ChangeClassification.NEITHER
