"""
Forbidden-content scan for plugin source repositories.

Each changed plugin's repository is shallow-cloned into a temporary
directory and walked:
- every file must have an allowed extension (or an allowed base name such
  as LICENSE)
- script files must not use forbidden tokens outside comment lines

The temporary clone is always removed afterwards.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ..config import get_default_config
from ..domain import RegistryEntry, ValidationVerdict
from ..infra import GitClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForbiddenToken:
    """A substring that may not appear in plugin source."""
    token: str
    message: str


@dataclass(frozen=True)
class ScanRules:
    """What the scan allows and forbids."""
    allowed_extensions: frozenset
    allowed_basenames: frozenset
    scanned_extensions: frozenset
    forbidden_tokens: tuple

    @classmethod
    def from_config(cls, scan_config: Optional[Dict[str, Any]] = None) -> 'ScanRules':
        defaults = get_default_config()['scan']
        scan_config = {**defaults, **(scan_config or {})}
        return cls(
            allowed_extensions=frozenset(e.lower() for e in scan_config['allowed_extensions']),
            allowed_basenames=frozenset(scan_config['allowed_basenames']),
            scanned_extensions=frozenset(e.lower() for e in scan_config['scanned_extensions']),
            forbidden_tokens=tuple(
                ForbiddenToken(token=t['token'], message=t['message'])
                for t in scan_config['forbidden_tokens']
            ),
        )


def _extension(name: str) -> str:
    """Extension as the scan sees it: ".gitignore" counts as its own extension."""
    if name.startswith('.') and name.count('.') == 1:
        return name.lower()
    return os.path.splitext(name)[1].lower()


def _is_comment(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith('//') or stripped.startswith('*')


def iter_files(root: Path) -> Iterable[Path]:
    """All files under root except the .git directory, as relative paths."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d != '.git')
        for filename in sorted(filenames):
            yield (Path(dirpath) / filename).relative_to(root)


class ContentScanner:
    """
    Scans the source repository of plugin entries.

    Example:
        scanner = ContentScanner(GitClient("/repo"))
        verdict = scanner.scan_entry(entry)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        rules: Optional[ScanRules] = None,
    ):
        self.git = git_client or GitClient()
        self.rules = rules or ScanRules.from_config()

    def _error(self, verdict: ValidationVerdict, message: str) -> None:
        logger.error(f"  [ERROR] {message}")
        verdict.error(message)

    def scan_directory(self, root: Path, verdict: Optional[ValidationVerdict] = None) -> ValidationVerdict:
        """
        Scan a checked-out repository.

        Args:
            root: Repository checkout
            verdict: Verdict to record findings on (creates one if None)

        Returns:
            Verdict listing every forbidden file and token found
        """
        verdict = verdict if verdict is not None else ValidationVerdict()
        root = Path(root)

        for relative in iter_files(root):
            name = relative.name
            ext = _extension(name)
            display = relative.as_posix()

            if ext not in self.rules.allowed_extensions and name not in self.rules.allowed_basenames:
                self._error(
                    verdict,
                    f'Forbidden file type found: {display} (Extension "{ext}" is not in whitelist)',
                )
                continue

            if ext in self.rules.scanned_extensions:
                self._scan_source(root / relative, display, verdict)

        return verdict

    def _scan_source(self, path: Path, display: str, verdict: ValidationVerdict) -> None:
        try:
            content = path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            self._error(verdict, f"Could not read {display}: {e}")
            return

        for lineno, line in enumerate(content.split('\n'), 1):
            for forbidden in self.rules.forbidden_tokens:
                if forbidden.token in line and not _is_comment(line):
                    self._error(
                        verdict,
                        f'Forbidden token "{forbidden.token}" found in {display}:{lineno}. {forbidden.message}',
                    )

    def scan_entry(self, entry: RegistryEntry) -> ValidationVerdict:
        """Clone an entry's repository and scan it."""
        verdict = ValidationVerdict(subject=entry.id)
        logger.info(f"Scanning plugin source: {entry.display_name} ({entry.repo})...")

        if not entry.repo:
            self._error(verdict, f"Plugin {entry.id} is missing 'repo'.")
            return verdict

        temp_dir = Path(tempfile.mkdtemp(prefix='regcheck-scan-'))
        checkout = temp_dir / 'repo'
        try:
            logger.info(f"  Cloning {entry.repo}...")
            if not self.git.clone(entry.repo, checkout, depth=1):
                self._error(verdict, f"Could not clone {entry.repo}")
                return verdict

            self.scan_directory(checkout, verdict)
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

        if verdict.ok:
            verdict.info(f"No forbidden content in {entry.repo}")
            logger.info("  No forbidden content found.")
        return verdict
