"""
Change set resolution for regcheck.

Compares two snapshots of the same registry and keeps only the entries a
pull request actually touched: new ids, or ids whose watched fields changed.
Release checks watch `version`; the content scan also watches `repo`, so a
plugin pointed at another repository is scanned even without a version bump.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..domain import RegistryEntry

logger = logging.getLogger(__name__)

RELEASE_FIELDS: Tuple[str, ...] = ('version',)
SCAN_FIELDS: Tuple[str, ...] = ('version', 'repo')


def resolve_changes(
    current: Iterable[RegistryEntry],
    base: Optional[Iterable[RegistryEntry]],
    fields: Sequence[str] = RELEASE_FIELDS,
) -> List[RegistryEntry]:
    """
    Entries of `current` that are new or differ from `base` in any of `fields`.

    Comparison is plain equality of the normalized values, so versions are
    compared as strings: "1.0" and "1.0.0" differ. An entry whose watched
    fields are unchanged is excluded even if other fields changed. With no
    base (history unavailable) every current entry counts as changed.

    Args:
        current: Entries in the working copy, in file order
        base: Entries at the base reference, or None
        fields: Entry attributes whose change marks the entry as changed

    Returns:
        Changed entries, in the order they appear in `current`
    """
    current = list(current)
    if base is None:
        return current

    base_by_id: Dict[str, RegistryEntry] = {}
    for entry in base:
        # First occurrence wins; duplicate ids are reported by the schema check
        base_by_id.setdefault(entry.id, entry)

    changed = []
    for entry in current:
        previous = base_by_id.get(entry.id)
        if previous is None:
            logger.debug(f"{entry.id}: new entry")
            changed.append(entry)
            continue
        for field in fields:
            old, new = getattr(previous, field), getattr(entry, field)
            if old != new:
                logger.debug(f"{entry.id}: {field} {old} -> {new}")
                changed.append(entry)
                break
    return changed


class ChangeSetResolver:
    """
    Resolves the change set of one registry from a RegistrySnapshot.

    Both snapshots are read once and reused for every field selection.

    Example:
        resolver = ChangeSetResolver(snapshot, base_ref="origin/main")
        for entry in resolver.resolve():
            print(entry.id, entry.version)
        scan_targets = resolver.resolve(SCAN_FIELDS)
    """

    def __init__(self, snapshot, base_ref: str = "origin/main"):
        """
        Initialize ChangeSetResolver.

        Args:
            snapshot: RegistrySnapshot for the registry file
            base_ref: Reference the pull request is compared against
        """
        self.snapshot = snapshot
        self.base_ref = base_ref
        self._loaded = None

    def _load(self):
        if self._loaded is None:
            current = self.snapshot.current()
            self._loaded = (current, self.snapshot.at_ref(self.base_ref))
        return self._loaded

    def resolve(self, fields: Sequence[str] = RELEASE_FIELDS) -> List[RegistryEntry]:
        """
        Changed entries of the registry.

        Raises:
            FileNotFoundError / ParseError: If the working copy itself is unreadable.
        """
        current, base = self._load()
        changes = resolve_changes(current, base, fields)
        logger.info(
            f"Found {len(changes)} modified/new entries in {self.snapshot.path} "
            f"(watching {', '.join(fields)})"
        )
        return changes
