"""
Check result domain objects for regcheck.

Every check returns a ValidationVerdict: a boolean plus the ordered
diagnostics that explain it. Verdicts are folded with `&`, so diagnostics
are aggregated rather than discarded.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Iterable


class Level(Enum):
    """Severity of a single diagnostic line."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """One human-readable line produced by a check."""
    level: Level
    message: str
    subject: Optional[str] = None  # entry id or file name the line is about

    def to_dict(self) -> Dict[str, Any]:
        result = {'level': self.level.value, 'message': self.message}
        if self.subject:
            result['subject'] = self.subject
        return result

    def __str__(self) -> str:
        if self.level is Level.ERROR:
            return f"[ERROR] {self.message}"
        if self.level is Level.WARNING:
            return f"[WARN] {self.message}"
        return self.message


@dataclass
class ValidationVerdict:
    """
    Outcome of a check: pass/fail plus every diagnostic it produced.

    Example:
        verdict = ValidationVerdict()
        verdict.info("Found release asset 'main.js' at tag v1.0")
        verdict.error("Manifest 'version' mismatch")
        assert not verdict.ok
    """
    ok: bool = True
    diagnostics: List[Diagnostic] = field(default_factory=list)
    subject: Optional[str] = None

    @classmethod
    def passed(cls, message: Optional[str] = None, subject: Optional[str] = None) -> 'ValidationVerdict':
        verdict = cls(subject=subject)
        if message:
            verdict.info(message)
        return verdict

    @classmethod
    def failed(cls, message: str, subject: Optional[str] = None) -> 'ValidationVerdict':
        verdict = cls(subject=subject)
        verdict.error(message)
        return verdict

    def _add(self, level: Level, message: str) -> Diagnostic:
        diagnostic = Diagnostic(level=level, message=message, subject=self.subject)
        self.diagnostics.append(diagnostic)
        return diagnostic

    def info(self, message: str) -> Diagnostic:
        return self._add(Level.INFO, message)

    def warning(self, message: str) -> Diagnostic:
        return self._add(Level.WARNING, message)

    def error(self, message: str) -> Diagnostic:
        """Record a defect; any error flips the verdict to failing."""
        self.ok = False
        return self._add(Level.ERROR, message)

    def merge(self, other: 'ValidationVerdict') -> 'ValidationVerdict':
        """Fold another verdict into this one (logical AND, diagnostics appended)."""
        self.ok = self.ok and other.ok
        self.diagnostics.extend(other.diagnostics)
        return self

    def __and__(self, other: 'ValidationVerdict') -> 'ValidationVerdict':
        combined = ValidationVerdict(ok=self.ok, diagnostics=list(self.diagnostics), subject=self.subject)
        return combined.merge(other)

    @classmethod
    def combine(cls, verdicts: Iterable['ValidationVerdict']) -> 'ValidationVerdict':
        result = cls()
        for verdict in verdicts:
            result.merge(verdict)
        return result

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level is Level.ERROR]

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'ok': self.ok,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }
        if self.subject:
            result['subject'] = self.subject
        return result


@dataclass(frozen=True)
class AssetLocation:
    """A release tag under which the required asset was found."""
    base_url: str
    resolved_tag: str

    def asset_url(self, asset: str) -> str:
        return f"{self.base_url}{asset}"


@dataclass(frozen=True)
class NotFound:
    """Locator miss: no candidate tag carried the required asset."""
    asset: str
    tried_tags: tuple = ()

    def __bool__(self) -> bool:
        return False


class ChangeClassification(Enum):
    """Which registry (if any) a pull request touches. Exactly one applies."""
    PLUGINS_ONLY = "plugins-only"
    THEMES_ONLY = "themes-only"
    NEITHER = "neither"
    BOTH = "both"


class PipelineState(Enum):
    """Terminal states of a pipeline run."""
    REJECTED = "rejected"
    SKIPPED = "skipped"
    CONCLUDED = "concluded"


@dataclass
class EntryReport:
    """Release verdict for one changed registry entry."""
    kind: str
    entry_id: str
    version: Optional[str]
    verdict: ValidationVerdict

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'entry',
            'kind': self.kind,
            'id': self.entry_id,
            'version': self.version,
            'ok': self.verdict.ok,
            'diagnostics': [d.to_dict() for d in self.verdict.diagnostics],
        }


@dataclass
class PipelineResult:
    """Everything a pipeline run concluded."""
    state: PipelineState
    classification: ChangeClassification
    verdict: ValidationVerdict = field(default_factory=ValidationVerdict)
    entries: List[EntryReport] = field(default_factory=list)
    changed_paths: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is not PipelineState.REJECTED and self.verdict.ok

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'summary',
            'state': self.state.value,
            'classification': self.classification.value,
            'ok': self.ok,
            'checked': len(self.entries),
            'failed': sum(1 for e in self.entries if not e.verdict.ok),
            'errors': [str(d) for d in self.verdict.errors],
        }
