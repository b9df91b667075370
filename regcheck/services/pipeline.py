"""
Pull request validation pipeline for regcheck.

Sequences one run:

    classify changed paths
      -> BOTH:    rejected (exclusivity), no further checks
      -> NEITHER: skipped, passes
      -> PLUGINS_ONLY / THEMES_ONLY:
           schema/format check
           -> content scan of changed plugin repos (plugins only)
           -> release check per changed entry
           -> aggregate verdict -> labels

No check failure stops the others; the verdict is the AND of all of them.
The exclusivity rejection is the only abort, and it happens before any
network access.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config import get_default_config
from ..domain import (
    ChangeClassification,
    EntryReport,
    PipelineResult,
    PipelineState,
    RegistryEntry,
    RegistryKind,
    ValidationVerdict,
)
from ..exceptions import ParseError, PolicyViolation
from ..exit_codes import ConfigError
from ..infra import GitClient, HttpClient, GitHubClient
from .changeset import ChangeSetResolver, RELEASE_FIELDS, SCAN_FIELDS
from .classifier import ChangeClassifier
from .content_scan import ContentScanner, ScanRules
from .labeling import PullRequestLabeler
from .release_validator import validator_for
from .schema import SchemaValidator
from .snapshot import RegistrySnapshot

logger = logging.getLogger(__name__)

EXCLUSIVITY_MESSAGE = (
    '"Exclusive PR" Rule Violation. You cannot modify both plugins.json and '
    'themes.json in the same PR. Please split your changes into two separate '
    'Pull Requests.'
)

_KIND_FOR_CLASSIFICATION = {
    ChangeClassification.PLUGINS_ONLY: RegistryKind.PLUGINS,
    ChangeClassification.THEMES_ONLY: RegistryKind.THEMES,
}


class PipelineOrchestrator:
    """
    Runs the registry change validation pipeline for one repository root.

    All collaborators can be injected; defaults are built from `config`.

    Example:
        orchestrator = PipelineOrchestrator("/path/to/registry", config=load_config())
        result = orchestrator.run(pr=42)
        sys.exit(0 if result.ok else 1)
    """

    def __init__(
        self,
        root: Union[str, Path] = ".",
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        http_client: Optional[HttpClient] = None,
        classifier: Optional[ChangeClassifier] = None,
        schema_validator: Optional[SchemaValidator] = None,
        content_scanner: Optional[ContentScanner] = None,
        labeler: Optional[PullRequestLabeler] = None,
    ):
        """
        Initialize PipelineOrchestrator.

        Args:
            root: Registry repository root (never chdir'd into)
            config: Configuration dict (defaults if None)
            git_client: Git client bound to root
            http_client: HTTP client for release probes
            classifier: Change classifier
            schema_validator: Schema/format check
            content_scanner: Forbidden-content scan
            labeler: Pull request labeler
        """
        self.root = Path(root)
        self.config = config or get_default_config()

        git_config = self.config.get('git', {})
        http_config = self.config.get('http', {})
        label_config = self.config.get('labels', {})

        self.git = git_client or GitClient(self.root, timeout=git_config.get('timeout', 30))
        self.http = http_client or HttpClient(
            timeout=http_config.get('timeout'),
            user_agent=http_config.get('user_agent', 'regcheck'),
        )
        self.classifier = classifier or self._default_classifier()
        self.schema = schema_validator or SchemaValidator(
            self.root,
            fix_format=self.config.get('schema', {}).get('format', True),
        )
        self.scanner = content_scanner or ContentScanner(
            self.git,
            ScanRules.from_config(self.config.get('scan')),
        )
        self.labeler = labeler or PullRequestLabeler(
            GitHubClient(),
            passed_label=label_config.get('passed', 'waiting-for-review'),
            failed_label=label_config.get('failed', 'validation-error'),
        )

    def _default_classifier(self) -> ChangeClassifier:
        match = self.config.get('classifier', {}).get('match', 'substring')
        try:
            return ChangeClassifier(
                plugins_file=self.registry_file(RegistryKind.PLUGINS),
                themes_file=self.registry_file(RegistryKind.THEMES),
                match=match,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid classifier.match: {e}") from e

    @property
    def base_ref(self) -> str:
        return self.config.get('git', {}).get('base_ref', 'origin/main')

    def registry_file(self, kind: RegistryKind) -> str:
        registries = self.config.get('registries', {})
        return registries.get(kind.value, {}).get('file', kind.default_file)

    def snapshot(self, kind: RegistryKind) -> RegistrySnapshot:
        return RegistrySnapshot(self.root, self.registry_file(kind), git_client=self.git)

    # ------------------------------------------------------------------
    # Individual stages
    # ------------------------------------------------------------------

    def changed_paths(self, base_ref: Optional[str] = None, head_ref: Optional[str] = None) -> List[str]:
        """Paths changed between base and head (three-dot diff)."""
        base_ref = base_ref or self.base_ref
        logger.info(f"Diffing {base_ref}...{head_ref or 'working tree'}")
        paths = self.git.diff_names(base_ref, head_ref)
        logger.info("Git Diff Output:\n" + ('\n'.join(paths) or '(empty)'))
        return paths

    def resolver(self, kind: RegistryKind, base_ref: Optional[str] = None) -> ChangeSetResolver:
        return ChangeSetResolver(self.snapshot(kind), base_ref=base_ref or self.base_ref)

    def changed_entries(
        self,
        kind: RegistryKind,
        base_ref: Optional[str] = None,
        fields: Sequence[str] = RELEASE_FIELDS,
    ) -> List[RegistryEntry]:
        """
        Changed entries of one registry.

        Args:
            kind: Registry to resolve
            base_ref: Base reference (defaults to git.base_ref)
            fields: Entry fields whose change counts (SCAN_FIELDS adds `repo`)

        Raises:
            FileNotFoundError / ParseError: If the working copy is unreadable.
        """
        return self.resolver(kind, base_ref).resolve(fields)

    def validate_releases(self, kind: RegistryKind, entries: List[RegistryEntry]) -> List[EntryReport]:
        """Release check for each entry, in order, never stopping early."""
        if not entries:
            logger.info(f"No {kind.value} version changes detected. Skipping release validation.")
            return []

        logger.info(f"Checking {len(entries)} modified {kind.value}...")
        validator = validator_for(kind, self.http)
        reports = []
        for entry in entries:
            verdict = validator.validate(entry)
            reports.append(EntryReport(
                kind=kind.value,
                entry_id=entry.id,
                version=entry.version,
                verdict=verdict,
            ))
        return reports

    def validate_registry(
        self,
        kind: RegistryKind,
        base_ref: Optional[str] = None,
    ) -> PipelineResult:
        """
        Full validation of one registry: schema, scan (plugins), releases.

        Returns:
            A concluded result whose verdict is the AND of every check
        """
        classification = (
            ChangeClassification.PLUGINS_ONLY if kind is RegistryKind.PLUGINS
            else ChangeClassification.THEMES_ONLY
        )
        result = PipelineResult(state=PipelineState.CONCLUDED, classification=classification)
        logger.info(f"--- Validating {kind.singular}s ---")

        # 1. schema/format of the whole file
        result.verdict.merge(self.schema.validate(kind, self.registry_file(kind)))

        scan = kind is RegistryKind.PLUGINS and self.config.get('scan', {}).get('enabled', True)
        resolver = self.resolver(kind, base_ref)
        try:
            entries = resolver.resolve(RELEASE_FIELDS)
            scan_targets = resolver.resolve(SCAN_FIELDS) if scan else []
        except (FileNotFoundError, ParseError) as e:
            message = f"Cannot resolve changed {kind.value}: {e}"
            logger.error(f"[ERROR] {message}")
            result.verdict.merge(ValidationVerdict.failed(message, subject=self.registry_file(kind)))
            return result

        # 2. forbidden-content scan of plugins with a new version or a new repo
        scan_verdicts: Dict[str, ValidationVerdict] = {}
        for entry in scan_targets:
            scan_verdicts[entry.id] = self.scanner.scan_entry(entry)

        # 3. per-entry release checks
        reports = self.validate_releases(kind, entries)
        for report in reports:
            if report.entry_id in scan_verdicts:
                report.verdict = scan_verdicts.pop(report.entry_id) & report.verdict

        # Repo-only changes have no release check; their scan is their report
        for entry in scan_targets:
            if entry.id in scan_verdicts:
                reports.append(EntryReport(
                    kind=kind.value,
                    entry_id=entry.id,
                    version=entry.version,
                    verdict=scan_verdicts.pop(entry.id),
                ))

        for report in reports:
            result.verdict.merge(report.verdict)
        result.entries = reports

        return result

    def check_exclusivity(self, classification: ChangeClassification, changed_paths: List[str]) -> None:
        """
        Reject a change that touches both registries.

        Raises:
            PolicyViolation: If classification is BOTH. The exception's
                `result` holds the rejected PipelineResult.
        """
        if classification is not ChangeClassification.BOTH:
            return

        logger.error(f"[FATAL] {EXCLUSIVITY_MESSAGE}")
        raise PolicyViolation(
            EXCLUSIVITY_MESSAGE,
            result=PipelineResult(
                state=PipelineState.REJECTED,
                classification=classification,
                verdict=ValidationVerdict.failed(EXCLUSIVITY_MESSAGE),
                changed_paths=list(changed_paths),
            ),
        )

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def run(
        self,
        base_ref: Optional[str] = None,
        head_ref: Optional[str] = None,
        pr: Optional[Union[int, str]] = None,
        fetch: Optional[bool] = None,
        label: bool = True,
    ) -> PipelineResult:
        """
        Run the pipeline.

        Args:
            base_ref: Base reference (defaults to git.base_ref)
            head_ref: Head reference (defaults to git.head_ref)
            pr: Pull request number to label; no labeling when None
            fetch: Fetch the base branch first (defaults to git.fetch)
            label: Allow labeling at all

        Returns:
            SKIPPED or CONCLUDED result

        Raises:
            PolicyViolation: If the change touches both registries.
        """
        git_config = self.config.get('git', {})
        base_ref = base_ref or self.base_ref
        head_ref = head_ref or git_config.get('head_ref', 'HEAD')
        fetch = git_config.get('fetch', True) if fetch is None else fetch

        logger.info("Starting registry PR validation...")

        if fetch:
            remote = git_config.get('remote', 'origin')
            branch = git_config.get('base_branch', 'main')
            logger.info(f"Fetching {remote} {branch}...")
            if not self.git.fetch(remote, branch):
                logger.warning(f"Could not fetch {remote} {branch}; using local refs")

        logger.info(f"HEAD: {self.git.rev_parse(head_ref)}")
        logger.info(f"{base_ref}: {self.git.rev_parse(base_ref)}")

        changed = self.changed_paths(base_ref, head_ref)
        classification = self.classifier.classify(changed)
        logger.info(
            f"Modified: Plugins={self.classifier.touches_plugins(changed)}, "
            f"Themes={self.classifier.touches_themes(changed)}"
        )

        self.check_exclusivity(classification, changed)

        if classification is ChangeClassification.NEITHER:
            logger.info("No registry files modified. Passing validation.")
            return PipelineResult(
                state=PipelineState.SKIPPED,
                classification=classification,
                changed_paths=changed,
            )

        result = self.validate_registry(_KIND_FOR_CLASSIFICATION[classification], base_ref)
        result.changed_paths = changed

        if label and pr and self.config.get('labels', {}).get('enabled', True):
            self._label(pr, classification, result.ok)
        elif label:
            logger.info("Skipping labeling (not in PR context or PR number missing).")

        if result.ok:
            logger.info("Validation Suite Passed!")
        else:
            logger.error("Validation Suite FAILED.")
        return result

    def _label(self, pr: Union[int, str], classification: ChangeClassification, ok: bool) -> None:
        try:
            self.labeler.apply(pr, classification, ok)
        except Exception as e:
            # Labeling never changes the verdict
            logger.warning(f"Labeling PR #{pr} failed: {e}")
