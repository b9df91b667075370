"""
Service layer for regcheck.

Contains the validation logic that orchestrates domain objects and
infrastructure:
- RegistrySnapshot / ChangeSetResolver: what a pull request changed
- ReleaseAssetLocator / *ReleaseValidator: what a release actually ships
- ChangeClassifier / PipelineOrchestrator: which checks run, and the verdict
- SchemaValidator / ContentScanner / PullRequestLabeler: supporting checks

Services are the primary API for commands to use.
"""

from .snapshot import RegistrySnapshot, parse_registry
from .changeset import ChangeSetResolver, resolve_changes, RELEASE_FIELDS, SCAN_FIELDS
from .classifier import ChangeClassifier
from .release_locator import ReleaseAssetLocator, candidate_tags
from .release_validator import (
    ReleaseValidator,
    PluginReleaseValidator,
    ThemeReleaseValidator,
    validator_for,
)
from .schema import SchemaValidator
from .content_scan import ContentScanner, ScanRules
from .labeling import PullRequestLabeler, plan_labels
from .pipeline import PipelineOrchestrator, EXCLUSIVITY_MESSAGE

__all__ = [
    'RegistrySnapshot',
    'parse_registry',
    'ChangeSetResolver',
    'resolve_changes',
    'RELEASE_FIELDS',
    'SCAN_FIELDS',
    'ChangeClassifier',
    'ReleaseAssetLocator',
    'candidate_tags',
    'ReleaseValidator',
    'PluginReleaseValidator',
    'ThemeReleaseValidator',
    'validator_for',
    'SchemaValidator',
    'ContentScanner',
    'ScanRules',
    'PullRequestLabeler',
    'plan_labels',
    'PipelineOrchestrator',
    'EXCLUSIVITY_MESSAGE',
]
