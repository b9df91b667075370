"""
regcheck - Validation pipeline for plugin and theme registry changes.

A registry repository keeps two JSON files, plugins.json and themes.json.
Contributors add or update entries through pull requests; regcheck decides
whether such a change is acceptable.

Quick Start:
    from regcheck import PipelineOrchestrator, load_config

    orchestrator = PipelineOrchestrator(".", config=load_config("."))
    result = orchestrator.run(pr=42)
    print(result.classification, result.ok)

    # Or just the release check of one entry
    from regcheck import RegistryEntry, RegistryKind, validator_for

    entry = RegistryEntry.from_dict({"id": "x", "name": "X", "version": "1.0.0",
                                     "repo": "https://github.com/a/x"})
    verdict = validator_for(RegistryKind.PLUGINS).validate(entry)
"""

__version__ = "0.1.0"

from .config import load_config
from .domain import (
    RegistryKind,
    RegistryEntry,
    RepoRef,
    ValidationVerdict,
    ChangeClassification,
    PipelineResult,
    PipelineState,
)
from .exceptions import (
    RegistryCheckError,
    ParseError,
    NotFoundError,
    MismatchError,
    PolicyViolation,
)
from .services import (
    RegistrySnapshot,
    ChangeSetResolver,
    ReleaseAssetLocator,
    ChangeClassifier,
    PipelineOrchestrator,
    validator_for,
)

__all__ = [
    '__version__',
    'load_config',
    'RegistryKind',
    'RegistryEntry',
    'RepoRef',
    'ValidationVerdict',
    'ChangeClassification',
    'PipelineResult',
    'PipelineState',
    'RegistryCheckError',
    'ParseError',
    'NotFoundError',
    'MismatchError',
    'PolicyViolation',
    'RegistrySnapshot',
    'ChangeSetResolver',
    'ReleaseAssetLocator',
    'ChangeClassifier',
    'PipelineOrchestrator',
    'validator_for',
]
