"""
Domain layer for regcheck.

Contains pure domain objects with no I/O or side effects:
- RegistryEntry / RepoRef: registry records and their parsed repository
- ValidationVerdict / Diagnostic: boolean-with-diagnostics check results
- AssetLocation / NotFound: release locator outcomes
- ChangeClassification / PipelineResult: pipeline-level outcomes
"""

from .entry import (
    RegistryEntry,
    RegistryKind,
    RepoRef,
    DEFAULT_MODES,
    SUPPORTED_MODES,
)
from .verdict import (
    Level,
    Diagnostic,
    ValidationVerdict,
    AssetLocation,
    NotFound,
    ChangeClassification,
    PipelineState,
    EntryReport,
    PipelineResult,
)

__all__ = [
    'RegistryEntry',
    'RegistryKind',
    'RepoRef',
    'DEFAULT_MODES',
    'SUPPORTED_MODES',
    'Level',
    'Diagnostic',
    'ValidationVerdict',
    'AssetLocation',
    'NotFound',
    'ChangeClassification',
    'PipelineState',
    'EntryReport',
    'PipelineResult',
]
