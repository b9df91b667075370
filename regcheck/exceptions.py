"""
Error taxonomy for registry validation.

Everything below PolicyViolation is recovered inside the check that raised
it: it becomes a diagnostic line plus a failing verdict for that check only.
PolicyViolation is the single error that aborts a pipeline run.
"""

from typing import List, Optional

from .exit_codes import CommandError, GENERAL_ERROR


class RegistryCheckError(Exception):
    """Base class for errors recovered into a failing check."""


class ParseError(RegistryCheckError):
    """Malformed JSON document, registry file, or repository reference."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class NotFoundError(RegistryCheckError):
    """A release asset could not be found under any candidate tag."""

    def __init__(self, asset: str, tried_tags: Optional[List[str]] = None, message: Optional[str] = None):
        self.asset = asset
        self.tried_tags = list(tried_tags or [])
        if message is None:
            message = f"Could not find '{asset}'"
            if self.tried_tags:
                message += f" (checked {', '.join(self.tried_tags)})"
        super().__init__(message)


class ManifestMissing(NotFoundError):
    """manifest.json is absent or does not parse as a JSON document."""

    def __init__(self, url: str):
        super().__init__(
            'manifest.json',
            message=f"Missing 'manifest.json' in release assets ({url})",
        )
        self.url = url


class MismatchError(RegistryCheckError):
    """A manifest field disagrees with the registry entry."""

    def __init__(self, field: str, expected, actual):
        super().__init__(
            f"Manifest '{field}' mismatch. Registry: {expected}, Manifest: {actual}"
        )
        self.field = field
        self.expected = expected
        self.actual = actual


class ReferenceUnavailable(RegistryCheckError):
    """The base reference (or the file at that reference) could not be read."""

    def __init__(self, ref: str, path: str):
        super().__init__(f"Could not retrieve {path} from {ref}")
        self.ref = ref
        self.path = path


class PolicyViolation(CommandError):
    """
    The change breaks a pipeline-wide rule and no further checks may run.

    Currently only raised for the exclusivity rule (both registries touched
    by one pull request).
    """

    def __init__(self, message: str, rule: str = "exclusive-pr", result=None):
        super().__init__(message, GENERAL_ERROR)
        self.rule = rule
        self.result = result  # PipelineResult of the rejected run, when available
