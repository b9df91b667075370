"""
Release validation for regcheck.

Checks that the release a registry entry points at really ships what the
entry claims. Both variants share one shape: locate the release through its
identifying asset, then check the rest of the release against the entry.

Plugins: main.js locates the release; manifest.json must agree with the
entry on id and version; styles.css is optional.

Themes: theme.json locates the release; every mode the entry declares needs
its stylesheet (dark.css, light.css).

Every check outcome is logged as one line and recorded on the verdict. A
defect never stops the remaining checks for the same entry.
"""

import logging
from typing import Optional

from ..domain import (
    AssetLocation,
    RegistryEntry,
    RegistryKind,
    RepoRef,
    SUPPORTED_MODES,
    ValidationVerdict,
)
from ..exceptions import (
    ManifestMissing,
    MismatchError,
    NotFoundError,
    ParseError,
    RegistryCheckError,
)
from ..infra import HttpClient
from .release_locator import ReleaseAssetLocator

logger = logging.getLogger(__name__)


class ReleaseValidator:
    """
    Base class for the locate-then-check release validators.

    Subclasses set `kind` and implement `check_release`.
    """

    kind: RegistryKind

    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        locator: Optional[ReleaseAssetLocator] = None,
    ):
        self.http = http_client or HttpClient()
        self.locator = locator or ReleaseAssetLocator(self.http)

    def _info(self, verdict: ValidationVerdict, message: str) -> None:
        logger.info(f"  {message}")
        verdict.info(message)

    def _error(self, verdict: ValidationVerdict, message: str) -> None:
        logger.error(f"  [ERROR] {message}")
        verdict.error(message)

    def _warning(self, verdict: ValidationVerdict, message: str) -> None:
        logger.warning(f"  {message}")
        verdict.warning(message)

    def locate(self, entry: RegistryEntry, repo: RepoRef) -> AssetLocation:
        """
        Locate the entry's release through the kind's identifying asset.

        Raises:
            NotFoundError: If no candidate tag carries the asset.
        """
        asset = self.kind.required_asset
        location = self.locator.locate(repo, entry.version, asset)
        if not location:
            raise NotFoundError(
                asset,
                list(location.tried_tags),
                message=(
                    f"Could not find '{asset}' release asset for {entry.repo} @ {entry.version} "
                    f"(checked {', '.join(location.tried_tags)})"
                ),
            )
        return location

    def validate(self, entry: RegistryEntry) -> ValidationVerdict:
        """
        Validate the release of one registry entry.

        Never raises for check-level problems: parse errors, missing assets
        and mismatches all become error diagnostics on the returned verdict.
        """
        verdict = ValidationVerdict(subject=entry.id)
        logger.info(
            f"Validating {self.kind.singular} Release: {entry.display_name} v{entry.version}..."
        )

        if not entry.version:
            self._error(verdict, f"{self.kind.singular} {entry.id} is missing 'version'.")
            return verdict

        try:
            repo = entry.repo_ref()
            location = self.locate(entry, repo)
        except ParseError as e:
            self._error(verdict, str(e))
            return verdict
        except NotFoundError as e:
            self._error(verdict, str(e))
            self._error(verdict, f"Ensure the release exists and contains '{e.asset}'.")
            return verdict

        self._info(
            verdict,
            f"Found release asset '{self.kind.required_asset}' at tag {location.resolved_tag}",
        )

        try:
            self.check_release(entry, location, verdict)
        except RegistryCheckError as e:
            self._error(verdict, str(e))

        return verdict

    def check_release(
        self,
        entry: RegistryEntry,
        location: AssetLocation,
        verdict: ValidationVerdict,
    ) -> None:
        raise NotImplementedError


class PluginReleaseValidator(ReleaseValidator):
    """Cross-checks a plugin release's manifest.json against its registry entry."""

    kind = RegistryKind.PLUGINS

    def fetch_manifest(self, location: AssetLocation) -> dict:
        """
        Fetch manifest.json from the located release.

        Raises:
            ManifestMissing: If the fetch or JSON parse yields nothing.
            ParseError: If the document is not a JSON object.
        """
        url = location.asset_url('manifest.json')
        manifest = self.http.fetch_json(url)
        if manifest is None:
            raise ManifestMissing(url)
        if not isinstance(manifest, dict):
            raise ParseError(f"'manifest.json' must be a JSON object ({url})", source=url)
        return manifest

    def check_release(self, entry, location, verdict):
        manifest = self.fetch_manifest(location)

        # Both fields are always checked so one run reports every mismatch
        for field, expected in (('id', entry.id), ('version', entry.version)):
            actual = manifest.get(field)
            # Registry values are normalized to strings; compare the manifest the same way
            if expected != (None if actual is None else str(actual)):
                self._error(verdict, str(MismatchError(field, expected, actual)))
            else:
                self._info(verdict, f"Manifest '{field}' matches registry: {actual}")

        if self.http.exists(location.asset_url('styles.css')):
            self._info(verdict, "Found 'styles.css' (optional).")
        else:
            logger.debug("  No 'styles.css' in release (optional).")


class ThemeReleaseValidator(ReleaseValidator):
    """Checks that a theme release ships a stylesheet for every declared mode."""

    kind = RegistryKind.THEMES

    def check_release(self, entry, location, verdict):
        for mode in entry.modes:
            if mode not in SUPPORTED_MODES:
                self._warning(
                    verdict,
                    f"Theme declares unsupported mode '{mode}'; no stylesheet checked.",
                )
                continue

            stylesheet = f"{mode}.css"
            if self.http.exists(location.asset_url(stylesheet)):
                self._info(verdict, f"Found '{stylesheet}'.")
            else:
                self._error(
                    verdict,
                    f"Theme supports '{mode}' mode but missing '{stylesheet}' in release.",
                )


def validator_for(kind: RegistryKind, http_client: Optional[HttpClient] = None) -> ReleaseValidator:
    """Release validator for a registry kind."""
    if kind is RegistryKind.PLUGINS:
        return PluginReleaseValidator(http_client)
    return ThemeReleaseValidator(http_client)
