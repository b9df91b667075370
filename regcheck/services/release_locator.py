"""
Release asset location for regcheck.

Registry entries carry a bare version string, but release tags are published
both as "1.2.0" and as "v1.2.0". The locator tries each spelling in a fixed
order and keeps the first tag whose release actually carries the asset.
"""

import logging
from typing import List, Optional, Union

from ..domain import AssetLocation, NotFound, RepoRef
from ..infra import HttpClient

logger = logging.getLogger(__name__)


def candidate_tags(version: str) -> List[str]:
    """
    Tag names to try for a version, in order.

    "1.2.0" -> ["1.2.0", "v1.2.0"]; "v1.2.0" -> ["v1.2.0"].
    """
    candidates = [version]
    if not version.startswith('v'):
        candidates.append(f"v{version}")
    return candidates


class ReleaseAssetLocator:
    """
    Finds the release download prefix for a repository and version.

    Each candidate tag is probed exactly once; the first one for which the
    required asset exists wins. Probe errors count as "absent".

    Example:
        locator = ReleaseAssetLocator(HttpClient())
        location = locator.locate(RepoRef.parse(url), "1.0.0", "main.js")
        if location:
            print(location.base_url, location.resolved_tag)
    """

    def __init__(self, http_client: Optional[HttpClient] = None):
        self.http = http_client or HttpClient()

    def locate(
        self,
        repo: Union[RepoRef, str],
        version: str,
        required_asset: str,
    ) -> Union[AssetLocation, NotFound]:
        """
        Locate the release carrying `required_asset`.

        Args:
            repo: Parsed reference or repository URL
            version: Version string from the registry entry
            required_asset: Asset whose presence identifies the release

        Returns:
            AssetLocation on success, otherwise NotFound (falsy) listing the
            tags that were tried

        Raises:
            ParseError: If `repo` is a URL that cannot be parsed.
        """
        ref = repo if isinstance(repo, RepoRef) else RepoRef.parse(repo)
        tried = []

        for tag in candidate_tags(version):
            tried.append(tag)
            url = ref.release_download_url(tag, required_asset)
            if self.http.exists(url):
                logger.debug(f"{ref.slug}: '{required_asset}' found at tag {tag}")
                return AssetLocation(
                    base_url=ref.release_download_url(tag),
                    resolved_tag=tag,
                )
            logger.debug(f"{ref.slug}: '{required_asset}' not found at tag {tag}")

        return NotFound(asset=required_asset, tried_tags=tuple(tried))
