"""
Git client infrastructure for regcheck.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Anchored to an explicit repository root (the process cwd is never changed)
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

logger = logging.getLogger(__name__)


class GitClient:
    """
    Abstraction over git commands run inside one repository root.

    Failing or erroring commands never raise: they come back as None / False
    so callers can treat them as "reference unavailable".

    Example:
        client = GitClient("/path/to/registry-repo")
        content = client.show_file("origin/main", "plugins.json")
        if content is None:
            print("No base copy available")
    """

    def __init__(self, root: Union[str, Path] = ".", timeout: Optional[int] = 30):
        """
        Initialize GitClient.

        Args:
            root: Repository root every command runs in
            timeout: Command timeout in seconds (default: 30, None to disable)
        """
        self.root = Path(root)
        self.timeout = timeout

    def _run(
        self,
        args: List[str],
        cwd: Optional[Union[str, Path]] = None,
        strip: bool = True,
    ) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments after `git`
            cwd: Working directory (defaults to the client root)
            strip: Strip surrounding whitespace from stdout

        Returns:
            Tuple of (stdout, returncode); returncode is -1 when the command
            could not be run at all
        """
        cmd = ['git', *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd or self.root),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )

            if result.returncode != 0:
                logger.debug(
                    f"Git command failed ({result.returncode}): {' '.join(cmd)}: "
                    f"{result.stderr.strip()}"
                )

            output = result.stdout
            if strip and output:
                output = output.strip()
            return output if output else None, result.returncode

        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except (OSError, ValueError) as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

    def show_file(self, ref: str, path: str) -> Optional[str]:
        """
        Read a file as it exists at `ref`.

        Args:
            ref: Any revision git understands (e.g. "origin/main")
            path: Path relative to the repository root

        Returns:
            File content, or None if the ref or the file is unavailable
        """
        output, code = self._run(['show', f"{ref}:{path}"], strip=False)
        if code != 0 or not output or not output.strip():
            return None
        return output

    def diff_names(self, base_ref: str, head_ref: Optional[str] = None) -> List[str]:
        """
        List paths changed relative to a base ref.

        With a head ref this is the three-dot diff `base...head`: changes
        reachable from head that are not in base. Without one, the working
        tree is compared against base.

        Returns:
            Changed paths in git's order (empty on failure)
        """
        spec = f"{base_ref}...{head_ref}" if head_ref else base_ref
        output, code = self._run(['diff', '--name-only', spec])
        if code != 0:
            logger.warning(f"git diff against {spec} failed; treating as no changes")
            return []
        if not output:
            return []
        return [line.strip() for line in output.split('\n') if line.strip()]

    def rev_parse(self, ref: str) -> Optional[str]:
        """Resolve a ref to a commit hash."""
        output, code = self._run(['rev-parse', ref])
        if code == 0 and output:
            return output
        return None

    def fetch(self, remote: str = "origin", branch: Optional[str] = None) -> bool:
        """
        Fetch from remote.

        Returns:
            True if successful
        """
        args = ['fetch', remote]
        if branch:
            args.append(branch)
        _, code = self._run(args)
        return code == 0

    def clone(self, url: str, dest: Union[str, Path], depth: Optional[int] = 1) -> bool:
        """
        Clone a repository into `dest`.

        Args:
            url: Repository URL
            dest: Target directory (may exist if empty)
            depth: Shallow clone depth, None for full history

        Returns:
            True if successful
        """
        args = ['clone']
        if depth:
            args += ['--depth', str(depth)]
        args += [url, str(dest)]
        _, code = self._run(args, cwd=Path(dest).parent)
        return code == 0
