"""
Git client infrastructure for repobase.

Provides a clean abstraction over the git commands repobase needs:
enumerating remotes and reading/writing the per-remote resolution key
in git config. All git access goes through this client, making it:
- Easy to mock for testing
- Consistent in error handling
- Isolated from the resolution logic
"""

import subprocess
from typing import Dict, List, Optional, Tuple
import logging

from ..domain import RepoReference, Remote
from ..exit_codes import MalformedReferenceError, PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_KEY = "repobase-resolved"

# `git config --unset-all` exits with 5 when the key does not exist
GIT_CONFIG_KEY_MISSING = 5


class GitClient:
    """
    Abstraction over git commands for one working copy.

    Example:
        client = GitClient("/path/to/checkout")
        for remote in client.list_remotes():
            print(remote.name, remote.full_name, remote.resolved)
    """

    def __init__(
        self,
        repo_path: str = ".",
        timeout: int = 30,
        config_key: str = DEFAULT_CONFIG_KEY
    ):
        """
        Initialize GitClient.

        Args:
            repo_path: Working copy to operate on (default: current directory)
            timeout: Command timeout in seconds (default: 30)
            config_key: Per-remote git config key holding the resolution tag
        """
        self.repo_path = repo_path
        self.timeout = timeout
        self.config_key = config_key

    def _run(self, args: List[str]) -> Tuple[Optional[str], int, str]:
        """
        Run a git command.

        Args:
            args: Git arguments (e.g., ['remote', '-v'])

        Returns:
            Tuple of (stdout, returncode, stderr)
        """
        cmd = ['git'] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
            output = result.stdout.strip() if result.stdout else None
            return output, result.returncode, (result.stderr or "").strip()

        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1, "timed out"
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1, str(e)

    def _resolutions(self) -> Dict[str, str]:
        """Read every remote.<name>.<config_key> entry; the last value wins."""
        pattern = r'^remote\..*\.' + self.config_key.replace('.', r'\.') + '$'
        output, code, _ = self._run(['config', '--get-regexp', pattern])
        # exit code 1 means no matching keys
        if code != 0 or not output:
            return {}

        suffix = '.' + self.config_key
        resolutions = {}
        for line in output.splitlines():
            key, _, value = line.partition(' ')
            if not key.startswith('remote.') or not key.endswith(suffix):
                continue
            name = key[len('remote.'):-len(suffix)]
            resolutions[name] = value.strip()
        return resolutions

    def list_remotes(self) -> List[Remote]:
        """
        List configured remotes in git's order.

        Remotes whose URL cannot be parsed into host/owner/name are skipped.

        Returns:
            List of Remote objects with their persisted resolution tags
        """
        output, code, stderr = self._run(['remote', '-v'])
        if code != 0:
            logger.debug(f"git remote -v failed in {self.repo_path}: {stderr}")
            return []
        if not output:
            return []

        urls: Dict[str, Dict[str, str]] = {}
        order: List[str] = []
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            name, url = parts[0], parts[1]
            kind = parts[2].strip('()') if len(parts) > 2 else 'fetch'
            if name not in urls:
                urls[name] = {}
                order.append(name)
            urls[name][kind] = url

        resolutions = self._resolutions()

        remotes = []
        for name in order:
            fetch_url = urls[name].get('fetch')
            push_url = urls[name].get('push')
            try:
                repo = RepoReference.from_url(fetch_url or push_url or '')
            except MalformedReferenceError:
                logger.debug(f"Skipping remote {name}: unrecognized URL {fetch_url or push_url}")
                continue
            remotes.append(Remote(
                name=name,
                repo=repo,
                fetch_url=fetch_url,
                push_url=push_url,
                resolved=resolutions.get(name, ''),
            ))

        return remotes

    def set_remote_resolution(self, name: str, resolution: str) -> None:
        """
        Persist a resolution tag for a remote.

        Raises:
            PersistenceError: if git config could not be written
        """
        key = f"remote.{name}.{self.config_key}"
        _, code, stderr = self._run(['config', '--replace-all', key, resolution])
        if code != 0:
            raise PersistenceError(f"could not set {key}: {stderr or f'git exited with {code}'}")
        logger.debug(f"Set {key} = {resolution}")

    def unset_remote_resolution(self, name: str) -> bool:
        """
        Remove the resolution tag of a remote.

        Returns:
            True if a tag was removed, False if none was set

        Raises:
            PersistenceError: if git config could not be written
        """
        key = f"remote.{name}.{self.config_key}"
        _, code, stderr = self._run(['config', '--unset-all', key])
        if code == GIT_CONFIG_KEY_MISSING:
            return False
        if code != 0:
            raise PersistenceError(f"could not unset {key}: {stderr or f'git exited with {code}'}")
        return True
