"""
GitLab API client infrastructure for repobase.

Provides a clean abstraction over GitLab API access:
- Uses `glab` CLI when available and authenticated for the host
- Falls back to requests with a private token
- Never retries; a failed lookup is reported as APIError
"""

import subprocess
import json
import os
import logging
from typing import Optional, Dict, Any
from urllib.parse import quote

import requests

from ..domain import Project
from ..domain.reference import DEFAULT_HOST, normalize_host
from ..exit_codes import APIError

logger = logging.getLogger(__name__)

# Warn when fewer requests than this remain in the current window
RATE_LIMIT_LOW = 50


class GitLabClient:
    """
    GitLab REST API (v4) client.

    Example:
        client = GitLabClient()
        project = client.get_project("gitlab-org/cli")
        if project.is_fork:
            print(project.forked_from_project.path_with_namespace)
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        token: Optional[str] = None,
        timeout: int = 30,
        use_glab_cli: bool = True
    ):
        """
        Initialize GitLabClient.

        Args:
            host: Default GitLab host for lookups
            token: Private token (defaults to REPOBASE_GITLAB_TOKEN or GITLAB_TOKEN env var)
            timeout: Request timeout in seconds
            use_glab_cli: Try the glab CLI before direct HTTP requests
        """
        self.host = normalize_host(host) or DEFAULT_HOST
        self.token = token or os.environ.get('REPOBASE_GITLAB_TOKEN') or os.environ.get('GITLAB_TOKEN')
        self.timeout = timeout
        self.use_glab_cli = use_glab_cli
        self._glab_hosts: Dict[str, bool] = {}
        self._session = requests.Session()
        self._session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'repobase',
        })

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'GitLabClient':
        """Create a client from the 'gitlab' config section."""
        section = config.get('gitlab', {})
        return cls(
            host=section.get('host') or DEFAULT_HOST,
            token=str(section['token']) if section.get('token') else None,
            timeout=int(section.get('timeout_seconds', 30)),
            use_glab_cli=bool(section.get('use_glab_cli', True)),
        )

    def _check_glab_cli(self, host: str) -> bool:
        """Check if glab CLI is available and authenticated for host."""
        if host not in self._glab_hosts:
            try:
                result = subprocess.run(
                    ['glab', 'auth', 'status', '--hostname', host],
                    capture_output=True,
                    text=True,
                    timeout=10
                )
                self._glab_hosts[host] = result.returncode == 0
            except (subprocess.TimeoutExpired, FileNotFoundError):
                self._glab_hosts[host] = False
        return self._glab_hosts[host]

    def _glab_api(self, endpoint: str, host: str) -> Optional[Dict[str, Any]]:
        """Call GitLab API using glab CLI; None means fall back to HTTP."""
        try:
            result = subprocess.run(
                ['glab', 'api', endpoint, '--hostname', host],
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
            if result.returncode == 0 and result.stdout:
                return json.loads(result.stdout)
            logger.debug(f"glab api {endpoint} exited with {result.returncode}: {result.stderr.strip()}")
            return None
        except (subprocess.TimeoutExpired, json.JSONDecodeError, FileNotFoundError) as e:
            logger.debug(f"glab api call failed for {endpoint}: {e}")
            return None

    def _check_rate_limit(self, headers) -> None:
        try:
            remaining = int(headers.get('RateLimit-Remaining', -1))
        except (TypeError, ValueError):
            return
        if 0 <= remaining < RATE_LIMIT_LOW:
            logger.warning(f"GitLab API rate limit low: {remaining} requests remaining")

    def _requests_api(self, endpoint: str, host: str) -> Dict[str, Any]:
        """Call GitLab API using requests."""
        url = f"https://{host}/api/v4/{endpoint}"
        headers = {}
        if self.token:
            headers['PRIVATE-TOKEN'] = self.token

        try:
            response = self._session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise APIError(f"GitLab API request failed for {endpoint}: {e}") from e

        self._check_rate_limit(response.headers)

        if response.status_code == 404:
            raise APIError(f"{endpoint} not found on {host}", status_code=404)
        if response.status_code != 200:
            raise APIError(
                f"GitLab API error {response.status_code} for {endpoint}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise APIError(f"Malformed GitLab API response for {endpoint}: {e}") from e
        if not isinstance(data, dict):
            raise APIError(f"Unexpected GitLab API response for {endpoint}")
        return data

    def _api(self, endpoint: str, host: Optional[str] = None) -> Dict[str, Any]:
        """Call GitLab API using best available method."""
        host = normalize_host(host or self.host)
        if self.use_glab_cli and self._check_glab_cli(host):
            result = self._glab_api(endpoint, host)
            if isinstance(result, dict):
                return result

        return self._requests_api(endpoint, host)

    def get_project(self, full_name: str, host: Optional[str] = None) -> Project:
        """
        Get a project by its path with namespace.

        Args:
            full_name: Project path, e.g. "group/subgroup/project"
            host: GitLab host (defaults to the client's host)

        Returns:
            Project record

        Raises:
            APIError: if the project cannot be fetched
        """
        data = self._api(f"projects/{quote(full_name, safe='')}", host)
        return Project.from_api_response(data)
