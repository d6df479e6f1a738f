"""
Repository reference domain object for repobase.

A RepoReference names a hosted repository by host, owner (namespace)
and project name. It is immutable and has no identity beyond its fields.
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from ..exit_codes import MalformedReferenceError

DEFAULT_HOST = "gitlab.com"

# scp-like syntax: [user@]host:path
_SCP_URL = re.compile(r'^(?:[^@/]+@)?([^:/]+):(?!//)(.+)$')
_URL_SCHEMES = ('https://', 'http://', 'ssh://', 'git://', 'git+ssh://', 'ssh+git://')


def normalize_host(host: str) -> str:
    """Lower-case a hostname and strip a leading 'www.'."""
    host = (host or "").strip().lower()
    if host.startswith('www.'):
        host = host[4:]
    return host


def is_url(value: str) -> bool:
    """Check whether a string looks like a git remote URL."""
    if value.startswith(_URL_SCHEMES):
        return True
    return bool(_SCP_URL.match(value)) and '@' in value.split(':', 1)[0]


def _strip_path(path: str) -> str:
    path = path.strip().strip('/')
    if path.endswith('.git'):
        path = path[:-4]
    return path


@dataclass(frozen=True)
class RepoReference:
    """
    Immutable reference to a hosted repository.

    `owner` may span several path segments on GitLab (group/subgroup);
    `name` is always the last segment.

    Example:
        ref = RepoReference.from_full_name("gitlab-org/cli")
        ref.full_name   # 'gitlab-org/cli'
        ref.host        # 'gitlab.com'
    """
    host: str
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def with_host(cls, owner: str, name: str, host: str) -> 'RepoReference':
        """Create a reference with a normalized host."""
        return cls(host=normalize_host(host) or DEFAULT_HOST, owner=owner, name=name)

    @classmethod
    def from_full_name(cls, value: str, default_host: Optional[str] = None) -> 'RepoReference':
        """
        Parse "OWNER/NAME", "GROUP/SUBGROUP/NAME", "HOST/OWNER/NAME" or a URL.

        The first of three or more segments is read as a host when it
        looks like one (contains '.' or ':') or equals the default host.

        Raises:
            MalformedReferenceError: if fewer than two path segments are present
        """
        value = (value or "").strip()
        if is_url(value):
            return cls.from_url(value)

        host = normalize_host(default_host or DEFAULT_HOST)
        parts = _strip_path(value).split('/')
        if len(parts) < 2 or any(not p for p in parts):
            raise MalformedReferenceError(
                f'expected the "[HOST/]OWNER/REPO" format, got "{value}"'
            )

        if len(parts) >= 3:
            first = parts[0]
            if '.' in first or ':' in first or normalize_host(first) == host:
                host = normalize_host(first)
                parts = parts[1:]

        return cls.with_host('/'.join(parts[:-1]), parts[-1], host)

    @classmethod
    def from_url(cls, url: str) -> 'RepoReference':
        """
        Parse a git remote URL.

        Handles:
            https://gitlab.com/owner/repo.git
            ssh://git@gitlab.com:22/group/sub/repo.git
            git@gitlab.com:owner/repo.git

        Raises:
            MalformedReferenceError: if host, owner or name cannot be extracted
        """
        raw = (url or "").strip()
        host = ""
        path = ""

        if raw.startswith(_URL_SCHEMES):
            parsed = urlparse(raw)
            host = parsed.hostname or ""
            path = parsed.path
        else:
            match = _SCP_URL.match(raw)
            if match:
                host, path = match.groups()

        path = _strip_path(path)
        parts = path.split('/') if path else []
        if not host or len(parts) < 2 or any(not p for p in parts):
            raise MalformedReferenceError(f'invalid repository URL: "{url}"')

        return cls.with_host('/'.join(parts[:-1]), parts[-1], host)

    def to_dict(self):
        return {
            'host': self.host,
            'owner': self.owner,
            'name': self.name,
            'full_name': self.full_name,
        }

    def __str__(self) -> str:
        return self.full_name


def is_same(a: RepoReference, b: RepoReference) -> bool:
    """True if both references point at the same repository (case-insensitive)."""
    return (
        normalize_host(a.host) == normalize_host(b.host)
        and a.owner.lower() == b.owner.lower()
        and a.name.lower() == b.name.lower()
    )


def full_name_from_url(url: str) -> str:
    """Return "OWNER/NAME" for a repository URL."""
    return RepoReference.from_url(url).full_name
