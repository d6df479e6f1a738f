"""
Remote domain object for repobase.

A Remote is one configured git remote together with the repository it
points at and the resolution tag previously persisted for it.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .reference import RepoReference

# Resolution tag kinds returned by decode_resolution()
UNRESOLVED = ""
BASE = "base"
BASE_REF = "base_ref"
LEGACY = "legacy"
HEAD = "head"

BASE_PREFIX = "base:"
HEAD_PREFIX = "head:"

DEFAULT_REMOTE_PRIORITY = ("upstream", "gitlab", "origin")


@dataclass(frozen=True)
class Remote:
    """A named git remote and the repository it tracks."""
    name: str
    repo: RepoReference
    fetch_url: Optional[str] = None
    push_url: Optional[str] = None
    resolved: str = ""

    @property
    def host(self) -> str:
        return self.repo.host

    @property
    def owner(self) -> str:
        return self.repo.owner

    @property
    def project(self) -> str:
        return self.repo.name

    @property
    def full_name(self) -> str:
        return self.repo.full_name

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'name': self.name,
            'host': self.host,
            'owner': self.owner,
            'project': self.project,
            'fetch_url': self.fetch_url,
            'push_url': self.push_url,
            'resolved': self.resolved,
        }


def decode_resolution(tag: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    Decode a persisted resolution tag.

    Returns a (kind, full_name) pair:
        ""            -> (UNRESOLVED, None)
        "base"        -> (BASE, None)
        "base:o/n"    -> (BASE_REF, "o/n")
        "head:..."    -> (HEAD, "...")
        "o/n"         -> (LEGACY, "o/n")

    Legacy tags are remoteless resolutions written before the "base:"
    prefix existed. This function never touches persisted state; see
    migrate_legacy_resolution() in the resolver for the rewrite.
    """
    tag = (tag or "").strip()
    if not tag:
        return UNRESOLVED, None
    if tag == BASE:
        return BASE, None
    if tag.startswith(BASE_PREFIX):
        return BASE_REF, tag[len(BASE_PREFIX):]
    if tag.startswith(HEAD_PREFIX):
        return HEAD, tag[len(HEAD_PREFIX):]
    return LEGACY, tag


def encode_base_resolution(full_name: Optional[str] = None) -> str:
    """Build the tag for a base resolution, remoteless when full_name is given."""
    if full_name:
        return f"{BASE_PREFIX}{full_name}"
    return BASE


def remote_sort_key(name: str, priority: Sequence[str] = DEFAULT_REMOTE_PRIORITY) -> int:
    """Lower sorts first; names missing from priority share the last slot."""
    try:
        return list(priority).index(name)
    except ValueError:
        return len(priority)


def sort_remotes(
    remotes: Iterable[Remote],
    priority: Optional[Sequence[str]] = None
) -> List[Remote]:
    """Stable-sort remotes by name priority (upstream, gitlab, origin by default)."""
    priority = tuple(priority) if priority is not None else DEFAULT_REMOTE_PRIORITY
    return sorted(remotes, key=lambda r: remote_sort_key(r.name, priority))
