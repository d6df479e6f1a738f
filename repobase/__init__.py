"""
repobase - Resolve the base (upstream) repository of a git working copy.

When a checkout has several remotes pointing at forks of one GitLab
project, repobase decides which of them is the base repository: it
honours decisions cached in git config, follows the fork graph reported
by the GitLab API, and asks the user only when that leaves a choice.

Quick Start:
    from repobase import load_config, load_resolved_remotes

    resolved = load_resolved_remotes(load_config(), repo_path=".")
    result = resolved.base_repo(prompt=True)
    print(result.repo.full_name)

Domain Objects:
    RepoReference - host + owner + name of a hosted repository
    Remote - a git remote and its persisted resolution tag
    Project - a GitLab project record

Services:
    ResolvedRemotes - base repository resolution
    resolve_remotes_to_repos - build a ResolvedRemotes from remotes
"""

__version__ = "0.3.0"

from .domain import (
    RepoReference,
    Remote,
    Project,
    ForkParent,
    is_same,
    decode_resolution,
)

from .services import (
    Resolution,
    ResolvedRemotes,
    resolve_remotes_to_repos,
    load_resolved_remotes,
)

from .config import load_config

__all__ = [
    "__version__",
    "RepoReference",
    "Remote",
    "Project",
    "ForkParent",
    "is_same",
    "decode_resolution",
    "Resolution",
    "ResolvedRemotes",
    "resolve_remotes_to_repos",
    "load_resolved_remotes",
    "load_config",
]
