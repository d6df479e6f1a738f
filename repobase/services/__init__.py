"""
Service layer for repobase.

- network: fork graph discovery over the GitLab API
- resolver: base repository resolution and caching
"""

from .network import (
    MAX_REMOTES_FOR_LOOKUP,
    resolve_network,
    resolve_fork_parents,
    candidate_repositories,
)
from .resolver import (
    Resolution,
    ResolvedRemotes,
    resolve_remotes_to_repos,
    load_resolved_remotes,
    migrate_legacy_resolution,
)

__all__ = [
    'MAX_REMOTES_FOR_LOOKUP',
    'resolve_network',
    'resolve_fork_parents',
    'candidate_repositories',
    'Resolution',
    'ResolvedRemotes',
    'resolve_remotes_to_repos',
    'load_resolved_remotes',
    'migrate_legacy_resolution',
]
