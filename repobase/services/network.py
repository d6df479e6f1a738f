"""
Fork graph discovery for repobase.

Looks up the GitLab project behind each candidate remote, plus the
project it was forked from (one hop only), and builds the deduplicated
list of repositories the base could be chosen from.
"""

from typing import Dict, List, Optional, Tuple
import logging

from ..domain import Project, RepoReference, full_name_from_url
from ..exit_codes import APIError, MalformedReferenceError

logger = logging.getLogger(__name__)

# cap the number of git remotes looked up, since the user might have an
# unusually large number of git remotes
MAX_REMOTES_FOR_LOOKUP = 5


def resolve_network(resolved) -> List[Project]:
    """
    Populate resolved.network with the projects behind the first remotes.

    Only the first `resolved.max_remotes_for_lookup` remotes are queried, in
    their existing order. A remote whose lookup fails is skipped. Once
    populated the network is never queried again, even when it came back
    empty.

    Args:
        resolved: ResolvedRemotes instance

    Returns:
        The memoized list of project records
    """
    if resolved.network is not None:
        return resolved.network

    network: List[Project] = []
    for remote in resolved.remotes[:resolved.max_remotes_for_lookup]:
        try:
            network.append(resolved.api_client.get_project(remote.full_name, host=remote.host))
        except APIError as e:
            logger.debug(f"Skipping remote {remote.name} ({remote.full_name}): {e}")

    resolved.network = network
    return network


def _project_host(project: Project, default: str) -> str:
    try:
        return RepoReference.from_url(project.http_url_to_repo).host
    except MalformedReferenceError:
        return default


def resolve_fork_parents(resolved) -> Dict[str, Optional[Project]]:
    """
    Populate resolved.parents with the fork parent of each network project.

    Keyed by the parent's path with namespace; a parent whose lookup
    failed maps to None. Like the network itself, parents are fetched
    at most once per instance.
    """
    if resolved.parents is not None:
        return resolved.parents

    parents: Dict[str, Optional[Project]] = {}
    for project in resolve_network(resolved):
        parent = project.forked_from_project
        if parent is None or parent.path_with_namespace in parents:
            continue
        host = _project_host(project, resolved.api_client.host)
        try:
            parents[parent.path_with_namespace] = resolved.api_client.get_project(
                parent.path_with_namespace, host=host
            )
        except APIError as e:
            logger.debug(f"Could not fetch fork parent {parent.path_with_namespace}: {e}")
            parents[parent.path_with_namespace] = None

    resolved.parents = parents
    return parents


def candidate_repositories(resolved) -> Tuple[List[str], Dict[str, Project]]:
    """
    Collect the unique repositories reachable from the network.

    Each forked project contributes its parent first, then itself. The
    key is the full name derived from the clone URL; the first record
    seen for a key wins.

    Returns:
        Tuple of (full names in discovery order, full name -> project)
    """
    names: List[str] = []
    by_name: Dict[str, Project] = {}

    def add(project: Project) -> None:
        try:
            name = full_name_from_url(project.http_url_to_repo)
        except MalformedReferenceError:
            logger.debug(f"Ignoring project with unparseable URL: {project.http_url_to_repo!r}")
            return
        if name not in by_name:
            by_name[name] = project
            names.append(name)

    parents = resolve_fork_parents(resolved)
    for project in resolve_network(resolved):
        parent = project.forked_from_project
        if parent is not None and parents.get(parent.path_with_namespace) is not None:
            add(parents[parent.path_with_namespace])
        add(project)

    return names, by_name
