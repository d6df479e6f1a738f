"""
Base repository resolution for repobase.

Decides which repository a working copy treats as its base (upstream)
when several git remotes exist. Cached per-remote resolutions win; the
GitLab fork graph is consulted next; the user is asked only when the
graph leaves more than one candidate. The decision is written back to
git config so later runs need no network access.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging

from ..domain import RepoReference, Remote, Project, is_same, sort_remotes
from ..domain.remote import (
    BASE,
    BASE_REF,
    LEGACY,
    decode_resolution,
    encode_base_resolution,
)
from ..exit_codes import NoRemotesError, PersistenceError, RemoteNotFoundError
from ..infra import GitClient, GitLabClient, select_one
from .network import MAX_REMOTES_FOR_LOOKUP, candidate_repositories, resolve_network

logger = logging.getLogger(__name__)

BASE_REPO_PROMPT = "Which should be the base repository (used for e.g. querying issues) for this directory?"

Chooser = Callable[[str, Sequence[str]], str]


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of base repository resolution.

    `source` records which rule decided: override, cached, default,
    network or prompt. `remote` is the configured remote tracking the
    base, or None when the base has no remote of its own. A failure to
    cache the decision is carried in `persist_error`; `repo` is valid
    either way.
    """
    repo: RepoReference
    source: str
    remote: Optional[Remote] = None
    persist_error: Optional[PersistenceError] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.repo.to_dict(),
            'source': self.source,
            'remote': self.remote.name if self.remote else None,
            'persist_error': str(self.persist_error) if self.persist_error else None,
        }


def migrate_legacy_resolution(git_client: GitClient, remote: Remote) -> bool:
    """
    Rewrite a bare "owner/name" tag to the "base:owner/name" form.

    Best effort: a failed write is logged and reported as False.
    """
    try:
        git_client.set_remote_resolution(remote.name, encode_base_resolution(remote.resolved))
        logger.debug(f"Migrated resolution of remote {remote.name} to base:{remote.resolved}")
        return True
    except PersistenceError as e:
        logger.debug(f"Could not migrate resolution of remote {remote.name}: {e}")
        return False


class ResolvedRemotes:
    """
    The sorted remotes of a working copy plus everything needed to resolve them.

    The fork network and the fork parents are fetched lazily, at most
    once per instance.

    Example:
        resolved = resolve_remotes_to_repos(git.list_remotes(), GitLabClient())
        result = resolved.base_repo(prompt=True)
        print(result.repo.full_name)
    """

    def __init__(
        self,
        remotes: Sequence[Remote],
        api_client: GitLabClient,
        base_override: Optional[RepoReference] = None,
        git_client: Optional[GitClient] = None,
        chooser: Optional[Chooser] = None,
        max_remotes_for_lookup: int = MAX_REMOTES_FOR_LOOKUP
    ):
        self.remotes: List[Remote] = list(remotes)
        self.api_client = api_client
        self.base_override = base_override
        self.git = git_client or GitClient()
        self.chooser = chooser or select_one
        self.max_remotes_for_lookup = max_remotes_for_lookup
        self.network: Optional[List[Project]] = None
        self.parents: Optional[Dict[str, Optional[Project]]] = None

    def _first_remote(self) -> Remote:
        if not self.remotes:
            raise NoRemotesError()
        return self.remotes[0]

    def _cached_resolution(self) -> Optional[Resolution]:
        """Return the first base resolution persisted on any remote."""
        for remote in self.remotes:
            kind, full_name = decode_resolution(remote.resolved)
            if kind == BASE:
                return Resolution(remote.repo, 'cached', remote=remote)
            if kind in (BASE_REF, LEGACY):
                parsed = RepoReference.from_full_name(full_name, default_host=remote.host)
                if kind == LEGACY:
                    migrate_legacy_resolution(self.git, remote)
                repo = RepoReference.with_host(parsed.owner, parsed.name, remote.host)
                return Resolution(repo, 'cached', remote=self._tracking_remote(repo))
        return None

    def _tracking_remote(self, repo: RepoReference) -> Optional[Remote]:
        try:
            return self.remote_for_repo(repo)
        except RemoteNotFoundError:
            return None

    def base_repo(self, prompt: bool = True) -> Resolution:
        """
        Determine the base repository.

        Args:
            prompt: Whether the user may be asked to choose

        Returns:
            Resolution with the base repository

        Raises:
            MalformedReferenceError: if a persisted resolution cannot be parsed
            PromptCancelledError: if the user aborts the selection
            NoRemotesError: if a remote is needed but none is configured
        """
        if self.base_override is not None:
            return Resolution(self.base_override, 'override', remote=self._tracking_remote(self.base_override))

        cached = self._cached_resolution()
        if cached is not None:
            return cached

        if not prompt:
            # we cannot prompt, so just resort to the 1st remote
            first = self._first_remote()
            return Resolution(first.repo, 'default', remote=first)

        names, by_name = candidate_repositories(self)
        if not names:
            first = self._first_remote()
            return Resolution(first.repo, 'default', remote=first)

        base_name = names[0]
        source = 'network'
        if len(names) > 1:
            base_name = self.chooser(BASE_REPO_PROMPT, names)
            source = 'prompt'

        selected = RepoReference.from_url(by_name[base_name].http_url_to_repo)

        resolution = BASE
        remote = self._tracking_remote(selected)
        target = remote
        if remote is None:
            target = self._first_remote()
            resolution = encode_base_resolution(selected.full_name)

        persist_error = None
        try:
            self.git.set_remote_resolution(target.name, resolution)
        except PersistenceError as e:
            logger.warning(f"Could not save base repository choice: {e}")
            persist_error = e

        return Resolution(selected, source, remote=remote, persist_error=persist_error)

    def head_repos(self) -> List[Project]:
        """All project records in the fork network, fetching it if needed."""
        return list(resolve_network(self))

    def remote_for_repo(self, repo: RepoReference) -> Remote:
        """
        Find the git remote that points to a repository.

        Raises:
            RemoteNotFoundError: if no configured remote matches
        """
        for remote in self.remotes:
            if is_same(remote.repo, repo):
                return remote
        raise RemoteNotFoundError(f"no git remote points to {repo.host}/{repo.full_name}")


def resolve_remotes_to_repos(
    remotes: Sequence[Remote],
    api_client: GitLabClient,
    base: Optional[str] = None,
    git_client: Optional[GitClient] = None,
    chooser: Optional[Chooser] = None,
    priority: Optional[Sequence[str]] = None,
    max_remotes_for_lookup: int = MAX_REMOTES_FOR_LOOKUP,
    default_host: Optional[str] = None
) -> ResolvedRemotes:
    """
    Sort remotes by priority and parse the optional base override.

    Args:
        remotes: Configured git remotes
        api_client: GitLab API client
        base: Explicit "[HOST/]OWNER/NAME" or URL that overrides resolution
        git_client: Store for resolution tags
        chooser: Interactive selection function
        priority: Remote names in preference order
        max_remotes_for_lookup: Cap on remotes queried for the fork network
        default_host: Host assumed for a base override without one

    Raises:
        MalformedReferenceError: if base cannot be parsed
    """
    base_override = None
    if base:
        base_override = RepoReference.from_full_name(
            base, default_host=default_host or api_client.host
        )

    return ResolvedRemotes(
        sort_remotes(remotes, priority),
        api_client,
        base_override=base_override,
        git_client=git_client,
        chooser=chooser,
        max_remotes_for_lookup=max_remotes_for_lookup,
    )


def load_resolved_remotes(
    config: Dict[str, Any],
    repo_path: str = ".",
    base: Optional[str] = None,
    git_client: Optional[GitClient] = None,
    api_client: Optional[GitLabClient] = None
) -> ResolvedRemotes:
    """Build a ResolvedRemotes for a working copy from configuration."""
    resolution_config = config.get('resolution', {})
    git = git_client or GitClient(
        repo_path,
        config_key=resolution_config.get('config_key', 'repobase-resolved'),
    )
    client = api_client or GitLabClient.from_config(config)

    return resolve_remotes_to_repos(
        git.list_remotes(),
        client,
        base=base,
        git_client=git,
        priority=resolution_config.get('remote_priority'),
        max_remotes_for_lookup=int(resolution_config.get('max_remotes_for_lookup', MAX_REMOTES_FOR_LOOKUP)),
    )
