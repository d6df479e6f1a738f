"""Shared fakes for repobase tests."""

from unittest.mock import MagicMock

import pytest

from repobase.domain import ForkParent, Project, RepoReference, Remote
from repobase.exit_codes import APIError
from repobase.infra import GitClient


def make_remote(name, full_name, resolved="", host="gitlab.com"):
    """Build a Remote pointing at host/full_name."""
    owner, _, project = full_name.rpartition('/')
    return Remote(
        name=name,
        repo=RepoReference.with_host(owner, project, host),
        fetch_url=f"https://{host}/{full_name}.git",
        push_url=f"https://{host}/{full_name}.git",
        resolved=resolved,
    )


def make_project(full_name, project_id=1, parent=None, url=None, host="gitlab.com"):
    """Build a Project record, optionally forked from `parent`."""
    return Project(
        id=project_id,
        path_with_namespace=full_name,
        http_url_to_repo=url or f"https://{host}/{full_name}.git",
        web_url=f"https://{host}/{full_name}",
        forked_from_project=ForkParent(id=project_id + 1000, path_with_namespace=parent) if parent else None,
    )


class FakeGitLab:
    """In-memory stand-in for GitLabClient.get_project."""

    host = "gitlab.com"

    def __init__(self, projects=None):
        self.projects = dict(projects or {})
        self.calls = []
        self.hosts = []

    def get_project(self, full_name, host=None):
        self.calls.append(full_name)
        self.hosts.append(host)
        if full_name not in self.projects:
            raise APIError(f"projects/{full_name} not found", status_code=404)
        return self.projects[full_name]


@pytest.fixture
def git_client():
    """GitClient mock that records persisted resolutions."""
    return MagicMock(spec=GitClient)


@pytest.fixture
def chooser():
    """Chooser mock that picks the first option."""
    return MagicMock(side_effect=lambda message, options: options[0])
