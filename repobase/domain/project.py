"""
Project record returned by the GitLab API.

Read-only to repobase: built from the API response and never mutated.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class ForkParent:
    """The project a fork was created from."""
    id: int
    path_with_namespace: str
    http_url_to_repo: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'ForkParent':
        return cls(
            id=data.get('id', 0),
            path_with_namespace=data.get('path_with_namespace', ''),
            http_url_to_repo=data.get('http_url_to_repo'),
        )


@dataclass(frozen=True)
class Project:
    """GitLab project metadata relevant to base repository resolution."""
    id: int
    path_with_namespace: str
    http_url_to_repo: str
    ssh_url_to_repo: Optional[str] = None
    web_url: Optional[str] = None
    default_branch: Optional[str] = None
    forked_from_project: Optional[ForkParent] = None

    @property
    def is_fork(self) -> bool:
        return self.forked_from_project is not None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Project':
        """Create from a GitLab /projects/:id response."""
        parent = data.get('forked_from_project')
        return cls(
            id=data.get('id', 0),
            path_with_namespace=data.get('path_with_namespace', ''),
            http_url_to_repo=data.get('http_url_to_repo', ''),
            ssh_url_to_repo=data.get('ssh_url_to_repo'),
            web_url=data.get('web_url'),
            default_branch=data.get('default_branch'),
            forked_from_project=ForkParent.from_api_response(parent) if isinstance(parent, dict) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'path_with_namespace': self.path_with_namespace,
            'http_url_to_repo': self.http_url_to_repo,
            'ssh_url_to_repo': self.ssh_url_to_repo,
            'web_url': self.web_url,
            'default_branch': self.default_branch,
            'forked_from': self.forked_from_project.path_with_namespace if self.forked_from_project else None,
        }
