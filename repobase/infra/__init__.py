"""
Infrastructure layer for repobase.

Contains abstractions for external systems:
- GitClient: remote enumeration and resolution storage in git config
- GitLabClient: GitLab API access
- select_one: interactive choice prompt

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient
from .gitlab_client import GitLabClient
from .prompt import select_one

__all__ = [
    'GitClient',
    'GitLabClient',
    'select_one',
]
