"""
Domain layer for repobase.

Contains pure value objects with no I/O or side effects:
- RepoReference: A hosted repository (host + owner + name)
- Remote: A configured git remote and its persisted resolution tag
- Project: A project record as reported by the GitLab API

All objects are immutable; use dataclasses.replace() to derive new ones.
"""

from .reference import RepoReference, is_same, full_name_from_url
from .remote import Remote, decode_resolution, encode_base_resolution, sort_remotes
from .project import Project, ForkParent

__all__ = [
    'RepoReference',
    'is_same',
    'full_name_from_url',
    'Remote',
    'decode_resolution',
    'encode_base_resolution',
    'sort_remotes',
    'Project',
    'ForkParent',
]
