"""
Infrastructure layer for reposeed.

Contains abstractions for external systems:
- GitClient: Git command execution with clone progress streaming

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, CloneProgressParser

__all__ = [
    'GitClient',
    'CloneProgressParser',
]
