"""Repository query adapters."""

from mergegate.repository.base import ChangedFile, RepositoryQuery
from mergegate.repository.diff import parse_diff_output, parse_hunk_ranges
from mergegate.repository.git import GitRepository
from mergegate.repository.github import GitHubRepository
from mergegate.repository.memory import InMemoryRepository

__all__ = [
  "ChangedFile",
  "GitHubRepository",
  "GitRepository",
  "InMemoryRepository",
  "RepositoryQuery",
  "parse_diff_output",
  "parse_hunk_ranges",
]
