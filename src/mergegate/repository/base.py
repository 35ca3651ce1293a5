"""Repository query protocol."""

from dataclasses import dataclass
from typing import Protocol, Sequence

from mergegate.models import ChangeKind, LineRange


@dataclass(frozen=True)
class ChangedFile:
  """A path reported as changed by the repository backend."""

  path: str
  change_kind: ChangeKind
  line_ranges: Sequence[LineRange] = ()

  def __post_init__(self) -> None:
    object.__setattr__(self, "line_ranges", tuple(self.line_ranges))


class RepositoryQuery(Protocol):
  """Version-control capability consumed by the scope resolver.

  Every operation may raise RepositoryUnavailable.
  """

  def list_changed_files(self, base_ref: str, head_ref: str) -> list[ChangedFile]:
    """List files changed between two refs, with new-side line ranges."""
    ...

  def list_all_files(self) -> list[str]:
    """List every tracked file."""
    ...

  def read_file(self, path: str, ref: str | None = None) -> bytes:
    """Read a file from the working tree, or at a ref when given.

    Raises:
      ArtifactNotFound: The path does not exist.
    """
    ...

  def list_worktree_changes(self) -> list[ChangedFile]:
    """List uncommitted (staged and unstaged) changes against HEAD."""
    ...
