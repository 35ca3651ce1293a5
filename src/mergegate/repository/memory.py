"""In-memory repository adapter."""

from typing import Mapping, Sequence

from mergegate.errors import ArtifactNotFound, RepositoryUnavailable
from mergegate.repository.base import ChangedFile


class InMemoryRepository:
  """Repository backed by plain mappings.

  Deterministic and side-effect free; useful for tests and for callers
  that already hold file contents.

  Example:
    repo = InMemoryRepository(
      files={"a.py": b"print(1)\\n"},
      diffs={("main", "feature"): [ChangedFile("a.py", ChangeKind.MODIFIED)]},
    )
  """

  def __init__(
    self,
    files: Mapping[str, bytes] | None = None,
    diffs: Mapping[tuple[str, str], Sequence[ChangedFile]] | None = None,
    worktree: Sequence[ChangedFile] | None = None,
    refs: Mapping[str, Mapping[str, bytes]] | None = None,
    available: bool = True,
  ):
    self.files = dict(files or {})
    self.diffs = {k: list(v) for k, v in (diffs or {}).items()}
    self.worktree = list(worktree or [])
    self.refs = {k: dict(v) for k, v in (refs or {}).items()}
    self.available = available

  def list_changed_files(self, base_ref: str, head_ref: str) -> list[ChangedFile]:
    self._check_available()
    try:
      return list(self.diffs[(base_ref, head_ref)])
    except KeyError:
      raise RepositoryUnavailable(f"Unknown revision range {base_ref}..{head_ref}") from None

  def list_all_files(self) -> list[str]:
    self._check_available()
    return list(self.files)

  def read_file(self, path: str, ref: str | None = None) -> bytes:
    self._check_available()
    source = self.files if ref is None else self.refs.get(ref, self.files)
    if path not in source:
      raise ArtifactNotFound(f"{path} not found")
    return source[path]

  def list_worktree_changes(self) -> list[ChangedFile]:
    self._check_available()
    return list(self.worktree)

  def _check_available(self) -> None:
    if not self.available:
      raise RepositoryUnavailable("Repository is unavailable")
