"""Local git repository adapter."""

import logging
import subprocess
from pathlib import Path

from mergegate.errors import ArtifactNotFound, GitError, RepositoryUnavailable
from mergegate.models import ChangeKind, LineRange
from mergegate.paths import normalize_path
from mergegate.repository.base import ChangedFile
from mergegate.repository.diff import parse_diff_output

logger = logging.getLogger(__name__)


def _sanitize_error(stderr: str) -> str:
  """Remove potentially sensitive path information from error messages."""
  lines = stderr.strip().split("\n")
  sanitized = []
  for line in lines:
    if "fatal:" in line or "error:" in line:
      sanitized.append(line.split("/")[-1] if "/" in line else line)
    else:
      sanitized.append(line)
  return "\n".join(sanitized)


def run_git(*args: str, cwd: Path | None = None) -> str:
  """Run a git command and return stdout."""
  return run_git_bytes(*args, cwd=cwd).decode("utf-8", errors="replace")


def run_git_bytes(*args: str, cwd: Path | None = None) -> bytes:
  """Run a git command and return raw stdout."""
  logger.debug("git %s", " ".join(args))
  try:
    result = subprocess.run(
      ["git", *args],
      capture_output=True,
      check=True,
      cwd=cwd,
    )
    return result.stdout
  except subprocess.CalledProcessError as e:
    stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
    raise GitError(f"git {' '.join(args)} failed: {_sanitize_error(stderr)}") from e
  except FileNotFoundError as e:
    raise GitError("git executable not found") from e


def _count_lines(content: bytes) -> int:
  if not content:
    return 0
  count = content.count(b"\n")
  return count if content.endswith(b"\n") else count + 1


class GitRepository:
  """Repository queries answered by the local git CLI."""

  def __init__(self, root: Path | None = None):
    self.root = root or Path.cwd()

  def list_changed_files(self, base_ref: str, head_ref: str) -> list[ChangedFile]:
    diff_output = run_git(
      "diff", "--no-color", "--no-ext-diff", "--unified=0", base_ref, head_ref,
      cwd=self.root,
    )
    return parse_diff_output(diff_output)

  def list_worktree_changes(self) -> list[ChangedFile]:
    """List staged and unstaged changes against HEAD, plus untracked files."""
    diff_output = run_git(
      "diff", "--no-color", "--no-ext-diff", "--unified=0", "HEAD", cwd=self.root,
    )
    changes = parse_diff_output(diff_output)

    untracked = run_git("ls-files", "--others", "--exclude-standard", "-z", cwd=self.root)
    for path in (p for p in untracked.split("\0") if p):
      line_count = _count_lines(self.read_file(path))
      ranges = [LineRange(1, line_count)] if line_count else []
      changes.append(ChangedFile(path=path, change_kind=ChangeKind.ADDED, line_ranges=ranges))

    return changes

  def list_all_files(self) -> list[str]:
    output = run_git("ls-files", "-z", cwd=self.root)
    return [p for p in output.split("\0") if p]

  def read_file(self, path: str, ref: str | None = None) -> bytes:
    if ref is not None:
      try:
        return run_git_bytes("show", f"{ref}:{normalize_path(path)}", cwd=self.root)
      except GitError as e:
        raise ArtifactNotFound(f"{path} not found at {ref}") from e

    file_path = self.root / path
    try:
      return file_path.read_bytes()
    except FileNotFoundError as e:
      raise ArtifactNotFound(f"{path} not found") from e
    except IsADirectoryError as e:
      raise ArtifactNotFound(f"{path} is a directory") from e
    except OSError as e:
      raise RepositoryUnavailable(f"Cannot read {path}: {e}") from e
