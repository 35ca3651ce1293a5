"""Unified diff parsing."""

import re

from mergegate.models import ChangeKind, LineRange
from mergegate.repository.base import ChangedFile

# Hunk header: @@ -start,count +start,count @@
_HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")


def parse_hunk_ranges(patch: str) -> list[LineRange]:
  """Extract new-side line ranges from hunk headers.

  A hunk that adds no lines (pure deletion) contributes no range.
  """
  ranges: list[LineRange] = []
  for line in patch.split("\n"):
    match = _HUNK_HEADER.match(line)
    if not match:
      continue
    start = int(match.group(1))
    count = int(match.group(2)) if match.group(2) is not None else 1
    if count > 0:
      ranges.append(LineRange(start, start + count - 1))
  return ranges


def parse_diff_output(diff_output: str) -> list[ChangedFile]:
  """Parse git diff output into changed files."""
  if not diff_output.strip():
    return []

  files: list[ChangedFile] = []
  current_file: str | None = None
  current_content: list[str] = []
  kind = ChangeKind.MODIFIED

  def flush() -> None:
    if current_file is None:
      return
    ranges = [] if kind == ChangeKind.DELETED else parse_hunk_ranges("\n".join(current_content))
    files.append(ChangedFile(path=current_file, change_kind=kind, line_ranges=ranges))

  for line in diff_output.split("\n"):
    if line.startswith("diff --git"):
      flush()
      parts = line.split(" b/")
      current_file = parts[-1] if len(parts) > 1 else None
      current_content = []
      kind = ChangeKind.MODIFIED
    elif line.startswith("new file"):
      kind = ChangeKind.ADDED
    elif line.startswith("deleted file"):
      kind = ChangeKind.DELETED
    elif line.startswith("rename to "):
      current_file = line[len("rename to "):]
    elif current_file is not None:
      current_content.append(line)

  flush()
  return files
