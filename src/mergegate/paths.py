"""Repository path normalization and glob matching."""

import fnmatch
from pathlib import PurePosixPath
from typing import Sequence


def normalize_path(path: str) -> str:
  """Return a canonical repository-relative POSIX path."""
  cleaned = path.strip().replace("\\", "/")
  while cleaned.startswith("./"):
    cleaned = cleaned[2:]
  if not cleaned:
    return ""
  return str(PurePosixPath(cleaned))


def matches(path: str, pattern: str) -> bool:
  """Return True if path matches a single pattern.

  Supports:
  - fnmatch globs on the full path: "src/*.py", "src/**/*.ts"
  - fnmatch globs on the basename: "*.lock"
  - Leading directories: "migrations/", "docs" (any file within that tree)
  """
  if fnmatch.fnmatch(path, pattern):
    return True
  # "src/**/*.py" should also match files directly under src/
  if "**/" in pattern and fnmatch.fnmatch(path, pattern.replace("**/", "")):
    return True
  if fnmatch.fnmatch(path.rsplit("/", 1)[-1], pattern):
    return True
  prefix = normalize_path(pattern) + "/"
  return path.startswith(prefix)


def matches_any(path: str, patterns: Sequence[str]) -> bool:
  """Return True if path matches any pattern, or no pattern is given.

  Blank patterns are ignored.
  """
  patterns = [p for p in patterns if p.strip()]
  if not patterns:
    return True
  return any(matches(path, p) for p in patterns)
