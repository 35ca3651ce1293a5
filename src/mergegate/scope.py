"""Scope resolution: turn a review request into concrete artifacts."""

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from mergegate.errors import ArtifactNotFound, InvalidTarget
from mergegate.models import ArtifactRef, ChangeKind, LineRange, Scope, ScopeRequest, content_hash
from mergegate.paths import matches_any, normalize_path
from mergegate.repository.base import ChangedFile, RepositoryQuery

logger = logging.getLogger(__name__)

DEFAULT_BASE_REF = "main"
DEFAULT_PR_HEAD_REF = "refs/pull/{number}/head"
SINGLE_REF_BASE = "HEAD~1"

_PR_NUMBER = re.compile(r"^#?(\d+)$")
_REF_RANGE = re.compile(r"^(.*?)\.{2,3}(.*)$")
_PATH_DELIMITERS = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class _Resolution:
  """Raw resolver output before filtering."""

  changes: list[ChangedFile]
  read_ref: str | None = None


def merge_line_ranges(ranges: Sequence[LineRange]) -> list[LineRange]:
  """Sort and merge overlapping or adjacent ranges."""
  merged: list[LineRange] = []
  for r in sorted(ranges):
    if merged and r.start <= merged[-1].end + 1:
      last = merged[-1]
      merged[-1] = LineRange(last.start, max(last.end, r.end))
    else:
      merged.append(r)
  return merged


def parse_pr_number(target: str | None) -> int:
  """Parse a pull request identifier such as '42' or '#42'."""
  match = _PR_NUMBER.match((target or "").strip())
  if not match or int(match.group(1)) < 1:
    raise InvalidTarget(f"Pull request target must be a PR number, got {target!r}")
  return int(match.group(1))


def parse_ref_range(target: str | None) -> tuple[str, str]:
  """Parse 'refA..refB' into (base, head).

  A single side ('feature..' or '..feature') is diffed against HEAD~1.
  """
  match = _REF_RANGE.match((target or "").strip())
  if not match:
    raise InvalidTarget(f"Diff target must be 'refA..refB', got {target!r}")
  base, head = match.group(1).strip(), match.group(2).strip()
  if not base and not head:
    raise InvalidTarget(f"Diff target names no refs: {target!r}")
  if not base or not head:
    return SINGLE_REF_BASE, base or head
  return base, head


def parse_paths(target: str | None) -> list[str]:
  """Split a file target on whitespace and commas."""
  tokens = [normalize_path(t) for t in _PATH_DELIMITERS.split((target or "").strip())]
  paths = [t for t in tokens if t]
  if not paths:
    raise InvalidTarget("File scope requires at least one path")
  return paths


class ScopeResolver:
  """Resolves a ScopeRequest into an ordered, deduplicated artifact list.

  Example:
    resolver = ScopeResolver(GitRepository())
    artifacts = resolver.resolve(ScopeRequest(Scope.DIFF, "main..feature"))
  """

  def __init__(
    self,
    repository: RepositoryQuery,
    base_ref: str = DEFAULT_BASE_REF,
    pr_head_ref: str = DEFAULT_PR_HEAD_REF,
  ):
    self.repository = repository
    self.base_ref = base_ref
    self.pr_head_ref = pr_head_ref

  def resolve(self, request: ScopeRequest) -> list[ArtifactRef]:
    """Resolve a request into artifacts sorted by path.

    Raises:
      InvalidTarget: The target does not fit the scope.
      RepositoryUnavailable: The repository could not answer.
    """
    resolution = self._resolve_raw(request)

    kept = [
      c for c in resolution.changes
      if matches_any(normalize_path(c.path), request.path_filters)
    ]
    unique = self._deduplicate(kept)
    artifacts = [self._load(change, resolution.read_ref, request.scope) for change in unique]
    artifacts.sort(key=lambda a: a.path)

    logger.debug(
      "Resolved %s scope to %d artifact(s) (%d before filters)",
      request.scope.value, len(artifacts), len(resolution.changes),
    )
    return artifacts

  def _resolve_raw(self, request: ScopeRequest) -> _Resolution:
    if request.scope == Scope.PULL_REQUEST:
      number = parse_pr_number(request.target)
      head = self.pr_head_ref.format(number=number)
      return _Resolution(self.repository.list_changed_files(self.base_ref, head), read_ref=head)

    if request.scope == Scope.WORKTREE:
      return _Resolution(self.repository.list_worktree_changes())

    if request.scope == Scope.DIFF:
      base, head = parse_ref_range(request.target)
      return _Resolution(self.repository.list_changed_files(base, head), read_ref=head)

    if request.scope == Scope.FILE:
      return _Resolution([
        ChangedFile(path=p, change_kind=ChangeKind.UNCHANGED) for p in parse_paths(request.target)
      ])

    if request.scope == Scope.REPO:
      return _Resolution([
        ChangedFile(path=p, change_kind=ChangeKind.UNCHANGED)
        for p in self.repository.list_all_files()
      ])

    raise InvalidTarget(f"Unsupported scope: {request.scope!r}")

  def _deduplicate(self, changes: list[ChangedFile]) -> list[ChangedFile]:
    """Collapse repeated paths.

    The later change kind wins, except UNCHANGED never replaces a concrete
    change. Line ranges are unioned.
    """
    by_path: dict[str, ChangedFile] = {}
    for change in changes:
      path = normalize_path(change.path)
      previous = by_path.get(path)
      if previous is None:
        by_path[path] = ChangedFile(path, change.change_kind, merge_line_ranges(change.line_ranges))
        continue

      kind = change.change_kind
      if kind == ChangeKind.UNCHANGED:
        kind = previous.change_kind
      ranges = [] if kind == ChangeKind.DELETED else merge_line_ranges(
        [*previous.line_ranges, *change.line_ranges]
      )
      by_path[path] = ChangedFile(path, kind, ranges)
    return list(by_path.values())

  def _load(self, change: ChangedFile, ref: str | None, scope: Scope) -> ArtifactRef:
    if change.change_kind == ChangeKind.DELETED:
      content = b""
    else:
      try:
        content = self.repository.read_file(change.path, ref)
      except ArtifactNotFound as e:
        if scope == Scope.FILE:
          raise InvalidTarget(f"No such file: {change.path}") from e
        raise

    return ArtifactRef(
      path=change.path,
      content_hash=content_hash(content),
      change_kind=change.change_kind,
      line_ranges=change.line_ranges,
      content=content,
    )
