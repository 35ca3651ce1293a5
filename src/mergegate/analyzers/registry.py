"""Analyzer registration and applicability."""

import logging
from typing import Iterable, Sequence

from mergegate.analyzers.base import AnalyzerFn, AnalyzerJob
from mergegate.errors import DuplicateAnalyzer
from mergegate.models import AnalyzerDescriptor, ArtifactRef, Category
from mergegate.paths import matches_any

logger = logging.getLogger(__name__)


class AnalyzerRegistry:
  """Append-only set of analyzers and their capability metadata."""

  def __init__(self) -> None:
    self._entries: dict[str, tuple[AnalyzerDescriptor, AnalyzerFn]] = {}

  def register(self, descriptor: AnalyzerDescriptor, fn: AnalyzerFn) -> None:
    """Register an analyzer.

    Raises:
      DuplicateAnalyzer: An analyzer with the same id already exists.
    """
    if descriptor.id in self._entries:
      raise DuplicateAnalyzer(f"Analyzer '{descriptor.id}' is already registered")
    self._entries[descriptor.id] = (descriptor, fn)
    logger.debug("Registered analyzer %s (%s)", descriptor.id, descriptor.category.value)

  def get(self, analyzer_id: str) -> AnalyzerDescriptor:
    return self._entries[analyzer_id][0]

  def descriptors(self) -> list[AnalyzerDescriptor]:
    """List descriptors in registration order."""
    return [descriptor for descriptor, _ in self._entries.values()]

  def applicable_analyzers(
    self,
    artifacts: Sequence[ArtifactRef],
    categories: Iterable[Category] | None = None,
    exclude: Iterable[str] = (),
  ) -> list[AnalyzerJob]:
    """Partition artifacts per analyzer by glob.

    Analyzers with no matching artifacts are left out entirely.

    Args:
      artifacts: Resolved artifacts for the run.
      categories: Restrict to these categories. None or empty means all.
      exclude: Analyzer ids to skip.
    """
    wanted = set(categories or ())
    excluded = set(exclude)
    jobs: list[AnalyzerJob] = []

    for descriptor, fn in self._entries.values():
      if descriptor.id in excluded:
        continue
      if wanted and descriptor.category not in wanted:
        continue
      matched = [a for a in artifacts if matches_any(a.path, descriptor.applicable_globs)]
      if matched:
        jobs.append(AnalyzerJob(descriptor=descriptor, fn=fn, artifacts=matched))

    return jobs

  def __contains__(self, analyzer_id: object) -> bool:
    return analyzer_id in self._entries

  def __len__(self) -> int:
    return len(self._entries)


_default = AnalyzerRegistry()


def default_registry() -> AnalyzerRegistry:
  """Return the process-wide registry."""
  return _default


def register_analyzer(descriptor: AnalyzerDescriptor, fn: AnalyzerFn) -> None:
  """Register an analyzer with the process-wide registry."""
  _default.register(descriptor, fn)


def load_builtin_analyzers() -> None:
  """Import built-in analyzer modules to trigger registration.

  Safe to call repeatedly; each module registers once on first import.
  """
  from mergegate.analyzers.builtin import (  # noqa: F401
    conflicts,
    debug,
    line_length,
    secrets,
    todos,
  )
