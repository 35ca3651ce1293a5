"""Core review orchestration."""

import logging
import threading
from dataclasses import replace
from pathlib import Path

from mergegate.aggregate import aggregate
from mergegate.analyzers import (
  AnalyzerRegistry,
  ExecutionEngine,
  default_registry,
  load_builtin_analyzers,
)
from mergegate.config import Backend, Settings, load_config
from mergegate.errors import InvalidTarget
from mergegate.models import ReviewReport, ScopeRequest
from mergegate.policy import reduce_findings
from mergegate.report import assemble_report
from mergegate.repository import GitHubRepository, GitRepository, RepositoryQuery
from mergegate.scope import ScopeResolver

logger = logging.getLogger(__name__)


class ReviewOrchestrator:
  """Runs the resolve, analyze, aggregate, reduce and assemble pipeline.

  Holds no state between runs; a single orchestrator can serve any number
  of sequential or concurrent run_review calls.
  """

  def __init__(
    self,
    repository: RepositoryQuery,
    registry: AnalyzerRegistry | None = None,
    settings: Settings | None = None,
    engine: ExecutionEngine | None = None,
  ):
    self.settings = settings or Settings()
    self.registry = registry if registry is not None else default_registry()
    self.engine = engine or ExecutionEngine(max_workers=self.settings.max_concurrency)
    self.resolver = ScopeResolver(
      repository,
      base_ref=self.settings.base_ref,
      pr_head_ref=self.settings.pr_head_ref,
    )

  def run_review(
    self,
    request: ScopeRequest,
    cancel: threading.Event | None = None,
  ) -> ReviewReport:
    """Review the artifacts selected by request.

    Raises:
      InvalidTarget: The request's target does not fit its scope.
      RepositoryUnavailable: The repository could not be queried.
    """
    artifacts = self.resolver.resolve(request)

    jobs = self.registry.applicable_analyzers(
      artifacts,
      categories=self.settings.categories,
      exclude=self.settings.disabled_analyzers,
    )
    logger.info(
      "Reviewing %d artifact(s) with %d analyzer(s)", len(artifacts), len(jobs),
    )

    findings = self.engine.execute(jobs, cancel)
    result = aggregate(findings)
    verdict = reduce_findings(result)

    return assemble_report(
      request,
      artifacts,
      result,
      verdict,
      analyzers=[job.descriptor.id for job in jobs],
    )


def build_repository(settings: Settings, cwd: Path | None = None) -> RepositoryQuery:
  """Create the repository adapter named by settings."""
  if settings.backend == Backend.GITHUB:
    if not settings.github_repo:
      raise InvalidTarget("The github backend requires github_repo (owner/name)")
    return GitHubRepository(
      settings.github_repo,
      token=settings.github_token,
      base_url=settings.github_api_url,
    )
  return GitRepository(cwd)


def run_review(
  request: ScopeRequest,
  config_path: Path | None = None,
  cwd: Path | None = None,
  cancel: threading.Event | None = None,
  settings: Settings | None = None,
) -> ReviewReport:
  """Run a review with configuration and built-in analyzers loaded."""
  settings = settings or load_config(config_path, cwd)
  load_builtin_analyzers()

  if not request.path_filters and settings.path_filters:
    request = replace(request, path_filters=tuple(settings.path_filters))

  orchestrator = ReviewOrchestrator(build_repository(settings, cwd), settings=settings)
  return orchestrator.run_review(request, cancel)
