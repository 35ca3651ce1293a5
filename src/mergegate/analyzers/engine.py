"""Concurrent analyzer execution with per-analyzer isolation."""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from mergegate.analyzers.base import AnalyzerJob, StopSignal, bind_stop_signal
from mergegate.errors import AnalyzerFailure, AnalyzerTimeout
from mergegate.models import AnalyzerDescriptor, Confidence, Finding, Severity

logger = logging.getLogger(__name__)

TIMEOUT_TITLE = "analyzer timed out"
FAILURE_TITLE = "analyzer failed"
SKIPPED_TITLE = "analyzer skipped due to cancellation"
STOPPED_TITLE = "analyzer stopped due to cancellation"


def synthesized_finding(descriptor: AnalyzerDescriptor, title: str, evidence: str) -> Finding:
  """Build the low-severity finding that stands in for a degraded analyzer."""
  return descriptor.finding(
    artifact_path=None,
    title=title,
    severity=Severity.LOW,
    confidence=Confidence.LOW,
    evidence=evidence,
  )


class _Outcome:
  """Result slot written only by the analyzer thread that owns it."""

  def __init__(self) -> None:
    self.findings: list[Finding] = []
    self.error: Exception | None = None
    self.completed = False


class ExecutionEngine:
  """Runs analyzer jobs concurrently and collects their findings.

  Each job runs in its own thread, bounded by max_workers in flight.
  Timeouts, errors and cancellation never abort the run; each is reported
  as a single low-severity finding for the affected analyzer.

  Example:
    engine = ExecutionEngine(max_workers=4)
    findings = engine.execute(registry.applicable_analyzers(artifacts))
  """

  def __init__(self, max_workers: int | None = None):
    if max_workers is not None and max_workers < 1:
      raise ValueError(f"max_workers must be >= 1, got {max_workers}")
    self.max_workers = max_workers or os.cpu_count() or 1

  def execute(
    self,
    jobs: Sequence[AnalyzerJob],
    cancel: threading.Event | None = None,
  ) -> list[Finding]:
    """Run every job and return findings in job order.

    Blocks until every job has completed, timed out, failed or been
    skipped.

    Args:
      jobs: Analyzer jobs from AnalyzerRegistry.applicable_analyzers.
      cancel: Optional signal; jobs not yet started when it is set are
              skipped, running ones may stop early.
    """
    if not jobs:
      return []

    cancel = cancel or threading.Event()
    workers = min(self.max_workers, len(jobs))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mergegate") as pool:
      futures = [pool.submit(self._run_job, job, cancel) for job in jobs]
      slots = [future.result() for future in futures]

    return [finding for slot in slots for finding in slot]

  def _run_job(self, job: AnalyzerJob, cancel: threading.Event) -> list[Finding]:
    descriptor = job.descriptor
    if cancel.is_set():
      logger.info("Skipping analyzer %s: run cancelled", descriptor.id)
      return [synthesized_finding(
        descriptor, SKIPPED_TITLE, f"{descriptor.id} was not started because the review was cancelled",
      )]

    signal = StopSignal(cancel)
    outcome = _Outcome()
    thread = threading.Thread(
      target=self._invoke,
      args=(job, signal, outcome),
      name=f"analyzer-{descriptor.id}",
      daemon=True,
    )
    budget = descriptor.timeout_budget.total_seconds()
    logger.debug("Starting analyzer %s on %d artifact(s)", descriptor.id, len(job.artifacts))
    thread.start()
    thread.join(budget)

    if thread.is_alive():
      # Threads cannot be killed; ask the analyzer to stop and discard whatever it returns.
      signal.stop()
      error: Exception = AnalyzerTimeout(f"{descriptor.id} exceeded its {budget:g}s budget")
      logger.warning("%s", error)
      return [synthesized_finding(descriptor, TIMEOUT_TITLE, str(error))]

    if outcome.error is not None or not outcome.completed:
      reason = (
        f"{type(outcome.error).__name__}: {outcome.error}"
        if outcome.error is not None
        else "exited without returning findings"
      )
      logger.warning("Analyzer %s failed: %s", descriptor.id, reason)
      return [synthesized_finding(descriptor, FAILURE_TITLE, f"{descriptor.id}: {reason}")]

    logger.debug("Analyzer %s returned %d finding(s)", descriptor.id, len(outcome.findings))
    if signal.observed:
      logger.info("Analyzer %s stopped early: run cancelled", descriptor.id)
      return outcome.findings + [synthesized_finding(
        descriptor, STOPPED_TITLE, f"{descriptor.id} stopped before finishing because the review was cancelled",
      )]
    return outcome.findings

  def _invoke(self, job: AnalyzerJob, signal: StopSignal, outcome: _Outcome) -> None:
    bind_stop_signal(signal)
    try:
      result = job.fn(job.artifacts)
      findings = list(result)
      for item in findings:
        if not isinstance(item, Finding):
          raise AnalyzerFailure(f"returned {type(item).__name__} instead of Finding")
      outcome.findings = findings
      outcome.completed = True
    except Exception as e:
      outcome.error = e
    finally:
      bind_stop_signal(None)
