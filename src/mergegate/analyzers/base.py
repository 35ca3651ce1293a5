"""Analyzer abstractions."""

import threading
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

from mergegate.models import AnalyzerDescriptor, ArtifactRef, Finding

AnalyzerFn = Callable[[Sequence[ArtifactRef]], Sequence[Finding]]
"""Opaque analyzer capability: artifacts in, findings out.

Analyzers must not mutate the artifacts they receive and must not share
mutable state with other analyzers. Raising is allowed; the engine turns
errors into a synthesized finding.
"""

_task_state = threading.local()


@dataclass(frozen=True)
class AnalyzerJob:
  """One analyzer paired with the artifacts it applies to."""

  descriptor: AnalyzerDescriptor
  fn: AnalyzerFn
  artifacts: Sequence[ArtifactRef]

  def __post_init__(self) -> None:
    object.__setattr__(self, "artifacts", tuple(self.artifacts))


class StopSignal:
  """Stop request seen by a single analyzer invocation.

  Set when the whole run is cancelled or when this invocation alone is
  told to stop, for example after exceeding its timeout budget.
  """

  def __init__(self, run_cancel: threading.Event | None = None):
    self._run_cancel = run_cancel or threading.Event()
    self._stop = threading.Event()
    self.observed = False

  def stop(self) -> None:
    self._stop.set()

  def is_set(self) -> bool:
    return self._stop.is_set() or self._run_cancel.is_set()


def bind_stop_signal(signal: StopSignal | None) -> None:
  """Attach a stop signal to the current analyzer thread."""
  _task_state.signal = signal


def cancellation_requested() -> bool:
  """Check whether the current analyzer should stop.

  Long-running analyzers should poll this between units of work and
  return what they have found so far once it turns True. An analyzer
  that stops this way is reported as cut short.
  """
  signal = getattr(_task_state, "signal", None)
  if signal is None or not signal.is_set():
    return False
  signal.observed = True
  return True


def reviewable_lines(artifact: ArtifactRef) -> Iterator[tuple[int, str]]:
  """Yield (line_number, text) for lines under review in an artifact."""
  if not artifact.content:
    return
  for i, line in enumerate(artifact.text.split("\n"), start=1):
    if artifact.touches(i):
      yield i, line
