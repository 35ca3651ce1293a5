"""Report assembly."""

from typing import Sequence

from mergegate.models import AggregatedResult, ArtifactRef, ReviewReport, ScopeRequest, Verdict


def assemble_report(
  request: ScopeRequest,
  artifacts: Sequence[ArtifactRef],
  result: AggregatedResult,
  verdict: Verdict,
  analyzers: Sequence[str] = (),
) -> ReviewReport:
  """Package one run's outputs into a serializable report.

  Pure: no I/O and no clock. generated_at is left for the caller to fill
  via ReviewReport.with_timestamp.
  """
  return ReviewReport(
    request=request,
    artifacts=tuple(artifacts),
    result=result,
    verdict=verdict,
    analyzers=tuple(analyzers),
  )
