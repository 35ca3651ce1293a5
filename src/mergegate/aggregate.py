"""Finding aggregation: deduplicate, sort and roll up."""

from typing import Iterable

from mergegate.models import AggregatedResult, Category, Finding, Severity

_DedupKey = tuple[str, str | None, int | None, int | None, str]


def _dedup_key(finding: Finding) -> _DedupKey:
  return (
    finding.analyzer_id,
    finding.artifact_path,
    finding.line_start,
    finding.line_end,
    finding.title,
  )


def _outranks(candidate: Finding, current: Finding) -> bool:
  """True if candidate should replace current; ties keep the first seen."""
  if candidate.severity != current.severity:
    return candidate.severity > current.severity
  return candidate.confidence > current.confidence


def sort_key(finding: Finding) -> tuple:
  """Severity desc, confidence desc, path asc, line asc; missing values last."""
  return (
    -finding.severity.rank,
    -finding.confidence.rank,
    finding.artifact_path is None,
    finding.artifact_path or "",
    finding.line_start is None,
    finding.line_start or 0,
  )


def deduplicate(findings: Iterable[Finding]) -> list[Finding]:
  """Collapse findings sharing (analyzer, path, lines, title).

  The survivor keeps the position of the first finding seen for its key.
  """
  kept: dict[_DedupKey, Finding] = {}
  for finding in findings:
    key = _dedup_key(finding)
    current = kept.get(key)
    if current is None or _outranks(finding, current):
      kept[key] = finding
  return list(kept.values())


def aggregate(findings: Iterable[Finding]) -> AggregatedResult:
  """Build the aggregated result for a run.

  Idempotent: aggregating an aggregated finding list yields the same result.
  """
  unique = sorted(deduplicate(findings), key=sort_key)

  by_severity = {sev: 0 for sev in Severity}
  by_category = {cat: 0 for cat in Category}
  for finding in unique:
    by_severity[finding.severity] += 1
    by_category[finding.category] += 1

  return AggregatedResult(
    findings=tuple(unique),
    counts_by_severity={k: v for k, v in by_severity.items() if v},
    counts_by_category={k: v for k, v in by_category.items() if v},
  )
