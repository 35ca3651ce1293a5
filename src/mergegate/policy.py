"""Recommendation policy over aggregated findings."""

from typing import Sequence

from mergegate.aggregate import sort_key
from mergegate.models import AggregatedResult, Confidence, Finding, Recommendation, Severity, Verdict

APPROVE_RATIONALE = "no blocking or high-confidence high-severity findings"


def _is_blocker(finding: Finding) -> bool:
  return finding.severity == Severity.BLOCKER


def _is_confident_high(finding: Finding) -> bool:
  return finding.severity == Severity.HIGH and finding.confidence in (Confidence.HIGH, Confidence.MED)


def _is_commentable(finding: Finding) -> bool:
  return (
    (finding.severity == Severity.HIGH and finding.confidence == Confidence.LOW)
    or finding.severity == Severity.MED
  )


_RULES = (
  (_is_blocker, Recommendation.BLOCK, "blocker finding"),
  (_is_confident_high, Recommendation.REQUEST_CHANGES, "high-severity finding"),
  (_is_commentable, Recommendation.APPROVE_WITH_COMMENTS, "finding worth addressing"),
)


def _trigger_key(finding: Finding) -> tuple:
  # Total order so the rationale does not depend on input order.
  return (*sort_key(finding), finding.line_end or 0, finding.analyzer_id, finding.title, finding.evidence)


def _describe(label: str, triggers: Sequence[Finding]) -> str:
  plural = "s" if len(triggers) != 1 else ""
  refs = "; ".join(f"[{f.analyzer_id}] {f.location} {f.title}" for f in triggers)
  return f"{len(triggers)} {label}{plural}: {refs}"


def reduce_findings(result: AggregatedResult) -> Verdict:
  """Reduce aggregated findings to a single merge recommendation.

  Rules are evaluated in order and the first match wins:
  1. Any BLOCKER -> BLOCK
  2. Any HIGH with HIGH or MED confidence -> REQUEST_CHANGES
  3. Any HIGH with LOW confidence, or any MED -> APPROVE_WITH_COMMENTS
  4. Otherwise -> APPROVE

  The outcome depends only on the set of findings, never their order.
  """
  for predicate, recommendation, label in _RULES:
    triggers = sorted((f for f in result.findings if predicate(f)), key=_trigger_key)
    if triggers:
      return Verdict(
        recommendation=recommendation,
        rationale=_describe(label, triggers),
        triggers=tuple(triggers),
      )
  return Verdict(recommendation=Recommendation.APPROVE, rationale=APPROVE_RATIONALE)
