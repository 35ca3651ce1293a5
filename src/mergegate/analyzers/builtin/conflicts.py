"""Detection of unresolved merge conflicts."""

import re
from typing import Sequence

from mergegate.analyzers.base import cancellation_requested, reviewable_lines
from mergegate.analyzers.registry import register_analyzer
from mergegate.models import AnalyzerDescriptor, ArtifactRef, Category, Confidence, Finding, Severity

DESCRIPTOR = AnalyzerDescriptor(
  id="correctness.merge-conflicts",
  category=Category.CORRECTNESS,
)


class MergeConflictAnalyzer:
  """Detects unresolved git merge conflict markers.

  A file carrying <<<<<<<, ======= or >>>>>>> markers does not build,
  so any marker blocks the merge.
  """

  MARKERS = (
    (re.compile(r"^<{7}(?:\s|$)"), "start"),
    (re.compile(r"^={7}$"), "separator"),
    (re.compile(r"^>{7}(?:\s|$)"), "end"),
  )

  descriptor = DESCRIPTOR

  def __call__(self, artifacts: Sequence[ArtifactRef]) -> list[Finding]:
    findings: list[Finding] = []
    for artifact in artifacts:
      if cancellation_requested():
        break
      for i, line in reviewable_lines(artifact):
        for pattern, label in self.MARKERS:
          if pattern.match(line):
            findings.append(self.descriptor.finding(
              artifact_path=artifact.path,
              title=f"Unresolved merge conflict marker ({label})",
              severity=Severity.BLOCKER,
              confidence=Confidence.HIGH,
              evidence=line.rstrip(),
              line=i,
              remediation_hint="Resolve the merge conflict before merging",
            ))
            break
    return findings


register_analyzer(DESCRIPTOR, MergeConflictAnalyzer())
