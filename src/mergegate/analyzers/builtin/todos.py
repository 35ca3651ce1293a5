"""Detection of TODO/FIXME comments."""

import re
from typing import Sequence

from mergegate.analyzers.base import cancellation_requested, reviewable_lines
from mergegate.analyzers.registry import register_analyzer
from mergegate.models import AnalyzerDescriptor, ArtifactRef, Category, Confidence, Finding, Severity

DESCRIPTOR = AnalyzerDescriptor(
  id="maintainability.todo-comments",
  category=Category.MAINTAINABILITY,
)


class TodoCommentAnalyzer:
  """Detects TODO, FIXME, HACK, XXX, BUG and OPTIMIZE comments."""

  PATTERN = re.compile(
    r"(?:^|\s)(?:#|//|/\*|\*|<!--|--)\s*"  # Comment prefix
    r"(TODO|FIXME|HACK|XXX|BUG|OPTIMIZE)"  # Keyword
    r"(?:[\s:(\[]|$)",
    re.IGNORECASE,
  )

  SEVERITY_MAP = {
    "TODO": Severity.NIT,
    "FIXME": Severity.MED,
    "HACK": Severity.MED,
    "XXX": Severity.MED,
    "BUG": Severity.HIGH,
    "OPTIMIZE": Severity.LOW,
  }

  descriptor = DESCRIPTOR

  def __call__(self, artifacts: Sequence[ArtifactRef]) -> list[Finding]:
    findings: list[Finding] = []
    for artifact in artifacts:
      if cancellation_requested():
        break
      for i, line in reviewable_lines(artifact):
        match = self.PATTERN.search(line)
        if not match:
          continue
        keyword = match.group(1).upper()
        findings.append(self.descriptor.finding(
          artifact_path=artifact.path,
          title=f"{keyword} comment",
          severity=self.SEVERITY_MAP.get(keyword, Severity.NIT),
          confidence=Confidence.LOW,
          evidence=line.strip(),
          line=i,
          remediation_hint=f"Address the {keyword} before merging or create a tracking issue",
        ))
    return findings


register_analyzer(DESCRIPTOR, TodoCommentAnalyzer())
