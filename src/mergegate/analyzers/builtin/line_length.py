"""Detection of overly long lines."""

from typing import Sequence

from mergegate.analyzers.base import cancellation_requested, reviewable_lines
from mergegate.analyzers.registry import register_analyzer
from mergegate.models import AnalyzerDescriptor, ArtifactRef, Category, Confidence, Finding, Severity

DESCRIPTOR = AnalyzerDescriptor(
  id="maintainability.long-lines",
  category=Category.MAINTAINABILITY,
)

# Formats where long lines are normal
_SKIP_EXTENSIONS = (".md", ".json", ".svg", ".lock")


class LineLengthAnalyzer:
  """Detects lines exceeding recommended length limits.

  Default thresholds:
  - 120 characters: LOW severity
  - 150 characters: MED severity
  """

  DEFAULT_WARNING_LENGTH = 120
  DEFAULT_ERROR_LENGTH = 150

  descriptor = DESCRIPTOR

  def __init__(
    self,
    warning_length: int = DEFAULT_WARNING_LENGTH,
    error_length: int = DEFAULT_ERROR_LENGTH,
  ):
    self._warning_length = warning_length
    self._error_length = error_length

  def __call__(self, artifacts: Sequence[ArtifactRef]) -> list[Finding]:
    findings: list[Finding] = []
    for artifact in artifacts:
      if cancellation_requested():
        break
      if artifact.path.endswith(_SKIP_EXTENSIONS):
        continue
      for i, line in reviewable_lines(artifact):
        length = len(line)
        if length > self._error_length:
          severity, limit = Severity.MED, self._error_length
        elif length > self._warning_length:
          severity, limit = Severity.LOW, self._warning_length
        else:
          continue
        findings.append(self.descriptor.finding(
          artifact_path=artifact.path,
          title=f"Line exceeds {limit} characters",
          severity=severity,
          confidence=Confidence.HIGH,
          evidence=f"{length} characters",
          line=i,
          remediation_hint="Break this line for better readability",
        ))
    return findings


register_analyzer(DESCRIPTOR, LineLengthAnalyzer())
