"""Detection of leftover debug statements."""

import re
from typing import Sequence

from mergegate.analyzers.base import cancellation_requested, reviewable_lines
from mergegate.analyzers.registry import register_analyzer
from mergegate.models import AnalyzerDescriptor, ArtifactRef, Category, Confidence, Finding, Severity

_JS_TS_PATTERN = re.compile(
  r"^\s*(?:console\.(?:log|debug|warn|error|trace|info)\s*\(|debugger\b)"
)

PATTERNS: dict[str, re.Pattern[str]] = {
  ".py": re.compile(
    r"^\s*(?:print\s*\(|breakpoint\s*\(|import\s+pdb|pdb\.set_trace\s*\()"
  ),
  ".js": _JS_TS_PATTERN,
  ".ts": _JS_TS_PATTERN,
  ".tsx": _JS_TS_PATTERN,
  ".jsx": _JS_TS_PATTERN,
  ".go": re.compile(r"^\s*(?:fmt\.Print|log\.Print)"),
  ".rb": re.compile(r"^\s*(?:puts\s|p\s+[^=]|pp\s|binding\.pry)"),
}

DESCRIPTOR = AnalyzerDescriptor(
  id="observability.debug-statements",
  category=Category.OBSERVABILITY,
  applicable_globs=tuple(f"*{ext}" for ext in PATTERNS),
)


class DebugStatementAnalyzer:
  """Detects debug output that should go through real logging.

  Supports:
  - Python: print(), breakpoint(), pdb
  - JavaScript/TypeScript: console.*, debugger
  - Go: fmt.Print*, log.Print*
  - Ruby: puts, p, pp, binding.pry
  """

  descriptor = DESCRIPTOR

  def __call__(self, artifacts: Sequence[ArtifactRef]) -> list[Finding]:
    findings: list[Finding] = []
    for artifact in artifacts:
      if cancellation_requested():
        break
      pattern = self._get_pattern(artifact.path)
      if pattern is None:
        continue
      for i, line in reviewable_lines(artifact):
        stripped = line.strip()
        if stripped.startswith("#") or stripped.startswith("//"):
          continue
        if pattern.search(line):
          findings.append(self.descriptor.finding(
            artifact_path=artifact.path,
            title="Debug statement",
            severity=Severity.MED,
            confidence=Confidence.MED,
            evidence=stripped,
            line=i,
            remediation_hint="Remove it or route the output through the project logger",
          ))
    return findings

  def _get_pattern(self, file_path: str) -> re.Pattern[str] | None:
    for ext, pattern in PATTERNS.items():
      if file_path.endswith(ext):
        return pattern
    return None


register_analyzer(DESCRIPTOR, DebugStatementAnalyzer())
