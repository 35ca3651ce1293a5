"""Detection of hardcoded secrets and credentials."""

import re
from typing import Sequence

from mergegate.analyzers.base import cancellation_requested, reviewable_lines
from mergegate.analyzers.registry import register_analyzer
from mergegate.models import AnalyzerDescriptor, ArtifactRef, Category, Confidence, Finding, Severity

DESCRIPTOR = AnalyzerDescriptor(
  id="security.hardcoded-secrets",
  category=Category.SECURITY,
)


class HardcodedSecretAnalyzer:
  """Detects secrets committed to source.

  Looks for patterns like:
  - api_key = "sk-..."
  - password: "secret123"
  - AWS access keys (AKIA...)
  - Private key blocks (-----BEGIN ... PRIVATE KEY-----)
  """

  ASSIGNMENT_PATTERN = re.compile(
    r"""
    (?:api[_-]?key|apikey|secret|password|passwd|pwd|token|auth[_-]?token)
    \s*[:=]\s*                          # Assignment operator
    ['"][^'"]{8,}['"]                   # Quoted value, 8+ chars
    """,
    re.VERBOSE | re.IGNORECASE,
  )

  PREFIX_PATTERN = re.compile(
    r"""
    ['"]
    (?:
      sk-[a-zA-Z0-9]{20,}               # OpenAI API key
      |ghp_[a-zA-Z0-9]{36,}             # GitHub personal access token
      |gho_[a-zA-Z0-9]{36,}             # GitHub OAuth token
      |xox[baprs]-[a-zA-Z0-9-]{10,}     # Slack tokens
    )
    ['"]
    """,
    re.VERBOSE,
  )

  AWS_ACCESS_KEY = re.compile(r"(?<![A-Z0-9])(AKIA[0-9A-Z]{16})(?![A-Z0-9])")

  PRIVATE_KEY = re.compile(
    r"-----BEGIN\s+(?:RSA\s+)?(?:EC\s+)?(?:DSA\s+)?(?:OPENSSH\s+)?PRIVATE\s+KEY-----"
  )

  PLACEHOLDERS = ("example", "placeholder", "your_", "changeme", "<password>", "${", "{{")

  descriptor = DESCRIPTOR

  def __call__(self, artifacts: Sequence[ArtifactRef]) -> list[Finding]:
    findings: list[Finding] = []
    for artifact in artifacts:
      if cancellation_requested():
        break
      if self._is_test_or_example(artifact.path):
        continue
      findings.extend(self._check(artifact))
    return findings

  def _check(self, artifact: ArtifactRef) -> list[Finding]:
    findings: list[Finding] = []
    for i, line in reviewable_lines(artifact):
      stripped = line.strip()
      if stripped.startswith("#") or stripped.startswith("//"):
        continue

      if self.PRIVATE_KEY.search(line):
        title, hint = "Private key committed", "Store private keys in a key management system"
      elif self.AWS_ACCESS_KEY.search(line):
        title, hint = "AWS access key ID committed", "Use IAM roles or environment variables"
      elif self.PREFIX_PATTERN.search(line):
        title, hint = "API token committed", "Move the token to an environment variable"
      elif self.ASSIGNMENT_PATTERN.search(line) and not self._is_placeholder(line):
        title, hint = "Hardcoded secret", "Use environment variables or a secrets manager"
      else:
        continue

      findings.append(self.descriptor.finding(
        artifact_path=artifact.path,
        title=title,
        severity=Severity.BLOCKER,
        confidence=Confidence.HIGH,
        evidence=_redact(stripped),
        line=i,
        remediation_hint=hint,
      ))
    return findings

  def _is_test_or_example(self, file_path: str) -> bool:
    lower_path = file_path.lower()
    return any(
      pattern in lower_path
      for pattern in ["test", "example", "mock", "fixture", "fake"]
    )

  def _is_placeholder(self, line: str) -> bool:
    lower_line = line.lower()
    return any(p in lower_line for p in self.PLACEHOLDERS)


def _redact(line: str, keep: int = 12) -> str:
  """Truncate evidence so the secret itself is not copied into reports."""
  return line[:keep] + "..." if len(line) > keep else line


register_analyzer(DESCRIPTOR, HardcodedSecretAnalyzer())
