"""Pytest fixtures."""

from typing import Callable

import pytest
from mergegate.aggregate import aggregate
from mergegate.models import (
  ArtifactRef,
  Category,
  ChangeKind,
  Confidence,
  Finding,
  LineRange,
  ReviewReport,
  Scope,
  ScopeRequest,
  Severity,
  content_hash,
)
from mergegate.policy import reduce_findings
from mergegate.report import assemble_report
from mergegate.repository import ChangedFile, InMemoryRepository

FindingFactory = Callable[..., Finding]


def _make_finding(
  severity: Severity = Severity.LOW,
  confidence: Confidence = Confidence.HIGH,
  path: str | None = "a.py",
  line: int | None = 1,
  title: str = "Issue",
  analyzer_id: str = "test.analyzer",
  category: Category = Category.CORRECTNESS,
) -> Finding:
  return Finding(
    analyzer_id=analyzer_id,
    category=category,
    artifact_path=path,
    severity=severity,
    confidence=confidence,
    title=title,
    line_start=line,
  )


@pytest.fixture
def make_finding() -> FindingFactory:
  return _make_finding


@pytest.fixture
def make_artifact() -> Callable[..., ArtifactRef]:
  def factory(
    path: str,
    content: str = "",
    change_kind: ChangeKind = ChangeKind.UNCHANGED,
    line_ranges: list[LineRange] | None = None,
  ) -> ArtifactRef:
    data = content.encode()
    return ArtifactRef(
      path=path,
      content_hash=content_hash(data),
      change_kind=change_kind,
      line_ranges=line_ranges or [],
      content=data,
    )

  return factory


@pytest.fixture
def feature_repo() -> InMemoryRepository:
  """Repository where main..feature modifies a.ts (line 10) and adds b.ts."""
  a_lines = "\n".join(f"const line{i} = {i};" for i in range(1, 21))
  return InMemoryRepository(
    files={
      "a.ts": a_lines.encode(),
      "b.ts": b"export const b = 1;\n",
      "README.md": b"# readme\n",
    },
    diffs={
      ("main", "feature"): [
        ChangedFile("a.ts", ChangeKind.MODIFIED, [LineRange(10, 10)]),
        ChangedFile("b.ts", ChangeKind.ADDED, [LineRange(1, 1)]),
      ],
    },
  )


@pytest.fixture
def sample_diff() -> str:
  return """diff --git a/test.py b/test.py
index 1234567..abcdefg 100644
--- a/test.py
+++ b/test.py
@@ -1,5 +1,6 @@
 def hello():
-    print("hello")
+    print("hello world")
+    return True
"""


@pytest.fixture
def sample_report(make_finding: FindingFactory) -> ReviewReport:
  """Report for diff main..feature with one high and one low finding."""
  findings = [
    make_finding(Severity.HIGH, Confidence.HIGH, path="a.ts", line=10, title="Unsafe eval"),
    make_finding(Severity.LOW, Confidence.HIGH, path="b.ts", line=1, title="Naming"),
  ]
  artifacts = [
    ArtifactRef("a.ts", content_hash(b"a"), ChangeKind.MODIFIED, [LineRange(10, 10)], b"a"),
    ArtifactRef("b.ts", content_hash(b"b"), ChangeKind.ADDED, [LineRange(1, 1)], b"b"),
  ]
  result = aggregate(findings)
  return assemble_report(
    ScopeRequest(Scope.DIFF, "main..feature"),
    artifacts,
    result,
    reduce_findings(result),
    analyzers=["test.analyzer"],
  )
