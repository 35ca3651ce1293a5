"""Tests for domain models."""

from datetime import timedelta

import pytest
from mergegate.models import (
  AnalyzerDescriptor,
  ArtifactRef,
  Category,
  ChangeKind,
  Confidence,
  Finding,
  LineRange,
  Scope,
  ScopeRequest,
  Severity,
  content_hash,
)


class TestOrderedEnums:
  def test_severity_total_order(self) -> None:
    assert Severity.BLOCKER > Severity.HIGH > Severity.MED > Severity.LOW > Severity.NIT

  def test_confidence_total_order(self) -> None:
    assert Confidence.HIGH > Confidence.MED > Confidence.LOW

  def test_sorted_by_rank(self) -> None:
    assert sorted([Severity.LOW, Severity.BLOCKER, Severity.NIT]) == [
      Severity.NIT, Severity.LOW, Severity.BLOCKER,
    ]

  def test_cross_enum_comparison_unsupported(self) -> None:
    with pytest.raises(TypeError):
      _ = Severity.HIGH < Confidence.HIGH  # type: ignore[operator]


class TestScopeRequest:
  def test_filters_normalized_to_tuple(self) -> None:
    request = ScopeRequest(Scope.REPO, path_filters=["src/*"])
    assert request.path_filters == ("src/*",)

  def test_frozen(self) -> None:
    request = ScopeRequest(Scope.WORKTREE)
    with pytest.raises(AttributeError):
      request.target = "x"  # type: ignore[misc]


class TestLineRange:
  def test_contains(self) -> None:
    r = LineRange(3, 5)
    assert 3 in r
    assert 5 in r
    assert 6 not in r

  @pytest.mark.parametrize("start,end", [(0, 1), (5, 4)])
  def test_rejects_invalid(self, start: int, end: int) -> None:
    with pytest.raises(ValueError):
      LineRange(start, end)


class TestArtifactRef:
  def test_full_file_touches_every_line(self) -> None:
    artifact = ArtifactRef("a.py", content_hash(b"x"), ChangeKind.UNCHANGED, content=b"x")
    assert artifact.touches(1)
    assert artifact.touches(500)

  def test_ranges_limit_touched_lines(self) -> None:
    artifact = ArtifactRef("a.py", "", ChangeKind.MODIFIED, [LineRange(2, 3)])
    assert not artifact.touches(1)
    assert artifact.touches(2)
    assert not artifact.touches(4)

  def test_deleted_touches_nothing(self) -> None:
    artifact = ArtifactRef("a.py", "", ChangeKind.DELETED)
    assert not artifact.touches(1)

  def test_text_replaces_invalid_bytes(self) -> None:
    artifact = ArtifactRef("a.bin", "", ChangeKind.UNCHANGED, content=b"ok\xff")
    assert artifact.text.startswith("ok")


class TestFinding:
  def test_line_end_defaults_to_start(self) -> None:
    finding = Finding("a", Category.SECURITY, "x.py", Severity.HIGH, Confidence.LOW, "t", line_start=4)
    assert finding.line_end == 4
    assert finding.location == "x.py:4"

  def test_file_level_location(self) -> None:
    finding = Finding("a", Category.SECURITY, "x.py", Severity.HIGH, Confidence.LOW, "t")
    assert finding.line_start is None
    assert finding.location == "x.py"

  def test_requires_severity_and_confidence(self) -> None:
    with pytest.raises(TypeError):
      Finding("a", Category.SECURITY, "x.py", "high", Confidence.LOW, "t")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
      Finding("a", Category.SECURITY, "x.py", Severity.HIGH, None, "t")  # type: ignore[arg-type]

  def test_to_dict_uses_enum_values(self) -> None:
    finding = Finding("a", Category.UX_COPY, None, Severity.NIT, Confidence.MED, "t")
    data = finding.to_dict()
    assert data["category"] == "ux-copy"
    assert data["severity"] == "nit"
    assert data["artifact_path"] is None


class TestAnalyzerDescriptor:
  def test_finding_is_attributed(self) -> None:
    descriptor = AnalyzerDescriptor("cost.queries", Category.COST, ["*.sql"], timedelta(seconds=1))

    finding = descriptor.finding("q.sql", "Full scan", Severity.MED, Confidence.MED, line=3)

    assert finding.analyzer_id == "cost.queries"
    assert finding.category == Category.COST
    assert descriptor.applicable_globs == ("*.sql",)
