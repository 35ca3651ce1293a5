"""Tests for report assembly."""

import json
from typing import Callable

from mergegate.aggregate import aggregate
from mergegate.models import (
  AggregatedResult,
  Recommendation,
  ReviewReport,
  Scope,
  ScopeRequest,
  Verdict,
)
from mergegate.policy import reduce_findings
from mergegate.report import assemble_report


class TestAssembleReport:
  def test_packages_inputs(self) -> None:
    request = ScopeRequest(Scope.WORKTREE)
    result = AggregatedResult()
    verdict = reduce_findings(result)

    report = assemble_report(request, [], result, verdict, analyzers=["x.y"])

    assert report.request is request
    assert report.result is result
    assert report.verdict is verdict
    assert report.artifacts == ()
    assert report.analyzers == ("x.y",)
    assert report.generated_at is None

  def test_is_deterministic(self, make_finding: Callable) -> None:
    result = aggregate([make_finding()])
    verdict = reduce_findings(result)
    request = ScopeRequest(Scope.REPO)

    assert assemble_report(request, [], result, verdict) == assemble_report(
      request, [], result, verdict
    )


class TestReviewReport:
  def test_with_timestamp_returns_copy(self, sample_report: ReviewReport) -> None:
    stamped = sample_report.with_timestamp("2024-01-01T00:00:00+00:00")

    assert stamped.generated_at == "2024-01-01T00:00:00+00:00"
    assert sample_report.generated_at is None
    assert stamped.result is sample_report.result

  def test_to_dict_is_json_serializable(self, sample_report: ReviewReport) -> None:
    data = json.loads(json.dumps(sample_report.to_dict()))

    assert data["request"] == {
      "scope": "diff", "target": "main..feature", "path_filters": [],
    }
    assert data["recommendation"]["decision"] == "request-changes"
    assert [t["title"] for t in data["recommendation"]["triggers"]] == ["Unsafe eval"]
    assert data["counts_by_severity"] == {"high": 1, "low": 1}
    assert data["counts_by_category"] == {"correctness": 2}
    assert data["artifacts"][0] == {
      "path": "a.ts",
      "content_hash": sample_report.artifacts[0].content_hash,
      "change_kind": "modified",
      "line_ranges": [[10, 10]],
    }
    assert [f["artifact_path"] for f in data["findings"]] == ["a.ts", "b.ts"]

  def test_blocks_merge(self) -> None:
    assert Verdict(Recommendation.BLOCK, "").blocks_merge
    assert Verdict(Recommendation.REQUEST_CHANGES, "").blocks_merge
    assert not Verdict(Recommendation.APPROVE_WITH_COMMENTS, "").blocks_merge
    assert not Verdict(Recommendation.APPROVE, "").blocks_merge
