"""Tests for output formatters."""

import io
import json

import pytest
from mergegate.models import (
  AggregatedResult,
  Recommendation,
  ReviewReport,
  Scope,
  ScopeRequest,
  Verdict,
)
from mergegate.output.formatter import (
  GitHubFormatter,
  JsonFormatter,
  MarkdownFormatter,
  TerminalFormatter,
  get_formatter,
)
from mergegate.report import assemble_report
from rich.console import Console


@pytest.fixture
def empty_report() -> ReviewReport:
  return assemble_report(
    ScopeRequest(Scope.WORKTREE),
    [],
    AggregatedResult(),
    Verdict(Recommendation.APPROVE, "no blocking or high-confidence high-severity findings"),
  )


class TestJsonFormatter:
  def test_format_empty_report(self, empty_report: ReviewReport) -> None:
    data = json.loads(JsonFormatter().format(empty_report))

    assert data["recommendation"]["decision"] == "approve"
    assert data["findings"] == []
    assert data["counts_by_severity"] == {}

  def test_format_with_findings(self, sample_report: ReviewReport) -> None:
    data = json.loads(JsonFormatter().format(sample_report))

    assert len(data["findings"]) == 2
    assert data["findings"][0]["artifact_path"] == "a.ts"
    assert data["findings"][0]["severity"] == "high"


class TestMarkdownFormatter:
  def test_format_empty_report(self, empty_report: ReviewReport) -> None:
    output = MarkdownFormatter().format(empty_report)

    assert "# Code Review" in output
    assert "**approve**" in output
    assert "No findings." in output

  def test_format_with_findings(self, sample_report: ReviewReport) -> None:
    output = MarkdownFormatter().format(
      sample_report.with_timestamp("2024-01-01T00:00:00+00:00")
    )

    assert "**Scope:** diff `main..feature`" in output
    assert "**Generated:** 2024-01-01T00:00:00+00:00" in output
    assert "**request-changes**" in output
    assert "### [HIGH] a.ts:10: Unsafe eval" in output
    assert "Found 2 findings across 2 artifact(s): 1 high, 1 low." in output


class TestGitHubFormatter:
  def test_format_annotations(self, sample_report: ReviewReport) -> None:
    lines = GitHubFormatter().format(sample_report).splitlines()

    assert lines == [
      "::error file=a.ts,line=10,title=test.analyzer::Unsafe eval",
      "::notice file=b.ts,line=1,title=test.analyzer::Naming",
    ]

  def test_format_empty(self, empty_report: ReviewReport) -> None:
    assert GitHubFormatter().format(empty_report) == ""


class TestTerminalFormatter:
  def test_prints_verdict_and_findings(self, sample_report: ReviewReport) -> None:
    buffer = io.StringIO()
    formatter = TerminalFormatter(Console(file=buffer, width=160, color_system=None))

    assert formatter.format(sample_report) == ""
    output = buffer.getvalue()
    assert "REQUEST-CHANGES" in output
    assert "Unsafe eval" in output
    assert "a.ts:10" in output

  def test_prints_no_findings(self, empty_report: ReviewReport) -> None:
    buffer = io.StringIO()
    TerminalFormatter(Console(file=buffer, width=160, color_system=None)).format(empty_report)

    assert "No findings." in buffer.getvalue()


class TestGetFormatter:
  @pytest.mark.parametrize(
    "name,cls",
    [
      ("terminal", TerminalFormatter),
      ("json", JsonFormatter),
      ("markdown", MarkdownFormatter),
      ("github", GitHubFormatter),
    ],
  )
  def test_known_formats(self, name: str, cls: type) -> None:
    assert isinstance(get_formatter(name), cls)

  def test_unknown_format(self) -> None:
    with pytest.raises(ValueError, match="Unknown format"):
      get_formatter("xml")
