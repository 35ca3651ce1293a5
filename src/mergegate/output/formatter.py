"""Output formatting for review reports."""

import json
from abc import ABC, abstractmethod

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mergegate.models import Recommendation, ReviewReport, Severity


class OutputFormatter(ABC):
  """Base output formatter."""

  @abstractmethod
  def format(self, report: ReviewReport) -> str:
    """Format a review report for output."""
    ...


def _summary(report: ReviewReport) -> str:
  findings = report.result.findings
  if not findings:
    return f"No findings across {len(report.artifacts)} artifact(s)."
  parts = [
    f"{count} {sev.value}" for sev, count in report.result.counts_by_severity.items()
  ]
  return (
    f"Found {len(findings)} finding{'s' if len(findings) != 1 else ''} "
    f"across {len(report.artifacts)} artifact(s): {', '.join(parts)}."
  )


class TerminalFormatter(OutputFormatter):
  """Rich terminal output formatter."""

  SEVERITY_STYLES = {
    Severity.BLOCKER: "bold red",
    Severity.HIGH: "red",
    Severity.MED: "yellow",
    Severity.LOW: "blue",
    Severity.NIT: "dim",
  }

  RECOMMENDATION_STYLES = {
    Recommendation.APPROVE: "green",
    Recommendation.APPROVE_WITH_COMMENTS: "yellow",
    Recommendation.REQUEST_CHANGES: "red",
    Recommendation.BLOCK: "bold red",
  }

  def __init__(self, console: Console | None = None):
    self.console = console or Console()

  def format(self, report: ReviewReport) -> str:
    self._print_summary(report)
    self._print_findings(report)
    return ""

  def _print_summary(self, report: ReviewReport) -> None:
    verdict = report.verdict
    style = self.RECOMMENDATION_STYLES.get(verdict.recommendation, "")
    body = Text()
    body.append(verdict.recommendation.value.upper(), style=style)
    body.append(f"\n{verdict.rationale}\n\n{_summary(report)}")
    self.console.print()
    self.console.print(Panel(
      body,
      title=f"[bold]Review[/bold] ({report.request.scope.value})",
      border_style=style or "blue",
    ))

  def _print_findings(self, report: ReviewReport) -> None:
    if not report.result.findings:
      self.console.print("\n[green]No findings.[/green]")
      return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Severity", width=10)
    table.add_column("Conf.", width=6)
    table.add_column("Location", width=32)
    table.add_column("Finding", min_width=40)

    for finding in report.result.findings:
      style = self.SEVERITY_STYLES.get(finding.severity, "")
      message = Text(f"{finding.title} [{finding.analyzer_id}]")
      if finding.remediation_hint:
        message.append(f"\n{finding.remediation_hint}", style="dim")
      table.add_row(
        Text(finding.severity.value.upper(), style=style),
        finding.confidence.value,
        finding.location,
        message,
      )

    self.console.print()
    self.console.print(table)


class JsonFormatter(OutputFormatter):
  """JSON output formatter."""

  def format(self, report: ReviewReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


class MarkdownFormatter(OutputFormatter):
  """Markdown output formatter."""

  def format(self, report: ReviewReport) -> str:
    verdict = report.verdict
    lines = [
      "# Code Review",
      "",
      f"**Scope:** {report.request.scope.value}"
      + (f" `{report.request.target}`" if report.request.target else ""),
    ]
    if report.generated_at:
      lines.append(f"**Generated:** {report.generated_at}")
    lines.extend([
      "",
      "## Recommendation",
      "",
      f"**{verdict.recommendation.value}**: {verdict.rationale}",
      "",
      "## Summary",
      "",
      _summary(report),
      "",
    ])

    if report.result.findings:
      lines.extend(["## Findings", ""])
      for finding in report.result.findings:
        severity = finding.severity.value.upper()
        lines.append(f"### [{severity}] {finding.location}: {finding.title}")
        lines.append("")
        lines.append(
          f"*{finding.analyzer_id}* ({finding.category.value}, "
          f"confidence {finding.confidence.value})"
        )
        if finding.evidence:
          lines.extend(["", f"> {finding.evidence}"])
        if finding.remediation_hint:
          lines.extend(["", f"**Suggestion:** {finding.remediation_hint}"])
        lines.append("")
    else:
      lines.extend(["## Findings", "", "No findings.", ""])

    return "\n".join(lines)


class GitHubFormatter(OutputFormatter):
  """GitHub Actions workflow command formatter for PR annotations."""

  def format(self, report: ReviewReport) -> str:
    lines = []
    for finding in report.result.findings:
      level = self._severity_to_level(finding.severity)
      params = []
      if finding.artifact_path:
        params.append(f"file={finding.artifact_path}")
      if finding.line_start:
        params.append(f"line={finding.line_start}")
      if finding.line_end and finding.line_end != finding.line_start:
        params.append(f"endLine={finding.line_end}")
      params.append(f"title={self._escape(finding.analyzer_id)}")
      message = self._escape(finding.title)
      lines.append(f"::{level} {','.join(params)}::{message}")
    return "\n".join(lines)

  def _escape(self, value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")

  def _severity_to_level(self, severity: Severity) -> str:
    if severity in (Severity.BLOCKER, Severity.HIGH):
      return "error"
    if severity == Severity.MED:
      return "warning"
    return "notice"


def get_formatter(format_type: str) -> OutputFormatter:
  """Get formatter by type name."""
  formatters = {
    "terminal": TerminalFormatter,
    "json": JsonFormatter,
    "markdown": MarkdownFormatter,
    "github": GitHubFormatter,
  }
  formatter_class = formatters.get(format_type)
  if not formatter_class:
    raise ValueError(f"Unknown format: {format_type}")
  return formatter_class()
