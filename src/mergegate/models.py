"""Core domain models for review orchestration."""

import hashlib
from dataclasses import dataclass, field, replace
from datetime import timedelta
from enum import Enum
from typing import Any, Mapping, Sequence


class _Ordered(Enum):
  """Enum whose declaration order is its total order, highest first."""

  @property
  def rank(self) -> int:
    members = list(type(self))
    return len(members) - members.index(self)

  def __lt__(self, other: object) -> bool:
    if not isinstance(other, type(self)):
      return NotImplemented
    return self.rank < other.rank

  def __le__(self, other: object) -> bool:
    if not isinstance(other, type(self)):
      return NotImplemented
    return self.rank <= other.rank

  def __gt__(self, other: object) -> bool:
    if not isinstance(other, type(self)):
      return NotImplemented
    return self.rank > other.rank

  def __ge__(self, other: object) -> bool:
    if not isinstance(other, type(self)):
      return NotImplemented
    return self.rank >= other.rank


class Scope(Enum):
  """Review selection mode."""

  PULL_REQUEST = "pr"
  WORKTREE = "worktree"
  DIFF = "diff"
  FILE = "file"
  REPO = "repo"


class ChangeKind(Enum):
  """How an artifact changed within the reviewed range."""

  ADDED = "added"
  MODIFIED = "modified"
  DELETED = "deleted"
  UNCHANGED = "unchanged"


class Category(Enum):
  """Analyzer category taxonomy."""

  ARCHITECTURE = "architecture"
  SECURITY = "security"
  PERFORMANCE = "performance"
  CORRECTNESS = "correctness"
  COST = "cost"
  PRIVACY = "privacy"
  INFRA = "infra"
  CI = "ci"
  ACCESSIBILITY = "accessibility"
  OBSERVABILITY = "observability"
  MAINTAINABILITY = "maintainability"
  UX_COPY = "ux-copy"


class Severity(_Ordered):
  """Finding severity, highest first."""

  BLOCKER = "blocker"
  HIGH = "high"
  MED = "med"
  LOW = "low"
  NIT = "nit"


class Confidence(_Ordered):
  """Analyzer confidence in a finding, highest first."""

  HIGH = "high"
  MED = "med"
  LOW = "low"


class Recommendation(Enum):
  """Merge recommendation."""

  APPROVE = "approve"
  APPROVE_WITH_COMMENTS = "approve-with-comments"
  REQUEST_CHANGES = "request-changes"
  BLOCK = "block"


@dataclass(frozen=True)
class ScopeRequest:
  """A single review request."""

  scope: Scope
  target: str | None = None
  path_filters: Sequence[str] = ()

  def __post_init__(self) -> None:
    object.__setattr__(self, "path_filters", tuple(self.path_filters))


@dataclass(frozen=True, order=True)
class LineRange:
  """Inclusive, 1-based interval of lines."""

  start: int
  end: int

  def __post_init__(self) -> None:
    if self.start < 1 or self.end < self.start:
      raise ValueError(f"Invalid line range: {self.start}-{self.end}")

  def __contains__(self, line: object) -> bool:
    return isinstance(line, int) and self.start <= line <= self.end


def content_hash(content: bytes) -> str:
  """Fingerprint artifact content."""
  return hashlib.sha256(content).hexdigest()


@dataclass(frozen=True)
class ArtifactRef:
  """A resolved source unit under review."""

  path: str
  content_hash: str
  change_kind: ChangeKind
  line_ranges: Sequence[LineRange] = ()
  content: bytes = field(default=b"", repr=False)

  def __post_init__(self) -> None:
    object.__setattr__(self, "line_ranges", tuple(self.line_ranges))

  @property
  def text(self) -> str:
    return self.content.decode("utf-8", errors="replace")

  def touches(self, line: int) -> bool:
    """Check whether a line is under review.

    Full-file artifacts (no line ranges) have every line under review.
    Deleted artifacts have none.
    """
    if self.change_kind == ChangeKind.DELETED:
      return False
    if not self.line_ranges:
      return True
    return any(line in r for r in self.line_ranges)


@dataclass(frozen=True)
class Finding:
  """One issue reported by an analyzer."""

  analyzer_id: str
  category: Category
  artifact_path: str | None
  severity: Severity
  confidence: Confidence
  title: str
  evidence: str = ""
  line_start: int | None = None
  line_end: int | None = None
  remediation_hint: str | None = None

  def __post_init__(self) -> None:
    if not isinstance(self.severity, Severity):
      raise TypeError(f"severity must be a Severity, got {self.severity!r}")
    if not isinstance(self.confidence, Confidence):
      raise TypeError(f"confidence must be a Confidence, got {self.confidence!r}")
    if self.line_end is None and self.line_start is not None:
      object.__setattr__(self, "line_end", self.line_start)

  @property
  def location(self) -> str:
    if self.artifact_path is None:
      return "-"
    if self.line_start is None:
      return self.artifact_path
    if self.line_end is not None and self.line_end != self.line_start:
      return f"{self.artifact_path}:{self.line_start}-{self.line_end}"
    return f"{self.artifact_path}:{self.line_start}"

  def to_dict(self) -> dict[str, Any]:
    return {
      "analyzer_id": self.analyzer_id,
      "category": self.category.value,
      "artifact_path": self.artifact_path,
      "line_start": self.line_start,
      "line_end": self.line_end,
      "severity": self.severity.value,
      "confidence": self.confidence.value,
      "title": self.title,
      "evidence": self.evidence,
      "remediation_hint": self.remediation_hint,
    }


@dataclass(frozen=True)
class AnalyzerDescriptor:
  """Capability metadata for a registered analyzer.

  An empty applicable_globs matches every artifact.
  """

  id: str
  category: Category
  applicable_globs: Sequence[str] = ()
  timeout_budget: timedelta = timedelta(seconds=30)

  def __post_init__(self) -> None:
    object.__setattr__(self, "applicable_globs", tuple(self.applicable_globs))

  def finding(
    self,
    artifact_path: str | None,
    title: str,
    severity: Severity,
    confidence: Confidence,
    evidence: str = "",
    line: int | None = None,
    line_end: int | None = None,
    remediation_hint: str | None = None,
  ) -> Finding:
    """Build a finding attributed to this analyzer."""
    return Finding(
      analyzer_id=self.id,
      category=self.category,
      artifact_path=artifact_path,
      severity=severity,
      confidence=confidence,
      title=title,
      evidence=evidence,
      line_start=line,
      line_end=line_end,
      remediation_hint=remediation_hint,
    )


@dataclass(frozen=True)
class AggregatedResult:
  """Deduplicated, sorted findings with roll-ups."""

  findings: Sequence[Finding] = ()
  counts_by_severity: Mapping[Severity, int] = field(default_factory=dict)
  counts_by_category: Mapping[Category, int] = field(default_factory=dict)

  @property
  def is_empty(self) -> bool:
    return not self.findings


@dataclass(frozen=True)
class Verdict:
  """Merge recommendation with the findings that triggered it."""

  recommendation: Recommendation
  rationale: str
  triggers: Sequence[Finding] = ()

  @property
  def blocks_merge(self) -> bool:
    return self.recommendation in (Recommendation.REQUEST_CHANGES, Recommendation.BLOCK)


@dataclass(frozen=True)
class ReviewReport:
  """Structured result of a single review run."""

  request: ScopeRequest
  artifacts: Sequence[ArtifactRef]
  result: AggregatedResult
  verdict: Verdict
  analyzers: Sequence[str] = ()
  generated_at: str | None = None

  def with_timestamp(self, timestamp: str) -> "ReviewReport":
    return replace(self, generated_at=timestamp)

  def to_dict(self) -> dict[str, Any]:
    return {
      "generated_at": self.generated_at,
      "request": {
        "scope": self.request.scope.value,
        "target": self.request.target,
        "path_filters": list(self.request.path_filters),
      },
      "artifacts": [
        {
          "path": a.path,
          "content_hash": a.content_hash,
          "change_kind": a.change_kind.value,
          "line_ranges": [[r.start, r.end] for r in a.line_ranges],
        }
        for a in self.artifacts
      ],
      "analyzers": list(self.analyzers),
      "recommendation": {
        "decision": self.verdict.recommendation.value,
        "rationale": self.verdict.rationale,
        "triggers": [f.to_dict() for f in self.verdict.triggers],
      },
      "counts_by_severity": {
        sev.value: count for sev, count in self.result.counts_by_severity.items()
      },
      "counts_by_category": {
        cat.value: count for cat, count in self.result.counts_by_category.items()
      },
      "findings": [f.to_dict() for f in self.result.findings],
    }
