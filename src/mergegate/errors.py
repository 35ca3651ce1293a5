"""Review error taxonomy."""


class ReviewError(Exception):
  """Base class for review errors."""


class InvalidTarget(ReviewError):
  """Scope and target do not form a valid request."""


class RepositoryUnavailable(ReviewError):
  """Repository adapter could not answer a query."""


class ArtifactNotFound(RepositoryUnavailable):
  """Requested path does not exist in the repository."""


class GitError(RepositoryUnavailable):
  """Git command failed."""


class DuplicateAnalyzer(ReviewError):
  """An analyzer with the same id is already registered."""


class AnalyzerFailure(ReviewError):
  """Analyzer raised or returned malformed results."""


class AnalyzerTimeout(ReviewError):
  """Analyzer exceeded its timeout budget."""
