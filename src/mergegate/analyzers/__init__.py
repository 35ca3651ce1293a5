"""Analyzer registry and execution."""

from mergegate.analyzers.base import AnalyzerFn, AnalyzerJob, cancellation_requested
from mergegate.analyzers.engine import ExecutionEngine
from mergegate.analyzers.registry import (
  AnalyzerRegistry,
  default_registry,
  load_builtin_analyzers,
  register_analyzer,
)

__all__ = [
  "AnalyzerFn",
  "AnalyzerJob",
  "AnalyzerRegistry",
  "ExecutionEngine",
  "cancellation_requested",
  "default_registry",
  "load_builtin_analyzers",
  "register_analyzer",
]
