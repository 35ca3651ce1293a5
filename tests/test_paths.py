"""Tests for path normalization and glob matching."""

import pytest
from mergegate.paths import matches, matches_any, normalize_path


class TestNormalizePath:
  @pytest.mark.parametrize(
    "raw,expected",
    [
      ("./src/a.py", "src/a.py"),
      ("src\\a.py", "src/a.py"),
      ("  src//a.py ", "src/a.py"),
      ("", ""),
    ],
  )
  def test_normalizes(self, raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


class TestMatches:
  def test_full_path_glob(self) -> None:
    assert matches("src/gen/a.py", "src/gen/*.py")

  def test_double_star_matches_direct_children(self) -> None:
    assert matches("src/a.py", "src/**/*.py")
    assert matches("src/pkg/a.py", "src/**/*.py")

  def test_basename_glob(self) -> None:
    assert matches("web/yarn.lock", "*.lock")

  def test_directory_prefix(self) -> None:
    assert matches("migrations/0001.py", "migrations/")
    assert matches("docs/index.md", "docs")
    assert matches("src/a.py", "./src/")

  def test_directory_prefix_is_anchored(self) -> None:
    assert not matches("app/migrations/0001.py", "migrations/")
    assert not matches("vendor/lib/src/b.py", "src/")

  def test_non_match(self) -> None:
    assert not matches("src/a.py", "*.ts")
    assert not matches("src/a.py", "lib/")


class TestMatchesAny:
  def test_empty_patterns_match_everything(self) -> None:
    assert matches_any("anything/at/all.txt", [])

  def test_blank_patterns_are_ignored(self) -> None:
    assert matches_any("a.py", [""])
    assert matches_any("a.py", ["  ", ""])
    assert not matches_any("a.py", ["", "*.ts"])

  def test_any_pattern(self) -> None:
    assert matches_any("a.ts", ["*.py", "*.ts"])
    assert not matches_any("a.go", ["*.py", "*.ts"])
