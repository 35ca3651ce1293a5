"""Tests for the GitHub API adapter."""

import httpx
import pytest
from mergegate.errors import ArtifactNotFound, RepositoryUnavailable
from mergegate.models import ChangeKind, LineRange
from mergegate.repository.github import GitHubRepository


def _repo(handler) -> GitHubRepository:
  client = httpx.Client(
    base_url="https://api.github.test",
    transport=httpx.MockTransport(handler),
  )
  return GitHubRepository("acme/widgets", token="t0ken", client=client, max_retries=1)


class TestListChangedFiles:
  def test_resolves_pull_head_and_compares(self) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
      seen.append(request.url.path)
      if request.url.path == "/repos/acme/widgets/pulls/7":
        return httpx.Response(200, json={"head": {"sha": "abc123"}})
      if request.url.path == "/repos/acme/widgets/compare/main...abc123":
        return httpx.Response(200, json={"files": [
          {"filename": "a.ts", "status": "modified", "patch": "@@ -10 +10 @@\n-x\n+y"},
          {"filename": "b.ts", "status": "added", "patch": "@@ -0,0 +1,3 @@\n+1\n+2\n+3"},
          {"filename": "c.ts", "status": "removed", "patch": "@@ -1 +0,0 @@\n-z"},
        ]})
      return httpx.Response(404)

    changes = _repo(handler).list_changed_files("main", "refs/pull/7/head")

    assert seen[0] == "/repos/acme/widgets/pulls/7"
    assert [(c.path, c.change_kind) for c in changes] == [
      ("a.ts", ChangeKind.MODIFIED),
      ("b.ts", ChangeKind.ADDED),
      ("c.ts", ChangeKind.DELETED),
    ]
    assert changes[0].line_ranges == (LineRange(10, 10),)
    assert changes[1].line_ranges == (LineRange(1, 3),)
    assert changes[2].line_ranges == ()

  def test_sends_token(self) -> None:
    headers: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
      headers["authorization"] = request.headers.get("authorization", "")
      return httpx.Response(200, json={"files": []})

    _repo(handler).list_changed_files("main", "feature")

    assert headers["authorization"] == "Bearer t0ken"

  def test_server_error_is_unavailable(self) -> None:
    repo = _repo(lambda request: httpx.Response(500))

    with pytest.raises(RepositoryUnavailable):
      repo.list_changed_files("main", "feature")

  def test_connect_errors_are_retried_then_unavailable(self) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
      calls.append(request)
      raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RepositoryUnavailable):
      _repo(handler).list_changed_files("main", "feature")
    assert len(calls) == 2


class TestListAllFiles:
  def test_returns_blobs_only(self) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
      assert request.url.params["recursive"] == "1"
      return httpx.Response(200, json={"tree": [
        {"path": "src", "type": "tree"},
        {"path": "src/a.py", "type": "blob"},
        {"path": "README.md", "type": "blob"},
      ]})

    assert _repo(handler).list_all_files() == ["src/a.py", "README.md"]


class TestReadFile:
  def test_reads_raw_content_at_ref(self) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
      assert request.url.path == "/repos/acme/widgets/contents/src/a.py"
      assert request.url.params["ref"] == "feature"
      assert request.headers["accept"] == "application/vnd.github.raw+json"
      return httpx.Response(200, content=b"print('hi')\n")

    assert _repo(handler).read_file("src/a.py", "feature") == b"print('hi')\n"

  def test_missing_file(self) -> None:
    repo = _repo(lambda request: httpx.Response(404))

    with pytest.raises(ArtifactNotFound):
      repo.read_file("nope.py")

  def test_pull_head_resolved_once(self) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
      seen.append(request.url.path)
      if request.url.path == "/repos/acme/widgets/pulls/7":
        return httpx.Response(200, json={"head": {"sha": "abc123"}})
      assert request.url.params["ref"] == "abc123"
      return httpx.Response(200, content=b"x")

    repo = _repo(handler)
    for path in ("a.py", "b.py", "c.py"):
      repo.read_file(path, "refs/pull/7/head")

    assert seen.count("/repos/acme/widgets/pulls/7") == 1
    assert len(seen) == 4


class TestWorktree:
  def test_worktree_unavailable_remotely(self) -> None:
    repo = _repo(lambda request: httpx.Response(200))

    with pytest.raises(RepositoryUnavailable):
      repo.list_worktree_changes()
