"""GitHub REST API repository adapter."""

import logging
import os
import re
from urllib.parse import quote

import httpx

from mergegate.errors import ArtifactNotFound, RepositoryUnavailable
from mergegate.models import ChangeKind
from mergegate.repository.base import ChangedFile
from mergegate.repository.diff import parse_hunk_ranges

logger = logging.getLogger(__name__)

_PULL_HEAD_REF = re.compile(r"^refs/pull/(\d+)/head$")

_STATUS_MAP = {
  "added": ChangeKind.ADDED,
  "removed": ChangeKind.DELETED,
  "modified": ChangeKind.MODIFIED,
  "renamed": ChangeKind.MODIFIED,
  "copied": ChangeKind.ADDED,
  "changed": ChangeKind.MODIFIED,
  "unchanged": ChangeKind.UNCHANGED,
}


class GitHubRepository:
  """Repository queries answered by the GitHub REST API."""

  DEFAULT_BASE_URL = "https://api.github.com"
  DEFAULT_TIMEOUT = 30.0

  def __init__(
    self,
    repo: str,
    token: str | None = None,
    base_url: str = DEFAULT_BASE_URL,
    ref: str = "HEAD",
    client: httpx.Client | None = None,
    max_retries: int = 2,
  ):
    self.repo = repo
    self.ref = ref
    self._max_retries = max_retries
    self._resolved_refs: dict[str, str] = {}
    token = token or os.environ.get("GITHUB_TOKEN")
    headers = {
      "Accept": "application/vnd.github+json",
      "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
      headers["Authorization"] = f"Bearer {token}"
    if client is None:
      client = httpx.Client(base_url=base_url, headers=headers, timeout=self.DEFAULT_TIMEOUT)
    else:
      client.headers.update(headers)
    self._client = client

  def close(self) -> None:
    self._client.close()

  def list_changed_files(self, base_ref: str, head_ref: str) -> list[ChangedFile]:
    head = self._resolve_ref(head_ref)
    data = self._get_json(f"/repos/{self.repo}/compare/{quote(base_ref)}...{quote(head)}")

    files: list[ChangedFile] = []
    for entry in data.get("files", []):
      kind = _STATUS_MAP.get(entry.get("status", ""), ChangeKind.MODIFIED)
      ranges = [] if kind == ChangeKind.DELETED else parse_hunk_ranges(entry.get("patch") or "")
      files.append(ChangedFile(path=entry["filename"], change_kind=kind, line_ranges=ranges))
    return files

  def list_all_files(self) -> list[str]:
    data = self._get_json(
      f"/repos/{self.repo}/git/trees/{quote(self.ref)}",
      params={"recursive": "1"},
    )
    if data.get("truncated"):
      logger.warning("Tree listing for %s was truncated by the API", self.repo)
    return [item["path"] for item in data.get("tree", []) if item.get("type") == "blob"]

  def read_file(self, path: str, ref: str | None = None) -> bytes:
    response = self._request(
      f"/repos/{self.repo}/contents/{quote(path)}",
      params={"ref": self._resolve_ref(ref or self.ref)},
      headers={"Accept": "application/vnd.github.raw+json"},
      not_found=ArtifactNotFound(f"{path} not found"),
    )
    return response.content

  def list_worktree_changes(self) -> list[ChangedFile]:
    raise RepositoryUnavailable("Worktree changes are not available from a remote repository")

  def _resolve_ref(self, ref: str) -> str:
    """Translate a pull request head ref into the PR's head SHA.

    Resolved SHAs are cached so a review sees one consistent head.
    """
    match = _PULL_HEAD_REF.match(ref)
    if not match:
      return ref
    if ref not in self._resolved_refs:
      pull = self._get_json(f"/repos/{self.repo}/pulls/{match.group(1)}")
      self._resolved_refs[ref] = pull["head"]["sha"]
    return self._resolved_refs[ref]

  def _get_json(self, url: str, params: dict[str, str] | None = None) -> dict:
    response = self._request(url, params=params)
    try:
      return response.json()
    except ValueError as e:
      raise RepositoryUnavailable(f"Malformed response from {url}") from e

  def _request(
    self,
    url: str,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    not_found: RepositoryUnavailable | None = None,
  ) -> httpx.Response:
    """GET with retry on transient failures."""
    last_error: Exception | None = None

    for attempt in range(self._max_retries + 1):
      try:
        response = self._client.get(url, params=params, headers=headers)
        if response.status_code == 404 and not_found is not None:
          raise not_found
        response.raise_for_status()
        return response
      except (httpx.ConnectError, httpx.ReadTimeout) as e:
        last_error = e
        logger.debug("GitHub request %s failed (attempt %d): %s", url, attempt + 1, e)
      except httpx.HTTPStatusError as e:
        raise RepositoryUnavailable(
          f"GitHub API returned {e.response.status_code} for {url}"
        ) from e
      except httpx.HTTPError as e:
        raise RepositoryUnavailable(f"GitHub request failed: {e}") from e

    raise RepositoryUnavailable(f"GitHub request failed: {last_error}")
