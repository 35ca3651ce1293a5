"""Application settings."""

import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mergegate.models import Category
from mergegate.scope import DEFAULT_BASE_REF, DEFAULT_PR_HEAD_REF


class Backend(Enum):
  """Repository backend."""

  GIT = "git"
  GITHUB = "github"


class Settings(BaseModel):
  """Application configuration."""

  model_config = ConfigDict(use_enum_values=False)

  backend: Backend = Backend.GIT
  github_repo: str | None = None
  github_api_url: str = "https://api.github.com"
  github_token: str | None = None
  base_ref: str = DEFAULT_BASE_REF
  pr_head_ref: str = DEFAULT_PR_HEAD_REF
  max_concurrency: int = Field(default_factory=lambda: os.cpu_count() or 1, ge=1)
  path_filters: list[str] = Field(default_factory=list)
  categories: list[Category] = Field(default_factory=list)
  disabled_analyzers: list[str] = Field(default_factory=list)
