"""Configuration for the label sync.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The `INPUT_*` aliases are the variables GitHub Actions sets for step inputs,
so the same settings work when the tool runs as a workflow step.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_label_sync.labels import SyncMode

DEFAULT_MANIFEST_PATH = Path(".github/labels.json")


class LabelSyncSettings(BaseSettings):
    """Settings for a single label sync run.

    Environment variables:
    - LABEL_SYNC_TOKEN / INPUT_TOKEN / GITHUB_TOKEN
    - LABEL_SYNC_REPOSITORY / GITHUB_REPOSITORY   (optional, "owner/repo")
    - LABEL_SYNC_MODE / INPUT_MODE                (optional, add | update | delete)
    - LABEL_SYNC_MANIFEST / INPUT_MANIFEST        (optional)
    - GITHUB_API_URL / GITHUB_BASE_URL            (optional)
    - LOG_LEVEL                                   (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `LabelSyncSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("LABEL_SYNC_TOKEN", "INPUT_TOKEN", "GITHUB_TOKEN"),
        description="GitHub token used for API authentication",
    )
    repository: str = Field(
        default="",
        validation_alias=AliasChoices("LABEL_SYNC_REPOSITORY", "GITHUB_REPOSITORY"),
        description="Target repository in the form 'owner/repo'",
    )
    mode: SyncMode = Field(
        default=SyncMode.UPDATE,
        validation_alias=AliasChoices("LABEL_SYNC_MODE", "INPUT_MODE"),
        description="Reconciliation mode: add | update | delete",
    )
    manifest: Path = Field(
        default=DEFAULT_MANIFEST_PATH,
        validation_alias=AliasChoices("LABEL_SYNC_MANIFEST", "INPUT_MANIFEST"),
        description="Path to the JSON label manifest",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("GITHUB_API_URL", "GITHUB_BASE_URL"),
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Action inputs arrive as empty strings when not set in the workflow.
    @field_validator("mode", mode="before")
    @classmethod
    def _default_blank_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or SyncMode.UPDATE
        return value

    @field_validator("manifest", mode="before")
    @classmethod
    def _default_blank_manifest(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return DEFAULT_MANIFEST_PATH
        return value

    @model_validator(mode="after")
    def _require_github_auth(self) -> LabelSyncSettings:
        if not self.github_token.strip():
            raise ValueError("LABEL_SYNC_TOKEN (or INPUT_TOKEN / GITHUB_TOKEN) is required")
        return self
