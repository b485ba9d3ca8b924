"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from github_label_sync.errors import RemoteError
from github_label_sync.labels import LabelSpec

_SETTINGS_ENV_VARS = (
    "LABEL_SYNC_TOKEN",
    "INPUT_TOKEN",
    "GITHUB_TOKEN",
    "LABEL_SYNC_REPOSITORY",
    "GITHUB_REPOSITORY",
    "LABEL_SYNC_MODE",
    "INPUT_MODE",
    "LABEL_SYNC_MANIFEST",
    "INPUT_MANIFEST",
    "GITHUB_API_URL",
    "GITHUB_BASE_URL",
    "LOG_LEVEL",
)


class InMemoryLabelService:
    """Label service double that keeps labels in a dict and records every call."""

    def __init__(self, labels: list[LabelSpec] | None = None, repository: str = "octo-org/octo-repo"):
        self.labels: dict[str, LabelSpec] = {label.name: label for label in labels or []}
        self.repository = repository
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    def list_labels(self) -> Iterator[LabelSpec]:
        for label in list(self.labels.values()):
            self.calls.append(("list", label.name))
            yield label

    def create_label(self, label: LabelSpec) -> None:
        self.calls.append(("create", label.name))
        if label.name.lower() in {name.lower() for name in self.labels}:
            raise RemoteError("create", "422 Validation Failed", label=label.name)
        self.labels[label.name] = label

    def update_label(self, label: LabelSpec) -> None:
        self.calls.append(("update", label.name))
        if label.name not in self.labels:
            raise RemoteError("update", "404 Not Found", label=label.name)
        self.labels[label.name] = label

    def delete_label(self, name: str) -> None:
        self.calls.append(("delete", name))
        if name not in self.labels:
            raise RemoteError("delete", "404 Not Found", label=name)
        del self.labels[name]

    def mutations(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "list"]

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's or CI's GitHub variables out of settings tests."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def label_service() -> InMemoryLabelService:
    """Provide a repository that already has a `bug` label."""
    return InMemoryLabelService([LabelSpec(name="bug", color="ff0000")])


@pytest.fixture
def service_factory() -> type[InMemoryLabelService]:
    """Provide the in-memory service class for tests that need custom starting labels."""
    return InMemoryLabelService
