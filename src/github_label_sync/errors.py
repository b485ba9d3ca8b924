"""Error types raised by the label sync."""

from __future__ import annotations


class LabelSyncError(Exception):
    """Base class for all label sync failures."""


class ConfigError(LabelSyncError):
    """Settings or manifest could not be loaded."""


class ManifestValidationError(LabelSyncError):
    """A manifest entry is missing a required field."""

    def __init__(self, index: int, field: str) -> None:
        self.index = index
        self.field = field
        super().__init__(
            f"Manifest entry #{index} is missing {field!r}; "
            "each label must have at least a name and a color"
        )


class RemoteError(LabelSyncError):
    """The GitHub label service rejected or failed a request."""

    def __init__(self, operation: str, message: str, *, label: str | None = None) -> None:
        self.operation = operation
        self.label = label
        target = f" label {label!r}" if label is not None else ""
        super().__init__(f"GitHub {operation}{target} failed: {message}")
