"""Loading and validating the label manifest.

The manifest is a JSON array of objects:

    [
      {"name": "bug", "color": "d73a4a", "description": "Something isn't working"},
      {"name": "feature", "color": "a2eeef"}
    ]

The whole file is validated before anything is returned so that a malformed
manifest never leaves the repository half-synchronized.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from github_label_sync.errors import ConfigError, ManifestValidationError
from github_label_sync.labels import LabelSpec

logger = logging.getLogger(__name__)


def parse_manifest(raw: Any) -> list[LabelSpec]:
    """Validate decoded manifest content and return its labels in file order."""

    if not isinstance(raw, list):
        raise ConfigError(
            "Manifest file is not properly formatted. It should be an array of label objects."
        )

    labels: list[LabelSpec] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigError(f"Manifest entry #{index} is not an object")

        name = entry.get("name")
        color = entry.get("color")
        if not name:
            raise ManifestValidationError(index, "name")
        if not color:
            raise ManifestValidationError(index, "color")

        description = entry.get("description")
        for field, value in (("name", name), ("color", color)):
            if not isinstance(value, str):
                raise ConfigError(f"Manifest entry #{index} has a non-string {field!r}")
        if description is not None and not isinstance(description, str):
            raise ConfigError(f"Manifest entry #{index} has a non-string 'description'")

        labels.append(LabelSpec(name=name, color=color, description=description or ""))

    return labels


def load_manifest(path: Path) -> list[LabelSpec]:
    """Read the manifest at `path`.

    Raises:
        ConfigError: the file is missing, unreadable or not JSON, or an entry has the wrong shape.
        ManifestValidationError: an entry lacks a name or a color.
    """

    resolved = path.resolve()
    if not resolved.is_file():
        raise ConfigError(f"Manifest file not found at path: {resolved}")

    try:
        raw = json.loads(resolved.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Manifest file could not be read: {resolved}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise ConfigError(f"Manifest file is not valid JSON: {resolved}: {e}") from e

    labels = parse_manifest(raw)
    logger.debug("Manifest loaded", extra={"path": str(resolved), "labels": len(labels)})
    return labels
