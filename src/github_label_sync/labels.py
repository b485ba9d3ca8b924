"""Label value objects shared by the manifest loader, client and reconciler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SyncMode(str, Enum):
    """Which label transitions a run may perform."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class LabelSpec:
    name: str
    color: str
    description: str = ""

    def matches(self, other: LabelSpec) -> bool:
        """Return True when color and description are equal (name is not compared)."""

        return self.color == other.color and (self.description or "") == (
            other.description or ""
        )
