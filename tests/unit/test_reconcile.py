"""Unit tests for label reconciliation."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import Mock

import pytest

from github_label_sync.errors import RemoteError
from github_label_sync.github.client import GitHubLabelClient
from github_label_sync.labels import LabelSpec, SyncMode
from github_label_sync.reconcile import (
    CreateLabel,
    DeleteLabel,
    UpdateLabel,
    apply_plan,
    plan_actions,
    sync_labels,
)


def _label(name: str, color: str, description: str = "") -> LabelSpec:
    return LabelSpec(name=name, color=color, description=description)


def test_update_mode_skips_matching_label_and_creates_missing() -> None:
    current = [_label("bug", "ff0000")]
    desired = [_label("bug", "ff0000", ""), _label("feature", "00ff00")]

    plan = plan_actions(desired, current, SyncMode.UPDATE)

    assert plan.updates == []
    assert plan.creates == [CreateLabel(label=_label("feature", "00ff00"))]
    assert plan.unchanged == ["bug"]


def test_update_mode_updates_changed_color() -> None:
    current = [_label("bug", "ff0000")]
    desired = [_label("bug", "00ff00")]

    plan = plan_actions(desired, current, SyncMode.UPDATE)

    assert plan.actions == [
        UpdateLabel(label=_label("bug", "00ff00"), previous=_label("bug", "ff0000"))
    ]


def test_update_mode_updates_changed_description() -> None:
    current = [_label("bug", "ff0000", "Old")]
    desired = [_label("bug", "ff0000", "New")]

    plan = plan_actions(desired, current, SyncMode.UPDATE)

    assert [a.kind for a in plan.actions] == ["update"]
    assert plan.actions[0].label.description == "New"


def test_update_mode_leaves_unlisted_labels_alone() -> None:
    current = [_label("bug", "ff0000"), _label("wontfix", "ffffff")]
    desired = [_label("bug", "ff0000")]

    plan = plan_actions(desired, current, SyncMode.UPDATE)

    assert plan.actions == []
    assert plan.unchanged == ["bug"]


def test_delete_mode_deletes_every_current_label() -> None:
    current = [_label("bug", "ff0000"), _label("wontfix", "ffffff")]

    plan = plan_actions([], current, SyncMode.DELETE)

    assert plan.actions == [DeleteLabel(name="bug"), DeleteLabel(name="wontfix")]
    assert plan.creates == []


def test_delete_mode_deletes_manifest_labels_before_recreating_them() -> None:
    current = [_label("bug", "ff0000"), _label("wontfix", "ffffff")]
    desired = [_label("bug", "ff0000"), _label("feature", "00ff00")]

    plan = plan_actions(desired, current, SyncMode.DELETE)

    assert [(a.kind, a.name) for a in plan.actions] == [
        ("delete", "bug"),
        ("delete", "wontfix"),
        ("create", "bug"),
        ("create", "feature"),
    ]


def test_add_mode_only_creates_and_never_reads_current() -> None:
    def exploding_listing() -> Iterator[LabelSpec]:
        raise AssertionError("current labels must not be listed in add mode")
        yield  # pragma: no cover

    desired = [_label("bug", "00ff00"), _label("feature", "00ff00")]

    plan = plan_actions(desired, exploding_listing(), SyncMode.ADD)

    assert [(a.kind, a.name) for a in plan.actions] == [("create", "bug"), ("create", "feature")]
    assert plan.updates == [] and plan.deletes == []


def test_updates_come_before_creates() -> None:
    current = [_label("b", "000000"), _label("a", "000000")]
    desired = [_label("new", "111111"), _label("a", "222222"), _label("b", "333333")]

    plan = plan_actions(desired, current, SyncMode.UPDATE)

    assert [(a.kind, a.name) for a in plan.actions] == [
        ("update", "b"),
        ("update", "a"),
        ("create", "new"),
    ]


def test_duplicate_manifest_names_last_entry_wins(caplog: pytest.LogCaptureFixture) -> None:
    desired = [_label("bug", "111111"), _label("feature", "00ff00"), _label("bug", "222222")]

    with caplog.at_level(logging.WARNING, logger="github_label_sync.reconcile"):
        plan = plan_actions(desired, [], SyncMode.ADD)

    assert [(a.name, a.label.color) for a in plan.actions] == [
        ("bug", "222222"),
        ("feature", "00ff00"),
    ]
    assert any("Duplicate label" in r.getMessage() for r in caplog.records)


def test_update_mode_is_idempotent(service_factory) -> None:
    service = service_factory([_label("bug", "ff0000"), _label("docs", "0000ff", "Docs")])
    desired = [_label("bug", "00ff00"), _label("docs", "0000ff", "Docs"), _label("feature", "abcdef")]

    first = sync_labels(service, desired, SyncMode.UPDATE)
    assert first.summary() == "created=1 updated=1 deleted=0 unchanged=1"

    service.calls.clear()
    second = sync_labels(service, desired, SyncMode.UPDATE)

    assert second.actions == []
    assert service.mutations() == []


def test_listing_finishes_before_any_mutation(service_factory) -> None:
    service = service_factory([_label("bug", "ff0000"), _label("wontfix", "ffffff")])

    sync_labels(service, [_label("feature", "00ff00")], SyncMode.DELETE)

    kinds = [kind for kind, _ in service.calls]
    assert kinds == ["list", "list", "delete", "delete", "create"]
    assert list(service.labels) == ["feature"]


def test_apply_stops_at_first_failure_without_rollback() -> None:
    service = Mock(spec=GitHubLabelClient)
    plan = plan_actions(
        [_label("ok", "000000"), _label("gone", "000000"), _label("new", "000000")],
        [_label("ok", "ffffff"), _label("gone", "ffffff")],
        SyncMode.UPDATE,
    )
    service.update_label.side_effect = [None, RemoteError("update", "404 Not Found", label="gone")]

    with pytest.raises(RemoteError):
        apply_plan(plan, service)

    assert service.update_label.call_count == 2
    service.create_label.assert_not_called()
    service.delete_label.assert_not_called()


def test_dry_run_plans_without_mutating(service_factory) -> None:
    service = service_factory([_label("bug", "ff0000")])

    result = sync_labels(
        service, [_label("bug", "00ff00"), _label("feature", "00ff00")], SyncMode.UPDATE, dry_run=True
    )

    assert result.dry_run is True
    assert [(a.kind, a.name) for a in result.actions] == [("update", "bug"), ("create", "feature")]
    assert service.mutations() == []
    assert service.labels["bug"].color == "ff0000"


def test_remote_listing_failure_aborts_before_mutations() -> None:
    service = Mock(spec=GitHubLabelClient)
    service.list_labels.side_effect = RemoteError("list labels", "502 Bad Gateway")

    with pytest.raises(RemoteError):
        sync_labels(service, [_label("feature", "00ff00")], SyncMode.UPDATE)

    service.create_label.assert_not_called()
