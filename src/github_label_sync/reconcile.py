"""Label reconciliation.

A run has two strictly ordered phases:

1. plan: walk the current labels once and diff them against the manifest,
   producing update/delete actions followed by create actions;
2. apply: execute the actions one by one, stopping at the first failure.

Every page of the current label listing is fetched during planning, so no
listing request is interleaved with a mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import ClassVar, Protocol

from github_label_sync.labels import LabelSpec, SyncMode

logger = logging.getLogger(__name__)


class LabelService(Protocol):
    """The label operations a repository must offer."""

    def list_labels(self) -> Iterator[LabelSpec]: ...

    def create_label(self, label: LabelSpec) -> None: ...

    def update_label(self, label: LabelSpec) -> None: ...

    def delete_label(self, name: str) -> None: ...


@dataclass(frozen=True, slots=True)
class CreateLabel:
    kind: ClassVar[str] = "create"

    label: LabelSpec

    @property
    def name(self) -> str:
        return self.label.name

    def apply(self, service: LabelService) -> None:
        service.create_label(self.label)
        logger.debug(f'Label "{self.name}" has been created.', extra={"label": self.name})


@dataclass(frozen=True, slots=True)
class UpdateLabel:
    kind: ClassVar[str] = "update"

    label: LabelSpec
    previous: LabelSpec

    @property
    def name(self) -> str:
        return self.label.name

    def apply(self, service: LabelService) -> None:
        service.update_label(self.label)
        logger.debug(
            f'Label "{self.name}" has been updated.',
            extra={
                "label": self.name,
                "color": self.label.color,
                "previous_color": self.previous.color,
            },
        )


@dataclass(frozen=True, slots=True)
class DeleteLabel:
    kind: ClassVar[str] = "delete"

    name: str

    def apply(self, service: LabelService) -> None:
        service.delete_label(self.name)
        logger.debug(f'Label "{self.name}" has been deleted.', extra={"label": self.name})


LabelAction = CreateLabel | UpdateLabel | DeleteLabel


def _summarize(actions: Sequence[LabelAction], unchanged: Sequence[str]) -> str:
    counts = {"create": 0, "update": 0, "delete": 0}
    for action in actions:
        counts[action.kind] += 1
    return (
        f"created={counts['create']} updated={counts['update']} "
        f"deleted={counts['delete']} unchanged={len(unchanged)}"
    )


@dataclass(frozen=True, slots=True)
class ReconcilePlan:
    """Ordered actions for one run: updates/deletes first, then creates."""

    mode: SyncMode
    actions: list[LabelAction] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)

    def of_kind(self, kind: str) -> list[LabelAction]:
        return [a for a in self.actions if a.kind == kind]

    @property
    def creates(self) -> list[LabelAction]:
        return self.of_kind(CreateLabel.kind)

    @property
    def updates(self) -> list[LabelAction]:
        return self.of_kind(UpdateLabel.kind)

    @property
    def deletes(self) -> list[LabelAction]:
        return self.of_kind(DeleteLabel.kind)

    def summary(self) -> str:
        return _summarize(self.actions, self.unchanged)


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Actions a run applied, or would have applied for a dry run."""

    actions: list[LabelAction]
    unchanged: list[str]
    dry_run: bool = False

    def summary(self) -> str:
        return _summarize(self.actions, self.unchanged)


def _desired_by_name(desired: Iterable[LabelSpec]) -> dict[str, LabelSpec]:
    by_name: dict[str, LabelSpec] = {}
    for label in desired:
        if label.name in by_name:
            logger.warning(
                "Duplicate label in manifest; the last entry wins",
                extra={"label": label.name},
            )
        by_name[label.name] = label
    return by_name


def plan_actions(
    desired: Iterable[LabelSpec],
    current: Iterable[LabelSpec],
    mode: SyncMode,
) -> ReconcilePlan:
    """Diff the desired labels against the current ones.

    Args:
        desired: Manifest labels. On duplicate names the last entry wins.
        current: Labels on the repository, in listing order. Not consumed in
            add mode.
        mode: Which transitions are allowed.

    Returns:
        The plan. In update mode, current labels missing from the manifest are
        left alone; in delete mode every current label is deleted.
    """

    pending = _desired_by_name(desired)
    plan = ReconcilePlan(mode=mode)

    if mode is not SyncMode.ADD:
        for existing in current:
            if mode is SyncMode.DELETE:
                plan.actions.append(DeleteLabel(name=existing.name))
                continue

            wanted = pending.pop(existing.name, None)
            if wanted is None:
                continue
            if wanted.matches(existing):
                logger.debug(
                    f'Label "{existing.name}" is already up to date.',
                    extra={"label": existing.name},
                )
                plan.unchanged.append(existing.name)
            else:
                plan.actions.append(UpdateLabel(label=wanted, previous=existing))

    plan.actions.extend(CreateLabel(label=label) for label in pending.values())
    return plan


def apply_plan(plan: ReconcilePlan, service: LabelService) -> ReconcileResult:
    """Apply each action in order.

    The first failing call propagates; actions already applied are not rolled
    back and later actions are not attempted.
    """

    applied: list[LabelAction] = []
    for action in plan.actions:
        action.apply(service)
        applied.append(action)
    return ReconcileResult(actions=applied, unchanged=list(plan.unchanged))


def sync_labels(
    service: LabelService,
    desired: Sequence[LabelSpec],
    mode: SyncMode,
    *,
    dry_run: bool = False,
) -> ReconcileResult:
    """Plan and (unless `dry_run`) apply a full reconciliation against `service`."""

    current: Iterable[LabelSpec] = () if mode is SyncMode.ADD else service.list_labels()
    plan = plan_actions(desired, current, mode)
    logger.info(
        "Label sync planned",
        extra={"mode": mode.value, "summary": plan.summary(), "dry_run": dry_run},
    )

    if dry_run:
        return ReconcileResult(
            actions=list(plan.actions), unchanged=list(plan.unchanged), dry_run=True
        )

    result = apply_plan(plan, service)
    logger.info("Label sync complete", extra={"mode": mode.value, "summary": result.summary()})
    return result
