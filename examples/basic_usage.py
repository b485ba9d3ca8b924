#!/usr/bin/env python3
"""Programmatic label sync example.

This demonstrates using the components directly:

* load settings from the environment / `.env`
* load and validate a manifest
* print the plan, then apply it

Repository selection is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from github_label_sync.config import LabelSyncSettings
from github_label_sync.github.client import GitHubLabelClient
from github_label_sync.logging import configure_logging
from github_label_sync.manifest import load_manifest
from github_label_sync.reconcile import apply_plan, plan_actions


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync labels (programmatic example).")
    parser.add_argument("--repo", required=True, help='Target repository in the form "owner/repo"')
    parser.add_argument("--manifest", type=Path, default=None, help="Label manifest path")
    parser.add_argument("--yes", action="store_true", help="Apply the plan without asking")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = LabelSyncSettings()
    configure_logging(settings.log_level)

    desired = load_manifest(args.manifest or settings.manifest)
    github = GitHubLabelClient(
        token=settings.github_token,
        repository=args.repo,
        base_url=settings.github_base_url,
    )

    try:
        plan = plan_actions(desired, github.list_labels(), settings.mode)
        for action in plan.actions:
            print(f"{action.kind:>6}  {action.name}")
        print(plan.summary())

        if not plan.actions:
            return 0
        if not args.yes and input("Apply? [y/N] ").strip().lower() != "y":
            return 0

        result = apply_plan(plan, github)
        print(f"Applied: {result.summary()}")
        return 0
    finally:
        github.close()


if __name__ == "__main__":
    raise SystemExit(main())
