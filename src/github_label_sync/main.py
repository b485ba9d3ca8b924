"""CLI entrypoint for the label sync."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from github_label_sync import __version__
from github_label_sync.config import LabelSyncSettings
from github_label_sync.errors import ConfigError, LabelSyncError, ManifestValidationError
from github_label_sync.github.client import GitHubLabelClient
from github_label_sync.labels import SyncMode
from github_label_sync.logging import configure_logging
from github_label_sync.manifest import load_manifest
from github_label_sync.reconcile import sync_labels

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="label-sync",
        description="Synchronize a GitHub repository's labels with a JSON manifest",
    )
    parser.add_argument("--version", action="version", version=f"github-label-sync {__version__}")
    parser.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Target repository in the form 'owner/repo' (defaults to GITHUB_REPOSITORY)",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SyncMode],
        default=None,
        help=(
            "add: only create labels; update: update changed labels and create missing ones; "
            "delete: delete every existing label, then create the manifest labels"
        ),
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Path to the label manifest (default: .github/labels.json)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned changes without applying them",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = LabelSyncSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG

    mode = SyncMode(args.mode) if args.mode else settings.mode
    manifest_path = args.manifest or settings.manifest
    repository = args.repository or settings.repository

    configure_logging(
        settings.log_level,
        context={"repository": repository, "mode": mode.value, "dry_run": args.dry_run},
    )

    try:
        if not repository.strip("/ "):
            raise ConfigError("A repository is required (--repo or GITHUB_REPOSITORY)")

        desired = load_manifest(manifest_path)

        github = GitHubLabelClient(
            token=settings.github_token,
            repository=repository,
            base_url=settings.github_base_url,
        )
        try:
            result = sync_labels(github, desired, mode, dry_run=args.dry_run)
        finally:
            github.close()

        if result.dry_run:
            for action in result.actions:
                print(f"would {action.kind}: {action.name}")
        print(f"{github.repository} ({mode.value}): {result.summary()}")
        return EXIT_OK

    except (ConfigError, ManifestValidationError) as e:
        logger.error(str(e), extra={"manifest": str(manifest_path)})
        print(str(e), file=sys.stderr)
        return EXIT_CONFIG

    except LabelSyncError as e:
        logger.exception("Label sync failed")
        print(str(e), file=sys.stderr)
        return EXIT_FAILED

    except Exception as e:
        logger.exception("Command failed")
        print(f"Label sync failed: {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
