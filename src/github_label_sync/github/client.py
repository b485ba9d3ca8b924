"""GitHub label API client.

This wraps PyGithub (listing and creation) and a plain `requests` session
(update and delete by name) so that the reconciler never touches HTTP and
tests can inject a fake repository.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from urllib.parse import quote

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

from github_label_sync.errors import RemoteError
from github_label_sync.labels import LabelSpec

logger = logging.getLogger(__name__)

LABELS_PER_PAGE = 100
REQUEST_TIMEOUT_SECONDS = 30


def _response_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return f"{resp.status_code} {data['message']}"
    return f"{resp.status_code} {resp.reason}"


class GitHubLabelClient:
    """Small wrapper around the repository label endpoints."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        repo: Repository | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository.strip("/ "):
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-label-sync",
            }
        )

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(
            auth=auth, base_url=self._rest_base_url, per_page=LABELS_PER_PAGE
        )

        try:
            self._repo = self._github.get_repo(self._repository_name)
        except (GithubException, requests.RequestException) as e:
            self._session.close()
            raise RemoteError("get repository", str(e)) from e
        logger.info(
            "Authenticated with GitHub and connected to repository",
            extra={"repo": self._repository_name},
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _label_url(self, name: str) -> str:
        return (
            f"{self._rest_base_url}/repos/{self._repository_name}/labels/{quote(name, safe='')}"
        )

    def list_labels(self) -> Iterator[LabelSpec]:
        """Yield every label of the repository, fetching pages as they are consumed."""

        try:
            for label in self._repo.get_labels():
                yield LabelSpec(
                    name=label.name,
                    color=label.color,
                    description=label.description or "",
                )
        except (GithubException, requests.RequestException) as e:
            raise RemoteError("list labels", str(e)) from e

    def create_label(self, label: LabelSpec) -> None:
        try:
            self._repo.create_label(
                name=label.name, color=label.color, description=label.description
            )
        except (GithubException, requests.RequestException) as e:
            raise RemoteError("create", str(e), label=label.name) from e

    def update_label(self, label: LabelSpec) -> None:
        """Set color and description of the existing label named `label.name`."""

        payload = {"color": label.color, "description": label.description}
        try:
            resp = self._session.patch(
                self._label_url(label.name), json=payload, timeout=REQUEST_TIMEOUT_SECONDS
            )
        except requests.RequestException as e:
            raise RemoteError("update", str(e), label=label.name) from e
        if not resp.ok:
            raise RemoteError("update", _response_message(resp), label=label.name)

    def delete_label(self, name: str) -> None:
        try:
            resp = self._session.delete(self._label_url(name), timeout=REQUEST_TIMEOUT_SECONDS)
        except requests.RequestException as e:
            raise RemoteError("delete", str(e), label=name) from e
        if not resp.ok:
            raise RemoteError("delete", _response_message(resp), label=name)

    def close(self) -> None:
        """Release HTTP resources."""

        self._session.close()
        if self._github is not None:
            self._github.close()
