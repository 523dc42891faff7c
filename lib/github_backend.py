"""Mirror application documents to a repository via GitHub's Contents API."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


@dataclass
class GitHubBackend:
    """Reads and writes one JSON file in a GitHub repository."""

    token: str
    repo: str
    path: str
    branch: str = "main"
    api_url: str = "https://api.github.com"

    @classmethod
    def from_config(cls, config: Dict[str, Any], path: str) -> "GitHubBackend":
        """Build a backend for ``path`` from a ``lib.config.get_github_config`` mapping."""

        return cls(
            token=config["token"],
            repo=config["repo"],
            path=path,
            branch=config.get("branch", "main"),
            api_url=config.get("api_url", "https://api.github.com"),
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
        }

    def _url(self) -> str:
        return f"{self.api_url.rstrip('/')}/repos/{self.repo}/contents/{self.path}"

    def _get(self) -> requests.Response:
        return requests.get(
            self._url(),
            headers=self._headers(),
            params={"ref": self.branch},
            timeout=REQUEST_TIMEOUT,
        )

    def get_file_sha(self) -> Optional[str]:
        """Return the blob SHA of the file, or ``None`` when it does not exist yet."""

        response = self._get()
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json().get("sha")

    def write_json(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        sha: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or replace the file with ``data``.

        When ``sha`` is omitted the current SHA is looked up first, which makes
        the write last-write-wins.
        """

        if sha is None:
            sha = self.get_file_sha()

        payload: Dict[str, Any] = {
            "message": message,
            "branch": self.branch,
            "content": base64.b64encode(json.dumps(data, indent=2).encode("utf-8")).decode("utf-8"),
        }
        if sha:
            payload["sha"] = sha

        response = requests.put(
            self._url(),
            headers=self._headers(),
            json=payload,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        logger.info("Wrote %s to %s@%s", self.path, self.repo, self.branch)
        return response.json()

    def delete_file(self, message: str) -> bool:
        """Delete the file. Returns ``False`` when there was nothing to delete."""

        sha = self.get_file_sha()
        if sha is None:
            return False
        response = requests.delete(
            self._url(),
            headers=self._headers(),
            json={"message": message, "sha": sha, "branch": self.branch},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        logger.info("Deleted %s from %s@%s", self.path, self.repo, self.branch)
        return True


__all__ = ["GitHubBackend"]
