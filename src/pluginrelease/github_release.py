# github_release.py
from __future__ import annotations

import json
import mimetypes
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urljoin

from .errors import ReleaseApiError
from .model import PluginManifest

API_URL = "https://api.github.com"
UPLOADS_URL = "https://uploads.github.com"

CONTENT_TYPES = {
    ".zip": "application/zip",
    ".json": "application/json",
    ".md5": "text/plain",
    ".sha1": "text/plain",
    ".txt": "text/plain",
}


def content_type(path: Path) -> str:
    """Content type for an uploaded release asset."""
    known = CONTENT_TYPES.get(path.suffix.lower())
    if known:
        return known
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


class GitHubRelease:
    """Creates a GitHub release for a built plugin and attaches its packages."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo_name: str,
        release_notes: str,
        commit_hash: Optional[str] = None,
        api_url: str = API_URL,
        uploads_url: str = UPLOADS_URL,
    ):
        self.token = token
        self.owner = owner
        self.repo_name = repo_name
        self.release_notes = release_notes
        self.commit_hash = commit_hash
        self.api_url = api_url.rstrip("/")
        self.uploads_url = uploads_url.rstrip("/")

    @property
    def repo_path(self) -> str:
        return f"repos/{self.owner}/{self.repo_name}"

    def _request(
        self,
        method: str,
        url: str,
        data: Optional[bytes] = None,
        headers: Optional[dict] = None,
    ) -> Dict[str, Any]:
        """
        Make an authenticated HTTP request.

        Returns:
            Parsed JSON response as dictionary ({} for empty bodies)

        Raises:
            ReleaseApiError: If the request fails
        """
        req_headers = {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
        }
        if headers:
            req_headers.update(headers)

        req = urllib.request.Request(url, data=data, headers=req_headers, method=method)

        try:
            with urllib.request.urlopen(req) as response:
                response_data = response.read().decode("utf-8")
                if response_data:
                    return json.loads(response_data)
                return {}
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8") if e.fp else ""
            raise ReleaseApiError(
                message=f"GitHub request failed: {method} {url}: {e.code} {e.reason}. {error_body}".strip(),
                status=e.code,
            )
        except urllib.error.URLError as e:
            raise ReleaseApiError(message=f"Network error: {e.reason}")
        except json.JSONDecodeError as e:
            raise ReleaseApiError(message=f"Invalid JSON response: {e}")

    def _api(self, method: str, path: str, payload: Optional[dict] = None) -> Dict[str, Any]:
        url = urljoin(self.api_url + "/", f"{self.repo_path}/{path.lstrip('/')}")
        data = None
        headers = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers = {"Content-Type": "application/json"}
        return self._request(method, url, data=data, headers=headers)

    def delete_existing(self, tag: str) -> bool:
        """Delete the release for `tag` if there is one. Returns True if deleted."""
        try:
            existing = self._api("GET", f"releases/tags/{quote(tag)}")
        except ReleaseApiError as e:
            if e.status == 404:
                return False
            raise

        if existing.get("tag_name") != tag:
            return False
        self._api("DELETE", f"releases/{existing['id']}")
        return True

    def publish_assets(self, packages_dir: Path, release_id: int) -> List[str]:
        """Upload every file in `packages_dir` to the release."""
        if not packages_dir.is_dir():
            return []

        uploaded = []
        for path in sorted(p for p in packages_dir.iterdir() if p.is_file()):
            url = (
                f"{self.uploads_url}/{self.repo_path}/releases/{release_id}/assets"
                f"?name={quote(path.name)}"
            )
            data = path.read_bytes()
            self._request(
                "POST",
                url,
                data=data,
                headers={
                    "Content-Type": content_type(path),
                    "Content-Length": str(len(data)),
                },
            )
            uploaded.append(path.name)
        return uploaded

    def release(self, manifest: PluginManifest, packages_dir: Path) -> Dict[str, Any]:
        """
        (Re)create the release v<version> and attach the packaged artifacts.

        Returns:
            The created release as returned by the API.
        """
        tag = f"v{manifest.version}"
        self.delete_existing(tag)

        payload = {
            "tag_name": tag,
            "name": tag,
            "body": self.release_notes,
            "draft": False,
            "prerelease": False,
        }
        commitish = self.commit_hash or manifest.build_hash
        if commitish:
            payload["target_commitish"] = commitish

        created = self._api("POST", "releases", payload)
        self.publish_assets(packages_dir, created["id"])
        return created
