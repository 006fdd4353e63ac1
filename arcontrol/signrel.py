"""Download release assets, sign them with gpg and upload the signatures."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Any, Sequence

import requests

OWNER = "actions-runner-controller"
REPO = "actions-runner-controller"
API_URL = "https://api.github.com"
UPLOADS_URL = "https://uploads.github.com"

USAGE = "USAGE: signrel [list-tags|sign-assets]"


@dataclass(frozen=True)
class Release:
    """A published release."""

    id: int


@dataclass(frozen=True)
class Asset:
    """A file attached to a release."""

    name: str
    id: int
    url: str = ""


class ReleaseAssets:
    """Fetches, signs and uploads the assets of the repository's releases."""

    def __init__(
        self,
        owner: str = OWNER,
        repo: str = REPO,
        token: str | None = None,
        session: Any = None,
        api_url: str = API_URL,
        uploads_url: str = UPLOADS_URL,
        passphrase: str | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.token = os.environ.get("GITHUB_TOKEN", "") if token is None else token
        self.session = requests.Session() if session is None else session
        self.api_url = api_url.rstrip("/")
        self.uploads_url = uploads_url.rstrip("/")
        self.passphrase = passphrase

    def _headers(self, **extra: str) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.token:
            headers["authorization"] = f"token {self.token}"
        headers.update({key.replace("_", "-"): value for key, value in extra.items()})
        return headers

    def _repo_url(self, suffix: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/{suffix}"

    def _get_ok(self, url: str) -> Any:
        response = self.session.get(url, headers=self._headers())
        if response.status_code != 200:
            raise requests.HTTPError(
                f"GET {url}: {response.status_code} {response.reason}",
                response=response,
            )
        return response

    def recent_releases(self) -> str:
        """Return the raw JSON listing of the repository's releases."""
        return self._get_ok(self._repo_url("releases")).text

    def release_by_tag(self, tag: str) -> Release:
        """Return the release published under ``tag``."""
        data = self._get_ok(self._repo_url(f"releases/tags/{tag}")).json()
        return Release(id=int(data.get("id", 0)))

    def assets_by_release_id(self, release_id: int) -> list[Asset]:
        """Return the assets attached to the release."""
        data = self._get_ok(self._repo_url(f"releases/{release_id}/assets")).json()
        return [
            Asset(
                name=item.get("name", ""),
                id=int(item.get("id", 0)),
                url=item.get("url", ""),
            )
            for item in data or []
        ]

    def get_file(self, dst: str, asset_id: int) -> None:
        """Download the asset's content into ``dst``, creating parent directories."""
        parent = os.path.dirname(dst)
        if parent:
            os.makedirs(parent, exist_ok=True)
        response = self.session.get(
            self._repo_url(f"releases/assets/{asset_id}"),
            headers=self._headers(accept="application/octet-stream"),
            stream=True,
        )
        try:
            with open(dst, "wb") as out:
                for chunk in response.iter_content(chunk_size=65536):
                    out.write(chunk)
        finally:
            response.close()

    def sign(self, path: str) -> str:
        """Write an armored detached signature next to ``path`` and return its path."""
        passphrase = (
            os.environ.get("SIGNREL_PASSWORD", "")
            if self.passphrase is None
            else self.passphrase
        )
        command = [
            "gpg",
            "--armor",
            "--detach-sign",
            "--pinentry-mode",
            "loopback",
            "--passphrase",
            passphrase,
            path,
        ]
        result = subprocess.run(
            command, stdout=subprocess.PIPE, stderr=subprocess.STDOUT
        )
        if result.returncode != 0:
            output = result.stdout or b""
            if isinstance(output, bytes):
                output = output.decode("utf-8", errors="replace")
            print(f"gpg: {output}", end="", file=sys.stderr)
            raise subprocess.CalledProcessError(result.returncode, command, output)
        return path + ".asc"

    def upload(self, sig: str, release_id: int) -> None:
        """Attach the signature file to the release; an existing one is left alone."""
        url = (
            f"{self.uploads_url}/repos/{self.owner}/{self.repo}"
            f"/releases/{release_id}/assets"
        )
        size = os.path.getsize(sig)
        headers = self._headers(content_type="application/octet-stream")
        headers["content-length"] = str(size)
        headers["accept"] = "application/vnd.github.v3+json"
        with open(sig, "rb") as body:
            response = self.session.post(
                url,
                params={"name": os.path.basename(sig)},
                data=body,
                headers=headers,
            )
        text = response.text

        if response.status_code == 422:
            print(f"{sig} has been already uploaded")
            return
        if response.status_code >= 300:
            raise requests.HTTPError(
                f"unexpected http status {response.status_code}: {text}",
                response=response,
            )
        print(f"Upload completed: {text}")

    def download(self, tag: str, dst_dir: str) -> None:
        """Download every unsigned asset of the release, sign it and upload the signature."""
        release = self.release_by_tag(tag)
        assets = self.assets_by_release_id(release.id)

        directory = os.path.join(dst_dir, tag)
        os.makedirs(directory, exist_ok=True)

        for asset in assets:
            if asset.name.endswith(".asc"):
                continue

            path = os.path.join(directory, asset.name)
            print(f"Downloading {asset.name} to {path}", file=sys.stderr)
            self.get_file(path, asset.id)

            sig = path + ".asc"
            if not os.path.exists(sig):
                self.sign(path)

            print(f"Uploading {sig}")
            self.upload(sig, release.id)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``tags`` or ``sign`` command and return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)

    if len(args) != 1:
        print(f"Invalid command: {['signrel', *args]}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2

    command = args[0]
    assets = ReleaseAssets()

    if command == "tags":
        try:
            body = assets.recent_releases()
        except Exception as exc:
            print(exc, file=sys.stderr)
            return 1
        print(body)
        return 0

    if command == "sign":
        try:
            assets.download(os.environ.get("TAG", ""), "downloads")
        except Exception as exc:
            print(exc, file=sys.stderr)
            return 1
        return 0

    print(f"Unknown command {command}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())