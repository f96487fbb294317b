from __future__ import annotations

import os
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..infra.contracts import ArtifactDownloader
from ..infra.errors import NotFoundError, ValidationError
from ..infra.models import RunContext
from ..utils.fs import ensure_dir


def _github_api_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": "publish-artifact-action",
    }


def _safe_extract(zf: zipfile.ZipFile, dest_dir: Path) -> List[Path]:
    root = dest_dir.resolve()
    out: List[Path] = []
    for name in zf.namelist():
        target = (root / name).resolve()
        if target != root and root not in target.parents:
            raise ValidationError(f"Refusing to extract entry outside destination: {name}")
        if name.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        with zf.open(name) as src, target.open("wb") as dst:
            dst.write(src.read())
        out.append(target)
    return out


class GitHubRunArtifactDownloader(ArtifactDownloader):
    """Downloads an artifact uploaded earlier in the same workflow run.

    Uses the REST API: list the run's artifacts filtered by name, then fetch the
    zip archive of the newest non-expired match and unpack it into dest_dir.
    """

    def __init__(
        self,
        *,
        env: Optional[Mapping[str, str]] = None,
        session: Optional[Any] = None,
        timeout: int = 60,
    ):
        self.env: Mapping[str, str] = env if env is not None else os.environ
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _token(self) -> str:
        token = str(self.env.get("GITHUB_TOKEN", "") or "").strip() or str(self.env.get("GH_TOKEN", "") or "").strip()
        if not token:
            raise ValidationError("Missing GitHub token in env var GITHUB_TOKEN (or GH_TOKEN); required to download artifacts.")
        return token

    def _find_artifact(self, *, name: str, context: RunContext, token: str) -> Dict[str, Any]:
        if not context.repository or "/" not in context.repository:
            raise ValidationError("GITHUB_REPOSITORY is not set; cannot locate run artifacts")
        if not context.run_id:
            raise ValidationError("GITHUB_RUN_ID is not set; cannot locate run artifacts")

        url = f"{context.api_url}/repos/{context.repository}/actions/runs/{context.run_id}/artifacts"
        r = self.session.get(
            url,
            headers=_github_api_headers(token),
            params={"name": name, "per_page": 100},
            timeout=self.timeout,
        )
        if r.status_code != 200:
            raise RuntimeError(f"GitHub API error listing run artifacts: {r.status_code}: {r.text[:2000]}")

        payload = r.json()
        artifacts = payload.get("artifacts") if isinstance(payload, dict) else None
        candidates = [
            a for a in (artifacts or [])
            if isinstance(a, dict) and str(a.get("name")) == name and not a.get("expired")
        ]
        if not candidates:
            raise NotFoundError(f"Artifact not found in run {context.run_id}: {name}")
        # Newest upload wins when a name was reused.
        candidates.sort(key=lambda a: str(a.get("created_at") or ""), reverse=True)
        return candidates[0]

    def download(self, *, name: str, dest_dir: Path, context: RunContext) -> Path:
        token = self._token()
        artifact = self._find_artifact(name=name, context=context, token=token)

        archive_url = str(artifact.get("archive_download_url") or "").strip()
        if not archive_url:
            archive_url = f"{context.api_url}/repos/{context.repository}/actions/artifacts/{artifact.get('id')}/zip"

        r = self.session.get(archive_url, headers=_github_api_headers(token), timeout=self.timeout, allow_redirects=True)
        if r.status_code != 200:
            raise RuntimeError(f"GitHub API error downloading artifact {name}: {r.status_code}: {r.text[:2000]}")

        ensure_dir(dest_dir)
        fd, tmp = tempfile.mkstemp(prefix="artifact_", suffix=".zip", dir=str(dest_dir.parent))
        tmp_path = Path(tmp)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(r.content)
            with zipfile.ZipFile(tmp_path, "r") as zf:
                _safe_extract(zf, dest_dir)
        finally:
            tmp_path.unlink(missing_ok=True)

        return dest_dir
