from __future__ import annotations

import contextlib
import json
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from ..github.context import repository_url
from ..infra.models import PublishConfig, PublishMetadata, RunContext
from ..utils.fs import atomic_write_bytes, atomic_write_text

MANIFEST_FILENAME = "package.json"
MANIFEST_FILES = ["dist/", "lib/", "*.js", "*.json"]


def build_package_manifest(config: PublishConfig, metadata: PublishMetadata, context: RunContext) -> Dict[str, Any]:
    """Package manifest handed to the registry.

    The `build` block is only present when metadata inclusion was requested.
    """
    manifest: Dict[str, Any] = {
        "name": config.artifact_name,
        "version": config.version,
        "description": f"Automated build artifact for {config.artifact_name}",
        "main": "index.js",
        "files": list(MANIFEST_FILES),
        "repository": {
            "type": "git",
            "url": repository_url(context),
        },
        "publishConfig": {
            "registry": config.registry_url,
        },
    }
    if config.include_metadata:
        manifest["build"] = metadata.as_dict()
    return manifest


def render_manifest(manifest: Dict[str, Any]) -> str:
    return json.dumps(manifest, ensure_ascii=False, indent=2)


@contextlib.contextmanager
def written_manifest(artifact_dir: Path, manifest: Dict[str, Any]) -> Iterator[Path]:
    """Write package.json into artifact_dir for the duration of the block.

    On exit a replaced file is restored byte-for-byte; a new one is removed.
    """
    path = artifact_dir / MANIFEST_FILENAME
    previous: Optional[bytes] = path.read_bytes() if path.exists() else None
    atomic_write_text(path, render_manifest(manifest))
    try:
        yield path
    finally:
        if previous is not None:
            atomic_write_bytes(path, previous)
        else:
            path.unlink(missing_ok=True)
