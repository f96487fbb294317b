from __future__ import annotations

import re

from ..infra.contracts import ActionsIO
from ..infra.errors import MissingFieldError
from ..infra.models import PublishConfig

SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+(-[a-zA-Z0-9-]+)?(\+[a-zA-Z0-9-]+)?$")


def is_semver(version: str) -> bool:
    return bool(SEMVER_RE.match(str(version)))


def validate_config(config: PublishConfig, io: ActionsIO) -> None:
    """Fail on empty required inputs; warn (only) on a non-semver version."""
    io.info("🔍 Validating inputs...")

    if not config.artifact_name:
        raise MissingFieldError("artifact-name", "Artifact name is required")
    if not config.version:
        raise MissingFieldError("version", "Version is required")
    if not config.registry_url:
        raise MissingFieldError("registry-url", "Registry URL is required")

    if not is_semver(config.version):
        io.warning(f"Version {config.version} doesn't follow semantic versioning")

    io.info("✅ Input validation completed")
