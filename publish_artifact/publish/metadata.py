from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional

from ..infra.contracts import ActionsIO
from ..infra.models import PublishConfig, PublishMetadata, RunContext

BRANCH_REF_PREFIX = "refs/heads/"


def utcnow_iso(now: Optional[datetime] = None) -> str:
    dt = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def branch_from_ref(ref: str) -> str:
    r = str(ref or "")
    return r[len(BRANCH_REF_PREFIX):] if r.startswith(BRANCH_REF_PREFIX) else r


def prepare_metadata(
    config: PublishConfig,
    context: RunContext,
    io: ActionsIO,
    now: Optional[datetime] = None,
) -> PublishMetadata:
    io.info("📋 Preparing publication metadata...")

    metadata = PublishMetadata(
        timestamp=utcnow_iso(now),
        commit=context.sha,
        branch=branch_from_ref(context.ref),
        actor=context.actor,
        run_id=context.run_id,
        build_number=context.run_number,
    )

    if config.include_metadata:
        io.info("📄 Metadata prepared:")
        io.info(f"  • Timestamp: {metadata.timestamp}")
        io.info(f"  • Commit: {metadata.commit[:8]}")
        io.info(f"  • Branch: {metadata.branch}")
        io.info(f"  • Actor: {metadata.actor}")
        io.info(f"  • Run ID: {metadata.run_id}")

    return metadata


def metadata_json(metadata: PublishMetadata) -> str:
    return json.dumps(metadata.as_dict(), separators=(",", ":"))
