from __future__ import annotations

from ..github.summary import JobSummary, SummaryCell
from ..infra.contracts import ActionsIO
from ..infra.models import PublishConfig, PublishResult
from .metadata import metadata_json


def set_failed_outputs(io: ActionsIO, error: str = "") -> None:
    io.set_output("published-url", "")
    io.set_output("published-version", "")
    io.set_output("publication-status", "failed")
    if error:
        io.set_output("error", error)


def emit_outputs(config: PublishConfig, result: PublishResult, io: ActionsIO) -> None:
    """Set the action outputs for result and, on success, write the job summary."""
    io.info("📤 Setting action outputs...")

    if not result.success:
        set_failed_outputs(io, result.error)
        return

    io.set_output("published-url", result.url)
    io.set_output("published-version", result.version)
    io.set_output("publication-status", "success")

    if result.metadata is not None and config.include_metadata:
        io.set_output("metadata", metadata_json(result.metadata))

    rows = [
        [SummaryCell("Property", header=True), SummaryCell("Value", header=True)],
        ["Artifact Name", config.artifact_name],
        ["Version", result.version or "N/A"],
        ["Registry URL", config.registry_url],
        ["Published URL", result.url or "N/A"],
        ["Dry Run", "true" if config.dry_run else "false"],
    ]
    for outcome in result.degraded:
        rows.append([f"Degraded: {outcome.step}", outcome.reason])

    JobSummary().add_heading("🎉 Artifact Published Successfully").add_table(rows).write(io)
