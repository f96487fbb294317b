from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Tuple

# Canonical names of the guarded external calls, in execution order.
ExternalStep = Literal["download", "authenticate", "upload", "tag"]
EXTERNAL_STEP_VALUES: Tuple[str, ...] = ("download", "authenticate", "upload", "tag")

PublicationStatus = Literal["success", "failed"]


@dataclass(frozen=True)
class PublishConfig:
    """Action inputs, read once at start.

    Required fields may be empty here; emptiness is reported by the validate step
    so that it fails inside the run boundary.
    """

    artifact_name: str
    version: str
    registry_url: str
    access_token: Optional[str] = None
    dry_run: bool = False
    include_metadata: bool = False

    # Escalate degraded external calls into failures instead of absorbing them.
    strict: bool = False


@dataclass(frozen=True)
class RunContext:
    """Ambient information about the triggering workflow run."""

    sha: str = ""
    ref: str = ""
    actor: str = ""
    run_id: int = 0
    run_number: int = 0
    repository: str = ""
    server_url: str = "https://github.com"
    api_url: str = "https://api.github.com"

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0] if "/" in self.repository else ""

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1] if "/" in self.repository else ""


@dataclass(frozen=True)
class PublishMetadata:
    timestamp: str
    commit: str
    branch: str
    actor: str
    run_id: int
    build_number: int

    def as_dict(self) -> Dict[str, Any]:
        # Key names are part of the `metadata` output contract.
        return {
            "timestamp": self.timestamp,
            "commit": self.commit,
            "branch": self.branch,
            "actor": self.actor,
            "runId": self.run_id,
            "buildNumber": self.build_number,
        }


@dataclass(frozen=True)
class CallOutcome:
    """Outcome of one guarded external call: ok, or degraded with a reason."""

    step: str
    ok: bool = True
    reason: str = ""

    def __post_init__(self) -> None:
        if self.step not in EXTERNAL_STEP_VALUES:
            raise ValueError(f"unknown external step: {self.step!r}")

    @classmethod
    def success(cls, step: str) -> "CallOutcome":
        return cls(step=step, ok=True)

    @classmethod
    def degraded(cls, step: str, reason: str) -> "CallOutcome":
        return cls(step=step, ok=False, reason=str(reason))


@dataclass(frozen=True)
class PublishResult:
    success: bool
    url: str = ""
    version: str = ""
    metadata: Optional[PublishMetadata] = None
    error: str = ""
    outcomes: Tuple[CallOutcome, ...] = ()

    @property
    def status(self) -> PublicationStatus:
        return "success" if self.success else "failed"

    @property
    def degraded(self) -> Tuple[CallOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.ok)

    @classmethod
    def failure(cls, error: str, outcomes: Tuple[CallOutcome, ...] = ()) -> "PublishResult":
        return cls(success=False, error=str(error), outcomes=outcomes)
