from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Optional, Protocol

from .models import RunContext


class ArtifactDownloader(Protocol):
    def download(self, *, name: str, dest_dir: Path, context: RunContext) -> Path:
        """Fetch the named artifact into dest_dir and return the directory holding it.

        Raises on any failure; the caller decides whether that is fatal.
        """
        raise NotImplementedError


class CommandResult(Protocol):
    returncode: int
    stdout: str
    stderr: str


class CommandRunner(Protocol):
    def run(self, cmd: List[str], *, cwd: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> CommandResult:
        raise NotImplementedError


class ActionsIO(Protocol):
    """The slice of the Actions runtime the orchestrator talks to."""

    def get_input(self, name: str, *, trim: bool = True) -> str:
        raise NotImplementedError

    def get_boolean_input(self, name: str, *, default: Optional[bool] = None) -> bool:
        raise NotImplementedError

    def set_output(self, name: str, value: str) -> None:
        raise NotImplementedError

    def set_secret(self, value: str) -> None:
        raise NotImplementedError

    def info(self, message: str) -> None:
        raise NotImplementedError

    def warning(self, message: str) -> None:
        raise NotImplementedError

    def error(self, message: str) -> None:
        raise NotImplementedError

    def debug(self, message: str) -> None:
        raise NotImplementedError

    def set_failed(self, message: str) -> None:
        raise NotImplementedError

    def append_summary(self, markdown: str) -> None:
        raise NotImplementedError
