from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from ..infra.contracts import CommandResult, CommandRunner
from ..infra.models import PublishConfig


class SubprocessRunner(CommandRunner):
    def run(self, cmd: List[str], *, cwd: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> CommandResult:
        return subprocess.run(
            cmd,
            check=False,
            text=True,
            capture_output=True,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
        )


def publish_command(config: PublishConfig, artifact_dir: Path) -> List[str]:
    cmd = ["npm", "publish", str(artifact_dir), "--registry", config.registry_url]
    if config.access_token:
        cmd.extend(["--access", "public"])
    return cmd


def dist_tag_command(config: PublishConfig, tag: str = "latest") -> List[str]:
    return [
        "npm",
        "dist-tag",
        "add",
        f"{config.artifact_name}@{config.version}",
        tag,
        "--registry",
        config.registry_url,
    ]


def _check(cmd: List[str], result: CommandResult) -> None:
    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise RuntimeError(f"{' '.join(cmd[:2])} failed rc={result.returncode}: {stderr[:2000]}")


def upload_package(runner: CommandRunner, config: PublishConfig, artifact_dir: Path) -> None:
    """Run `npm publish` once. Raises on a non-zero exit or a missing npm executable."""
    cmd = publish_command(config, artifact_dir)
    _check(cmd, runner.run(cmd, cwd=artifact_dir))


def tag_version(runner: CommandRunner, config: PublishConfig, tag: str = "latest") -> None:
    cmd = dist_tag_command(config, tag)
    _check(cmd, runner.run(cmd))
