from __future__ import annotations

import argparse
import shutil
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from publish_artifact.github.actions import ActionsRuntime, input_env_name  # noqa: E402
from publish_artifact.infra.models import RunContext  # noqa: E402
from publish_artifact.publish.orchestrator import run_publish  # noqa: E402


@dataclass
class _Completed:
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class EchoRunner:
    """Prints registry commands instead of running them."""

    def run(self, cmd: List[str], *, cwd: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> _Completed:
        print(f"[simulate] would run: {' '.join(cmd)}" + (f" (cwd={cwd})" if cwd else ""))
        return _Completed()


class LocalDirDownloader:
    """Copies a local directory in place of the run's artifact."""

    def __init__(self, source: Optional[Path]):
        self.source = source

    def download(self, *, name: str, dest_dir: Path, context: RunContext) -> Path:
        if self.source is None:
            raise FileNotFoundError(f"no local directory given for artifact {name!r}")
        shutil.copytree(self.source, dest_dir, dirs_exist_ok=True)
        return dest_dir


def _print_file(title: str, path: Path) -> None:
    print("")
    print("=" * 80)
    print(title)
    print("=" * 80)
    text = path.read_text(encoding="utf-8") if path.exists() else ""
    print(text.strip() or "(empty)")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Simulate the publish-artifact action locally")
    ap.add_argument("--artifact-name", default="demo-artifact")
    ap.add_argument("--version", default="1.0.0")
    ap.add_argument("--registry-url", default="https://npm.pkg.github.com")
    ap.add_argument("--access-token", default="")
    ap.add_argument("--include-metadata", action="store_true")
    ap.add_argument("--real", action="store_true", help="Run the non-dry-run path with echoed registry commands")
    ap.add_argument("--artifact-dir", default="", help="Local directory standing in for the downloaded artifact")
    args = ap.parse_args(argv)

    with tempfile.TemporaryDirectory(prefix="publish_sim_") as td:
        tmp = Path(td)
        env: Dict[str, str] = {
            input_env_name("artifact-name"): args.artifact_name,
            input_env_name("version"): args.version,
            input_env_name("registry-url"): args.registry_url,
            input_env_name("access-token"): args.access_token,
            input_env_name("dry-run"): "false" if args.real else "true",
            input_env_name("include-metadata"): "true" if args.include_metadata else "false",
            "GITHUB_OUTPUT": str(tmp / "github_output"),
            "GITHUB_STEP_SUMMARY": str(tmp / "step_summary.md"),
            "GITHUB_SHA": "0123456789abcdef0123456789abcdef01234567",
            "GITHUB_REF": "refs/heads/main",
            "GITHUB_ACTOR": "local-user",
            "GITHUB_RUN_ID": "1",
            "GITHUB_RUN_NUMBER": "1",
            "GITHUB_REPOSITORY": "example/demo",
            "HOME": str(tmp / "home"),
        }

        io = ActionsRuntime(env=env)
        rc = run_publish(
            io,
            env=env,
            downloader=LocalDirDownloader(Path(args.artifact_dir).resolve() if args.artifact_dir else None),
            runner=EchoRunner(),
            cwd=tmp / "work",
            action_path=str(REPO_ROOT / "action.yml"),
        )

        _print_file("OUTPUTS", tmp / "github_output")
        _print_file("JOB SUMMARY", tmp / "step_summary.md")
        print("")
        print(f"exit code: {rc}")
        return rc


if __name__ == "__main__":
    raise SystemExit(main())
