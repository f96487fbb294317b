from __future__ import annotations

import argparse
import os
from typing import List, Optional

from . import __version__
from .github.actions import ActionsRuntime
from .publish.orchestrator import run_publish


def cmd_run(args: argparse.Namespace) -> int:
    io = ActionsRuntime(env=os.environ)
    return run_publish(io, env=os.environ, action_path=args.action_file)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="publish-artifact",
        description="Publish a build artifact to a package registry. Inputs are read from INPUT_* environment variables.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--action-file",
        default=None,
        help="Path to action.yml (defaults to $GITHUB_ACTION_PATH/action.yml, then the repository root)",
    )
    p.set_defaults(func=cmd_run)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args) or 0)


if __name__ == "__main__":
    raise SystemExit(main())
