from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict


def ensure_repo_on_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
    return repo_root


def read_outputs(path: Path) -> Dict[str, str]:
    """Parse a GITHUB_OUTPUT file written with the heredoc delimiter form; later values win."""
    out: Dict[str, str] = {}
    if not path.exists():
        return out
    lines = path.read_text(encoding="utf-8").splitlines()
    i = 0
    while i < len(lines):
        line = lines[i]
        if "<<" not in line:
            i += 1
            continue
        name, delimiter = line.split("<<", 1)
        value_lines = []
        i += 1
        while i < len(lines) and lines[i] != delimiter:
            value_lines.append(lines[i])
            i += 1
        out[name] = "\n".join(value_lines)
        i += 1
    return out
