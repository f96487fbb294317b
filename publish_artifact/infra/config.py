from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import jsonschema

from ..utils.yamlio import read_yaml
from .contracts import ActionsIO
from .errors import ValidationError
from .models import PublishConfig

ACTION_FILENAMES = ("action.yml", "action.yaml")


@dataclass(frozen=True)
class InputSpec:
    name: str
    required: bool = False
    default: str = ""
    description: str = ""


# Used when no action.yml is reachable (e.g. the package was pip-installed on its own).
DEFAULT_INPUTS: Dict[str, InputSpec] = {
    "artifact-name": InputSpec("artifact-name", required=True, description="Name of the artifact to publish"),
    "version": InputSpec("version", required=True, description="Version to publish (semantic version)"),
    "registry-url": InputSpec("registry-url", required=True, description="Registry URL"),
    "access-token": InputSpec("access-token", description="Registry access token"),
    "dry-run": InputSpec("dry-run", default="false", description="Simulate the publication"),
    "include-metadata": InputSpec("include-metadata", default="false", description="Attach build metadata"),
    "strict": InputSpec("strict", default="false", description="Fail when an external call fails"),
}


def _action_schema() -> Dict[str, Any]:
    input_obj = {
        "type": "object",
        "properties": {
            "description": {"type": "string"},
            "required": {"type": "boolean"},
            "default": {"type": ["string", "boolean", "number"]},
            "deprecationMessage": {"type": "string"},
        },
        "additionalProperties": False,
    }
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": ["name", "description", "runs"],
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "description": {"type": "string"},
            "author": {"type": "string"},
            "branding": {"type": "object"},
            "inputs": {"type": "object", "additionalProperties": input_obj},
            "outputs": {"type": "object"},
            "runs": {
                "type": "object",
                "required": ["using"],
                "properties": {"using": {"type": "string"}},
            },
        },
    }


def resolve_action_path(
    repo_root: Optional[Path] = None,
    cli_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Resolve the action metadata file.

    Precedence:
      1) explicit path
      2) GITHUB_ACTION_PATH (directory the runner checked the action out to)
      3) <repo_root>/action.yml
    Returns None when nothing exists.
    """
    e = env if env is not None else os.environ

    if cli_path and str(cli_path).strip():
        return Path(str(cli_path).strip()).expanduser().resolve()

    dirs = []
    action_dir = str(e.get("GITHUB_ACTION_PATH", "") or "").strip()
    if action_dir:
        dirs.append(Path(action_dir).expanduser())
    root = repo_root if repo_root is not None else Path(__file__).resolve().parents[2]
    dirs.append(root)

    for d in dirs:
        for fname in ACTION_FILENAMES:
            p = d / fname
            if p.exists():
                return p.resolve()
    return None


def _default_as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def load_input_specs(path: Optional[Path]) -> Dict[str, InputSpec]:
    """Load input declarations from action.yml, falling back to DEFAULT_INPUTS."""
    if path is None:
        return dict(DEFAULT_INPUTS)
    if not path.exists():
        raise ValidationError(f"action metadata not found: {path}")

    try:
        data = read_yaml(path)
        jsonschema.validate(instance=data, schema=_action_schema())
    except (ValueError, jsonschema.ValidationError) as e:
        raise ValidationError(f"action metadata validation failed: {path}: {e}") from e

    specs: Dict[str, InputSpec] = {}
    for name, raw in (data.get("inputs") or {}).items():
        raw = raw or {}
        specs[str(name)] = InputSpec(
            name=str(name),
            required=bool(raw.get("required", False)),
            default=_default_as_str(raw.get("default")),
            description=str(raw.get("description") or ""),
        )

    missing = [k for k in DEFAULT_INPUTS if k not in specs]
    if missing:
        raise ValidationError(f"action metadata does not declare inputs: {missing}")
    return specs


def _default_bool(spec: InputSpec, name: str) -> bool:
    raw = spec.default.strip()
    if raw in ("true", "True", "TRUE"):
        return True
    if raw in ("false", "False", "FALSE", ""):
        return False
    raise ValidationError(f"action metadata default for boolean input {name!r} is not a boolean: {raw!r}")


def load_publish_config(io: ActionsIO, specs: Optional[Mapping[str, InputSpec]] = None) -> PublishConfig:
    """Read the action inputs through `io` into a PublishConfig.

    Required inputs are not enforced here; the validate step reports empty ones.
    Empty optional inputs take their declared default.
    """
    s = dict(specs) if specs is not None else dict(DEFAULT_INPUTS)

    def text(name: str) -> str:
        return io.get_input(name) or s[name].default

    def flag(name: str) -> bool:
        return io.get_boolean_input(name, default=_default_bool(s[name], name))

    token = io.get_input("access-token")
    return PublishConfig(
        artifact_name=text("artifact-name"),
        version=text("version"),
        registry_url=text("registry-url"),
        access_token=token or None,
        dry_run=flag("dry-run"),
        include_metadata=flag("include-metadata"),
        strict=flag("strict"),
    )
