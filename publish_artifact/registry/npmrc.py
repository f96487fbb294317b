from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Optional
from urllib.parse import urlparse

from ..infra.errors import ValidationError
from ..utils.fs import atomic_write_bytes


@dataclass(frozen=True)
class RegistryAuth:
    npmrc_path: Path
    auth_line: str
    added: bool
    created: bool
    # File bytes before the credential line went in, and the bytes that were appended.
    original: bytes = b""
    appended: bytes = b""


def default_npmrc_path(env: Optional[Mapping[str, str]] = None) -> Path:
    e = env if env is not None else os.environ
    home = str(e.get("HOME", "") or "").strip()
    return (Path(home) if home else Path.home()) / ".npmrc"


def registry_host(registry_url: str) -> str:
    host = urlparse(str(registry_url).strip()).netloc
    if not host:
        raise ValidationError(f"Registry URL is not an absolute URL: {registry_url!r}")
    return host


def auth_line_for(registry_url: str, token: str) -> str:
    return f"//{registry_host(registry_url)}/:_authToken={token}"


def configure_registry_auth(registry_url: str, token: str, npmrc_path: Optional[Path] = None) -> RegistryAuth:
    """Associate the registry host with token in the per-user .npmrc.

    Idempotent: the credential line is written at most once.
    """
    path = npmrc_path if npmrc_path is not None else default_npmrc_path()
    line = auth_line_for(registry_url, token)

    if not path.exists():
        appended = f"{line}\n".encode("utf-8")
        atomic_write_bytes(path, appended)
        return RegistryAuth(npmrc_path=path, auth_line=line, added=True, created=True, appended=appended)

    original = path.read_bytes()
    if line in original.decode("utf-8").splitlines():
        return RegistryAuth(npmrc_path=path, auth_line=line, added=False, created=False, original=original)

    appended = f"\n{line}\n".encode("utf-8")
    with path.open("ab") as f:
        f.write(appended)
    return RegistryAuth(npmrc_path=path, auth_line=line, added=True, created=False, original=original, appended=appended)


def remove_registry_auth(auth: RegistryAuth) -> None:
    """Undo configure_registry_auth: drop the line it added, and the file if it created it.

    When nothing else touched the file in between, its original bytes come back exactly.
    """
    if not auth.added:
        return
    path = auth.npmrc_path
    if not path.exists():
        return

    current = path.read_bytes()
    if current == auth.original + auth.appended:
        if auth.created:
            path.unlink(missing_ok=True)
        else:
            atomic_write_bytes(path, auth.original)
        return

    # The file changed meanwhile; remove only our line and keep everything else as is.
    kept = [ln for ln in current.decode("utf-8").splitlines(keepends=True) if ln.rstrip("\r\n") != auth.auth_line]
    if auth.created and not any(ln.strip() for ln in kept):
        path.unlink(missing_ok=True)
        return
    atomic_write_bytes(path, "".join(kept).encode("utf-8"))


@contextlib.contextmanager
def registry_credentials(registry_url: str, token: str, npmrc_path: Optional[Path] = None) -> Iterator[RegistryAuth]:
    auth = configure_registry_auth(registry_url, token, npmrc_path=npmrc_path)
    try:
        yield auth
    finally:
        remove_registry_auth(auth)
