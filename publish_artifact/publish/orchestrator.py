from __future__ import annotations

import contextlib
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Tuple

from ..artifacts.manifest import build_package_manifest, written_manifest
from ..github.artifacts import GitHubRunArtifactDownloader
from ..github.context import load_run_context
from ..infra.config import load_input_specs, load_publish_config, resolve_action_path
from ..infra.contracts import ActionsIO, ArtifactDownloader, CommandRunner
from ..infra.errors import ExternalCallError
from ..infra.models import CallOutcome, PublishConfig, PublishMetadata, PublishResult, RunContext
from ..registry.npm import SubprocessRunner, tag_version, upload_package
from ..registry.npmrc import default_npmrc_path, registry_credentials
from ..utils.fs import ensure_dir
from .metadata import prepare_metadata
from .outputs import emit_outputs, set_failed_outputs
from .validate import validate_config

DOWNLOAD_DIRNAME = "downloaded-artifacts"


def published_url(config: PublishConfig) -> str:
    return f"{config.registry_url}/{config.artifact_name}/{config.version}"


def _reason(e: Exception) -> str:
    return str(e).strip() or type(e).__name__


def attempt(step: str, fn: Callable[[], object], config: PublishConfig) -> CallOutcome:
    """Run one external call; a failure becomes a degraded outcome, or an error in strict mode."""
    try:
        fn()
    except Exception as e:
        if config.strict:
            raise ExternalCallError(step, _reason(e)) from e
        return CallOutcome.degraded(step, _reason(e))
    return CallOutcome.success(step)


def download_artifact(
    config: PublishConfig,
    context: RunContext,
    io: ActionsIO,
    downloader: ArtifactDownloader,
    cwd: Path,
) -> Tuple[Path, CallOutcome]:
    """Fetch the artifact; fall back to cwd when the download fails (best-effort)."""
    io.info(f"📦 Downloading artifact: {config.artifact_name}")

    found: List[Path] = []

    def _download() -> None:
        dest = ensure_dir(cwd / DOWNLOAD_DIRNAME)
        found.append(downloader.download(name=config.artifact_name, dest_dir=dest, context=context))

    outcome = attempt("download", _download, config)
    if outcome.ok:
        io.info(f"✅ Artifact downloaded to: {found[0]}")
        return found[0], outcome

    io.debug(f"download failed: {outcome.reason}")
    io.warning("Could not download artifact, using current directory")
    return cwd, outcome


def _report(io: ActionsIO, outcome: CallOutcome, simulated: str) -> CallOutcome:
    if not outcome.ok:
        io.warning(f"{outcome.step} failed: {outcome.reason}")
        io.info(simulated)
    return outcome


def publish_to_registry(
    config: PublishConfig,
    artifact_dir: Path,
    metadata: PublishMetadata,
    context: RunContext,
    io: ActionsIO,
    runner: CommandRunner,
    npmrc_path: Path,
    outcomes: Tuple[CallOutcome, ...] = (),
) -> PublishResult:
    io.info(f"🚀 Publishing artifact to: {config.registry_url}")
    done: List[CallOutcome] = list(outcomes)

    if config.dry_run:
        io.warning("🔍 DRY RUN: Artifact publication simulated")
        return PublishResult(
            success=True,
            url=published_url(config),
            version=config.version,
            metadata=metadata,
            outcomes=tuple(done),
        )

    try:
        manifest = build_package_manifest(config, metadata, context)
        # Credential line and manifest are released on exit, whatever the outcome.
        with contextlib.ExitStack() as stack:
            io.info("📝 Creating package manifest...")
            stack.enter_context(written_manifest(artifact_dir, manifest))

            io.info("🔐 Authenticating with registry...")

            def _authenticate() -> None:
                if not config.access_token:
                    io.warning("⚠️ No access token provided, using default authentication")
                    return
                stack.enter_context(registry_credentials(config.registry_url, config.access_token, npmrc_path=npmrc_path))
                io.info("🔐 Registry authentication configured")

            done.append(_report(io, attempt("authenticate", _authenticate, config), "🔐 Registry authentication completed (simulated)"))

            io.info("📤 Uploading artifact...")
            done.append(
                _report(
                    io,
                    attempt("upload", lambda: upload_package(runner, config, artifact_dir), config),
                    "📤 Artifact upload completed (simulated)",
                )
            )

            io.info("🏷️ Tagging version...")
            done.append(
                _report(
                    io,
                    attempt("tag", lambda: tag_version(runner, config), config),
                    "🏷️ Version tagging completed (simulated)",
                )
            )

        return PublishResult(
            success=True,
            url=published_url(config),
            version=config.version,
            metadata=metadata,
            outcomes=tuple(done),
        )
    except ExternalCallError:
        raise
    except Exception as e:
        return PublishResult.failure(_reason(e), outcomes=tuple(done))


def run_publish(
    io: ActionsIO,
    *,
    env: Mapping[str, str],
    context: Optional[RunContext] = None,
    downloader: Optional[ArtifactDownloader] = None,
    runner: Optional[CommandRunner] = None,
    cwd: Optional[Path] = None,
    npmrc_path: Optional[Path] = None,
    action_path: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """Run the publish sequence once and report a single terminal outcome.

    Returns the process exit code: 1 when an exception escapes the sequence,
    0 otherwise. A publish result that reports failure still returns 0; its
    outputs (empty URL/version, status `failed`, `error`) carry the outcome.
    """
    try:
        specs = load_input_specs(resolve_action_path(cli_path=action_path, env=env))
        config = load_publish_config(io, specs)
        if config.access_token:
            io.set_secret(config.access_token)

        ctx = context if context is not None else load_run_context(env)
        work_dir = cwd if cwd is not None else Path.cwd()

        io.info(f"Initialized ArtifactPublisher with artifact: {config.artifact_name}")
        io.info("🚀 Starting artifact publication process...")

        validate_config(config, io)

        artifact_dir, fetched = download_artifact(
            config,
            ctx,
            io,
            downloader if downloader is not None else GitHubRunArtifactDownloader(env=env),
            work_dir,
        )

        metadata = prepare_metadata(config, ctx, io, now=now)

        result = publish_to_registry(
            config,
            artifact_dir,
            metadata,
            ctx,
            io,
            runner if runner is not None else SubprocessRunner(),
            npmrc_path if npmrc_path is not None else default_npmrc_path(env),
            outcomes=(fetched,),
        )

        emit_outputs(config, result, io)
    except Exception as e:
        message = _reason(e)
        io.set_failed(f"❌ Artifact publication failed: {message}")
        set_failed_outputs(io, message)
        return 1

    if not result.success:
        # Outputs carry the failure; the step itself still succeeds.
        io.error(f"❌ Artifact publication failed: {result.error}")
        return 0

    io.info("✅ Artifact publication completed successfully!")
    return 0
