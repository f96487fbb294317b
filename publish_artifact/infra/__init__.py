from __future__ import annotations

from .models import (
    CallOutcome,
    PublishConfig,
    PublishMetadata,
    PublishResult,
    RunContext,
)

from .errors import (
    ExternalCallError,
    InvalidInputError,
    MissingFieldError,
    NotFoundError,
    PublishError,
    ValidationError,
)

from .contracts import (
    ActionsIO,
    ArtifactDownloader,
    CommandRunner,
)

from .config import (
    InputSpec,
    load_input_specs,
    load_publish_config,
    resolve_action_path,
)

__all__ = [
    "CallOutcome",
    "PublishConfig",
    "PublishMetadata",
    "PublishResult",
    "RunContext",
    "ExternalCallError",
    "InvalidInputError",
    "MissingFieldError",
    "NotFoundError",
    "PublishError",
    "ValidationError",
    "ActionsIO",
    "ArtifactDownloader",
    "CommandRunner",
    "InputSpec",
    "load_input_specs",
    "load_publish_config",
    "resolve_action_path",
]
