from __future__ import annotations


class PublishError(Exception):
    """Base class for publish-artifact errors."""


class ValidationError(PublishError):
    """Raised when action metadata or an input fails validation."""


class MissingFieldError(ValidationError):
    """Raised when a required input is empty."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class InvalidInputError(ValidationError):
    """Raised when an input value cannot be interpreted (e.g. a non-boolean flag)."""


class NotFoundError(PublishError):
    """Raised when a requested entity cannot be found."""


class ExternalCallError(PublishError):
    """Raised when an external call fails and the run is in strict mode."""

    def __init__(self, step: str, reason: str):
        super().__init__(f"{step} failed: {reason}")
        self.step = step
        self.reason = reason
