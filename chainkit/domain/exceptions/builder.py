"""Builder registry domain exceptions."""

from .base import DomainException


class BuilderAlreadyExistsException(DomainException):
    """Raised when a builder type is registered twice."""

    def __init__(self, builder_type: str):
        super().__init__(
            message=f"Middleware builder already exists: {builder_type}",
            code="BUILDER_ALREADY_EXISTS",
        )
        self.builder_type = builder_type


class BuilderNotFoundException(DomainException):
    """Raised when no builder is registered for a type."""

    def __init__(self, builder_type: str):
        super().__init__(
            message=f"No middleware builder for type: {builder_type}",
            code="BUILDER_NOT_FOUND",
        )
        self.builder_type = builder_type


class InvalidBuilderConfigException(DomainException):
    """Raised by a builder when its config record is invalid."""

    def __init__(self, builder_type: str, message: str):
        super().__init__(
            message=f"Invalid config for builder '{builder_type}': {message}",
            code="INVALID_BUILDER_CONFIG",
        )
        self.builder_type = builder_type
