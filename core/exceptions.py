"""
Exception classes for the content types engine.

Field display errors never reach this hierarchy (strategies swallow them);
validation, lookup and startup errors propagate to the caller.
"""

from typing import Any

from fastapi import status


class ContentEngineError(Exception):
    """Base exception class for all content engine errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Schema & registry
# ============================================================================


class SchemaDefinitionError(ContentEngineError):
    """Raised when a content type or field declaration is malformed"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details)


class ContentTypeNotFoundError(ContentEngineError):
    """Raised when no schema is registered under a slug"""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Content type '{slug}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"content_type": slug},
        )
        self.slug = slug


class RegistrySealedError(ContentEngineError):
    """Raised when a sealed registry is mutated"""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Cannot register '{slug}': the content type registry is sealed",
            details={"content_type": slug},
        )


class UnknownFieldError(ContentEngineError):
    """Raised when an accessor is asked for a field the schema does not declare"""

    def __init__(self, content_type: str, field: str):
        super().__init__(
            message=f"Content type '{content_type}' has no field '{field}'",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"content_type": content_type, "field": field},
        )
        self.field = field


class MaterializationError(ContentEngineError):
    """Raised when backing storage for a content type cannot be created"""

    def __init__(self, content_type: str, message: str):
        super().__init__(
            message=f"Materialization of '{content_type}' failed: {message}",
            details={"content_type": content_type},
        )
        self.content_type = content_type


# ============================================================================
# Validation
# ============================================================================


class FieldValidationError(ContentEngineError):
    """Raised by a field strategy when a submitted value cannot be accepted"""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"field": field},
        )
        self.field = field


class SubmissionValidationError(ContentEngineError):
    """Collects field-scoped errors for a whole submission"""

    def __init__(self, errors: dict[str, str]):
        super().__init__(
            message="Submission is invalid",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"errors": errors},
        )
        self.errors = errors


# ============================================================================
# Entities
# ============================================================================


class EntityNotFoundError(ContentEngineError):
    """Raised when an entity lookup by id or slug finds nothing"""

    def __init__(self, content_type: str, identifier: Any):
        super().__init__(
            message=f"{content_type} entry '{identifier}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"content_type": content_type, "identifier": str(identifier)},
        )


class SlugCollisionError(ContentEngineError):
    """Raised when no free slug was found within the retry budget"""

    def __init__(self, base_slug: str, attempts: int):
        super().__init__(
            message=f"Could not find a free slug for '{base_slug}' after {attempts} attempts",
            status_code=status.HTTP_409_CONFLICT,
            details={"slug": base_slug, "attempts": attempts},
        )
        self.base_slug = base_slug
        self.attempts = attempts
