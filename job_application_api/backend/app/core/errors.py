"""
Error taxonomy for the job application pipeline.

ValidationError            -> bad form input, answered with 400 before rendering starts
ResourceAcquisitionError   -> fonts (or other render inputs) unavailable, 500, no document
RenderError                -> drawing failure; optional elements degrade, structural ones propagate
DeliveryError              -> email transport failure, converted to a DeliveryResult and logged
"""

from enum import Enum
from typing import List, Optional


class JobApplicationError(Exception):
    """Base class for all errors raised by this service."""
    pass


class ValidationErrorKind(str, Enum):
    MISSING_REQUIRED_FIELDS = "missing_required_fields"
    INVALID_NATIONAL_ID = "invalid_national_id"
    INVALID_EMAIL = "invalid_email"
    INVALID_AGE = "invalid_age"
    MISSING_PHOTO = "missing_photo"


class ValidationError(JobApplicationError):
    """Raised (or returned inside an IntakeResult) when submitted fields are invalid."""

    def __init__(self, kind: ValidationErrorKind, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.fields = fields or []


class ResourceAcquisitionError(JobApplicationError):
    """Raised when a resource required before layout (font data) cannot be obtained."""

    def __init__(self, resource: str, reason: str):
        super().__init__(f"Cannot acquire resource '{resource}': {reason}")
        self.resource = resource
        self.reason = reason


class RenderError(JobApplicationError):
    """Raised when a drawing operation fails."""
    pass


class DeliveryError(JobApplicationError):
    """Raised by an email transport when a message could not be handed off."""
    pass
