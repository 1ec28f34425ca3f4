"""Error taxonomy for the contact pipeline and the admin surface.

Every error carries the generic message shown to the caller and the HTTP
status it maps to; the underlying cause is only ever logged.
"""

from app.constants.constants import (
    CONTACT_FAILURE_MESSAGE,
    CONTACT_NOT_FOUND_MESSAGE,
    INVALID_CONTACT_ID_MESSAGE,
)


class ContactServiceError(Exception):
    """Base class for all errors raised by the contact services."""

    status_code = 500
    default_message = CONTACT_FAILURE_MESSAGE

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ContactServiceError):
    """Bad input supplied by the client."""

    status_code = 400
    default_message = "Invalid input"


class InvalidIdError(ContactServiceError):
    """Identifier is not a well-formed submission id."""

    status_code = 400
    default_message = INVALID_CONTACT_ID_MESSAGE


class NotFoundError(ContactServiceError):
    status_code = 404
    default_message = CONTACT_NOT_FOUND_MESSAGE


class StoreError(ContactServiceError):
    """The submission store could not complete the operation."""


class NotificationError(ContactServiceError):
    """At least one notification email could not be delivered."""
