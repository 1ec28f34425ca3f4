"""Constants for submission statuses, validation patterns and user-facing messages."""

import re
from enum import Enum


class SubmissionStatus(str, Enum):
    """Enumeration of contact submission statuses."""

    new = "new"
    read = "read"
    replied = "replied"


# local-part@domain.tld, no whitespace or extra "@" in any part; use with fullmatch
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Contact form responses
CONTACT_SUCCESS_MESSAGE = "Message sent successfully! You'll receive a confirmation email shortly."
CONTACT_FAILURE_MESSAGE = "Failed to send message. Please try again later."
FIELDS_REQUIRED_MESSAGE = "All fields are required"
INVALID_EMAIL_MESSAGE = "Invalid email format"

# Admin responses
INVALID_CONTACT_ID_MESSAGE = "Invalid contact ID"
CONTACT_NOT_FOUND_MESSAGE = "Contact not found"
INVALID_STATUS_MESSAGE = "Invalid status. Must be one of: new, read, replied"
STATUS_UPDATED_MESSAGE = "Contact status updated successfully"
FETCH_CONTACTS_FAILURE_MESSAGE = "Failed to fetch contacts"
UPDATE_CONTACT_FAILURE_MESSAGE = "Failed to update contact"

# Email subjects
ADMIN_NOTIFICATION_SUBJECT = "New Contact Form Submission from {name}"
AUTO_REPLY_SUBJECT = "Thank you for contacting me!"
