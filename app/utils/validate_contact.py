from app.constants.constants import EMAIL_PATTERN, FIELDS_REQUIRED_MESSAGE, INVALID_EMAIL_MESSAGE
from app.core.exceptions import ValidationError


def validate_contact_submission(name, email, message) -> None:
    """
    Check a raw contact form submission.

    Fields are taken as given: no trimming, casing or length limits.

    Raises:
        ValidationError: if any field is empty/absent or the email is malformed.
    """
    if not name or not email or not message:
        raise ValidationError(FIELDS_REQUIRED_MESSAGE)

    if not isinstance(email, str) or not EMAIL_PATTERN.fullmatch(email):
        raise ValidationError(INVALID_EMAIL_MESSAGE)
