import asyncio
import html
import logging

from app.constants.constants import ADMIN_NOTIFICATION_SUBJECT, AUTO_REPLY_SUBJECT
from app.core.exceptions import NotificationError
from app.services.MicrosoftGraphClientPublic import MicrosoftGraphClientPublic

logger = logging.getLogger(__name__)


ADMIN_EMAIL_TEMPLATE = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .details {{ background: #f9fafb; padding: 20px; border-radius: 8px; border-left: 4px solid #3498db; }}
            .label {{ font-weight: bold; color: #6b7280; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h3>New Contact Form Submission</h3>
            <div class="details">
                <p><span class="label">Name:</span> {name}</p>
                <p><span class="label">Email:</span> <a href="mailto:{email}">{email}</a></p>
                <p><span class="label">Message:</span></p>
                <p>{message}</p>
                <p><span class="label">Submitted:</span> {submission_date}</p>
                <p><span class="label">Reference ID:</span> {submission_id}</p>
            </div>
        </div>
    </body>
    </html>
    """

AUTO_REPLY_TEMPLATE = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h3>Thank you for your message, {name}!</h3>
            <p>I have received your message and will get back to you soon.</p>
            <p>Best regards,<br>{owner_name}</p>
        </div>
    </body>
    </html>
    """


def _escaped(submission_data: dict) -> dict:
    return {
        "submission_id": submission_data["submission_id"],
        "name": html.escape(submission_data["name"]),
        "email": html.escape(submission_data["email"]),
        "message": html.escape(submission_data["message"]).replace("\n", "<br>"),
        "submission_date": submission_data["submitted_at"].strftime("%B %d, %Y at %I:%M %p UTC"),
    }


async def notify_admin_new_contact_message(
    submission_data: dict,
    graph_client: MicrosoftGraphClientPublic,
    admin_email: str
) -> dict:
    """Alert the site owner about a new submission. Reply-to is the submitter."""
    result = await graph_client.send_email(
        to_emails=[admin_email],
        subject=ADMIN_NOTIFICATION_SUBJECT.format(name=submission_data["name"]),
        body_html=ADMIN_EMAIL_TEMPLATE.format(**_escaped(submission_data)),
        reply_to=submission_data["email"]
    )
    logger.info(f"✅ Admin notified about submission {submission_data['submission_id']}")
    return result


async def notify_contact_message_received(
    submission_data: dict,
    graph_client: MicrosoftGraphClientPublic,
    owner_name: str
) -> dict:
    """Send the auto-reply acknowledging receipt to the submitter."""
    result = await graph_client.send_email(
        to_emails=[submission_data["email"]],
        subject=AUTO_REPLY_SUBJECT,
        body_html=AUTO_REPLY_TEMPLATE.format(owner_name=html.escape(owner_name), **_escaped(submission_data))
    )
    logger.info(f"✅ Auto-reply sent to {submission_data['email']}")
    return result


async def notify_contact_submission(
    submission_data: dict,
    graph_client: MicrosoftGraphClientPublic,
    admin_email: str,
    owner_name: str
) -> None:
    """
    Send the admin alert and the submitter auto-reply concurrently.

    Both sends are awaited together; there is no retry and no partial
    success. A failing send does not cancel the other one: the operation
    only fails once both have finished, so an auto-reply may still go out
    when the admin alert fails (and vice versa).

    Args:
        submission_data: dict with submission_id, name, email, message, submitted_at
        graph_client: email-sending client exposing ``send_email``
        admin_email: fixed administrator recipient
        owner_name: signature used in the auto-reply

    Raises:
        NotificationError: if either email could not be sent.
    """
    results = await asyncio.gather(
        notify_admin_new_contact_message(submission_data, graph_client, admin_email),
        notify_contact_message_received(submission_data, graph_client, owner_name),
        return_exceptions=True
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        for failure in failures:
            logger.error(f"⚠️ Notification for submission {submission_data['submission_id']} failed: {failure!r}")
        if isinstance(failures[0], NotificationError):
            raise failures[0]
        raise NotificationError() from failures[0]
