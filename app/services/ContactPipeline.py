"""Contact form pipeline: validate, persist, notify."""

import logging

from app.core.exceptions import NotificationError
from app.models.submission import Submission
from app.services.ContactNotifications import notify_contact_submission
from app.services.SubmissionStore import SubmissionStore
from app.utils.validate_contact import validate_contact_submission

logger = logging.getLogger(__name__)


class ContactPipeline:
    """
    Runs one contact submission through validate -> persist -> notify.

    Any stage failing halts the run and its error propagates to the caller.
    A notification failure still leaves the submission stored: the record is
    kept and the stored id is logged so it can be answered by hand.
    """

    def __init__(
        self,
        store: SubmissionStore,
        graph_client,
        admin_email: str,
        owner_name: str
    ):
        self.store = store
        self.graph_client = graph_client
        self.admin_email = admin_email
        self.owner_name = owner_name

    async def submit(self, name, email, message) -> Submission:
        validate_contact_submission(name, email, message)

        submission = await self.store.create(name, email, message)

        submission_data = {
            "submission_id": submission.submission_id,
            "name": submission.name,
            "email": submission.email,
            "message": submission.message,
            "submitted_at": submission.created_at,
        }
        try:
            await notify_contact_submission(
                submission_data,
                self.graph_client,
                admin_email=self.admin_email,
                owner_name=self.owner_name
            )
        except NotificationError:
            logger.error(
                f"📭 Submission {submission.submission_id} was stored but notifications failed"
            )
            raise

        logger.info(f"📬 Contact submission {submission.submission_id} completed")
        return submission
