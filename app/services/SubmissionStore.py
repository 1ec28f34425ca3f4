"""Persistence for contact form submissions."""

import uuid
import logging
from typing import Dict, List
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import INVALID_STATUS_MESSAGE, SubmissionStatus
from app.core.exceptions import InvalidIdError, NotFoundError, StoreError, ValidationError
from app.models.base import utcnow
from app.models.submission import Submission

logger = logging.getLogger(__name__)


def parse_submission_id(submission_id: str) -> str:
    """
    Return the canonical form of a submission id.

    Raises:
        InvalidIdError: if the value is not a UUID string.
    """
    try:
        return str(uuid.UUID(str(submission_id)))
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdError()


def parse_status(status) -> SubmissionStatus:
    try:
        return SubmissionStatus(status)
    except (ValueError, TypeError):
        raise ValidationError(INVALID_STATUS_MESSAGE)


class SubmissionStore:
    """
    Owns the canonical copy of every submission.

    Wraps one database session; callers get detached, disposable copies.
    Database failures surface as StoreError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, email: str, message: str) -> Submission:
        """Persist a new submission with status "new"."""
        now = utcnow()
        submission = Submission(
            submission_id=str(uuid.uuid4()),
            name=name,
            email=email,
            message=message,
            status=SubmissionStatus.new,
            created_at=now,
            updated_at=now
        )
        self.session.add(submission)

        try:
            await self.session.commit()
        except (SQLAlchemyError, OSError) as e:
            await self.session.rollback()
            logger.error(f"Failed to save submission from {email}: {e}")
            raise StoreError() from e

        logger.info(f"📥 Stored submission {submission.submission_id}")
        return submission

    async def list_all(self) -> List[Submission]:
        """Return every submission, most recent first."""
        try:
            result = await self.session.execute(
                select(Submission).order_by(Submission.created_at.desc())
            )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to list submissions: {e}")
            raise StoreError() from e
        return list(result.scalars().all())

    async def get(self, submission_id: str) -> Submission:
        submission_id = parse_submission_id(submission_id)
        submission = await self._fetch(submission_id)
        if submission is None:
            raise NotFoundError()
        return submission

    async def update_status(self, submission_id: str, new_status) -> Submission:
        """
        Set the status of an existing submission and stamp updated_at.

        The id and the status are both checked before the database is touched.
        Setting the current status again is accepted.

        Raises:
            InvalidIdError: malformed id.
            ValidationError: unknown status value.
            NotFoundError: no submission with that id.
            StoreError: database failure.
        """
        submission_id = parse_submission_id(submission_id)
        status = parse_status(new_status)

        submission = await self._fetch(submission_id)
        if submission is None:
            raise NotFoundError()

        submission.status = status
        submission.updated_at = utcnow()
        try:
            await self.session.commit()
        except (SQLAlchemyError, OSError) as e:
            await self.session.rollback()
            logger.error(f"Failed to update submission {submission_id}: {e}")
            raise StoreError() from e

        logger.info(f"✏️ Submission {submission_id} marked as {status.value}")
        return submission

    async def count_by_status(self) -> Dict[str, int]:
        """Totals for the admin dashboard summary cards."""
        try:
            result = await self.session.execute(
                select(Submission.status, func.count(Submission.submission_id))
                .group_by(Submission.status)
            )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to count submissions: {e}")
            raise StoreError() from e

        counts = {status.value: 0 for status in SubmissionStatus}
        for status, count in result.all():
            counts[SubmissionStatus(status).value] = count
        counts["total"] = sum(counts.values())
        return counts

    async def _fetch(self, submission_id: str):
        try:
            result = await self.session.execute(
                select(Submission).where(Submission.submission_id == submission_id)
            )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to load submission {submission_id}: {e}")
            raise StoreError() from e
        return result.scalar_one_or_none()
