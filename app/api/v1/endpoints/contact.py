import logging
from fastapi import APIRouter, Depends, Request

from app.constants.constants import CONTACT_SUCCESS_MESSAGE
from app.core.config import settings
from app.core.exceptions import ContactServiceError
from app.core.limiter import limiter
from app.api.v1.dependencies import get_contact_pipeline
from app.schemas.submissionSchema import ContactSubmissionRequest, ContactSubmissionResponse
from app.services.ContactPipeline import ContactPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["contact"])


@router.post("/contact", response_model=ContactSubmissionResponse)
@limiter.limit(settings.CONTACT_RATE_LIMIT)
async def submit_contact_form(
    request: Request,
    payload: ContactSubmissionRequest,
    pipeline: ContactPipeline = Depends(get_contact_pipeline)
):
    """
    Submit the portfolio contact form.

    Validates the fields, stores the submission, then emails the site owner
    and sends the submitter an auto-reply. Failures are turned into
    ``{"error": ...}`` responses by the app's ContactServiceError handler;
    a notification failure is reported even though the submission is kept.
    """
    try:
        await pipeline.submit(payload.name, payload.email, payload.message)
    except ContactServiceError:
        raise
    except Exception:
        logger.exception("Unexpected error processing contact form")
        raise ContactServiceError()

    return ContactSubmissionResponse(message=CONTACT_SUCCESS_MESSAGE)
