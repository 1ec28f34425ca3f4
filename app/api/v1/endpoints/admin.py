"""Admin endpoints for reviewing contact submissions."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.constants.constants import (
    FETCH_CONTACTS_FAILURE_MESSAGE,
    STATUS_UPDATED_MESSAGE,
    UPDATE_CONTACT_FAILURE_MESSAGE,
)
from app.core.config import settings
from app.core.exceptions import ContactServiceError, StoreError
from app.core.security import ADMIN_COOKIE_NAME, ADMIN_ROLE, create_jwt_token, require_admin, verify_api_key
from app.api.v1.dependencies import get_submission_store
from app.schemas.submissionSchema import (
    AdminSessionRequest,
    StatusUpdateRequest,
    StatusUpdateResponse,
    SubmissionDetailResponse,
    SubmissionListResponse,
    SubmissionStatsResponse,
)
from app.services.SubmissionStore import SubmissionStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"]
)


@router.post("/session")
async def create_admin_session(payload: AdminSessionRequest, response: Response):
    """
    Exchange the admin API key for a session cookie.

    The dashboard calls this once; later admin requests carry the cookie.
    """
    if not verify_api_key(payload.api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    token = create_jwt_token({"sub": ADMIN_ROLE, "role": ADMIN_ROLE})
    response.set_cookie(
        key=ADMIN_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="none" if settings.COOKIE_SECURE else "lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )
    return {"success": True, "message": "Admin session started"}


@router.get("/contacts", response_model=SubmissionListResponse)
async def list_contacts(
    _: str = Depends(require_admin),
    store: SubmissionStore = Depends(get_submission_store)
):
    """Get every contact submission, most recent first. No pagination."""
    try:
        submissions = await store.list_all()
    except StoreError as e:
        raise StoreError(FETCH_CONTACTS_FAILURE_MESSAGE) from e
    except Exception as e:
        logger.exception("Error fetching contacts")
        raise StoreError(FETCH_CONTACTS_FAILURE_MESSAGE) from e

    return SubmissionListResponse(contacts=[s.to_dict() for s in submissions])


@router.get("/contacts/stats", response_model=SubmissionStatsResponse)
async def get_contact_stats(
    _: str = Depends(require_admin),
    store: SubmissionStore = Depends(get_submission_store)
):
    """Totals per status for the dashboard summary cards."""
    try:
        counts = await store.count_by_status()
    except ContactServiceError as e:
        raise StoreError(FETCH_CONTACTS_FAILURE_MESSAGE) from e

    return SubmissionStatsResponse(stats=counts)


@router.get("/contacts/{contact_id}", response_model=SubmissionDetailResponse)
async def get_contact(
    contact_id: str,
    _: str = Depends(require_admin),
    store: SubmissionStore = Depends(get_submission_store)
):
    submission = await store.get(contact_id)
    return SubmissionDetailResponse(contact=submission.to_dict())


@router.patch("/contacts/{contact_id}", response_model=StatusUpdateResponse)
async def update_contact_status(
    contact_id: str,
    payload: StatusUpdateRequest,
    _: str = Depends(require_admin),
    store: SubmissionStore = Depends(get_submission_store)
):
    """
    Set a submission's status to new, read or replied.

    Malformed ids and unknown statuses are rejected with 400 before the
    database is queried; unknown ids return 404. Last write wins.
    """
    try:
        await store.update_status(contact_id, payload.status)
    except StoreError as e:
        raise StoreError(UPDATE_CONTACT_FAILURE_MESSAGE) from e
    except ContactServiceError:
        raise
    except Exception as e:
        logger.exception(f"Error updating contact {contact_id}")
        raise StoreError(UPDATE_CONTACT_FAILURE_MESSAGE) from e

    return StatusUpdateResponse(message=STATUS_UPDATED_MESSAGE)
