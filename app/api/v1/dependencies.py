"""Shared FastAPI dependencies: store, email client and pipeline wiring."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import aget_db
from app.services.ContactPipeline import ContactPipeline
from app.services.MicrosoftGraphClientPublic import MicrosoftGraphClientPublic
from app.services.SubmissionStore import SubmissionStore


def build_graph_client() -> MicrosoftGraphClientPublic:
    """Create the Microsoft Graph client from settings."""
    return MicrosoftGraphClientPublic(
        tenant_id=settings.MICROSOFT_TENANT_ID,
        client_id=settings.MICROSOFT_CLIENT_ID,
        client_secret=settings.MICROSOFT_CLIENT_SECRET,
        default_sender=settings.EMAIL_FROM
    )


def get_email_client(request: Request) -> MicrosoftGraphClientPublic:
    """Return the process-wide email client, creating it on first use."""
    client = getattr(request.app.state, "email_client", None)
    if client is None:
        client = build_graph_client()
        request.app.state.email_client = client
    return client


def get_submission_store(db: AsyncSession = Depends(aget_db)) -> SubmissionStore:
    return SubmissionStore(db)


def get_contact_pipeline(
    store: SubmissionStore = Depends(get_submission_store),
    email_client=Depends(get_email_client)
) -> ContactPipeline:
    return ContactPipeline(
        store=store,
        graph_client=email_client,
        admin_email=settings.ADMIN_EMAIL,
        owner_name=settings.SITE_OWNER_NAME
    )
