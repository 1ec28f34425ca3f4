"""Microsoft Graph Client for outgoing contact form emails."""

import httpx
import logging
from datetime import datetime, timedelta

from app.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class MicrosoftGraphClientPublic:
    """
    Client for sending emails to external/public recipients.

    Uses a single authorized sender mailbox. One instance is created at
    startup and shared across requests; the access token is cached until
    shortly before it expires.
    """

    BASE_URL = "https://graph.microsoft.com/v1.0"
    TOKEN_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        default_sender: str,
        transport: httpx.AsyncBaseTransport = None
    ):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.default_sender = default_sender
        self._access_token = None
        self._token_expiry = None
        self._transport = transport

    async def _get_access_token(self, force_refresh: bool = False) -> str:
        """Get access token for application (not user-delegated)."""
        if not force_refresh and self._access_token and self._token_expiry:
            if datetime.utcnow() < self._token_expiry - timedelta(minutes=5):
                return self._access_token

        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": "https://graph.microsoft.com/.default",
            "grant_type": "client_credentials"
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(self.TOKEN_URL.format(tenant_id=self.tenant_id), data=data)
        except httpx.HTTPError as e:
            logger.error(f"❌ Could not reach the Microsoft token endpoint: {e}")
            raise NotificationError() from e

        if response.status_code != 200:
            logger.error(f"❌ Failed to get Graph access token: {response.status_code} - {response.text}")
            raise NotificationError()

        token_data = response.json()
        self._access_token = token_data["access_token"]
        expires_in = token_data.get("expires_in", 3600)
        self._token_expiry = datetime.utcnow() + timedelta(seconds=expires_in)

        logger.info(f"✅ New Graph access token obtained, expires in {expires_in}s")
        return self._access_token

    async def clear_token_cache(self):
        """Force clear the token cache to get fresh permissions."""
        self._access_token = None
        self._token_expiry = None

    async def send_email(
        self,
        to_emails: list[str],
        subject: str,
        body_html: str,
        reply_to: str = None,
        retry_with_refresh: bool = True
    ) -> dict:
        """
        Send one HTML email from the authorized sender mailbox.

        Args:
            to_emails: List of recipient email addresses
            subject: Email subject
            body_html: HTML body content
            reply_to: Optional reply-to address
            retry_with_refresh: If True, retry once with fresh token on 403

        Returns:
            dict with status information

        Raises:
            NotificationError: if Graph rejects the message or cannot be reached.
        """
        token = await self._get_access_token()

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json"
        }

        message = {
            "message": {
                "subject": subject,
                "body": {
                    "contentType": "HTML",
                    "content": body_html
                },
                "toRecipients": [
                    {"emailAddress": {"address": email}}
                    for email in to_emails
                ]
            },
            "saveToSentItems": "true"
        }

        if reply_to:
            message["message"]["replyTo"] = [
                {"emailAddress": {"address": reply_to}}
            ]

        url = f"{self.BASE_URL}/users/{self.default_sender}/sendMail"

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(url, headers=headers, json=message, timeout=30.0)
        except httpx.HTTPError as e:
            logger.error(f"❌ Could not reach Graph to send email to {', '.join(to_emails)}: {e}")
            raise NotificationError() from e

        if response.status_code == 403 and retry_with_refresh:
            logger.warning("⚠️ Email send got 403, refreshing token and retrying...")
            await self.clear_token_cache()
            return await self.send_email(
                to_emails, subject, body_html, reply_to, retry_with_refresh=False
            )

        if response.status_code not in [200, 202]:
            logger.error(f"❌ Failed to send email: {response.status_code} - {response.text}")
            raise NotificationError()

        logger.info(f"✅ Email sent to {', '.join(to_emails)}")

        return {
            "status": "sent",
            "from": self.default_sender,
            "to": to_emails,
            "reply_to": reply_to,
            "subject": subject
        }
