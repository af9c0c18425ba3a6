import logging
from typing import Protocol
from uuid import UUID

import httpx

from party_rsvp.email_service.base import EmailDeliveryError, EmailServiceBase
from party_rsvp.email_service.email_logger import EmailLogger, NoOpEmailLogger

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    email_timeout_seconds: float

    @property
    def sender(self) -> str: ...


class ResendEmailService(EmailServiceBase):
    def __init__(
        self,
        config: ResendEmailConfig,
        email_logger: EmailLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self.email_logger = email_logger or NoOpEmailLogger()
        self._http_client_class = http_client_class

    async def send_email(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        rsvp_id: UUID | None = None,
    ) -> str | None:
        """Send email via Resend and log via injected logger."""

        # Log attempt before sending
        log_uuid = await self.email_logger.log_email_attempt(
            to_address=to_address,
            from_address=self._config.sender,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type=email_type,
            rsvp_id=rsvp_id,
        )

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    RESEND_EMAILS_URL,
                    headers={
                        "Authorization": f"Bearer {self._config.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self._config.sender,
                        "to": [to_address],
                        "subject": subject,
                        "html": html_body,
                        "text": text_body,
                    },
                    timeout=self._config.email_timeout_seconds,
                )
                response.raise_for_status()
                resend_email_id = response.json().get("id")
        except httpx.HTTPStatusError as e:
            reason = f"Resend rejected the message (HTTP {e.response.status_code})"
            await self._fail(log_uuid, to_address, reason, e)
        except httpx.TimeoutException as e:
            await self._fail(log_uuid, to_address, "Timed out talking to Resend", e)
        except httpx.HTTPError as e:
            await self._fail(log_uuid, to_address, "Could not reach Resend", e)
        except (ValueError, AttributeError) as e:
            # 2xx with a body that is not a JSON object
            await self._fail(log_uuid, to_address, "Unexpected reply from Resend", e)

        await self.email_logger.log_email_success(
            log_uuid=log_uuid,
            resend_email_id=resend_email_id,
        )
        return resend_email_id

    async def _fail(self, log_uuid: UUID, to_address: str, reason: str, error: Exception) -> None:
        logger.error(f"Failed to send email to {to_address}: {error!r}")
        await self.email_logger.log_email_failure(log_uuid=log_uuid, error_message=str(error))
        raise EmailDeliveryError(reason) from error
