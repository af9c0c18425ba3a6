import logging
from urllib.parse import urlencode

from party_rsvp.config.settings import settings
from party_rsvp.email_service.base import EmailDeliveryError, EmailServiceBase
from party_rsvp.email_service.templates import EmailTemplates
from party_rsvp.events.dtos import EventDTO
from party_rsvp.rsvps.dtos import DispatchResultDTO, EmailVariant, Language, RSVPDTO
from party_rsvp.rsvps.tokens import CancelTokenService

logger = logging.getLogger(__name__)


def build_cancel_url(app_url: str, rsvp_id, token: str) -> str:
    query = urlencode({"rsvpId": str(rsvp_id), "token": token})
    return f"{app_url.rstrip('/')}/cancel?{query}"


class NotificationDispatcher:
    """Renders and sends one RSVP email. Never touches the RSVP store."""

    def __init__(
        self,
        email_service: EmailServiceBase,
        token_service: CancelTokenService,
        app_url: str = settings.app_url,
        language: Language = settings.email_language,
    ) -> None:
        self.email_service = email_service
        self.token_service = token_service
        self.app_url = app_url
        self.language = language

    async def send(self, rsvp: RSVPDTO, event: EventDTO, variant: EmailVariant) -> DispatchResultDTO:
        token = self.token_service.mint(rsvp.id, rsvp.email)
        email = EmailTemplates.render(
            event=event,
            variant=variant,
            guest_name=rsvp.name,
            plus_one=rsvp.plus_one,
            cancel_url=build_cancel_url(self.app_url, rsvp.id, token),
            app_url=self.app_url,
            language=self.language,
        )

        try:
            email_id = await self.email_service.send_email(
                to_address=rsvp.email,
                subject=email.subject,
                html_body=email.html_body,
                text_body=email.text_body,
                email_type=variant.value,
                rsvp_id=rsvp.id,
            )
        except EmailDeliveryError as e:
            logger.warning(f"Could not send {variant.value} email for RSVP {rsvp.id}: {e.reason}")
            return DispatchResultDTO(ok=False, variant=variant, reason=e.reason)

        logger.info(f"Sent {variant.value} email for RSVP {rsvp.id}")
        return DispatchResultDTO(ok=True, variant=variant, email_id=email_id)
