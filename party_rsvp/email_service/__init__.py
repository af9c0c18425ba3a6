from party_rsvp.config.settings import settings
from party_rsvp.email_service.base import EmailDeliveryError, EmailServiceBase
from party_rsvp.email_service.email_logger import SQLEmailLogger
from party_rsvp.email_service.resend_service import ResendEmailService
from party_rsvp.email_service.smtp_service import SMTPEmailService
from party_rsvp.email_service.templates import EmailTemplates


def get_email_service() -> EmailServiceBase:
    if settings.resend_api_key:
        email_logger = SQLEmailLogger()
        return ResendEmailService(config=settings, email_logger=email_logger)
    return SMTPEmailService()


__all__ = [
    "EmailDeliveryError",
    "EmailServiceBase",
    "EmailTemplates",
    "get_email_service",
]
