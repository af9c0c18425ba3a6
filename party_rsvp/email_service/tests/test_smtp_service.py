import smtplib

import pytest

from party_rsvp.email_service.base import EmailDeliveryError
from party_rsvp.email_service.smtp_service import SMTPEmailService


@pytest.fixture
def smtp_service() -> SMTPEmailService:
    return SMTPEmailService()


def test_message_has_text_and_html_parts(smtp_service):
    msg = smtp_service._create_message(
        to_address="ana@example.com",
        subject="Recordatorio - Fiesta",
        html_body="<p>¡Hola!</p>",
        text_body="¡Hola!",
    )

    assert msg["To"] == "ana@example.com"
    assert msg["From"] == smtp_service.from_address
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]
    assert msg.get_payload()[1].get_payload(decode=True).decode("utf-8") == "<p>¡Hola!</p>"


async def test_send_email_hands_message_to_smtp(smtp_service, monkeypatch):
    sent = []
    monkeypatch.setattr(smtp_service, "_send", sent.append)

    email_id = await smtp_service.send_email(
        to_address="ana@example.com",
        subject="Hola",
        html_body="<p>Hola</p>",
        text_body="Hola",
        email_type="reminder",
    )

    assert email_id is None
    assert sent[0]["Subject"] == "Hola"


@pytest.mark.parametrize("error", [smtplib.SMTPRecipientsRefused({}), ConnectionRefusedError()])
async def test_smtp_failures_raise_delivery_error(smtp_service, monkeypatch, error):
    def fail(msg):
        raise error

    monkeypatch.setattr(smtp_service, "_send", fail)

    with pytest.raises(EmailDeliveryError) as exc_info:
        await smtp_service.send_email(
            to_address="ana@example.com",
            subject="Hola",
            html_body="<p>Hola</p>",
            text_body="Hola",
            email_type="reminder",
        )

    assert exc_info.value.reason == "SMTP delivery failed"
