from abc import ABC, abstractmethod
from uuid import UUID


class EmailDeliveryError(Exception):
    """Raised by a transport when the provider did not accept the message."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_email(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        rsvp_id: UUID | None = None,
    ) -> str | None:
        """Send one message.

        Returns:
            The provider's message id, when the provider returns one

        Raises:
            EmailDeliveryError: the message was not accepted
        """
        raise NotImplementedError
