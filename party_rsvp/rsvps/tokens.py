"""Cancel/edit tokens for guest self-service links.

A token is the first 32 hex characters of SHA-256 over
``"{rsvp_id}-{email}-{secret}"``. Nothing is stored or looked up: a link stays
valid until the guest's email changes or the secret is rotated.
"""

import hashlib
import hmac
from uuid import UUID

from party_rsvp.config.settings import settings

TOKEN_LENGTH = 32


class CancelTokenService:
    def __init__(self, secret: str) -> None:
        self._secret = secret

    def mint(self, rsvp_id: UUID | str, email: str) -> str:
        data = f"{rsvp_id}-{email}-{self._secret}"
        return hashlib.sha256(data.encode("utf-8")).hexdigest()[:TOKEN_LENGTH]

    def verify(self, token: str | None, rsvp_id: UUID | str, email: str) -> bool:
        if not isinstance(token, str) or len(token) != TOKEN_LENGTH:
            return False
        if not rsvp_id or not isinstance(email, str):
            return False
        expected = self.mint(rsvp_id, email)
        return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def get_token_service() -> CancelTokenService:
    return CancelTokenService(secret=settings.cancel_token_secret)
