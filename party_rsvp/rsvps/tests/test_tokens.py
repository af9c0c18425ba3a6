import hashlib
from uuid import UUID

import pytest

from party_rsvp.rsvps.tokens import TOKEN_LENGTH, CancelTokenService

RSVP_ID = UUID("6f1c2b9e-3d4a-4f5b-8c7d-9e0f1a2b3c4d")
EMAIL = "ana@example.com"


@pytest.fixture
def token_service() -> CancelTokenService:
    return CancelTokenService(secret="s3cret")


def test_mint_is_truncated_sha256_of_id_email_and_secret(token_service):
    expected = hashlib.sha256(f"{RSVP_ID}-{EMAIL}-s3cret".encode()).hexdigest()[:32]

    assert token_service.mint(RSVP_ID, EMAIL) == expected
    assert len(expected) == TOKEN_LENGTH


def test_mint_is_deterministic(token_service):
    assert token_service.mint(RSVP_ID, EMAIL) == token_service.mint(str(RSVP_ID), EMAIL)


def test_verify_accepts_minted_token(token_service):
    token = token_service.mint(RSVP_ID, EMAIL)

    assert token_service.verify(token, RSVP_ID, EMAIL) is True


def test_verify_rejects_any_single_character_change(token_service):
    token = token_service.mint(RSVP_ID, EMAIL)

    for position in range(len(token)):
        replacement = "0" if token[position] != "0" else "1"
        tampered = token[:position] + replacement + token[position + 1 :]
        assert token_service.verify(tampered, RSVP_ID, EMAIL) is False


def test_verify_rejects_token_for_another_email(token_service):
    token = token_service.mint(RSVP_ID, EMAIL)

    assert token_service.verify(token, RSVP_ID, "other@example.com") is False


def test_rotating_the_secret_invalidates_tokens(token_service):
    token = token_service.mint(RSVP_ID, EMAIL)

    assert CancelTokenService(secret="rotated").verify(token, RSVP_ID, EMAIL) is False


@pytest.mark.parametrize("token", [None, "", 12345, "short", "ü" * TOKEN_LENGTH])
def test_verify_never_raises_on_garbage(token_service, token):
    assert token_service.verify(token, RSVP_ID, EMAIL) is False
