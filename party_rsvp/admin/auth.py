import logging
import secrets

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from party_rsvp.admin.dtos import AdminContext
from party_rsvp.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# auto_error=False so missing credentials get our 401 instead of FastAPI's
security = HTTPBasic(auto_error=False)


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


async def require_admin(
    credentials: HTTPBasicCredentials | None = Depends(security),
    config: Settings = Depends(get_settings),
) -> AdminContext:
    """Authenticate an organizer with HTTP Basic credentials.

    With no admin credentials configured every request is rejected.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Basic"},
    )
    if not config.admin_username or not config.admin_password:
        logger.warning("Admin request rejected: no admin credentials configured")
        raise unauthorized
    if credentials is None:
        raise unauthorized

    # Evaluate both so timing does not reveal which one was wrong
    username_ok = _matches(credentials.username, config.admin_username)
    password_ok = _matches(credentials.password, config.admin_password)
    if not (username_ok and password_ok):
        logger.warning(f"Failed admin login for user {credentials.username!r}")
        raise unauthorized

    return AdminContext(username=credentials.username, event_scope=tuple(config.admin_event_scope))


def ensure_event_access(admin: AdminContext, event_id: str) -> None:
    if not admin.can_access(event_id):
        raise HTTPException(status_code=403, detail="No access to this event")


async def require_cron_secret(
    authorization: str | None = Header(default=None),
    x_cron_secret: str | None = Header(default=None),
    config: Settings = Depends(get_settings),
) -> None:
    """Accept ``Authorization: Bearer <secret>`` or ``X-Cron-Secret: <secret>``.

    Open when no secret is configured (local development).
    """
    if not config.cron_secret:
        return

    given = x_cron_secret or ""
    if authorization and authorization.startswith("Bearer "):
        given = authorization.removeprefix("Bearer ")
    if not given or not _matches(given, config.cron_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
