"""Cron endpoint authentication."""
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from steamwatch.config import Settings, get_settings

bearer_scheme = HTTPBearer(auto_error=False)


class CronUnauthorized(Exception):
    """Raised when a cron trigger carries a missing or wrong bearer secret."""


async def verify_cron_secret(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> None:
    """Require ``Authorization: Bearer <cron_secret>`` when a secret is configured."""
    if not settings.cron_secret:
        return

    if credentials is None or credentials.credentials != settings.cron_secret:
        raise CronUnauthorized()
