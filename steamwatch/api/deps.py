"""Shared request dependencies for outbound clients."""
from typing import AsyncIterator

from fastapi import Depends

from steamwatch.clients.steam import SteamStoreClient
from steamwatch.config import Settings, get_settings
from steamwatch.notifications.base import Notifier
from steamwatch.notifications.email import ResendNotifier


async def get_steam_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[SteamStoreClient]:
    async with SteamStoreClient(timeout=settings.http_timeout_seconds) as client:
        yield client


async def get_notifier(settings: Settings = Depends(get_settings)) -> AsyncIterator[Notifier]:
    async with ResendNotifier(
        api_key=settings.resend_api_key,
        sender=settings.email_from,
        timeout=settings.http_timeout_seconds,
    ) as notifier:
        yield notifier
