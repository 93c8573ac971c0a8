"""Notification abstractions for price-drop alerts."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(slots=True)
class PriceDropEmail:
    """Everything needed to render a price-drop email."""

    game_name: str
    game_url: str
    steam_url: str
    current_price: int
    currency: str
    discount_percent: int | None = None
    previous_price: int | None = None
    target_price: int | None = None
    min_discount_percent: int | None = None


class Notifier(ABC):
    """Base class for delivering price-drop alerts."""

    @abstractmethod
    async def send(self, to: str, payload: PriceDropEmail) -> bool:
        """Deliver ``payload`` to ``to``. Returns False on any delivery failure."""
