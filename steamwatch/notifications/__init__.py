"""Price-drop notifications."""
from steamwatch.notifications.base import Notifier, PriceDropEmail
from steamwatch.notifications.email import ResendNotifier

__all__ = [
    "Notifier",
    "PriceDropEmail",
    "ResendNotifier",
]
