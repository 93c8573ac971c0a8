"""Price-drop emails delivered through the Resend HTTP API."""
import logging
from html import escape

import httpx

from steamwatch.currency import format_price
from steamwatch.notifications.base import Notifier, PriceDropEmail

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <style>
      body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
      .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
      .header {{ background: #667eea; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
      .content {{ background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }}
      .game-name {{ font-size: 24px; font-weight: bold; margin-bottom: 20px; color: #667eea; }}
      .price-info {{ background: white; padding: 20px; border-radius: 8px; margin: 20px 0; }}
      .current-price {{ font-size: 32px; font-weight: bold; color: #10b981; }}
      .discount {{ background: #ef4444; color: white; padding: 5px 15px; border-radius: 5px; display: inline-block; margin: 10px 0; }}
      .button {{ display: inline-block; padding: 12px 30px; background: #667eea; color: white; text-decoration: none; border-radius: 5px; margin: 20px 0; }}
      .footer {{ text-align: center; margin-top: 30px; color: #666; font-size: 12px; }}
    </style>
  </head>
  <body>
    <div class="container">
      <div class="header"><h1>🎮 Price Alert!</h1></div>
      <div class="content">
        <div class="game-name">{game_name}</div>
        <div class="price-info">
          <div class="current-price">{current_price}</div>
          {discount}
          {previous}
        </div>
        <p>Great news! This game is now on sale. Don't miss out!</p>
        <div style="text-align: center;">
          <a href="{game_url}" class="button">View Details</a>
          <a href="{steam_url}" class="button" style="background: #1b2838; margin-left: 10px;">Buy on Steam</a>
        </div>
        <div class="footer">
          <p>You're receiving this because you set up a price alert for this game.</p>
          <p>To manage your alerts, visit the game page and click the bell icon.</p>
        </div>
      </div>
    </div>
  </body>
</html>
"""


def render_subject(payload: PriceDropEmail) -> str:
    return f"🎮 {payload.game_name} is on sale!"


def render_html(payload: PriceDropEmail) -> str:
    discount = ""
    if payload.discount_percent:
        discount = f'<div class="discount">-{payload.discount_percent}% OFF</div>'

    previous = ""
    if payload.previous_price and payload.previous_price > payload.current_price:
        was = format_price(payload.previous_price, payload.currency)
        previous = (
            '<p style="color: #666; margin-top: 10px;">'
            f'Was: <span style="text-decoration: line-through;">{escape(was)}</span></p>'
        )

    return HTML_TEMPLATE.format(
        game_name=escape(payload.game_name),
        current_price=escape(format_price(payload.current_price, payload.currency)),
        discount=discount,
        previous=previous,
        game_url=escape(payload.game_url, quote=True),
        steam_url=escape(payload.steam_url, quote=True),
    )


def render_text(payload: PriceDropEmail) -> str:
    lines = [
        f"Price Alert: {payload.game_name}",
        "",
        f"Current Price: {format_price(payload.current_price, payload.currency)}",
    ]
    if payload.discount_percent:
        lines.append(f"Discount: {payload.discount_percent}%")
    if payload.previous_price and payload.previous_price > payload.current_price:
        lines.append(f"Previous Price: {format_price(payload.previous_price, payload.currency)}")
    lines += [
        "",
        f"View Details: {payload.game_url}",
        f"Buy on Steam: {payload.steam_url}",
        "",
        "You're receiving this because you set up a price alert for this game.",
    ]
    return "\n".join(lines)


class ResendNotifier(Notifier):
    """Send price-drop emails with Resend.

    Without an API key or sender address every send logs a warning and
    returns False.
    """

    def __init__(
        self,
        api_key: str | None,
        sender: str | None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.sender)

    async def send(self, to: str, payload: PriceDropEmail) -> bool:
        if not self.configured:
            logger.warning("Email service not configured. Set RESEND_API_KEY and EMAIL_FROM")
            return False

        try:
            response = await self.client.post(
                RESEND_URL,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.sender,
                    "to": to,
                    "subject": render_subject(payload),
                    "html": render_html(payload),
                    "text": render_text(payload),
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error sending price drop email to {to}: {e}")
            return False

        return True
