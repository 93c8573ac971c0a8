"""Price-drop decision rules for a single watchlist entry.

Every rule is evaluated; none short-circuits the others. Each matching rule
adds a reason, the last one is the reported reason, and the entry is notified
when any rule matched and the entry is not cooling down.

Threshold and target rules only fire on the transition into the qualifying
state, so repeated passes over unchanged prices stay quiet. Only the two newest
snapshots are considered.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol

from steamwatch.timeutils import as_utc

RELATIVE_DROP_PERCENT = 10.0
DEFAULT_COOLDOWN = timedelta(hours=24)


class Snapshot(Protocol):
    final_price: int
    discount_percent: int | None
    is_on_sale: bool


class Trigger(str, Enum):
    SALE_STARTED = "sale_started"
    DISCOUNT_THRESHOLD = "discount_threshold"
    TARGET_PRICE = "target_price"
    RELATIVE_DROP = "relative_drop"


@dataclass(frozen=True)
class MatchedRule:
    trigger: Trigger
    description: str


@dataclass(frozen=True)
class PriceDropDecision:
    """Outcome of evaluating one entry."""

    matches: tuple[MatchedRule, ...] = field(default_factory=tuple)
    cooling_down: bool = False

    @property
    def matched(self) -> bool:
        return bool(self.matches)

    @property
    def notify(self) -> bool:
        return self.matched and not self.cooling_down

    @property
    def reasons(self) -> list[str]:
        return [m.description for m in self.matches]

    @property
    def reason(self) -> str | None:
        """Description of the last matching rule."""
        return self.matches[-1].description if self.matches else None

    @property
    def triggers(self) -> set[Trigger]:
        return {m.trigger for m in self.matches}


def evaluate_price_drop(
    current: Snapshot | None,
    previous: Snapshot | None,
    *,
    min_discount_percent: int | None,
    target_price: int | None,
    last_notified_at: datetime | None,
    now: datetime,
    cooldown: timedelta = DEFAULT_COOLDOWN,
) -> PriceDropDecision | None:
    """Decide whether an entry should be notified. None when there is no price yet."""
    if current is None:
        return None

    matches: list[MatchedRule] = []

    # Game just went on sale
    if current.is_on_sale and (previous is None or not previous.is_on_sale):
        matches.append(MatchedRule(Trigger.SALE_STARTED, "Game just went on sale"))

    # Discount crossed the subscriber's minimum
    if (
        min_discount_percent is not None
        and current.discount_percent is not None
        and current.discount_percent >= min_discount_percent
        and (
            previous is None
            or previous.discount_percent is None
            or previous.discount_percent < min_discount_percent
        )
    ):
        matches.append(
            MatchedRule(Trigger.DISCOUNT_THRESHOLD, f"Discount reached {min_discount_percent}%")
        )

    # Price fell to or below the target
    if (
        target_price is not None
        and current.final_price <= target_price
        and (previous is None or previous.final_price > target_price)
    ):
        matches.append(MatchedRule(Trigger.TARGET_PRICE, "Price dropped to target price"))

    # Significant drop while on sale
    if (
        previous is not None
        and current.final_price < previous.final_price
        and current.is_on_sale
    ):
        drop = (previous.final_price - current.final_price) / previous.final_price * 100
        if drop >= RELATIVE_DROP_PERCENT:
            matches.append(MatchedRule(Trigger.RELATIVE_DROP, f"Price dropped by {drop:.1f}%"))

    cooling_down = (
        last_notified_at is not None
        and as_utc(now) - as_utc(last_notified_at) < cooldown
    )

    return PriceDropDecision(matches=tuple(matches), cooling_down=cooling_down)
