"""Combo discount search.

Scans a fixed ladder of discounts from the most generous down and returns the
first one whose real profit still clears the profit floor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from .models import ComboSuggestion, PricingConfig, QuoteTotals, round_half_up
from .pricing import apply_rate
from .selection import Selection

logger = logging.getLogger(__name__)

REASON_NOTHING_SELECTED = "nothing selected"
REASON_NO_SAFE_DISCOUNT = "no safe discount found"

MIN_PROFIT_FLOOR_CENTS = 8000
MIN_PROFIT_RATE = Decimal("0.15")

_HUNDRED = Decimal("100")
_STEP = Decimal("0.5")
_MAX_DISCOUNT = Decimal("10")
_MIN_DISCOUNT = Decimal("1")


def _ladder() -> Tuple[Decimal, ...]:
    steps = int((_MAX_DISCOUNT - _MIN_DISCOUNT) / _STEP)
    return tuple(_MAX_DISCOUNT - _STEP * i for i in range(steps + 1))


# 10, 9.5, ..., 1.0
CANDIDATE_DISCOUNTS: Tuple[Decimal, ...] = _ladder()


def min_profit_cents(base_card_cents: int) -> int:
    return max(MIN_PROFIT_FLOOR_CENTS, round_half_up(MIN_PROFIT_RATE * base_card_cents))


def discounted_card_cents(base_card_cents: int, discount_percent: Decimal) -> int:
    return apply_rate(base_card_cents, discount_percent / _HUNDRED)


def profit_at_card(card_cents: int, totals: QuoteTotals, config: PricingConfig) -> int:
    net_card = apply_rate(card_cents, config.card_fee_rate)
    return net_card - totals.parts_cost_cents - totals.logistics_cents - totals.fixed_cost_cents


def suggest_combo(totals: QuoteTotals, config: PricingConfig) -> ComboSuggestion:
    """Return the largest safe discount, or a rejection carrying the reason."""
    base = totals.card_cents
    if base <= 0:
        return ComboSuggestion.rejected(REASON_NOTHING_SELECTED)

    floor = min_profit_cents(base)
    for discount in CANDIDATE_DISCOUNTS:
        card = discounted_card_cents(base, discount)
        profit = profit_at_card(card, totals, config)
        if profit >= floor:
            logger.debug("Combo accepted discount=%s card=%s profit=%s", discount, card, profit)
            return ComboSuggestion(
                discount_percent=discount,
                discounted_card_cents=card,
                min_profit_cents=floor,
                profit_cents=profit,
            )
    logger.debug("Combo rejected base=%s floor=%s", base, floor)
    return ComboSuggestion.rejected(REASON_NO_SAFE_DISCOUNT, min_profit_cents=floor)


@dataclass(frozen=True)
class EffectivePrices:
    card_cents: int
    pix_cents: int
    net_card_cents: int
    real_profit_cents: int
    discount_percent: Optional[Decimal] = None

    @property
    def combo_applied(self) -> bool:
        return self.discount_percent is not None


def effective_prices(totals: QuoteTotals, selection: Selection, config: PricingConfig) -> EffectivePrices:
    """Prices shown downstream: an active combo replaces the card price and its dependents."""
    combo = selection.active_combo
    if combo is None or combo.discounted_card_cents is None:
        return EffectivePrices(
            card_cents=totals.card_cents,
            pix_cents=totals.pix_cents,
            net_card_cents=totals.net_card_cents,
            real_profit_cents=totals.real_profit_cents,
        )
    card = combo.discounted_card_cents
    net_card = apply_rate(card, config.card_fee_rate)
    return EffectivePrices(
        card_cents=card,
        pix_cents=apply_rate(card, config.pix_discount_rate),
        net_card_cents=net_card,
        real_profit_cents=net_card - totals.parts_cost_cents - totals.logistics_cents - totals.fixed_cost_cents,
        discount_percent=combo.discount_percent,
    )
