"""Admission of manually typed services and parts.

Values arriving from forms are parsed and validated here; nothing that fails
these checks may reach a :class:`Selection`.
"""

from __future__ import annotations

import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .models import ALLOWED_MARGINS, ManualPart, ManualService, round_half_up

_NON_NUMERIC = re.compile(r"[^\d.,]")
_THOUSANDS_ONLY = re.compile(r"^\d{1,3}\.\d{3}$")


class AdmissionError(ValueError):
    """A manual entry was rejected before reaching the selection."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def parse_brl_to_cents(value: Any) -> int:
    """Parse a Brazilian-formatted amount (``"1.234,56"``, ``"R$ 80"``) into cents.

    Returns 0 for empty, unparseable or non-positive input.
    """
    if value is None:
        return 0
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        amount = Decimal(str(value))
    else:
        if "-" in str(value):
            return 0
        s = _NON_NUMERIC.sub("", str(value))
        if "," in s:
            # Comma is the decimal separator; dots are thousands separators.
            s = s.replace(".", "").replace(",", ".")
        elif s.count(".") > 1 or _THOUSANDS_ONLY.match(s):
            s = s.replace(".", "")
        if not s:
            return 0
        try:
            amount = Decimal(s)
        except InvalidOperation:
            return 0
    if not amount.is_finite() or amount <= 0:
        return 0
    return round_half_up(amount * 100)


def new_entry_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _clean_name(name: Any) -> str:
    cleaned = str(name or "").strip()
    if not cleaned:
        raise AdmissionError("name", "Name is required")
    return cleaned


def _positive_cents(field: str, cents: Optional[int], raw: Any) -> int:
    if cents is None:
        cents = parse_brl_to_cents(raw)
    if isinstance(cents, bool) or int(cents) <= 0:
        raise AdmissionError(field, "Enter a valid amount greater than zero")
    return int(cents)


def admit_manual_service(
    name: Any,
    value: Any = None,
    *,
    labor_cents: Optional[int] = None,
    warranty_days: Any = 0,
    entry_id: Optional[str] = None,
) -> ManualService:
    """Validate a manual service; ``value`` is the typed amount, ``labor_cents`` a pre-parsed one."""
    clean = _clean_name(name)
    cents = _positive_cents("labor_cents", labor_cents, value)
    try:
        days = int(warranty_days or 0)
    except (TypeError, ValueError):
        raise AdmissionError("warranty_days", "Warranty days must be a whole number")
    if days < 0:
        raise AdmissionError("warranty_days", "Warranty days cannot be negative")
    return ManualService(
        id=entry_id or new_entry_id("ms"),
        name=clean,
        labor_cents=cents,
        warranty_days=days,
    )


def check_margin(margin_percent: Any) -> int:
    try:
        margin = int(margin_percent)
    except (TypeError, ValueError):
        raise AdmissionError("margin_percent", "Margin must be a number")
    if margin not in ALLOWED_MARGINS:
        raise AdmissionError(
            "margin_percent",
            f"Margin must be one of {', '.join(str(m) for m in ALLOWED_MARGINS)}",
        )
    return margin


def admit_manual_part(
    name: Any,
    cost: Any = None,
    *,
    cost_cents: Optional[int] = None,
    margin_percent: Any = 40,
    needs_supplier_pickup: bool = False,
    entry_id: Optional[str] = None,
) -> ManualPart:
    clean = _clean_name(name)
    cents = _positive_cents("cost_cents", cost_cents, cost)
    margin = check_margin(margin_percent)
    return ManualPart(
        id=entry_id or new_entry_id("mp"),
        name=clean,
        cost_cents=cents,
        margin_percent=margin,
        needs_supplier_pickup=bool(needs_supplier_pickup),
    )
