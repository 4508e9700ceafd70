"""Draft snapshots of an in-progress quote.

A draft stores the selection and client fields as JSON so a quote can be
resumed later. Loading restores the snapshot as saved, combo state included.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Tuple

from ..schemas import ClientInfo
from ..service_types.appliance_repair import (
    ComboState,
    ComboSuggestion,
    EquipmentType,
    LogisticsMode,
    LogisticsOverride,
    ManualPart,
    ManualService,
    SelectedPart,
    Selection,
)
from ..utils.json import dumps_bytes, loads

logger = logging.getLogger(__name__)

DRAFT_VERSION = 1


def dump_draft(selection: Selection, client: ClientInfo) -> bytes:
    combo = None
    if selection.combo is not None:
        suggestion = selection.combo.suggestion
        combo = {
            "discount_percent": suggestion.discount_percent,
            "discounted_card_cents": suggestion.discounted_card_cents,
            "min_profit_cents": suggestion.min_profit_cents,
            "profit_cents": suggestion.profit_cents,
            "active": selection.combo.active,
        }
    payload = {
        "version": DRAFT_VERSION,
        "equipment_type": selection.equipment_type.value,
        "service_ids": sorted(selection.service_ids),
        "parts": list(selection.parts),
        "manual_services": list(selection.manual_services),
        "manual_parts": list(selection.manual_parts),
        "logistics_override": {
            "mode": selection.logistics_override.mode.value,
            "cents": selection.logistics_override.cents,
        },
        "combo": combo,
        "client": client.model_dump(),
    }
    return dumps_bytes(payload)


def _load_combo(raw: Any) -> ComboState | None:
    if not raw:
        return None
    suggestion = ComboSuggestion(
        discount_percent=Decimal(str(raw["discount_percent"])),
        discounted_card_cents=int(raw["discounted_card_cents"]),
        min_profit_cents=int(raw.get("min_profit_cents") or 0),
        profit_cents=raw.get("profit_cents"),
    )
    return ComboState(suggestion=suggestion, active=bool(raw.get("active")))


def load_draft(raw: bytes | str) -> Tuple[Selection, ClientInfo]:
    """Rebuild ``(selection, client)`` from :func:`dump_draft` output.

    Raises ``ValueError`` for anything that is not a readable draft.
    """
    try:
        data = loads(raw)
        if not isinstance(data, dict):
            raise ValueError("draft must be a JSON object")
        override = data.get("logistics_override") or {}
        selection = Selection(
            equipment_type=EquipmentType(data["equipment_type"]),
            service_ids=frozenset(str(s) for s in data.get("service_ids", [])),
            parts=tuple(SelectedPart(**p) for p in data.get("parts", [])),
            manual_services=tuple(ManualService(**s) for s in data.get("manual_services", [])),
            manual_parts=tuple(ManualPart(**p) for p in data.get("manual_parts", [])),
            logistics_override=LogisticsOverride(
                LogisticsMode(override.get("mode", LogisticsMode.AUTO.value)),
                int(override.get("cents") or 0),
            ),
            combo=_load_combo(data.get("combo")),
        )
        client = ClientInfo(**(data.get("client") or {}))
    except (ValueError, KeyError, TypeError, InvalidOperation) as exc:
        logger.warning("Rejected malformed draft: %s", exc)
        raise ValueError(f"malformed draft: {exc}") from exc
    return selection, client
