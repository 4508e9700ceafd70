from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional, Tuple

from .models import (
    CatalogPart,
    ComboState,
    ComboSuggestion,
    EquipmentType,
    LogisticsOverride,
    ManualPart,
    ManualService,
    SelectedPart,
)


@dataclass(frozen=True)
class Selection:
    """The quote being assembled for one equipment type.

    Instances are immutable. Every mutating operation returns a new
    ``Selection`` through :meth:`_evolve`, which drops any combo suggestion
    computed for the previous state.
    """

    equipment_type: EquipmentType
    service_ids: FrozenSet[str] = frozenset()
    parts: Tuple[SelectedPart, ...] = ()
    manual_services: Tuple[ManualService, ...] = ()
    manual_parts: Tuple[ManualPart, ...] = ()
    logistics_override: LogisticsOverride = field(default_factory=LogisticsOverride.auto)
    combo: Optional[ComboState] = None

    @classmethod
    def start(cls, equipment: EquipmentType | str) -> "Selection":
        return cls(equipment_type=EquipmentType(equipment))

    def _evolve(self, **changes) -> "Selection":
        changes["combo"] = None
        return replace(self, **changes)

    # -- equipment ---------------------------------------------------------

    def switch_equipment(self, equipment: EquipmentType | str) -> "Selection":
        # Nothing is carried over to the new equipment type.
        return Selection.start(equipment)

    def reset(self) -> "Selection":
        return Selection.start(self.equipment_type)

    # -- catalog services --------------------------------------------------

    def select_service(self, service_id: str) -> "Selection":
        return self._evolve(service_ids=self.service_ids | {service_id})

    def deselect_service(self, service_id: str) -> "Selection":
        return self._evolve(service_ids=self.service_ids - {service_id})

    def toggle_service(self, service_id: str) -> "Selection":
        if service_id in self.service_ids:
            return self.deselect_service(service_id)
        return self.select_service(service_id)

    def clear_services(self) -> "Selection":
        return self._evolve(service_ids=frozenset())

    # -- catalog parts -----------------------------------------------------

    def add_part(self, part: CatalogPart, margin_percent: int) -> "Selection":
        selected = SelectedPart.from_catalog(part, margin_percent)
        return self._evolve(parts=self.parts + (selected,))

    def remove_part(self, index: int) -> "Selection":
        self._check_index(self.parts, index)
        return self._evolve(parts=self.parts[:index] + self.parts[index + 1:])

    def toggle_part_supplier(self, index: int) -> "Selection":
        self._check_index(self.parts, index)
        part = self.parts[index]
        flipped = replace(part, needs_supplier_pickup=not part.needs_supplier_pickup)
        return self._evolve(parts=self.parts[:index] + (flipped,) + self.parts[index + 1:])

    # -- manual entries ----------------------------------------------------

    def add_manual_service(self, service: ManualService) -> "Selection":
        return self._evolve(manual_services=self.manual_services + (service,))

    def remove_manual_service(self, service_id: str) -> "Selection":
        remaining = tuple(s for s in self.manual_services if s.id != service_id)
        if len(remaining) == len(self.manual_services):
            raise KeyError(service_id)
        return self._evolve(manual_services=remaining)

    def add_manual_part(self, part: ManualPart) -> "Selection":
        return self._evolve(manual_parts=self.manual_parts + (part,))

    def remove_manual_part(self, part_id: str) -> "Selection":
        remaining = tuple(p for p in self.manual_parts if p.id != part_id)
        if len(remaining) == len(self.manual_parts):
            raise KeyError(part_id)
        return self._evolve(manual_parts=remaining)

    def toggle_manual_part_supplier(self, part_id: str) -> "Selection":
        found = False
        parts = []
        for p in self.manual_parts:
            if p.id == part_id:
                p = replace(p, needs_supplier_pickup=not p.needs_supplier_pickup)
                found = True
            parts.append(p)
        if not found:
            raise KeyError(part_id)
        return self._evolve(manual_parts=tuple(parts))

    # -- logistics ---------------------------------------------------------

    def set_logistics_override(self, override: LogisticsOverride) -> "Selection":
        return self._evolve(logistics_override=override)

    # -- combo -------------------------------------------------------------

    def with_combo(self, suggestion: ComboSuggestion) -> "Selection":
        """Attach a freshly computed suggestion; rejections clear the slot."""
        if not suggestion.ok:
            return replace(self, combo=None)
        return replace(self, combo=ComboState(suggestion=suggestion, active=False))

    def activate_combo(self) -> "Selection":
        if self.combo is None:
            return self
        return replace(self, combo=ComboState(suggestion=self.combo.suggestion, active=True))

    @property
    def active_combo(self) -> Optional[ComboSuggestion]:
        if self.combo is not None and self.combo.active:
            return self.combo.suggestion
        return None

    @staticmethod
    def _check_index(items: Iterable, index: int) -> None:
        size = len(tuple(items))
        if not 0 <= index < size:
            raise IndexError(f"index {index} out of range for {size} items")
