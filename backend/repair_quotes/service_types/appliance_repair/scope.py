"""Equipment scope matching for catalog rows.

``parts_catalog.equipment_scope`` holds both legacy and current tags, so the
match is normalized here instead of at every call site.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List

from .models import CatalogPart, CatalogService, EquipmentType

UNIVERSAL_SCOPES: FrozenSet[str] = frozenset({"ALL", "BOTH", "EVERY", "AMBOS", "TODOS"})

_SCOPE_TAGS: Dict[EquipmentType, FrozenSet[str]] = {
    EquipmentType.TOP_LOAD: frozenset({"TOP_LOAD", "MAQUINA_DE_LAVAR_TOP_LOAD"}),
    EquipmentType.FRONT_LOAD_WASHER_DRYER: frozenset(
        {"FRONT_LOAD", "FRONT_LOAD_WASHER_DRYER", "LAVA_E_SECA", "LAVA_E_SECA_FRONTAL"}
    ),
    EquipmentType.RESIDENTIAL_SERVICES: frozenset(
        {"RESIDENTIAL", "RESIDENTIAL_SERVICES", "SERVICOS_RESIDENCIAIS"}
    ),
}

OTHER_CATEGORY = "OTHER"


def scope_matches_equipment(scope: str | None, equipment: EquipmentType) -> bool:
    s = str(scope or "").strip().upper()
    if not s:
        return False
    if s in UNIVERSAL_SCOPES:
        return True
    return s in _SCOPE_TAGS.get(equipment, frozenset())


def parts_for_equipment(parts: Iterable[CatalogPart], equipment: EquipmentType) -> List[CatalogPart]:
    return [p for p in parts if scope_matches_equipment(p.equipment_scope, equipment)]


def search_services(services: Iterable[CatalogService], query: str | None) -> List[CatalogService]:
    q = str(query or "").strip().lower()
    items = list(services)
    if not q:
        return items
    out: List[CatalogService] = []
    for s in items:
        text = " ".join([s.name, s.category, " ".join(s.tags), s.notes]).lower()
        if q in text:
            out.append(s)
    return out


def group_by_category(services: Iterable[CatalogService]) -> Dict[str, List[CatalogService]]:
    grouped: Dict[str, List[CatalogService]] = {}
    for s in services:
        grouped.setdefault(s.category or OTHER_CATEGORY, []).append(s)
    return {cat: grouped[cat] for cat in sorted(grouped)}
