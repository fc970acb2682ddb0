from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .routing import Route

KEY_AREAS_PATH = "/key-areas"


@dataclass(frozen=True)
class NavItem:
    label: str
    path: str
    icon: str = ""
    query: Dict[str, str] = field(default_factory=dict)
    is_key_area_parent: bool = False


DEFAULT_NAV_ITEMS: tuple[NavItem, ...] = (
    NavItem("Dashboard", "/dashboard", icon="home"),
    NavItem("Calendar", "/calendar", icon="calendar"),
    NavItem("Don't Forget", "/reminders", icon="bell"),
    NavItem("Goals", "/goals", icon="bullseye"),
    NavItem("Key Areas", KEY_AREAS_PATH, icon="key", is_key_area_parent=True),
    NavItem("Give Strokes", "/recognition", icon="heart"),
    NavItem("Teams & Members", "/teams", icon="users"),
)


def build_nav_items(key_areas_path: str = KEY_AREAS_PATH) -> List[NavItem]:
    items = []
    for item in DEFAULT_NAV_ITEMS:
        if item.is_key_area_parent:
            item = NavItem(item.label, key_areas_path, item.icon, dict(item.query), True)
        items.append(item)
    return items


def filter_nav_items(items: Iterable[NavItem], text: Optional[str]) -> List[NavItem]:
    """Case-insensitive label filter for the static items only."""
    items = list(items)
    needle = (text or "").strip().lower()
    if not needle:
        return items
    return [item for item in items if needle in item.label.lower()]


def is_item_active(
    route: Optional[Route],
    target_path: str,
    target_query: Optional[Mapping[str, object]] = None,
) -> bool:
    if route is None or route.path != target_path:
        return False
    for key, value in (target_query or {}).items():
        if route.query.get(key) != str(value):
            return False
    return True


def is_key_area_active(route: Optional[Route], parent_path: str, key_area_id: object) -> bool:
    return is_item_active(route, parent_path, {"ka": key_area_id})


__all__ = [
    "DEFAULT_NAV_ITEMS",
    "KEY_AREAS_PATH",
    "NavItem",
    "build_nav_items",
    "filter_nav_items",
    "is_item_active",
    "is_key_area_active",
]
