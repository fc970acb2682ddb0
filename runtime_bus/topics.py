"""Topic constants for the runtime bus."""

# Key areas: owning page -> navigation panel
KEYAREA_SNAPSHOT = "keyarea-snapshot"

# Key areas: navigation panel -> owning page
KEYAREA_REORDER = "keyarea-reorder"
KEYAREA_OPEN_REQUEST = "keyarea-open-request"
KEYAREA_MENU_CLOSED = "keyarea-menu-closed"

# Navigation
NAV_ROUTE_CHANGED = "nav-route-changed"

__all__ = [
    "KEYAREA_SNAPSHOT",
    "KEYAREA_REORDER",
    "KEYAREA_OPEN_REQUEST",
    "KEYAREA_MENU_CLOSED",
    "NAV_ROUTE_CHANGED",
]
