"""UI-agnostic state of the navigation panel.

One ``NavPanelController`` exists per mounted panel. It owns the Display List
cache, the drag session (via ``ReorderEngine``) and the deferred-open intent
(via ``AutoOpenSequencer``), and only mutates them from bus handlers or user
interaction callbacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from runtime_bus import topics

from .auto_open import AutoOpenSequencer, STATE_CLOSED
from .nav_items import (
    KEY_AREAS_PATH,
    NavItem,
    build_nav_items,
    filter_nav_items,
    is_item_active,
    is_key_area_active,
)
from .normalize import normalize_key_areas
from .reorder import ReorderEngine
from .routing import Navigator, Route
from .schema import KeyArea

logger = logging.getLogger(__name__)

ROW_NAV = "nav"
ROW_KEY_AREA = "key_area"


@dataclass(frozen=True)
class PanelRow:
    kind: str
    label: str
    path: str
    query: Dict[str, str] = field(default_factory=dict)
    icon: str = ""
    active: bool = False
    expanded: bool = False
    key_area_id: object = None
    color: Optional[str] = None
    locked: bool = False
    draggable: bool = False
    dragging: bool = False
    drag_over: bool = False
    index: int = -1


class NavPanelController:
    def __init__(
        self,
        bus,
        navigator: Navigator,
        *,
        parent_path: str = KEY_AREAS_PATH,
        nav_items: Optional[Sequence[NavItem]] = None,
        source: str = "nav_panel",
    ) -> None:
        self._bus = bus
        self._navigator = navigator
        self._parent_path = parent_path
        self._nav_items: List[NavItem] = list(nav_items or build_nav_items(parent_path))
        self._display: List[KeyArea] = []
        self._search_text = ""
        self._subscriptions: list[str] = []
        self._listeners: list[Callable[[], None]] = []
        self._mounted = False
        self._reorder = ReorderEngine(bus, source=source)
        self._sequencer = AutoOpenSequencer(
            navigator,
            lambda: self._display,
            bus=bus,
            parent_path=parent_path,
            source=source,
        )

    # --- lifecycle
    def mount(self, route: Optional[Route] = None) -> None:
        if self._mounted:
            return
        self._mounted = True
        if self._bus is not None:
            self._subscriptions.append(self._bus.subscribe(topics.KEYAREA_SNAPSHOT, self._on_snapshot))
            self._subscriptions.append(self._bus.subscribe(topics.NAV_ROUTE_CHANGED, self._on_route_changed))
        self._sequencer.on_mount(route or self._navigator.current_route)
        self._notify()

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        if self._bus is not None:
            for sub_id in self._subscriptions:
                self._bus.unsubscribe(sub_id)
        self._subscriptions.clear()
        self._reorder.cancel()
        self._sequencer.on_unmount()

    @property
    def mounted(self) -> bool:
        return self._mounted

    # --- observers
    def add_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("nav panel listener failed")

    # --- state accessors
    @property
    def display_list(self) -> List[KeyArea]:
        return list(self._display)

    @property
    def menu_state(self) -> str:
        return self._sequencer.state

    @property
    def sequencer(self) -> AutoOpenSequencer:
        return self._sequencer

    @property
    def reorder_engine(self) -> ReorderEngine:
        return self._reorder

    @property
    def search_text(self) -> str:
        return self._search_text

    @property
    def route(self) -> Route:
        return self._navigator.current_route

    def _set_display(self, display: List[KeyArea]) -> None:
        self._display = list(display)

    # --- bus handlers
    def _on_snapshot(self, envelope) -> None:
        self._display = normalize_key_areas(getattr(envelope, "payload", None))
        self._sequencer.on_snapshot(self._display)
        self._notify()

    def _on_route_changed(self, envelope) -> None:
        self._notify()

    # --- user interactions
    def set_search_text(self, text: str) -> None:
        self._search_text = text or ""
        self._notify()

    def toggle_key_areas(self) -> None:
        self._sequencer.toggle()
        self._notify()

    def activate_nav_item(self, item: NavItem) -> None:
        if item.is_key_area_parent:
            self.toggle_key_areas()
            return
        self._sequencer.supersede()
        self._navigator.navigate(item.path, item.query)
        self._notify()

    def select_key_area(self, key_area_id: object) -> bool:
        area = next((area for area in self._display if area.id == key_area_id), None)
        if area is None:
            return False
        self._sequencer.select(area)
        self._notify()
        return True

    def start_drag(self, index: int) -> bool:
        started = self._reorder.start_drag(self._display, index)
        if started:
            self._notify()
        return started

    def drag_over(self, index: int) -> None:
        if self._reorder.session is None:
            return
        self._reorder.drag_over(index)
        self._notify()

    def drop(self, target_index: int) -> bool:
        had_session = self._reorder.session is not None
        # optimistic until the owner sends its next snapshot
        reordered = self._reorder.drop(self._display, target_index, self._set_display)
        if had_session:
            self._notify()
        return reordered is not None

    def cancel_drag(self) -> None:
        if self._reorder.session is None:
            return
        self._reorder.cancel()
        self._notify()

    # --- rendering
    def visible_nav_items(self) -> List[NavItem]:
        return filter_nav_items(self._nav_items, self._search_text)

    def rows(self) -> List[PanelRow]:
        route = self._navigator.current_route
        expanded = self._sequencer.state != STATE_CLOSED
        key_area_rows = self._key_area_rows(route) if expanded else []
        rows: List[PanelRow] = []
        placed = False
        for item in self.visible_nav_items():
            rows.append(
                PanelRow(
                    kind=ROW_NAV,
                    label=item.label,
                    path=item.path,
                    query=dict(item.query),
                    icon=item.icon,
                    active=is_item_active(route, item.path, item.query),
                    expanded=expanded if item.is_key_area_parent else False,
                )
            )
            if item.is_key_area_parent:
                rows.extend(key_area_rows)
                placed = True
        if not placed:
            # the search box never hides key areas
            rows.extend(key_area_rows)
        return rows

    def _key_area_rows(self, route: Route) -> List[PanelRow]:
        session = self._reorder.session
        rows = []
        for index, area in enumerate(self._display):
            rows.append(
                PanelRow(
                    kind=ROW_KEY_AREA,
                    label=area.title,
                    path=self._parent_path,
                    query={"ka": str(area.id), "openKA": "1"},
                    active=is_key_area_active(route, self._parent_path, area.id),
                    key_area_id=area.id,
                    color=area.color,
                    locked=area.is_default,
                    draggable=not area.is_default,
                    dragging=session is not None and session.source_item.id == area.id,
                    drag_over=session is not None and session.drag_over_index == index,
                    index=index,
                )
            )
        return rows


__all__ = ["NavPanelController", "PanelRow", "ROW_KEY_AREA", "ROW_NAV"]
