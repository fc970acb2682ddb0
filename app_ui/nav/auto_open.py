from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from runtime_bus import topics

from .nav_items import KEY_AREAS_PATH
from .routing import Navigator, Route
from .schema import KeyArea, OpenRequest

logger = logging.getLogger(__name__)

STATE_CLOSED = "CLOSED"
STATE_OPEN = "OPEN"
STATE_PENDING_OPEN = "PENDING_OPEN"

OPEN_MARKER = "openKA"
SELECTED_PARAM = "ka"


class AutoOpenSequencer:
    """Decides when opening the Key Areas submenu navigates to its first entry.

    With data cached, opening navigates straight to the first Display List
    entry. Without data the intent is deferred (``PENDING_OPEN``) and the first
    non-empty snapshot consumes it exactly once. Closing always drops a
    deferred intent so late snapshots cannot revive it.
    """

    def __init__(
        self,
        navigator: Navigator,
        display_list: Callable[[], Sequence[KeyArea]],
        *,
        bus=None,
        parent_path: str = KEY_AREAS_PATH,
        source: str = "nav_panel",
    ) -> None:
        self._navigator = navigator
        self._display_list = display_list
        self._bus = bus
        self._parent_path = parent_path
        self._source = source
        self._state = STATE_CLOSED
        self._mounted = False

    @property
    def state(self) -> str:
        return self._state

    @property
    def pending_open(self) -> bool:
        return self._state == STATE_PENDING_OPEN

    @property
    def is_open(self) -> bool:
        return self._state == STATE_OPEN

    @property
    def parent_path(self) -> str:
        return self._parent_path

    def on_mount(self, route: Optional[Route]) -> None:
        """Evaluate an ``openKA=1`` deep link once per mount."""
        if self._mounted:
            return
        self._mounted = True
        if route is None or route.path != self._parent_path:
            return
        if route.get(OPEN_MARKER) != "1":
            return
        if route.get(SELECTED_PARAM):
            # explicit selection in the link wins over the first entry
            self._set_state(STATE_OPEN)
            return
        self._open_from_closed()

    def on_unmount(self) -> None:
        self._mounted = False
        if self._state == STATE_PENDING_OPEN:
            self._set_state(STATE_CLOSED)

    def toggle(self) -> None:
        if self._state == STATE_CLOSED:
            self._open_from_closed()
        else:
            self._close()

    def on_snapshot(self, display: Sequence[KeyArea]) -> None:
        if self._state != STATE_PENDING_OPEN or not display:
            return
        self._open_entry(display[0])

    def select(self, area: KeyArea) -> None:
        """User picked a key area row directly."""
        self._open_entry(area)

    def supersede(self) -> None:
        """A different explicit user action replaces any deferred open."""
        if self._state == STATE_PENDING_OPEN:
            self._set_state(STATE_CLOSED)

    def _open_from_closed(self) -> None:
        display: List[KeyArea] = list(self._display_list() or [])
        if display:
            self._open_entry(display[0])
            return
        self._set_state(STATE_PENDING_OPEN)
        self._navigator.navigate(self._parent_path, {OPEN_MARKER: 1})

    def _open_entry(self, area: KeyArea) -> None:
        self._set_state(STATE_OPEN)
        self._navigator.navigate(self._parent_path, {SELECTED_PARAM: area.id, OPEN_MARKER: 1})
        if self._bus is not None:
            self._bus.publish(topics.KEYAREA_OPEN_REQUEST, OpenRequest(id=area.id), source=self._source)

    def _close(self) -> None:
        self._set_state(STATE_CLOSED)
        self._navigator.navigate(self._parent_path, {"view": "all"})
        if self._bus is not None:
            self._bus.publish(topics.KEYAREA_MENU_CLOSED, None, source=self._source)

    def _set_state(self, state: str) -> None:
        if state != self._state:
            logger.debug("key area menu %s -> %s", self._state, state)
        self._state = state


__all__ = [
    "AutoOpenSequencer",
    "OPEN_MARKER",
    "SELECTED_PARAM",
    "STATE_CLOSED",
    "STATE_OPEN",
    "STATE_PENDING_OPEN",
]
