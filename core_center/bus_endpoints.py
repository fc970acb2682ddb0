from __future__ import annotations

import logging
from typing import Any, List

from app_ui.nav.schema import KeyArea, coerce_open_request
from runtime_bus import topics

from .key_area_store import KeyAreaStore

logger = logging.getLogger(__name__)

SOURCE = "key_areas_page"


def register_key_area_endpoints(bus: Any, store: KeyAreaStore) -> List[str]:
    """Connect ``store`` to the key-area topics on ``bus``.

    The store publishes a snapshot after each mutation and reconciles reorder
    proposals from the panel. Returns the subscription ids; registering the
    same store twice on one bus is a no-op.
    """
    if bus is None:
        return []
    registered = getattr(bus, "_key_area_stores", None)
    if registered is None:
        registered = {}
        setattr(bus, "_key_area_stores", registered)
    if id(store) in registered:
        return list(registered[id(store)])

    def _publish_snapshot(areas: List[KeyArea]) -> None:
        bus.publish(topics.KEYAREA_SNAPSHOT, list(areas), source=SOURCE)

    def _handle_reorder(envelope) -> None:
        result = store.apply_reorder(envelope.payload)
        logger.info("key areas reordered: %s", [area.id for area in result])

    def _handle_open(envelope) -> None:
        request = coerce_open_request(envelope.payload)
        if request is None:
            logger.warning("ignoring malformed key area open request")
            return
        if store.open(request.id) is None:
            logger.info("open request for unknown key area id=%s", request.id)

    def _handle_menu_closed(envelope) -> None:
        store.show_all()

    store.set_change_callback(_publish_snapshot)
    sub_ids = [
        bus.subscribe(topics.KEYAREA_REORDER, _handle_reorder),
        bus.subscribe(topics.KEYAREA_OPEN_REQUEST, _handle_open),
        bus.subscribe(topics.KEYAREA_MENU_CLOSED, _handle_menu_closed),
    ]
    registered[id(store)] = sub_ids
    return list(sub_ids)


def unregister_key_area_endpoints(bus: Any, store: KeyAreaStore) -> None:
    if bus is None:
        return
    registered = getattr(bus, "_key_area_stores", None) or {}
    for sub_id in registered.pop(id(store), []):
        bus.unsubscribe(sub_id)
    store.set_change_callback(None)
