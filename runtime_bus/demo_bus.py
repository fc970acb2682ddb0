"""Simple runtime bus demo / smoke test of the key-area round trip."""

from __future__ import annotations

import tempfile
from pathlib import Path

from app_ui.nav.panel_state import NavPanelController
from app_ui.nav.routing import Location, Navigator, Route
from core_center.bus_endpoints import register_key_area_endpoints
from core_center.key_area_store import KeyAreaStore

from . import topics
from .bus import RuntimeBus


def main() -> None:
    bus = RuntimeBus()

    print("[demo] testing pub/sub isolation")
    received = []

    def _broken(envelope):
        raise RuntimeError("boom")

    bus.subscribe(topics.KEYAREA_MENU_CLOSED, _broken)
    bus.subscribe(topics.KEYAREA_MENU_CLOSED, lambda envelope: received.append(envelope.topic))
    bus.publish(topics.KEYAREA_MENU_CLOSED, None, source="demo")
    assert received == [topics.KEYAREA_MENU_CLOSED]
    print("[demo] pub/sub ok")

    print("[demo] testing deferred open + reorder")
    with tempfile.TemporaryDirectory(prefix="pmnav_demo_") as tmp:
        store = KeyAreaStore(Path(tmp) / "cache.json")
        register_key_area_endpoints(bus, store)
        location = Location()
        navigator = Navigator(location=location, bus=bus)
        panel = NavPanelController(bus, navigator)
        panel.mount(Route.from_url("/key-areas?openKA=1"))
        assert panel.sequencer.pending_open
        store.create("Sales")
        store.create("Hiring")
        store.ensure_ideas_slot()
        print(f"[demo] navigated to {location.href}")
        assert panel.start_drag(0)
        assert panel.drop(1)
        print(f"[demo] store order {[area.title for area in store.key_areas]}")
        panel.unmount()
    print("[demo] runtime bus demo complete")


if __name__ == "__main__":
    main()
