from app_ui.nav.auto_open import STATE_CLOSED, STATE_OPEN, STATE_PENDING_OPEN
from app_ui.nav.nav_items import build_nav_items
from app_ui.nav.panel_state import ROW_KEY_AREA, ROW_NAV, NavPanelController
from app_ui.nav.routing import Navigator, Route
from runtime_bus import RuntimeBus, topics


def _setup():
    bus = RuntimeBus()
    calls = []
    navigator = Navigator(lambda path, query: calls.append((path, query)), bus=bus)
    controller = NavPanelController(bus, navigator)
    return bus, calls, controller


SNAPSHOT = [
    {"id": 1, "title": "Ideas", "is_default": True, "position": 10},
    {"id": 2, "title": "Sales", "position": 1},
    {"id": 3, "title": "Hiring", "position": 2},
]


def _key_rows(controller):
    return [row for row in controller.rows() if row.kind == ROW_KEY_AREA]


def test_snapshot_updates_display_list_after_mount() -> None:
    bus, _calls, controller = _setup()
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert controller.display_list == []
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert [area.id for area in controller.display_list] == [2, 3, 1]


def test_non_list_snapshot_clears_display() -> None:
    bus, _calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    bus.publish(topics.KEYAREA_SNAPSHOT, {"keyAreas": SNAPSHOT})
    assert controller.display_list == []


def test_deferred_open_navigates_exactly_once() -> None:
    bus, calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    controller.toggle_key_areas()
    assert controller.menu_state == STATE_PENDING_OPEN
    assert calls == [("/key-areas", {"openKA": "1"})]
    opened = []
    bus.subscribe(topics.KEYAREA_OPEN_REQUEST, lambda env: opened.append(env.payload.id))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert calls[1:] == [("/key-areas", {"ka": "2", "openKA": "1"})]
    assert opened == [2]
    assert controller.menu_state == STATE_OPEN


def test_snapshot_after_close_does_not_resurrect_open() -> None:
    bus, calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    controller.toggle_key_areas()
    controller.toggle_key_areas()
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert controller.menu_state == STATE_CLOSED
    assert calls[-1] == ("/key-areas", {"view": "all"})


def test_deep_link_on_mount() -> None:
    bus, calls, controller = _setup()
    controller.mount(Route("/key-areas", {"openKA": "1"}))
    assert controller.menu_state == STATE_PENDING_OPEN
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert calls[-1] == ("/key-areas", {"ka": "2", "openKA": "1"})


def test_search_filters_static_items_only() -> None:
    bus, _calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    controller.toggle_key_areas()
    controller.set_search_text("goal")
    rows = controller.rows()
    assert [row.label for row in rows if row.kind == ROW_NAV] == ["Goals"]
    assert [row.label for row in rows if row.kind == ROW_KEY_AREA] == ["Sales", "Hiring", "Ideas"]


def test_key_area_rows_follow_parent_and_reflect_state() -> None:
    bus, _calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert _key_rows(controller) == []
    controller.toggle_key_areas()
    rows = controller.rows()
    labels = [row.label for row in rows]
    assert labels.index("Sales") == labels.index("Key Areas") + 1
    parent = next(row for row in rows if row.label == "Key Areas")
    assert parent.active and parent.expanded
    key_rows = _key_rows(controller)
    assert [row.active for row in key_rows] == [True, False, False]
    assert [row.locked for row in key_rows] == [False, False, True]
    assert [row.draggable for row in key_rows] == [True, True, False]


def test_drag_and_drop_reorders_and_publishes() -> None:
    bus, _calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    published = []
    bus.subscribe(topics.KEYAREA_REORDER, lambda env: published.append([a.id for a in env.payload]))
    controller.toggle_key_areas()
    assert controller.start_drag(0)
    controller.drag_over(1)
    rows = _key_rows(controller)
    assert rows[0].dragging and rows[1].drag_over
    assert controller.drop(1)
    assert published == [[3, 2, 1]]
    assert [area.id for area in controller.display_list] == [3, 2, 1]
    assert [area.position for area in controller.display_list] == [0, 1, 2]
    assert controller.reorder_engine.session is None
    assert not any(row.dragging or row.drag_over for row in _key_rows(controller))


def test_locked_row_never_starts_drag() -> None:
    bus, _calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert controller.start_drag(2) is False
    assert controller.reorder_engine.session is None
    assert controller.drop(0) is False


def test_cancel_drag_leaves_list_untouched() -> None:
    bus, _calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    before = controller.display_list
    controller.start_drag(0)
    controller.drag_over(1)
    controller.cancel_drag()
    assert controller.display_list == before
    assert controller.reorder_engine.session is None


def test_activate_static_item_supersedes_pending_open() -> None:
    bus, calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    controller.toggle_key_areas()
    goals = next(item for item in build_nav_items() if item.label == "Goals")
    controller.activate_nav_item(goals)
    assert calls[-1] == ("/goals", {})
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert controller.menu_state == STATE_CLOSED
    assert calls[-1] == ("/goals", {})


def test_select_key_area_and_highlight() -> None:
    bus, calls, controller = _setup()
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert controller.select_key_area(3)
    assert calls[-1] == ("/key-areas", {"ka": "3", "openKA": "1"})
    assert [row.active for row in _key_rows(controller)] == [False, True, False]
    assert controller.select_key_area(99) is False


def test_listeners_notified_and_unmount_stops_updates() -> None:
    bus, _calls, controller = _setup()
    hits = []
    controller.add_listener(lambda: hits.append(1))
    controller.mount(Route("/dashboard"))
    bus.publish(topics.KEYAREA_SNAPSHOT, SNAPSHOT)
    assert len(hits) == 2
    controller.unmount()
    bus.publish(topics.KEYAREA_SNAPSHOT, [])
    assert len(hits) == 2
    assert [area.id for area in controller.display_list] == [2, 3, 1]
    assert bus.subscriber_count(topics.KEYAREA_SNAPSHOT) == 0


def test_snapshot_published_by_router_highlights_opened_entry() -> None:
    bus = RuntimeBus()

    def _router(path, query):
        if "ka" not in query:
            # the page loads its data while handling the route
            bus.publish(topics.KEYAREA_SNAPSHOT, [{"id": 9, "title": "Ops", "position": 1}])

    controller = NavPanelController(bus, Navigator(_router, bus=bus))
    controller.mount(Route("/dashboard"))
    controller.toggle_key_areas()
    assert controller.menu_state == STATE_OPEN
    assert controller.route == Route("/key-areas", {"ka": "9", "openKA": "1"})
    assert [row.active for row in _key_rows(controller)] == [True]
