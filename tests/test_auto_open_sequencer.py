from app_ui.nav.auto_open import (
    STATE_CLOSED,
    STATE_OPEN,
    STATE_PENDING_OPEN,
    AutoOpenSequencer,
)
from app_ui.nav.routing import Navigator, Route
from app_ui.nav.schema import KeyArea, OpenRequest
from runtime_bus import RuntimeBus, topics


class _Harness:
    def __init__(self, display=None) -> None:
        self.bus = RuntimeBus()
        self.calls = []
        self.opened = []
        self.closed = []
        self.display = list(display or [])
        self.navigator = Navigator(lambda path, query: self.calls.append((path, query)), bus=self.bus)
        self.bus.subscribe(topics.KEYAREA_OPEN_REQUEST, lambda env: self.opened.append(env.payload))
        self.bus.subscribe(topics.KEYAREA_MENU_CLOSED, lambda env: self.closed.append(env.payload))
        self.sequencer = AutoOpenSequencer(self.navigator, lambda: self.display, bus=self.bus)


X = KeyArea(id="x", title="X", position=0)
Y = KeyArea(id="y", title="Y", position=1)


def test_toggle_with_cached_list_opens_first_entry() -> None:
    h = _Harness([X, Y])
    h.sequencer.toggle()
    assert h.sequencer.state == STATE_OPEN
    assert h.calls == [("/key-areas", {"ka": "x", "openKA": "1"})]
    assert h.opened == [OpenRequest(id="x")]


def test_toggle_with_empty_list_defers_until_snapshot() -> None:
    h = _Harness()
    h.sequencer.toggle()
    assert h.sequencer.state == STATE_PENDING_OPEN
    assert h.sequencer.pending_open
    assert h.calls == [("/key-areas", {"openKA": "1"})]
    assert h.opened == []

    h.sequencer.on_snapshot([])
    assert h.sequencer.state == STATE_PENDING_OPEN

    h.sequencer.on_snapshot([X, Y])
    assert h.sequencer.state == STATE_OPEN
    assert not h.sequencer.pending_open
    assert h.calls[-1] == ("/key-areas", {"ka": "x", "openKA": "1"})

    h.sequencer.on_snapshot([Y, X])
    assert len(h.calls) == 2
    assert h.opened == [OpenRequest(id="x")]


def test_toggle_while_open_closes_and_shows_all() -> None:
    h = _Harness([X])
    h.sequencer.toggle()
    h.sequencer.toggle()
    assert h.sequencer.state == STATE_CLOSED
    assert h.calls[-1] == ("/key-areas", {"view": "all"})
    assert h.closed == [None]


def test_close_while_pending_drops_intent() -> None:
    h = _Harness()
    h.sequencer.toggle()
    h.sequencer.toggle()
    assert h.sequencer.state == STATE_CLOSED
    h.sequencer.on_snapshot([X])
    assert h.sequencer.state == STATE_CLOSED
    assert h.opened == []
    assert h.calls[-1] == ("/key-areas", {"view": "all"})


def test_deep_link_on_mount_defers_without_data() -> None:
    h = _Harness()
    h.sequencer.on_mount(Route("/key-areas", {"openKA": "1"}))
    assert h.sequencer.state == STATE_PENDING_OPEN
    h.sequencer.on_snapshot([Y])
    assert h.calls[-1] == ("/key-areas", {"ka": "y", "openKA": "1"})


def test_deep_link_evaluated_once() -> None:
    h = _Harness([X])
    route = Route("/key-areas", {"openKA": "1"})
    h.sequencer.on_mount(route)
    h.sequencer.on_mount(route)
    assert h.calls == [("/key-areas", {"ka": "x", "openKA": "1"})]
    assert h.sequencer.state == STATE_OPEN
    assert h.opened == [OpenRequest(id="x")]


def test_deep_link_with_selection_keeps_it() -> None:
    h = _Harness([X, Y])
    h.sequencer.on_mount(Route("/key-areas", {"openKA": "1", "ka": "y"}))
    assert h.sequencer.state == STATE_OPEN
    assert h.calls == []


def test_mount_without_marker_stays_closed() -> None:
    h = _Harness([X])
    h.sequencer.on_mount(Route("/key-areas", {}))
    h.sequencer.on_mount(Route("/goals", {"openKA": "1"}))
    assert h.sequencer.state == STATE_CLOSED
    assert h.calls == []


def test_supersede_clears_pending_only() -> None:
    h = _Harness()
    h.sequencer.toggle()
    h.sequencer.supersede()
    assert h.sequencer.state == STATE_CLOSED
    h.sequencer.on_snapshot([X])
    assert h.opened == []

    h.display = [X]
    h.sequencer.toggle()
    h.sequencer.supersede()
    assert h.sequencer.state == STATE_OPEN


def test_select_opens_specific_entry() -> None:
    h = _Harness([X, Y])
    h.sequencer.select(Y)
    assert h.sequencer.is_open
    assert h.calls == [("/key-areas", {"ka": "y", "openKA": "1"})]
    assert h.opened == [OpenRequest(id="y")]


def test_unmount_drops_pending_intent() -> None:
    h = _Harness()
    h.sequencer.toggle()
    h.sequencer.on_unmount()
    assert h.sequencer.state == STATE_CLOSED
