# =============================================================================
# NAV INDEX (search these tags)
# [NAV-00] Imports / constants
# [NAV-30] Screens: PlaceholderScreen
# [NAV-90] MainWindow
# [NAV-99] main() entrypoint
# =============================================================================

# === [NAV-00] Imports / constants ============================================
# region NAV-00 Imports / constants
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from PyQt6 import QtCore, QtWidgets

from . import config as nav_config
from .nav.nav_items import build_nav_items
from .nav.panel_state import NavPanelController
from .nav.routing import Location, Navigator, Route, build_url
from .screens.key_areas import KeyAreasScreen
from .widgets.nav_panel import NavPanelWidget
from core_center.bus_endpoints import register_key_area_endpoints, unregister_key_area_endpoints
from core_center.key_area_store import KeyAreaStore
from diagnostics.logging_setup import configure_logging
from runtime_bus import RuntimeBus, get_global_bus

logger = logging.getLogger(__name__)

APP_TITLE = "Practical Manager"
# endregion


# === [NAV-30] Screens: PlaceholderScreen =====================================
# region NAV-30 PlaceholderScreen
class PlaceholderScreen(QtWidgets.QWidget):
    """Stand-in for pages owned by other collaborators (goals, calendar, ...)."""

    def __init__(self, title: str, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        layout = QtWidgets.QVBoxLayout(self)
        label = QtWidgets.QLabel(title)
        label.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(label)
        self.route_label = QtWidgets.QLabel("")
        self.route_label.setStyleSheet("color: #64748b;")
        layout.addWidget(self.route_label)
        layout.addStretch()

    def show_route(self, route: Route) -> None:
        self.route_label.setText(route.to_url())


# endregion


# === [NAV-90] MainWindow =====================================================
# region NAV-90 MainWindow
class MainWindow(QtWidgets.QMainWindow):
    # --- [NAV-90A] ctor / wiring
    def __init__(
        self,
        *,
        bus: RuntimeBus,
        store: KeyAreaStore,
        config: Dict[str, Any],
        initial_route: Optional[Route] = None,
    ):
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(1000, 640)
        self.bus = bus
        self.store = store
        self.key_areas_path = nav_config.get_key_areas_path(config)
        self.location = Location(
            href=(initial_route or Route(self.key_areas_path)).to_url(),
            on_reload=self._reload_location,
        )
        self.navigator = Navigator(
            self._client_navigate,
            location=self.location,
            bus=bus,
            initial=initial_route or Route(self.key_areas_path),
        )

        splitter = QtWidgets.QSplitter(QtCore.Qt.Orientation.Horizontal)
        self.setCentralWidget(splitter)

        self.controller = NavPanelController(bus, self.navigator, parent_path=self.key_areas_path)
        self.nav_panel = NavPanelWidget(self.controller)
        splitter.addWidget(self.nav_panel)

        self.stacked = QtWidgets.QStackedWidget()
        splitter.addWidget(self.stacked)
        splitter.setStretchFactor(1, 1)

        self.key_areas_screen = KeyAreasScreen(store=store, bus=bus)
        self.stacked.addWidget(self.key_areas_screen)
        self._placeholders: Dict[str, PlaceholderScreen] = {}
        for item in build_nav_items(self.key_areas_path):
            if item.is_key_area_parent:
                continue
            screen = PlaceholderScreen(item.label)
            self._placeholders[item.path] = screen
            self.stacked.addWidget(screen)

        self._show_route(self.navigator.current_route)
        self.controller.mount(self.navigator.current_route)

    # --- [NAV-90B] routing
    def _client_navigate(self, path: str, query: Dict[str, str]) -> None:
        route = Route(path=path, query=dict(query))
        self.location.href = build_url(path, query)
        self._show_route(route)

    def _reload_location(self, href: str) -> None:
        logger.info("full location transition to %s", href)
        self._show_route(Route.from_url(href))

    def _show_route(self, route: Route) -> None:
        if route.path == self.key_areas_path:
            self.key_areas_screen.show_route(route)
            self.stacked.setCurrentWidget(self.key_areas_screen)
            return
        screen = self._placeholders.get(route.path)
        if screen is None:
            logger.info("no screen for %s", route.path)
            return
        screen.show_route(route)
        self.stacked.setCurrentWidget(screen)

    # --- [NAV-90C] shutdown
    def closeEvent(self, event) -> None:
        self.controller.unmount()
        self.key_areas_screen.teardown()
        unregister_key_area_endpoints(self.bus, self.store)
        super().closeEvent(event)


# endregion


# === [NAV-99] main() entrypoint ==============================================
# region NAV-99 main() entrypoint
def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=APP_TITLE)
    parser.add_argument("--route", default="", help="initial route, e.g. /key-areas?openKA=1")
    parser.add_argument("--config", default="", help="path to nav_config.json")
    args, _unknown = parser.parse_known_args(argv)
    return args


def main(argv: Optional[List[str]] = None):
    args = _parse_args(argv)
    config = nav_config.load_nav_config(Path(args.config) if args.config else None)
    configure_logging(level=str(config.get("log_level") or "INFO"))

    bus = get_global_bus()
    store = KeyAreaStore(
        nav_config.get_cache_path(config),
        max_key_areas=nav_config.get_max_key_areas(config),
    )
    register_key_area_endpoints(bus, store)

    app = QtWidgets.QApplication(sys.argv)
    initial = Route.from_url(args.route) if args.route else None
    window = MainWindow(bus=bus, store=store, config=config, initial_route=initial)
    # snapshots only reach subscribers that exist, so publish after mounting
    store.prime_from_cache()
    store.ensure_ideas_slot()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
# endregion
