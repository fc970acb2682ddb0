from __future__ import annotations

from typing import Optional

from PyQt6 import QtCore, QtWidgets

from app_ui.nav.routing import Route
from core_center.key_area_store import KeyAreaStore
from runtime_bus import topics

_ERROR_TEXT = {
    "title_required": "Enter a title for the key area.",
    "key_area_limit_reached": "You already have the maximum number of key areas.",
    "key_area_not_found": "That key area no longer exists.",
}


class KeyAreasScreen(QtWidgets.QWidget):
    """
    Owning page for key areas.

    Mutations go through the store, which publishes a fresh snapshot for the
    navigation panel. Bus callbacks are marshalled onto the GUI thread.
    """

    snapshot_received = QtCore.pyqtSignal()

    def __init__(
        self,
        *,
        store: KeyAreaStore,
        bus=None,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._bus = bus
        self._bus_subscriptions: list[str] = []
        self._route = Route()

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)

        title = QtWidgets.QLabel("Key Areas")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        self.detail_label = QtWidgets.QLabel("All key areas")
        layout.addWidget(self.detail_label)

        self.list = QtWidgets.QListWidget()
        layout.addWidget(self.list, 1)

        form_row = QtWidgets.QHBoxLayout()
        self.title_edit = QtWidgets.QLineEdit()
        self.title_edit.setPlaceholderText("New key area title")
        self.title_edit.returnPressed.connect(self._on_add)
        add_btn = QtWidgets.QPushButton("Add")
        add_btn.clicked.connect(self._on_add)
        self.delete_btn = QtWidgets.QPushButton("Delete")
        self.delete_btn.clicked.connect(self._on_delete)
        form_row.addWidget(self.title_edit, 1)
        form_row.addWidget(add_btn)
        form_row.addWidget(self.delete_btn)
        layout.addLayout(form_row)

        self.snapshot_received.connect(
            self.refresh, QtCore.Qt.ConnectionType.QueuedConnection
        )
        if self._bus is not None:
            self._bus_subscriptions.append(
                self._bus.subscribe(topics.KEYAREA_SNAPSHOT, lambda _env: self.snapshot_received.emit())
            )
            self._bus_subscriptions.append(
                self._bus.subscribe(topics.KEYAREA_MENU_CLOSED, lambda _env: self.snapshot_received.emit())
            )
        self.refresh()

    def teardown(self) -> None:
        if self._bus is None:
            return
        for sub_id in self._bus_subscriptions:
            self._bus.unsubscribe(sub_id)
        self._bus_subscriptions.clear()

    def show_route(self, route: Route) -> None:
        self._route = route
        ka = route.get("ka")
        if ka:
            self._store.open(ka)
        elif route.get("view") == "all":
            self._store.show_all()
        self.refresh()

    def refresh(self) -> None:
        self.list.clear()
        for area in self._store.key_areas:
            label = area.title
            if area.is_default:
                label = f"{label} (locked)"
            item = QtWidgets.QListWidgetItem(label)
            item.setData(QtCore.Qt.ItemDataRole.UserRole, area.id)
            self.list.addItem(item)
            if self._store.selected_id is not None and str(area.id) == str(self._store.selected_id):
                item.setSelected(True)
        selected = self._store.get(self._store.selected_id) if self._store.selected_id is not None else None
        if selected is not None:
            self.detail_label.setText(f"Open: {selected.title}")
        else:
            self.detail_label.setText("All key areas")

    def _on_add(self) -> None:
        try:
            self._store.create(self.title_edit.text())
        except ValueError as exc:
            QtWidgets.QMessageBox.warning(self, "Key Areas", _ERROR_TEXT.get(str(exc), str(exc)))
            return
        self.title_edit.clear()

    def _on_delete(self) -> None:
        item = self.list.currentItem()
        if item is None:
            return
        ka_id = item.data(QtCore.Qt.ItemDataRole.UserRole)
        if not self._store.delete(ka_id):
            QtWidgets.QMessageBox.information(self, "Key Areas", "This key area cannot be deleted.")
