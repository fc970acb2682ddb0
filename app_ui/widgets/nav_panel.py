# =============================================================================
# NAV INDEX (search these tags)
# [NAV-00] Imports / constants
# [NAV-10] Row item helpers
# [NAV-20] _PanelListWidget (drag events -> controller)
# [NAV-30] NavPanelWidget
# =============================================================================

# === [NAV-00] Imports / constants ============================================
# region NAV-00 Imports / constants
from __future__ import annotations

from typing import Dict, Optional

from PyQt6 import QtCore, QtGui, QtWidgets

from app_ui.nav.nav_items import NavItem
from app_ui.nav.panel_state import NavPanelController, PanelRow, ROW_KEY_AREA, ROW_NAV

ROW_ROLE = QtCore.Qt.ItemDataRole.UserRole
LOCK_GLYPH = "\U0001F512"
# endregion NAV-00 Imports / constants


# === [NAV-10] Row item helpers ===============================================
# region NAV-10 Row item helpers
def _row_text(row: PanelRow) -> str:
    if row.kind == ROW_NAV:
        if row.expanded:
            return f"{row.label}  ▾"
        return row.label
    text = f"    {row.label}"
    if row.locked:
        text = f"{text}  {LOCK_GLYPH}"
    return text


def _row_flags(row: PanelRow) -> QtCore.Qt.ItemFlag:
    flags = QtCore.Qt.ItemFlag.ItemIsEnabled | QtCore.Qt.ItemFlag.ItemIsSelectable
    if row.kind == ROW_KEY_AREA:
        # locked rows accept drops but never start one
        flags |= QtCore.Qt.ItemFlag.ItemIsDropEnabled
        if row.draggable:
            flags |= QtCore.Qt.ItemFlag.ItemIsDragEnabled
    return flags


def _decorate(item: QtWidgets.QListWidgetItem, row: PanelRow) -> None:
    font = item.font()
    font.setBold(row.active)
    item.setFont(font)
    if row.dragging:
        item.setForeground(QtGui.QBrush(QtGui.QColor("#7f8a99")))
    elif row.locked:
        item.setForeground(QtGui.QBrush(QtGui.QColor("#5c6b80")))
    else:
        item.setForeground(QtGui.QBrush(QtGui.QColor("#1e3a5f")))
    if row.drag_over:
        item.setBackground(QtGui.QBrush(QtGui.QColor("#cfe0fb")))
    elif row.active:
        item.setBackground(QtGui.QBrush(QtGui.QColor("#bfdbfe")))
    else:
        item.setBackground(QtGui.QBrush())
    if row.locked:
        item.setToolTip("Locked: this key area cannot be moved")
    elif row.kind == ROW_KEY_AREA:
        item.setToolTip("Drag to reorder")
# endregion NAV-10 Row item helpers


# === [NAV-20] _PanelListWidget (drag events -> controller) ===================
# region NAV-20 _PanelListWidget
class _PanelListWidget(QtWidgets.QListWidget):
    """List that reports drag gestures to the controller instead of moving items."""

    drag_finished = QtCore.pyqtSignal()

    def __init__(self, controller: NavPanelController, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self.dragging = False
        self.setDragEnabled(True)
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QtWidgets.QAbstractItemView.DragDropMode.DragDrop)
        self.setDefaultDropAction(QtCore.Qt.DropAction.MoveAction)

    def key_area_index_at(self, point: QtCore.QPoint) -> Optional[int]:
        item = self.itemAt(point)
        if item is None:
            return None
        row = item.data(ROW_ROLE)
        if not isinstance(row, PanelRow) or row.kind != ROW_KEY_AREA:
            return None
        return row.index

    def startDrag(self, supportedActions: QtCore.Qt.DropAction) -> None:
        item = self.currentItem()
        row = item.data(ROW_ROLE) if item is not None else None
        if not isinstance(row, PanelRow) or row.kind != ROW_KEY_AREA:
            return
        if not self._controller.start_drag(row.index):
            return
        self.dragging = True
        try:
            super().startDrag(supportedActions)
        finally:
            self.dragging = False
            # released outside a valid target
            self._controller.cancel_drag()
            self.drag_finished.emit()

    def dragEnterEvent(self, event: QtGui.QDragEnterEvent) -> None:
        if event.source() is self and self._controller.reorder_engine.session is not None:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event: QtGui.QDragMoveEvent) -> None:
        index = self.key_area_index_at(event.position().toPoint())
        if index is None:
            event.ignore()
            return
        self._controller.drag_over(index)
        event.acceptProposedAction()

    def dropEvent(self, event: QtGui.QDropEvent) -> None:
        index = self.key_area_index_at(event.position().toPoint())
        if index is None:
            self._controller.cancel_drag()
            event.ignore()
            return
        self._controller.drop(index)
        # the controller owns the order; keep Qt from moving the item itself
        event.setDropAction(QtCore.Qt.DropAction.IgnoreAction)
        event.accept()
# endregion NAV-20 _PanelListWidget


# === [NAV-30] NavPanelWidget =================================================
# region NAV-30 NavPanelWidget
class NavPanelWidget(QtWidgets.QFrame):
    """Side navigation panel: static items plus the Key Areas submenu."""

    def __init__(self, controller: NavPanelController, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._rebuild_pending = False

        self.setObjectName("navPanel")
        self.setStyleSheet(
            "QFrame#navPanel { background: #dbeafe; border-right: 1px solid #93c5fd; }"
            "QLabel#navPanelTitle { color: #1e3a8a; font-weight: bold; font-size: 15px; }"
            "QLineEdit { background: #ffffff; border: 1px solid #93c5fd; border-radius: 8px; padding: 4px 8px; }"
            "QListWidget { background: transparent; border: none; }"
        )
        self.setMinimumWidth(220)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        title = QtWidgets.QLabel("Practical Manager")
        title.setObjectName("navPanelTitle")
        layout.addWidget(title)

        self.search = QtWidgets.QLineEdit()
        self.search.setPlaceholderText("Search menu")
        self.search.setClearButtonEnabled(True)
        self.search.textChanged.connect(self._controller.set_search_text)
        layout.addWidget(self.search)

        self.list = _PanelListWidget(controller)
        self.list.itemClicked.connect(self._on_item_clicked)
        self.list.drag_finished.connect(self._on_drag_finished)
        layout.addWidget(self.list, 1)

        self._controller.add_listener(self._on_controller_changed)
        self._rebuild()

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._controller.remove_listener(self._on_controller_changed)
        super().closeEvent(event)

    def _on_controller_changed(self) -> None:
        if self.list.dragging:
            # items must survive until the drag loop returns
            self._refresh_decorations()
            self._rebuild_pending = True
            return
        self._rebuild()

    def _on_drag_finished(self) -> None:
        if self._rebuild_pending:
            self._rebuild()

    def _rebuild(self) -> None:
        self._rebuild_pending = False
        self.list.blockSignals(True)
        try:
            self.list.clear()
            for row in self._controller.rows():
                item = QtWidgets.QListWidgetItem(_row_text(row))
                item.setData(ROW_ROLE, row)
                item.setFlags(_row_flags(row))
                _decorate(item, row)
                self.list.addItem(item)
        finally:
            self.list.blockSignals(False)

    def _refresh_decorations(self) -> None:
        rows = self._controller.rows()
        if len(rows) != self.list.count():
            return
        for position, row in enumerate(rows):
            item = self.list.item(position)
            current = item.data(ROW_ROLE)
            if not isinstance(current, PanelRow) or current.kind != row.kind or current.label != row.label:
                return
            _decorate(item, row)

    def _nav_items_by_label(self) -> Dict[str, NavItem]:
        return {item.label: item for item in self._controller.visible_nav_items()}

    def _on_item_clicked(self, item: QtWidgets.QListWidgetItem) -> None:
        row = item.data(ROW_ROLE)
        if not isinstance(row, PanelRow):
            return
        if row.kind == ROW_KEY_AREA:
            self._controller.select_key_area(row.key_area_id)
            return
        nav_item = self._nav_items_by_label().get(row.label)
        if nav_item is not None:
            self._controller.activate_nav_item(nav_item)
# endregion NAV-30 NavPanelWidget
