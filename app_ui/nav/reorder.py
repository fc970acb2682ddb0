from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from runtime_bus import topics

from .schema import KeyArea

logger = logging.getLogger(__name__)

STATE_IDLE = "IDLE"
STATE_DRAGGING = "DRAGGING"


@dataclass
class DragSession:
    source_item: KeyArea
    source_index: int
    drag_over_index: Optional[int] = None


def reorder_key_areas(
    items: Sequence[KeyArea], source_index: int, target_index: int
) -> List[KeyArea]:
    """Move ``items[source_index]`` to ``target_index`` and renumber positions.

    Uses splice semantics: the element is removed first, then inserted at
    ``target_index`` of the shortened list. Every element gets
    ``position == index`` in the result.
    """
    working = list(items)
    if not 0 <= source_index < len(working):
        raise IndexError("source_index out of range")
    moved = working.pop(source_index)
    target = max(0, min(int(target_index), len(working)))
    working.insert(target, moved)
    return [dataclasses.replace(area, position=index) for index, area in enumerate(working)]


class ReorderEngine:
    """Drag-reorder state machine for the key-area Display List.

    ``IDLE -> DRAGGING -> (drag over)* -> drop | cancel -> IDLE``. Locked
    (default) entries can be drop targets but never drag sources.
    """

    def __init__(self, bus=None, *, source: str = "nav_panel") -> None:
        self._bus = bus
        self._source = source
        self._session: Optional[DragSession] = None

    @property
    def state(self) -> str:
        return STATE_DRAGGING if self._session is not None else STATE_IDLE

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    def start_drag(self, items: Sequence[KeyArea], index: int) -> bool:
        if not 0 <= index < len(items):
            return False
        item = items[index]
        if item.is_default:
            logger.debug("drag start ignored for locked key area id=%s", item.id)
            return False
        self._session = DragSession(source_item=item, source_index=index)
        return True

    def drag_over(self, index: int) -> None:
        if self._session is None:
            return
        self._session.drag_over_index = int(index)

    def cancel(self) -> None:
        self._session = None

    def drop(
        self,
        items: Sequence[KeyArea],
        target_index: int,
        on_reordered: Optional[Callable[[List[KeyArea]], None]] = None,
    ) -> Optional[List[KeyArea]]:
        """Commit the drag at ``target_index``.

        Returns the renumbered list, or ``None`` when nothing changed. The
        list goes to ``on_reordered`` before it is published, so a local
        optimistic copy never overwrites a snapshot sent in response. The
        session is always cleared.
        """
        session = self._session
        self._session = None
        if session is None:
            return None
        source_index = self._locate_source(items, session)
        if source_index is None:
            logger.debug("drag source id=%s vanished before drop", session.source_item.id)
            return None
        target_index = max(0, min(int(target_index), len(items) - 1))
        if target_index == source_index:
            return None
        reordered = reorder_key_areas(items, source_index, target_index)
        if on_reordered is not None:
            on_reordered(reordered)
        self._publish(reordered)
        return reordered

    def _locate_source(self, items: Sequence[KeyArea], session: DragSession) -> Optional[int]:
        index = session.source_index
        if 0 <= index < len(items) and items[index].id == session.source_item.id:
            return index
        # the list may have been replaced by a snapshot mid-drag
        for candidate, area in enumerate(items):
            if area.id == session.source_item.id:
                return candidate
        return None

    def _publish(self, reordered: List[KeyArea]) -> None:
        if self._bus is None:
            return
        logger.debug("publishing reorder of %d key areas", len(reordered))
        self._bus.publish(topics.KEYAREA_REORDER, list(reordered), source=self._source)


__all__ = [
    "DragSession",
    "ReorderEngine",
    "STATE_DRAGGING",
    "STATE_IDLE",
    "reorder_key_areas",
]
