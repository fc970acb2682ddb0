from __future__ import annotations

import dataclasses
import json
import logging
import uuid
from pathlib import Path
from typing import Callable, List, Optional

from app_ui.nav.schema import (
    KeyArea,
    KeyAreaId,
    coerce_key_areas,
    is_ideas_entry,
    key_areas_to_payload,
)

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path("data/roaming/keyareas_cache.json")
DEFAULT_MAX_KEY_AREAS = 10
IDEAS_SLOT = KeyArea(id="ideas", title="Ideas", position=10, is_default=True)
_FREE_POSITIONS = range(1, 10)


class KeyAreaStore:
    """Canonical key-area collection owned by the Key Areas page.

    Every mutation is persisted to the JSON cache and handed to the
    ``on_change`` callback, which the bus endpoints turn into a snapshot.
    """

    def __init__(
        self,
        cache_path: Optional[Path] = None,
        *,
        max_key_areas: int = DEFAULT_MAX_KEY_AREAS,
        id_factory: Optional[Callable[[], KeyAreaId]] = None,
    ) -> None:
        self._cache_path = Path(cache_path) if cache_path else DEFAULT_CACHE_PATH
        self._max_key_areas = max(1, int(max_key_areas))
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex[:12])
        self._areas: List[KeyArea] = []
        self._on_change: Optional[Callable[[List[KeyArea]], None]] = None
        self.selected_id: Optional[KeyAreaId] = None
        self.view = "all"

    def set_change_callback(self, callback: Optional[Callable[[List[KeyArea]], None]]) -> None:
        self._on_change = callback

    @property
    def key_areas(self) -> List[KeyArea]:
        return sorted(self._areas, key=_position_key)

    def get(self, key_area_id: KeyAreaId) -> Optional[KeyArea]:
        return next((area for area in self._areas if _same_id(area.id, key_area_id)), None)

    # --- persistence
    def load_cache(self) -> List[KeyArea]:
        path = self._cache_path
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except Exception:
            logger.warning("unreadable key area cache at %s", path)
            return []
        return coerce_key_areas(data)

    def prime_from_cache(self) -> bool:
        """Adopt and announce cached entries before the authoritative load."""
        cached = self.load_cache()
        if not cached:
            return False
        self._areas = cached
        self._emit()
        return True

    def _save_cache(self) -> None:
        try:
            self._cache_path.parent.mkdir(parents=True, exist_ok=True)
            self._cache_path.write_text(
                json.dumps(key_areas_to_payload(self.key_areas), indent=2),
                encoding="utf-8",
            )
        except Exception:
            logger.warning("failed to write key area cache at %s", self._cache_path, exc_info=True)

    # --- mutations
    def replace_all(self, areas: List[KeyArea]) -> None:
        self._areas = list(areas)
        self._commit()

    def ensure_ideas_slot(self) -> KeyArea:
        existing = next((area for area in self._areas if is_ideas_entry(area)), None)
        if existing is not None:
            return existing
        self._areas.append(IDEAS_SLOT)
        self._commit()
        return IDEAS_SLOT

    def create(self, title: str, color: Optional[str] = None) -> KeyArea:
        clean = (title or "").strip()
        if not clean:
            raise ValueError("title_required")
        if len(self._areas) >= self._max_key_areas:
            raise ValueError("key_area_limit_reached")
        default = next((area for area in self._areas if area.is_default and area.has_position), None)
        used = {area.position for area in self._areas if area is not default}
        position = next((pos for pos in _FREE_POSITIONS if pos not in used), len(self._areas))
        if default is not None and position >= default.position:  # type: ignore[operator]
            # the locked slot stays last
            position = default.position
            last = max(area.position for area in self._areas if area.has_position)
            moved = dataclasses.replace(default, position=last + 1)  # type: ignore[operator]
            self._areas = [moved if existing is default else existing for existing in self._areas]
        area = KeyArea(id=self._id_factory(), title=clean, color=color, position=position)
        self._areas.append(area)
        self._commit()
        return area

    def update(self, key_area_id: KeyAreaId, **fields: object) -> KeyArea:
        current = self.get(key_area_id)
        if current is None:
            raise ValueError("key_area_not_found")
        allowed = {key: value for key, value in fields.items() if key in ("title", "color")}
        if "title" in allowed:
            allowed["title"] = str(allowed["title"] or "").strip()
            if not allowed["title"]:
                raise ValueError("title_required")
        updated = dataclasses.replace(current, **allowed)
        self._areas = [updated if area is current else area for area in self._areas]
        self._commit()
        return updated

    def delete(self, key_area_id: KeyAreaId) -> bool:
        current = self.get(key_area_id)
        if current is None or current.is_default:
            return False
        self._areas = [area for area in self._areas if area is not current]
        if self.selected_id is not None and _same_id(self.selected_id, key_area_id):
            self.selected_id = None
        self._commit()
        return True

    def apply_reorder(self, payload: object) -> List[KeyArea]:
        """Reconcile the collection with a panel reorder proposal.

        Known ids take the proposed order, entries the proposal did not carry
        follow in their previous order, and positions become ``0..n-1``.
        """
        proposed = coerce_key_areas(payload)
        remaining = self.key_areas
        ordered: List[KeyArea] = []
        for candidate in proposed:
            match = next((area for area in remaining if _same_id(area.id, candidate.id)), None)
            if match is None:
                continue
            remaining.remove(match)
            ordered.append(match)
        ordered.extend(remaining)
        self._areas = [dataclasses.replace(area, position=index) for index, area in enumerate(ordered)]
        self._commit()
        return self.key_areas

    # --- page state driven by the panel
    def open(self, key_area_id: KeyAreaId) -> Optional[KeyArea]:
        area = self.get(key_area_id)
        if area is None:
            return None
        self.selected_id = area.id
        self.view = "detail"
        return area

    def show_all(self) -> None:
        self.selected_id = None
        self.view = "all"

    def _commit(self) -> None:
        self._save_cache()
        self._emit()

    def _emit(self) -> None:
        if self._on_change is None:
            return
        self._on_change(self.key_areas)


def _position_key(area: KeyArea) -> tuple[int, float]:
    if area.has_position:
        return (0, float(area.position))  # type: ignore[arg-type]
    return (1, 0.0)


def _same_id(left: object, right: object) -> bool:
    return left == right or str(left) == str(right)

