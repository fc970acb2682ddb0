from __future__ import annotations

import logging
from typing import List, Set, Tuple

from .schema import (
    KeyArea,
    coerce_key_areas,
    is_dont_forget,
    is_ideas_entry,
    normalized_title,
)

logger = logging.getLogger(__name__)

SortKey = Tuple[int, float, int, str]


def normalize_key_areas(raw: object) -> List[KeyArea]:
    """Build the panel's Display List from a raw snapshot.

    The result has unique ids, at most one Ideas/default entry, no
    "Don't Forget" entry, and is ordered by :func:`display_sort_key`.
    Malformed payloads normalize to an empty list.
    """
    areas = _dedupe_by_id(coerce_key_areas(raw))
    areas = [area for area in areas if not is_dont_forget(area)]
    areas = _resolve_default_entry(areas)
    # sorted() is stable, so equal keys keep input order
    return sorted(areas, key=display_sort_key)


def display_sort_key(area: KeyArea) -> SortKey:
    """Positioned entries first by position; the rest by title, Ideas last."""
    if area.has_position:
        return (0, float(area.position), 0, "")  # type: ignore[arg-type]
    return (1, 0.0, 1 if is_ideas_entry(area) else 0, normalized_title(area.title))


def first_entry(raw: object) -> KeyArea | None:
    display = normalize_key_areas(raw)
    return display[0] if display else None


def _dedupe_by_id(areas: List[KeyArea]) -> List[KeyArea]:
    seen: Set[object] = set()
    unique: List[KeyArea] = []
    for area in areas:
        key = _id_key(area.id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(area)
    if len(unique) != len(areas):
        logger.debug("dropped %d duplicate key area ids", len(areas) - len(unique))
    return unique


def _resolve_default_entry(areas: List[KeyArea]) -> List[KeyArea]:
    candidates = [area for area in areas if is_ideas_entry(area)]
    if len(candidates) <= 1:
        return areas
    keep = next((area for area in candidates if area.is_default), candidates[0])
    dropped = {_id_key(area.id) for area in candidates if area is not keep}
    logger.debug("resolved %d Ideas/default candidates to id=%s", len(candidates), keep.id)
    return [area for area in areas if _id_key(area.id) not in dropped]


def _id_key(value: object) -> object:
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


__all__ = ["display_sort_key", "first_entry", "normalize_key_areas"]
