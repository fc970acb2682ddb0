"""Payload shapes shared by the navigation panel and the key-area owner.

Both sides of the ``keyarea-*`` topics import from here so neither has to
guess at the other's records.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

KeyAreaId = Union[str, int]

IDEAS_TITLE = "ideas"
DONT_FORGET_TITLES = frozenset({"don't forget", "dont forget"})


@dataclass(frozen=True)
class KeyArea:
    id: KeyAreaId
    title: str = ""
    color: Optional[str] = None
    position: Optional[float] = None
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Optional["KeyArea"]:
        ka_id = data.get("id")
        if ka_id is None or ka_id == "":
            return None
        title = data.get("title")
        color = data.get("color")
        if "is_default" in data:
            is_default = data.get("is_default")
        else:
            is_default = data.get("isDefault")
        return cls(
            id=ka_id,  # type: ignore[arg-type]
            title="" if title is None else str(title),
            color=str(color) if color else None,
            position=_numeric_or_none(data.get("position")),
            is_default=bool(is_default),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "color": self.color,
            "position": self.position,
            "is_default": self.is_default,
        }

    @property
    def has_position(self) -> bool:
        return is_numeric_position(self.position)


@dataclass(frozen=True)
class OpenRequest:
    id: KeyAreaId

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id}


def is_numeric_position(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _numeric_or_none(value: object) -> Optional[float]:
    return value if is_numeric_position(value) else None  # type: ignore[return-value]


def normalized_title(value: object) -> str:
    """Lower-case ``value`` and collapse runs of whitespace."""
    return " ".join(str(value or "").split()).lower()


def is_dont_forget(area: KeyArea) -> bool:
    return normalized_title(area.title) in DONT_FORGET_TITLES


def is_ideas_entry(area: KeyArea) -> bool:
    """True for the locked default slot, matched by flag or by its title."""
    return bool(area.is_default) or normalized_title(area.title) == IDEAS_TITLE


def coerce_key_areas(payload: object) -> List[KeyArea]:
    """Turn a raw snapshot payload into ``KeyArea`` records.

    Non-sequence payloads become an empty list; unusable records are skipped.
    """
    if not isinstance(payload, (list, tuple)):
        if payload is not None:
            logger.warning("ignoring non-list key area payload: %s", type(payload).__name__)
        return []
    areas: List[KeyArea] = []
    for record in payload:
        if isinstance(record, KeyArea):
            areas.append(record)
            continue
        if not isinstance(record, Mapping):
            logger.debug("skipping key area record of type %s", type(record).__name__)
            continue
        area = KeyArea.from_dict(record)
        if area is None:
            logger.debug("skipping key area record without id")
            continue
        areas.append(area)
    return areas


def key_areas_to_payload(areas: Iterable[KeyArea]) -> List[Dict[str, object]]:
    return [area.to_dict() for area in areas]


def coerce_open_request(payload: object) -> Optional[OpenRequest]:
    if isinstance(payload, OpenRequest):
        return payload
    if isinstance(payload, Mapping):
        ka_id = payload.get("id")
        if ka_id is not None and ka_id != "":
            return OpenRequest(id=ka_id)  # type: ignore[arg-type]
    return None


__all__ = [
    "KeyArea",
    "KeyAreaId",
    "OpenRequest",
    "coerce_key_areas",
    "coerce_open_request",
    "is_dont_forget",
    "is_ideas_entry",
    "is_numeric_position",
    "key_areas_to_payload",
    "normalized_title",
]
