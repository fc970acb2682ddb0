# =============================================================================
# NAV INDEX (search these tags)
# [NAV-00] Imports / constants
# [NAV-10] Config loading (defaults/roaming)
# [NAV-20] Public getters
# [NAV-99] End
# =============================================================================

# === [NAV-00] Imports / constants ============================================
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("data/roaming/nav_config.json")
_DEFAULT_NAV_CONFIG = {
    "key_areas_path": "/key-areas",
    "max_key_areas": 10,
    "cache_path": "data/roaming/keyareas_cache.json",
    "log_level": "INFO",
}


# === [NAV-10] Config loading (defaults/roaming) ==============================
def load_nav_config(path: Optional[Path] = None) -> Dict:
    path = Path(path) if path else CONFIG_PATH
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(_DEFAULT_NAV_CONFIG, indent=2), encoding="utf-8")
        return _DEFAULT_NAV_CONFIG.copy()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        logger.warning("unreadable nav config at %s, using defaults", path)
        return _DEFAULT_NAV_CONFIG.copy()
    if not isinstance(data, dict):
        return _DEFAULT_NAV_CONFIG.copy()
    for key, value in _DEFAULT_NAV_CONFIG.items():
        data.setdefault(key, value)
    return data


def save_nav_config(data: Dict, path: Optional[Path] = None) -> None:
    path = Path(path) if path else CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# === [NAV-20] Public getters ==================================================
def get_key_areas_path(config: Optional[Dict] = None) -> str:
    config = config if config is not None else load_nav_config()
    value = str(config.get("key_areas_path") or "").strip()
    if not value.startswith("/"):
        return _DEFAULT_NAV_CONFIG["key_areas_path"]
    return value


def get_max_key_areas(config: Optional[Dict] = None) -> int:
    config = config if config is not None else load_nav_config()
    try:
        value = int(config.get("max_key_areas"))
    except (TypeError, ValueError):
        return int(_DEFAULT_NAV_CONFIG["max_key_areas"])
    return max(1, value)


def get_cache_path(config: Optional[Dict] = None) -> Path:
    config = config if config is not None else load_nav_config()
    return Path(config.get("cache_path") or _DEFAULT_NAV_CONFIG["cache_path"])


# === [NAV-99] End =============================================================
__all__ = [
    "CONFIG_PATH",
    "load_nav_config",
    "save_nav_config",
    "get_key_areas_path",
    "get_max_key_areas",
    "get_cache_path",
]
