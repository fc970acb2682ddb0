import json
import logging
from pathlib import Path

from app_ui import config as nav_config
from diagnostics.logging_setup import configure_logging


def test_load_creates_defaults(tmp_path: Path) -> None:
    path = tmp_path / "roaming" / "nav_config.json"
    data = nav_config.load_nav_config(path)
    assert path.exists()
    assert data["key_areas_path"] == "/key-areas"
    assert nav_config.get_max_key_areas(data) == 10
    assert nav_config.get_cache_path(data) == Path("data/roaming/keyareas_cache.json")


def test_load_fills_missing_keys_and_survives_garbage(tmp_path: Path) -> None:
    path = tmp_path / "nav_config.json"
    path.write_text(json.dumps({"max_key_areas": 4}), encoding="utf-8")
    data = nav_config.load_nav_config(path)
    assert data["max_key_areas"] == 4
    assert data["log_level"] == "INFO"

    path.write_text("not json", encoding="utf-8")
    assert nav_config.load_nav_config(path)["max_key_areas"] == 10


def test_getters_reject_bad_values() -> None:
    assert nav_config.get_key_areas_path({"key_areas_path": "areas"}) == "/key-areas"
    assert nav_config.get_key_areas_path({"key_areas_path": "/areas"}) == "/areas"
    assert nav_config.get_max_key_areas({"max_key_areas": "lots"}) == 10
    assert nav_config.get_max_key_areas({"max_key_areas": 0}) == 1


def test_save_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nav_config.json"
    nav_config.save_nav_config({"key_areas_path": "/ka"}, path)
    assert nav_config.load_nav_config(path)["key_areas_path"] == "/ka"


def test_configure_logging_writes_kv_lines(tmp_path: Path) -> None:
    info = configure_logging(tmp_path)
    assert info["logger_name"] == "pmnav.test"
    logger = logging.getLogger(info["logger_name"])
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    text = Path(info["log_path"]).read_text(encoding="utf-8")
    assert "level=INFO" in text and "msg=hello" in text
    configure_logging(tmp_path)
    assert len(logger.handlers) == 1
