from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

LOGGER_NAME = "pmnav"
# package loggers that write through the pmnav handler
_PACKAGE_LOGGERS = ("runtime_bus", "app_ui", "core_center")

_CONFIGURED = False
_HANDLER: Optional[logging.Handler] = None


def _make_handler(log_path: Path) -> logging.Handler:
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s")
    )
    return handler


def configure_logging(base_dir: Optional[Path] = None, level: str = "INFO") -> Dict[str, str]:
    global _CONFIGURED, _HANDLER
    root = base_dir or Path("data/roaming")
    log_dir = root / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "pmnav.log"

    logger_name = LOGGER_NAME if base_dir is None else f"{LOGGER_NAME}.test"
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = False

    if base_dir is None and not _CONFIGURED:
        _HANDLER = _make_handler(log_path)
        logger.addHandler(_HANDLER)
        for name in _PACKAGE_LOGGERS:
            package_logger = logging.getLogger(name)
            package_logger.setLevel(logger.level)
            package_logger.addHandler(_HANDLER)
        _CONFIGURED = True
    elif base_dir is not None:
        for handler in list(logger.handlers):
            if getattr(handler, "baseFilename", None) == os.path.abspath(log_path):
                break
            logger.removeHandler(handler)
            handler.close()
        else:
            logger.addHandler(_make_handler(log_path))

    return {
        "log_path": str(log_path),
        "format": "kv",
        "handlers": "file",
        "logger_name": logger_name,
    }


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
