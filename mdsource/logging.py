"""Logger hierarchy for mdsource.

Library modules only ever emit through `get_logger`; output stays silent until an
application calls `configure_logging` (directly or through
`ProjectConfig.configure_logging`).
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "mdsource"

_CONSOLE_FORMAT = "[mdsource] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_TAG = "_mdsource_handler"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return `mdsource.<name>`; a name already under the hierarchy is used as is."""
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(
    *, verbose: bool = False, log_file: Path | str | None = None
) -> logging.Logger:
    """Attach console and optional file output to the mdsource logger.

    Only handlers installed by an earlier call are replaced, so handlers added by
    the host application survive reconfiguration.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in [handler for handler in logger.handlers if _is_managed(handler)]:
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_managed(logging.StreamHandler(), level, _CONSOLE_FORMAT))
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_managed(logging.FileHandler(path, encoding="utf-8"), level, _FILE_FORMAT))
    return logger


def _managed(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    setattr(handler, _HANDLER_TAG, True)
    return handler


def _is_managed(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG, False))


__all__ = ["LOGGER_NAME", "configure_logging", "get_logger"]
