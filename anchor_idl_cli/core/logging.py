"""Console logging for the toolkit.

Messages go to stderr as ``time - LEVEL - [source] message payload`` so
report output on stdout stays clean.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict

LOGGER_NAME = "anchor_idl_cli"


class SimpleLogger:
    """Thin wrapper around the ``anchor_idl_cli`` logger with build timers."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(LOGGER_NAME)
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
            )
            self._logger.addHandler(handler)
        self._timers: Dict[str, datetime] = {}
        self.configure()

    def configure(self, level: int = logging.INFO) -> None:
        self._logger.setLevel(level)

    def debug(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.DEBUG, msg, source, payload)

    def info(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.INFO, msg, source, payload)

    # Completed operations; logged at INFO
    def success(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.INFO, msg, source, payload)

    def start_timer(self, name: str) -> None:
        self._timers[name] = datetime.now()

    def end_timer(self, name: str, source: str | None = None) -> None:
        start = self._timers.pop(name, None)
        if start:
            self._emit(logging.INFO, f"{name} completed in {datetime.now() - start}", source)

    def _emit(self, level: int, msg: str, source: str | None, payload: Any | None = None) -> None:
        if not self._logger.isEnabledFor(level):
            return
        line = f"[{source}] {msg}" if source else msg
        if payload is not None:
            line = f"{line} {payload}"
        self._logger.log(level, line)


log = SimpleLogger()


def configure_console_log(debug: bool = False, level: str | None = None) -> None:
    """Configure the console logger.

    ``debug`` wins over ``level``; an unknown level name falls back to INFO.
    """
    if debug:
        log.configure(logging.DEBUG)
        return
    resolved = logging.getLevelName((level or "INFO").upper())
    log.configure(resolved if isinstance(resolved, int) else logging.INFO)


__all__ = ["log", "configure_console_log", "LOGGER_NAME"]
