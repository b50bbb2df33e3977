# steelcut/logger.py
# Lightweight run diagnostics for the optimizer.
# Info/debug go to stdout, warnings/errors to stderr; the CLI silences it with --quiet.

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

_LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


@dataclass
class Logger:
    enabled: bool = True
    level: str = "info"
    prefix: str = "[steelcut]"

    def _emit(self, level: str, msg: str, stream: TextIO) -> None:
        if _LEVELS[level] < _LEVELS.get(self.level, 20):
            return
        tag = "" if level in ("debug", "info") else f"{level.upper()}: "
        print(f"{self.prefix} {tag}{msg}", file=stream)

    def debug(self, msg: str) -> None:
        if self.enabled:
            self._emit("debug", msg, sys.stdout)

    def info(self, msg: str) -> None:
        if self.enabled:
            self._emit("info", msg, sys.stdout)

    def warn(self, msg: str) -> None:
        if self.enabled:
            self._emit("warn", msg, sys.stderr)

    def error(self, msg: str) -> None:
        # errors are printed even when disabled
        self._emit("error", msg, sys.stderr)


LOGGER = Logger()


def set_enabled(flag: bool) -> None:
    LOGGER.enabled = bool(flag)


def set_level(level: str) -> None:
    if level not in _LEVELS:
        raise ValueError(f"Unknown log level: {level!r} (use one of {sorted(_LEVELS)})")
    LOGGER.level = level


def get_logger() -> Logger:
    return LOGGER
