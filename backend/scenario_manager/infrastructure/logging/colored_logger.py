"""Colored stage logger for the start-up migration.

Each migration stage gets its own colour and icon so a terminal shows at a
glance whether the local cache was read, written to the document store and
cleared, or why it was left alone:

    📦 yellow  READ_CACHE   decoding the legacy cache keys
    ☁️  blue    BATCH_WRITE  the single atomic batch into the store
    🧹 green   CLEAR_CACHE  removing the migrated keys
    ⏭️  gray    SKIPPED      nothing cached
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RED = "\033[91m"
_GREEN = "\033[92m"
_GRAY = "\033[90m"


class MigrationStage(Enum):
    """Stages of the local cache migration: (ANSI colour, icon)."""

    READ_CACHE = ("\033[93m", "📦")
    BATCH_WRITE = ("\033[94m", "☁️")
    CLEAR_CACHE = (_GREEN, "🧹")
    SKIPPED = (_GRAY, "⏭️")

    @property
    def color(self) -> str:
        return self.value[0]

    @property
    def icon(self) -> str:
        return self.value[1]

    def tag(self, *, bold: bool = False) -> str:
        weight = _BOLD if bold else ""
        return f"{self.color}{weight}{self.icon} [{self.name}]{_RESET}"


class StageLogger:
    """Wraps a stdlib logger with stage-tagged, coloured messages.

    Usage:
        plog = StageLogger("MigrationService")
        plog.step_start(MigrationStage.READ_CACHE, "Reading local cache", keys=3)
        with plog.timed_step(MigrationStage.BATCH_WRITE, "Committing", writes=12):
            await store.commit_batch(writes)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: MigrationStage, message: str, **fields: Any) -> None:
        self._logger.info("%s %s%s%s%s", stage.tag(bold=True), stage.color, message, _RESET, _fields(fields))

    def step_complete(self, stage: MigrationStage, message: str, **fields: Any) -> None:
        self._logger.info("%s %s✓ %s%s%s", stage.tag(), _GREEN, message, _RESET, _fields(fields))

    def step_error(self, stage: MigrationStage, message: str, error: BaseException | None = None) -> None:
        cause = f" {_DIM}→ {type(error).__name__}: {error}{_RESET}" if error is not None else ""
        self._logger.error("%s%s❌ [%s]%s %s%s%s%s", _RED, _BOLD, stage.name, _RESET, _RED, message, _RESET, cause)

    def detail(self, message: str, **fields: Any) -> None:
        self._logger.info("   %s├─ %s%s%s", _GRAY, message, _RESET, _fields(fields))

    @contextmanager
    def timed_step(self, stage: MigrationStage, message: str, **fields: Any) -> Iterator[None]:
        """Log the start, then the duration on success or the error on failure (re-raised)."""
        self.step_start(stage, message, **fields)
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.step_error(stage, f"{message} failed after {time.perf_counter() - started:.2f}s", error=exc)
            raise
        self.step_complete(stage, f"{message} in {time.perf_counter() - started:.2f}s", **fields)


def _fields(fields: dict[str, Any]) -> str:
    if not fields:
        return ""
    joined = " | ".join(f"{key}={value}" for key, value in fields.items())
    return f" {_GRAY}({joined}){_RESET}"
