"""Process-wide switch and reporter for periodic training progress."""

import logging
import os

_enabled: bool = True


def enable_progress() -> None:
    """Turn periodic progress lines back on for subsequent training runs."""
    global _enabled
    _enabled = True


def disable_progress() -> None:
    """Silence periodic progress lines; per-merge ``verbose`` logging is unaffected."""
    global _enabled
    _enabled = False


def _is_enabled() -> bool:
    # SUBTOK_DISABLE_PROGRESS=1 wins over enable_progress()
    if os.environ.get("SUBTOK_DISABLE_PROGRESS", "").strip() == "1":
        return False
    return _enabled


class MergeProgress:
    """Logs a line roughly every tenth of the requested merges."""

    def __init__(self, logger: logging.Logger, n_requested: int) -> None:
        self.logger = logger
        self.n_requested = n_requested
        self.every = max(1, n_requested // 10)
        # read once so a run is either fully reported or silent
        self.active = _is_enabled()

    def update(self, n_done: int) -> None:
        if self.active and n_done % self.every == 0:
            pct = 100 * n_done // max(self.n_requested, 1)
            self.logger.info(f"learned {n_done}/{self.n_requested} merges ({pct}%)")
