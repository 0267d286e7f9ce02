"""
Pause switch: one global flag, default active (not paused).

Checked by transfer-class operations only. Owner authorization is enforced by
the dispatcher.
"""

from __future__ import annotations


class PauseSwitch:
    def __init__(self, paused: bool = False) -> None:
        self._paused = bool(paused)

    def is_paused(self) -> bool:
        return self._paused

    def set(self, value: bool) -> None:
        self._paused = bool(value)
