"""Per-session UI state of the console page."""

from __future__ import annotations

import itertools
from typing import List, Optional

from .models import Alert, SystemConfig


class UiState:
    """Transient state of one console session.

    Holds the visible alert, the loading flag, the selected ``sys_id`` and the
    last successfully fetched config list. Nothing here is persisted.

    List refreshes are single-flight: ``begin_refresh`` hands out a token and
    only the holder of the newest token may publish its result. A periodic
    refresh is skipped while any refresh is still in flight; an explicit one
    always proceeds and supersedes whatever is pending.
    """

    def __init__(self):
        self.alert: Optional[Alert] = None
        self.busy = False
        self.selected_sys_id = ""
        self.configs: List[SystemConfig] = []
        self._tokens = itertools.count(1)
        self._current_token = 0
        self._inflight: Optional[int] = None

    def present(self, alert: Alert) -> Alert:
        self.alert = alert
        return alert

    def clear(self) -> None:
        self.alert = None

    def set_busy(self, flag: bool) -> None:
        self.busy = bool(flag)

    def select(self, sys_id) -> None:
        self.selected_sys_id = sys_id or ""

    def clear_selection_if(self, sys_id: str) -> bool:
        if self.selected_sys_id and self.selected_sys_id == sys_id:
            self.selected_sys_id = ""
            return True
        return False

    @property
    def refreshing(self) -> bool:
        return self._inflight is not None

    def begin_refresh(self, periodic: bool = False) -> Optional[int]:
        """Return a refresh token, or None when a periodic refresh should be skipped."""
        if periodic and self.refreshing:
            return None
        token = next(self._tokens)
        self._current_token = token
        self._inflight = token
        return token

    def is_current(self, token: int) -> bool:
        return token == self._current_token

    def end_refresh(self, token: int) -> bool:
        """Release ``token``; True when its result is still the newest one."""
        if token != self._current_token:
            return False
        self._inflight = None
        return True

    def publish_configs(self, token: int, configs: List[SystemConfig]) -> bool:
        if not self.is_current(token):
            return False
        self.configs = list(configs)
        return True
