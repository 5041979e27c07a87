"""
Debounced draft persistence.

Each contributor gets one ``PendingWrite`` cell. Every edit merges into the
pending draft and re-arms the timer, so a burst of edits inside the quiet
period produces a single write carrying the last state. Writes for one cell
run one at a time.
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from django.db import connection

from Contribute.models import Contributor


class PendingWrite:
    def __init__(
        self,
        persist: Callable[[Dict[str, Any]], None],
        delay: float,
        timer_factory: Callable[..., Any] = threading.Timer,
        on_idle: Optional[Callable[["PendingWrite"], None]] = None,
    ):
        self._persist = persist
        self._on_idle = on_idle
        self._delay = delay
        self._timer_factory = timer_factory
        self._state_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._pending: Optional[Dict[str, Any]] = None
        self._timer = None

    @property
    def is_pending(self) -> bool:
        with self._state_lock:
            return self._pending is not None

    def stage(self, values: Dict[str, Any]) -> None:
        with self._state_lock:
            self._pending = {**(self._pending or {}), **values}

    def schedule(self, values: Dict[str, Any], delay: Optional[float] = None) -> None:
        with self._state_lock:
            self._pending = {**(self._pending or {}), **values}
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(self._delay if delay is None else delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._state_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> bool:
        """Persist whatever is pending now. Returns False when nothing was."""
        try:
            with self._write_lock:
                with self._state_lock:
                    values, self._pending = self._pending, None
                    if self._timer is not None:
                        self._timer.cancel()
                    self._timer = None
                if values is not None:
                    self._persist(values)
        finally:
            if self._on_idle is not None:
                self._on_idle(self)
        return values is not None

    def take(self) -> Optional[Dict[str, Any]]:
        """Remove and return the pending draft without writing it."""
        with self._write_lock:
            with self._state_lock:
                values, self._pending = self._pending, None
                if self._timer is not None:
                    self._timer.cancel()
                self._timer = None
        return values

    def peek(self) -> Dict[str, Any]:
        with self._state_lock:
            return dict(self._pending or {})

    def _fire(self) -> None:
        try:
            self.flush()
        except Exception:
            logging.exception("Autosave write failed")
        finally:
            # timer threads open their own connection
            if threading.current_thread() is not threading.main_thread():
                connection.close()


def persist_draft(contributor_id, values: Dict[str, Any]) -> int:
    """Write draft columns unless the preferences were already submitted."""
    return Contributor.objects.filter(
        id=contributor_id,
        allocation_prefs_submitted_at__isnull=True,
    ).update(**values)


class AutosaveRegistry:
    def __init__(self, delay: Optional[float] = None, timer_factory: Callable[..., Any] = threading.Timer):
        self._delay = delay
        self._timer_factory = timer_factory
        self._cells: Dict[Any, PendingWrite] = {}
        self._lock = threading.Lock()

    @property
    def delay(self) -> float:
        if self._delay is not None:
            return self._delay
        return float(getattr(settings, "AUTOSAVE_DEBOUNCE_SECONDS", 1.0))

    def __len__(self) -> int:
        with self._lock:
            return len(self._cells)

    def _cell_for(self, contributor_id) -> PendingWrite:
        # caller holds self._lock
        cell = self._cells.get(contributor_id)
        if cell is None:
            cell = PendingWrite(
                lambda values: persist_draft(contributor_id, values),
                self.delay,
                self._timer_factory,
                on_idle=lambda idle: self._release(contributor_id, idle),
            )
            self._cells[contributor_id] = cell
        return cell

    def _release(self, contributor_id, cell: PendingWrite) -> None:
        with self._lock:
            if self._cells.get(contributor_id) is cell and not cell.is_pending:
                del self._cells[contributor_id]

    def schedule(self, contributor_id, values: Dict[str, Any]) -> bool:
        """Queue a draft write. Returns True when it was written inline."""
        delay = self.delay
        with self._lock:
            cell = self._cell_for(contributor_id)
            if delay > 0:
                cell.schedule(values, delay=delay)
                return False
            cell.stage(values)
        cell.flush()
        return True

    def is_pending(self, contributor_id) -> bool:
        with self._lock:
            cell = self._cells.get(contributor_id)
        return bool(cell and cell.is_pending)

    def pending_values(self, contributor_id) -> Dict[str, Any]:
        with self._lock:
            cell = self._cells.get(contributor_id)
        return cell.peek() if cell is not None else {}

    def take(self, contributor_id) -> Dict[str, Any]:
        """Stop tracking a contributor and hand back any unwritten draft."""
        with self._lock:
            cell = self._cells.pop(contributor_id, None)
        if cell is None:
            return {}
        return cell.take() or {}

    def discard(self, contributor_id) -> None:
        self.take(contributor_id)


registry = AutosaveRegistry()
