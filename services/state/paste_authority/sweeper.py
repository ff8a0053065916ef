"""Background retention sweeper that deletes expired pastes.

The sweeper is an explicit state machine::

    IDLE --tick--> SWEEPING --done--> IDLE
      \\                |
       +----stop-------+---> STOPPED (terminal)

The first sweep runs as soon as the loop starts. Waiting between ticks uses
the stop token, so a stop request wakes the loop immediately and also aborts
an in-flight sweep at its next backend call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from threading import Lock, Thread
from typing import Callable

from packages.pastebin_shared.cancellation import (
    CancellationToken,
    OperationCancelledError,
)
from packages.pastebin_shared.durations import format_duration
from packages.pastebin_shared.logging import fields, get_logger
from services.state.paste_authority.domain import PasteMeta
from services.state.paste_authority.interfaces import (
    CONTINUE,
    PasteStore,
    PasteStoreError,
    VisitResult,
)

_LOGGER = get_logger(__name__)


class SweeperState(str, Enum):
    """Lifecycle state of one retention sweeper."""

    IDLE = "idle"
    SWEEPING = "sweeping"
    STOPPED = "stopped"


@dataclass(frozen=True)
class SweepReport:
    """Outcome counters for one sweep pass."""

    scanned: int
    expired: int
    deleted: int
    failed: int
    completed: bool
    cancelled: bool = False
    error: str | None = None


@dataclass
class _Tally:
    scanned: int = 0
    expired: int = 0
    deleted: int = 0
    failed: int = 0

    def report(
        self,
        *,
        completed: bool,
        cancelled: bool = False,
        error: str | None = None,
    ) -> SweepReport:
        return SweepReport(
            scanned=self.scanned,
            expired=self.expired,
            deleted=self.deleted,
            failed=self.failed,
            completed=completed,
            cancelled=cancelled,
            error=error,
        )


def _utc_now() -> datetime:
    return datetime.now(UTC)


class RetentionSweeper:
    """Periodically enumerate paste metadata and delete expired pastes."""

    def __init__(
        self,
        *,
        store: PasteStore,
        interval: timedelta,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("interval must be positive")
        self._store = store
        self._interval = interval
        self._clock = clock
        self._lock = Lock()
        self._state = SweeperState.IDLE
        self._worker: Thread | None = None
        self._stop_token: CancellationToken | None = None
        self._last_report: SweepReport | None = None

    @property
    def state(self) -> SweeperState:
        """Return the current lifecycle state."""
        with self._lock:
            return self._state

    @property
    def last_report(self) -> SweepReport | None:
        """Return the report of the most recent sweep, if any ran."""
        with self._lock:
            return self._last_report

    def sweep_once(self, token: CancellationToken | None = None) -> SweepReport:
        """Run one full pass and return its counters.

        Enumeration failures are logged and reported, never raised.
        """
        token = token or CancellationToken()
        tally = _Tally()
        now = self._clock()

        def visit(meta: PasteMeta) -> VisitResult:
            tally.scanned += 1
            if not meta.is_expired(now):
                return CONTINUE
            tally.expired += 1
            try:
                self._store.delete(meta.checksum, token=token)
            except PasteStoreError as exc:
                tally.failed += 1
                _LOGGER.warning(
                    "failed to delete expired paste",
                    extra={fields.CHECKSUM: meta.checksum, "error": str(exc)},
                )
                return CONTINUE
            tally.deleted += 1
            _LOGGER.info(
                "deleted expired paste", extra={fields.CHECKSUM: meta.checksum}
            )
            return CONTINUE

        try:
            self._store.for_each_meta(visit, token=token)
        except OperationCancelledError as exc:
            report = tally.report(completed=False, cancelled=True, error=str(exc))
            _LOGGER.info("cleanup cancelled", extra=_report_fields(report))
        except PasteStoreError as exc:
            report = tally.report(completed=False, error=str(exc))
            _LOGGER.error("cleanup failed", extra=_report_fields(report))
        else:
            report = tally.report(completed=True)
            _LOGGER.info("cleanup complete", extra=_report_fields(report))

        with self._lock:
            self._last_report = report
        return report

    def run(self, stop_token: CancellationToken) -> None:
        """Sweep now, then once per interval until ``stop_token`` is cancelled."""
        _LOGGER.info(
            "retention sweeper started",
            extra={fields.INTERVAL: format_duration(self._interval)},
        )
        try:
            while not stop_token.cancelled:
                self._set_state(SweeperState.SWEEPING)
                self.sweep_once(stop_token)
                if stop_token.cancelled:
                    break
                self._set_state(SweeperState.IDLE)
                if stop_token.wait(self._interval.total_seconds()):
                    break
        finally:
            self._set_state(SweeperState.STOPPED)
            _LOGGER.info("retention sweeper stopped")

    def start(self, stop_token: CancellationToken | None = None) -> None:
        """Run the sweep loop on a daemon thread."""
        with self._lock:
            if self._state is SweeperState.STOPPED:
                raise RuntimeError("retention sweeper already stopped")
            if self._worker is not None:
                return
            self._stop_token = stop_token or CancellationToken()
            self._worker = Thread(
                target=self.run,
                args=(self._stop_token,),
                name="retention-sweeper",
                daemon=True,
            )
            self._worker.start()

    def stop(self, timeout: float | None = None) -> bool:
        """Cancel the loop and wait for the worker; return whether it exited."""
        with self._lock:
            worker = self._worker
            token = self._stop_token
        if token is not None:
            token.cancel()
        if worker is None:
            self._set_state(SweeperState.STOPPED)
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def _set_state(self, state: SweeperState) -> None:
        with self._lock:
            self._state = state
        _LOGGER.debug(
            "retention sweeper state", extra={fields.SWEEP_STATE: state.value}
        )


def _report_fields(report: SweepReport) -> dict[str, object]:
    """Return structured log fields for one sweep report."""
    payload: dict[str, object] = {
        fields.SWEEP_SCANNED: report.scanned,
        fields.SWEEP_EXPIRED: report.expired,
        fields.SWEEP_DELETED: report.deleted,
        fields.SWEEP_FAILED: report.failed,
    }
    if report.error is not None:
        payload["error"] = report.error
    return payload
