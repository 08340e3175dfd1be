"""Background autotune job with a status channel.

Runs the random search on a worker thread so an interactive caller stays
responsive, publishing progress to a bounded queue and supporting
cancellation between samples.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from queue import Empty, Full, Queue
from typing import Optional

from controllers.types import (
    EnvironmentConfig,
    GainBounds,
    ScoredGainSet,
    TuningConfig,
)
from interfaces.disturbance import RandomSource
from tuning.autotuner import TuningCancelled, autotune

logger = logging.getLogger(__name__)

STATUS_QUEUE_SIZE = 100


class TuningState(Enum):
    """Lifecycle of an autotune job."""

    IDLE = 0
    IN_PROGRESS = 1
    COMPLETE = 2
    CANCELLED = 3
    FAILED = 4


@dataclass(frozen=True)
class TuningStatus:
    """Status update from an autotune job."""

    state: TuningState
    samples_done: int = 0
    sample_count: int = 0
    best: Optional[ScoredGainSet] = None
    error: Optional[str] = None

    @property
    def best_score(self) -> Optional[float]:
        return self.best.score if self.best is not None else None

    @property
    def is_terminal(self) -> bool:
        return self.state in (TuningState.COMPLETE, TuningState.CANCELLED, TuningState.FAILED)

    @property
    def message(self) -> str:
        """Human-readable status line."""
        if self.state == TuningState.IN_PROGRESS:
            return f"Tuning in progress... ({self.samples_done}/{self.sample_count})"
        if self.state == TuningState.COMPLETE:
            return f"Tuning complete! Found best gains with score: {self.best_score:.2f}"
        if self.state == TuningState.CANCELLED:
            return f"Tuning cancelled after {self.samples_done} samples"
        if self.state == TuningState.FAILED:
            return f"Tuning failed: {self.error}"
        return ""


class AutotuneWorker:
    """Runs ``autotune`` on a background thread.

    Example:
        >>> worker = AutotuneWorker(EnvironmentConfig(), sample_count=20, rng=1)
        >>> worker.start()
        >>> final = worker.wait(timeout=60.0)
        >>> final.state
        <TuningState.COMPLETE: 2>
    """

    def __init__(
        self,
        environment: EnvironmentConfig,
        sample_count: Optional[int] = None,
        bounds: Optional[GainBounds] = None,
        rng: RandomSource = None,
        config: Optional[TuningConfig] = None,
        exit_resets: bool = False,
    ):
        """Initialize worker.

        Args:
            environment: Plant parameters (horizon and dt are replaced by the
                search timing)
            sample_count: Overrides ``config.sample_count``
            bounds: Overrides ``config.bounds``
            rng: Random source owned by this job
            config: Search settings, defaults to TuningConfig()
            exit_resets: Settling policy, see ``compute_settling_time``
        """
        self.config = config or TuningConfig()
        self.environment = environment
        self.sample_count = sample_count if sample_count is not None else self.config.sample_count
        self.bounds = bounds or self.config.bounds
        self.rng = rng
        self.exit_resets = exit_resets

        # Threading
        self.thread: Optional[threading.Thread] = None
        self._cancel_event = threading.Event()
        self._done_event = threading.Event()
        self._lock = threading.Lock()
        self.status_queue: Queue = Queue(maxsize=STATUS_QUEUE_SIZE)

        self._status = TuningStatus(state=TuningState.IDLE, sample_count=self.sample_count)
        self.result: Optional[ScoredGainSet] = None

    def start(self) -> None:
        """Start the search on a daemon thread.

        Raises:
            RuntimeError: If the worker was already started
        """
        if self.thread is not None:
            raise RuntimeError("AutotuneWorker can only be started once")

        self._publish(TuningStatus(
            state=TuningState.IN_PROGRESS,
            samples_done=0,
            sample_count=self.sample_count,
        ))
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.start()

    def cancel(self) -> None:
        """Request cancellation; takes effect before the next sample."""
        self._cancel_event.set()

    def is_running(self) -> bool:
        return self.thread is not None and not self._done_event.is_set()

    @property
    def status(self) -> TuningStatus:
        """Latest status, regardless of what has been consumed from the queue."""
        with self._lock:
            return self._status

    def get_status(self) -> Optional[TuningStatus]:
        """Get next queued status update.

        Returns:
            TuningStatus or None if no update is available
        """
        try:
            return self.status_queue.get_nowait()
        except Empty:
            return None

    def wait(self, timeout: Optional[float] = None) -> TuningStatus:
        """Block until the job reaches a terminal state or timeout expires.

        Returns immediately with the IDLE status if the worker was never
        started.

        Returns:
            Latest status (terminal unless the timeout expired or the worker
            was never started)
        """
        if self.thread is None:
            return self.status
        self._done_event.wait(timeout)
        return self.status

    def _on_progress(
        self, samples_done: int, sample_count: int, best: Optional[ScoredGainSet]
    ) -> None:
        self._publish(TuningStatus(
            state=TuningState.IN_PROGRESS,
            samples_done=samples_done,
            sample_count=sample_count,
            best=best,
        ))

    def _run(self) -> None:
        """Search loop (runs in background thread)."""
        try:
            best = autotune(
                self.environment,
                sample_count=self.sample_count,
                bounds=self.bounds,
                rng=self.rng,
                horizon=self.config.horizon,
                dt=self.config.dt,
                fallback_gains=self.config.fallback_gains,
                exit_resets=self.exit_resets,
                cancel_event=self._cancel_event,
                progress_callback=self._on_progress,
            )
        except TuningCancelled as e:
            self.result = e.best
            final = TuningStatus(
                state=TuningState.CANCELLED,
                samples_done=e.samples_done,
                sample_count=self.sample_count,
                best=e.best,
            )
        except Exception as e:
            logger.exception("Autotune failed")
            final = TuningStatus(
                state=TuningState.FAILED,
                samples_done=self.status.samples_done,
                sample_count=self.sample_count,
                error=str(e),
            )
        else:
            self.result = best
            final = TuningStatus(
                state=TuningState.COMPLETE,
                samples_done=self.sample_count,
                sample_count=self.sample_count,
                best=best,
            )

        self._publish(final)
        self._done_event.set()

    def _publish(self, status: TuningStatus) -> None:
        with self._lock:
            self._status = status
        try:
            self.status_queue.put_nowait(status)
        except Full:
            # Queue full, drop oldest
            try:
                self.status_queue.get_nowait()
                self.status_queue.put_nowait(status)
            except (Empty, Full):
                pass
