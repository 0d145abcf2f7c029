"""Single-threaded cooperative scheduler for the polling and flush timers."""

import time
from typing import Callable, List, Optional

from .logging import get_logger

logger = get_logger(__name__)


class PeriodicTask:
    """A callback due every ``period`` seconds until cancelled."""

    def __init__(self, name: str, period: float, callback: Callable[[], None], next_due: float):
        if period <= 0:
            raise ValueError(f"period for task {name!r} must be positive")
        self.name = name
        self.period = period
        self.callback = callback
        self.next_due = next_due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return f"PeriodicTask({self.name!r}, period={self.period}, next_due={self.next_due})"


class Scheduler:
    """
    Runs periodic tasks one at a time on the calling thread.

    Every task runs to completion before another can start. A task that
    overruns its period is not run again to catch up; its next run is
    pushed to one full period after it finished.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize scheduler.

        Args:
            clock: Monotonic time source in seconds
            sleep: Function used to wait between runs
        """
        self._clock = clock
        self._sleep = sleep
        self.tasks: List[PeriodicTask] = []
        self._stopped = False

    def every(
        self,
        period: float,
        callback: Callable[[], None],
        name: Optional[str] = None,
        run_immediately: bool = False,
    ) -> PeriodicTask:
        """
        Schedule a callback to run every ``period`` seconds.

        Args:
            period: Seconds between runs
            callback: Function taking no arguments
            name: Label used in log messages
            run_immediately: If True the first run is due now, otherwise after one period

        Returns:
            The scheduled task (call ``cancel`` on it to stop it)
        """
        now = self._clock()
        task = PeriodicTask(
            name or getattr(callback, "__name__", "task"),
            period,
            callback,
            now if run_immediately else now + period,
        )
        self.tasks.append(task)
        logger.debug(f"Scheduled {task}")
        return task

    def _active(self) -> List[PeriodicTask]:
        self.tasks = [t for t in self.tasks if not t.cancelled]
        return self.tasks

    def run_pending(self) -> int:
        """
        Run every task that is due, earliest first.

        Returns:
            Number of task runs performed
        """
        runs = 0
        while not self._stopped:
            now = self._clock()
            due = [t for t in self._active() if t.next_due <= now]
            if not due:
                break
            task = min(due, key=lambda t: t.next_due)
            try:
                task.callback()
            except Exception as e:
                logger.error(f"Error in scheduled task {task.name}: {e}", exc_info=True)
            runs += 1

            task.next_due += task.period
            finished = self._clock()
            if task.next_due <= finished:
                # Overran; drop the missed runs instead of queueing them
                task.next_due = finished + task.period
        return runs

    def seconds_until_next(self) -> Optional[float]:
        active = self._active()
        if not active:
            return None
        return max(0.0, min(t.next_due for t in active) - self._clock())

    def run(self, duration: Optional[float] = None) -> None:
        """
        Run tasks until stopped, all tasks are cancelled, or ``duration`` elapses.

        Args:
            duration: Optional number of seconds to run for
        """
        self._stopped = False
        deadline = None if duration is None else self._clock() + duration
        while not self._stopped:
            self.run_pending()
            wait = self.seconds_until_next()
            if wait is None:
                break
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining < wait:
                    if remaining > 0:
                        self._sleep(remaining)
                    break
            self._sleep(wait)
        if deadline is not None:
            self.run_pending()

    def stop(self) -> None:
        self._stopped = True

