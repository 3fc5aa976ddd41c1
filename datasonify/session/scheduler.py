"""
Ordered playback scheduling.

Playback order is an explicit task list consumed one step at a time,
rather than a side effect of timer arithmetic.
"""

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List, Optional

from .session import PlayResult, SonificationSession
from ..config import get_config
from ..exceptions import PlaybackError
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlaybackTask:
    index: int
    delay: float
    # None plays on the scheduler's own session
    session: Optional[SonificationSession] = None


class PlaybackScheduler:
    """
    Single-threaded scheduler playing session indices in insertion order.
    
    Tasks must be added with non-decreasing delays, so insertion order and
    time order always agree. A failed task is recorded and skipped; the
    remaining tasks still play. A task may name another session, which is
    how several series share one ordered timeline.
    
    Args:
        session: Session whose values are played
        sleep: Blocking sleep used by realtime runs
        clock: Monotonic clock used by realtime runs
    """
    
    def __init__(self, session: SonificationSession,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.session = session
        self._sleep = sleep
        self._clock = clock
        self._tasks: Deque[PlaybackTask] = deque()
        self._last_delay = 0.0
        self._sessions: List[SonificationSession] = [session]
        self.results: List[PlayResult] = []
    
    @classmethod
    def for_indices(cls, session: SonificationSession, indices: Iterable[int],
                    interval: float, start: float = 0.0, **kwargs) -> "PlaybackScheduler":
        """Schedule indices back to back: the i-th task at ``start + i * interval``."""
        if interval < 0:
            raise PlaybackError(f"Interval must be non-negative, got {interval}")
        scheduler = cls(session, **kwargs)
        for position, index in enumerate(indices):
            scheduler.add(index, start + position * interval)
        return scheduler
    
    @classmethod
    def duet(cls, lead: SonificationSession, answer: SonificationSession,
             interval: float, limit: Optional[int] = None, **kwargs) -> "PlaybackScheduler":
        """
        Interleave two sessions on one timeline.
        
        The i-th note of ``lead`` plays at ``i * interval`` and the i-th note
        of ``answer`` half an interval later. Only as many pairs as the
        shorter session holds are scheduled, capped at ``limit``
        (default ``playback.duet_limit`` from config).
        
        Raises:
            PlaybackError: If interval or limit is negative
        """
        if interval < 0:
            raise PlaybackError(f"Interval must be non-negative, got {interval}")
        if limit is None:
            limit = get_config('playback', 'duet_limit')
        if limit < 0:
            raise PlaybackError(f"Duet limit must be non-negative, got {limit}")
        
        count = min(len(lead), len(answer), limit)
        if count == 0:
            logger.warning("Duet has nothing to play: one of the series is empty")
        
        scheduler = cls(lead, **kwargs)
        for i in range(count):
            scheduler.add(i, i * interval)
            scheduler.add(i, i * interval + interval / 2, session=answer)
        return scheduler
    
    def add(self, index: int, delay: float,
            session: Optional[SonificationSession] = None) -> PlaybackTask:
        """
        Append a task, optionally on a session other than the scheduler's own.
        
        Raises:
            PlaybackError: If delay is negative or earlier than the last task's
        """
        if delay < 0:
            raise PlaybackError(f"Delay must be non-negative, got {delay}")
        if self._tasks and delay < self._last_delay:
            raise PlaybackError(
                f"Delay {delay} is earlier than the previous task ({self._last_delay})"
            )
        if session is self.session:
            session = None
        if session is not None and all(s is not session for s in self._sessions):
            self._sessions.append(session)
        
        task = PlaybackTask(index=index, delay=delay, session=session)
        self._tasks.append(task)
        self._last_delay = delay
        return task
    
    @property
    def pending(self) -> List[PlaybackTask]:
        return list(self._tasks)
    
    def __len__(self) -> int:
        return len(self._tasks)
    
    @property
    def done(self) -> bool:
        return not self._tasks
    
    def step(self) -> Optional[PlayResult]:
        """Play the next task; None once the list is exhausted."""
        if not self._tasks:
            return None
        task = self._tasks.popleft()
        session = task.session if task.session is not None else self.session
        result = session.play(task.index, task.delay)
        self.results.append(result)
        return result
    
    def run(self, realtime: bool = False) -> List[PlayResult]:
        """
        Drain the task list.
        
        With ``realtime`` each task waits until its delay has elapsed since
        the run started, for emitters that sound notes immediately.
        
        Returns:
            Results of the tasks played during this run, in order
        """
        played = []
        started = self._clock()
        while self._tasks:
            if realtime:
                wait = started + self._tasks[0].delay - self._clock()
                if wait > 0:
                    self._sleep(wait)
            played.append(self.step())
        
        failures = sum(1 for r in played if not r.ok)
        if failures:
            logger.info(f"Playback finished: {len(played) - failures} played, {failures} skipped")
        else:
            logger.debug(f"Playback finished: {len(played)} played")
        return played
    
    def cancel(self) -> None:
        """Drop pending tasks and silence every emitter involved."""
        dropped = len(self._tasks)
        self._tasks.clear()
        
        stopped = []
        for session in self._sessions:
            if any(session.emitter is e for e in stopped):
                continue
            session.emitter.stop()
            stopped.append(session.emitter)
        if dropped:
            logger.debug(f"Cancelled {dropped} pending tasks")
