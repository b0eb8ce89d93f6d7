import asyncio
import logging
from collections import deque

logger = logging.getLogger(__name__)


class Scheduler:
    def schedule(self, task):
        raise NotImplementedError


class TaskQueue(Scheduler):
    """FIFO queue of deferred tasks, drained by :meth:`run`.

    Tasks scheduled while the queue is draining run in the same pass, after
    everything that was already queued.
    """

    def __init__(self):
        self.tasks = deque()
        self.running = False

    def __len__(self):
        return len(self.tasks)

    def schedule(self, task):
        self.tasks.append(task)

    def run(self):
        if self.running:
            return 0

        self.running = True
        count = 0
        try:
            while self.tasks:
                task = self.tasks.popleft()
                count += 1
                try:
                    task()
                except Exception:
                    logger.exception('Scheduled task %r raised', task)
        finally:
            self.running = False
        return count


class AsyncioScheduler(Scheduler):
    def __init__(self, loop=None):
        self.loop = loop

    def schedule(self, task):
        loop = self.loop if self.loop is not None else asyncio.get_running_loop()
        loop.call_soon(task)


class HostScheduler(Scheduler):
    """Runs tasks on the running asyncio loop, or on the process-wide queue
    when no loop is running in this thread."""

    def schedule(self, task):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            tasks.schedule(task)
        else:
            loop.call_soon(task)


tasks = TaskQueue()
host = HostScheduler()
default = host


def get_scheduler():
    return default


def set_scheduler(scheduler):
    global default
    default = scheduler if scheduler is not None else host


def run_pending():
    return tasks.run()
