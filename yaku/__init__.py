from yaku.promise import (
    FULFILLED,
    PENDING,
    REJECTED,
    ChainingCycleError,
    Promise,
    PromiseException,
)
from yaku.scheduler import (
    AsyncioScheduler,
    HostScheduler,
    Scheduler,
    TaskQueue,
    get_scheduler,
    run_pending,
    set_scheduler,
)

__all__ = [
    'AsyncioScheduler',
    'HostScheduler',
    'ChainingCycleError',
    'FULFILLED',
    'PENDING',
    'Promise',
    'PromiseException',
    'REJECTED',
    'Scheduler',
    'TaskQueue',
    'get_scheduler',
    'run_pending',
    'set_scheduler',
]
