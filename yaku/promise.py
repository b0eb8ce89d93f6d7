import inspect
import logging
from functools import partial

from yaku.scheduler import get_scheduler

logger = logging.getLogger(__name__)

PENDING = 'pending'
FULFILLED = 'fulfilled'
REJECTED = 'rejected'


class PromiseException(Exception):
    """Raise from a reaction to reject its promise with a non-exception value."""

    def __init__(self, value):
        super().__init__(value)
        self.value = value

    def __str__(self):
        return repr(self.value)


class ChainingCycleError(TypeError):
    pass


class Once:
    """Pairs callbacks so that only the first call of any of them has effect."""

    def __init__(self):
        self.called = False

    def wrap(self, fn):
        def wrapper(value=None):
            if self.called:
                return
            self.called = True
            fn(value)
        return wrapper


def empty(resolve, reject):
    pass


def reason_of(error):
    if isinstance(error, PromiseException):
        return error.value
    return error


PLAIN_TYPES = (type(None), bool, int, float, complex, str, bytes)


def get_then(value):
    then = getattr(value, 'then', None)
    if not callable(then):
        return None
    # a plain function looked up on a class is a method, not a continuation
    if isinstance(value, type) and inspect.isfunction(inspect.getattr_static(value, 'then', None)):
        return None
    return then


def settle(promise, state, value):
    if promise.state != PENDING:
        return

    if state == FULFILLED:
        promise.result = value
    else:
        promise.reason = value
    promise.state = state

    reactions = promise.reactions
    promise.reactions = []
    logger.debug('%r settled, draining %d reaction(s)', promise, len(reactions))
    drain_all(promise, reactions)


def fulfill(promise, value):
    settle(promise, FULFILLED, value)


def reject(promise, reason):
    settle(promise, REJECTED, reason)


def resolve_with(promise, value):
    if value is promise:
        reject(promise, ChainingCycleError('Chaining cycle detected for promise %r' % promise))
        return

    if type(value) in PLAIN_TYPES:
        fulfill(promise, value)
        return

    promise.scheduler.schedule(partial(assimilate, promise, value))


def assimilate(promise, value):
    try:
        then = get_then(value)
    except Exception as e:
        reject(promise, reason_of(e))
        return

    if then is None:
        fulfill(promise, value)
        return

    once = Once()
    on_rejected = once.wrap(partial(reject, promise))
    try:
        then(once.wrap(partial(resolve_with, promise)), on_rejected)
    except Exception as e:
        on_rejected(reason_of(e))


def register(promise, reaction):
    if promise.state == PENDING:
        promise.reactions.append(reaction)
    else:
        promise.scheduler.schedule(partial(run_reaction, promise, reaction))


def drain_all(promise, reactions):
    for reaction in reactions:
        promise.scheduler.schedule(partial(run_reaction, promise, reaction))


def run_reaction(promise, reaction):
    child = reaction['promise']
    if promise.state == FULFILLED:
        handler, value = reaction['on_fulfilled'], promise.result
    else:
        handler, value = reaction['on_rejected'], promise.reason

    if handler is None:
        settle(child, promise.state, value)
        return

    try:
        value = handler(value)
    except Exception as e:
        reject(child, reason_of(e))
        return

    resolve_with(child, value)


def capabilities(promise):
    once = Once()
    return once.wrap(partial(resolve_with, promise)), once.wrap(partial(reject, promise))


class Promise:
    """Single-value result of a deferred computation.

    ``executor(resolve, reject)`` runs synchronously inside the constructor;
    whichever capability is called first settles the promise, and an
    exception raised by the executor rejects it. Reactions registered with
    :meth:`then` always run later, through the promise's scheduler.
    """

    def __init__(self, executor=None, scheduler=None):
        self.state = PENDING
        self.result = None
        self.reason = None
        self.reactions = []
        self.scheduler = scheduler if scheduler is not None else get_scheduler()

        if executor is None:
            executor = empty

        on_resolve, on_reject = capabilities(self)
        try:
            executor(on_resolve, on_reject)
        except Exception as e:
            on_reject(reason_of(e))

    @staticmethod
    def resolve(value, scheduler=None):
        if isinstance(value, Promise):
            return value
        return Promise(lambda on_resolve, on_reject: on_resolve(value), scheduler)

    @staticmethod
    def reject(reason, scheduler=None):
        return Promise(lambda on_resolve, on_reject: on_reject(reason), scheduler)

    @property
    def is_pending(self):
        return self.state == PENDING

    @property
    def is_fulfilled(self):
        return self.state == FULFILLED

    @property
    def is_rejected(self):
        return self.state == REJECTED

    def then(self, on_fulfilled=None, on_rejected=None):
        reaction = {
            'promise': Promise(empty, self.scheduler),
            'on_fulfilled': on_fulfilled,
            'on_rejected': on_rejected,
        }
        register(self, reaction)
        return reaction['promise']

    def catch(self, on_rejected=None):
        return self.then(None, on_rejected)

    def __repr__(self):
        if self.state == PENDING:
            v = '(pending)'
        elif self.state == REJECTED:
            v = repr(self.reason) + ' (rejected)'
        else:
            v = repr(self.result)
        return '<%s %s>' % (self.__class__.__name__, v)
