"""Reactor-thread bridge: run blocking backend calls off the event loop.

The event loop thread (the "reactor") multiplexes every HTTP connection and
must never block on storage I/O. Each pool operation is submitted here,
executed on a bounded ThreadPoolExecutor, and its outcome is handed back to
the loop with call_soon_threadsafe. The loop thread only ever dispatches
and receives; it never calls a backend itself.

Lifecycle of one operation:

    SUBMITTED -> DISPATCHED -> EXECUTING -> COMPLETED | FAILED -> DELIVERED

Exactly one OperationOutcome is delivered per submitted operation, whether
the callable returned or raised. Outcomes carry the operation id so callers
correlate results without relying on completion order.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from resource_pool.domain.exceptions import BackendUnavailableError
from resource_pool.shared.utils.generators import generate_operation_id

logger = logging.getLogger(__name__)

DeliveryListener = Callable[["OperationOutcome"], None]


class OperationState(str, Enum):
    """Where an operation is in its lifecycle."""

    SUBMITTED = "submitted"
    DISPATCHED = "dispatched"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class OperationOutcome:
    """Terminal result of an operation: a value or the error it raised."""

    operation_id: str
    name: str
    value: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or re-raise the error on the caller's thread."""
        if self.error is not None:
            raise self.error
        return self.value


@dataclass
class PoolOperation:
    """Handle for a submitted operation. future resolves on the loop thread."""

    operation_id: str
    name: str
    future: asyncio.Future[OperationOutcome]
    state: OperationState = OperationState.SUBMITTED
    submitted_at: float = field(default_factory=time.monotonic)
    outcome: OperationOutcome | None = None


class ReactorBridge:
    """Bounded worker pool with ordered, thread-safe delivery to one event loop.

    The bridge binds to the running loop on first submit. When every worker
    is busy, further submissions queue inside the executor instead of
    spawning threads.
    """

    def __init__(self, max_workers: int = 8, thread_name_prefix: str = "pool-io") -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_thread_id: int | None = None
        self._in_flight: dict[str, PoolOperation] = {}
        self._listeners: list[DeliveryListener] = []
        self._closed = False

    def _bind_loop(self) -> asyncio.AbstractEventLoop:
        """Return the running loop; raise if called off the bound loop thread."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise RuntimeError(
                "ReactorBridge.submit must be called from the event loop thread"
            ) from e
        if self._loop is None:
            self._loop = loop
            self._loop_thread_id = threading.get_ident()
        elif loop is not self._loop:
            raise RuntimeError("ReactorBridge is bound to a different event loop")
        return loop

    def in_reactor_thread(self) -> bool:
        """True when the caller runs on the bound event loop thread."""
        return self._loop_thread_id is not None and threading.get_ident() == self._loop_thread_id

    @property
    def in_flight(self) -> dict[str, PoolOperation]:
        """Operations submitted but not yet delivered, by operation id."""
        return dict(self._in_flight)

    def add_listener(self, listener: DeliveryListener) -> None:
        """Call listener(outcome) on the loop thread after every delivery."""
        self._listeners.append(listener)

    def remove_listener(self, listener: DeliveryListener) -> None:
        self._listeners.remove(listener)

    def submit(self, name: str, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> PoolOperation:
        """Dispatch fn(*args, **kwargs) to a worker and return immediately.

        Args:
            name: Short label for logs and failure details (e.g. "exists").
            fn: Blocking callable to run on a worker thread.

        Returns:
            PoolOperation whose future resolves with an OperationOutcome.

        Raises:
            RuntimeError: If not called from the event loop thread.
        """
        loop = self._bind_loop()
        op = PoolOperation(
            operation_id=generate_operation_id(),
            name=name,
            future=loop.create_future(),
        )
        self._in_flight[op.operation_id] = op

        if self._closed:
            self._fail_at_submit(loop, op, "bridge is shut down")
            return op
        op.state = OperationState.DISPATCHED
        try:
            self._executor.submit(self._execute, loop, op, fn, args, kwargs)
        except RuntimeError as e:
            self._fail_at_submit(loop, op, str(e))
            return op
        logger.debug("Dispatched %s (%s)", op.operation_id, name)
        return op

    def _fail_at_submit(
        self, loop: asyncio.AbstractEventLoop, op: PoolOperation, reason: str
    ) -> None:
        """Deliver a FAILED outcome on the next loop cycle instead of raising."""
        op.state = OperationState.FAILED
        outcome = OperationOutcome(
            op.operation_id, op.name, error=BackendUnavailableError(op.name, reason)
        )
        loop.call_soon(self._deliver, op, outcome)

    def _execute(
        self,
        loop: asyncio.AbstractEventLoop,
        op: PoolOperation,
        fn: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> None:
        """Worker thread: run the call, then hand the outcome to the loop.

        Anything the call raises, SystemExit and KeyboardInterrupt included,
        becomes a FAILED outcome; otherwise it would end up in the executor's
        unobserved future and the operation would never be delivered.
        """
        op.state = OperationState.EXECUTING
        try:
            value = fn(*args, **kwargs)
        except BaseException as e:
            op.state = OperationState.FAILED
            outcome = OperationOutcome(op.operation_id, op.name, error=e)
        else:
            op.state = OperationState.COMPLETED
            outcome = OperationOutcome(op.operation_id, op.name, value=value)
        try:
            loop.call_soon_threadsafe(self._deliver, op, outcome)
        except RuntimeError:
            # Loop already closed: there is no controlling context left to notify.
            logger.warning(
                "Event loop closed before delivering %s (%s)", op.operation_id, op.name
            )

    def _deliver(self, op: PoolOperation, outcome: OperationOutcome) -> None:
        """Loop thread: resolve the future once and notify listeners."""
        self._in_flight.pop(op.operation_id, None)
        op.outcome = outcome
        op.state = OperationState.DELIVERED
        if not op.future.done():
            op.future.set_result(outcome)
        logger.debug(
            "Delivered %s (%s) ok=%s after %.3fs",
            op.operation_id,
            op.name,
            outcome.ok,
            time.monotonic() - op.submitted_at,
        )
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                logger.exception("Delivery listener failed for %s", op.operation_id)

    async def wait(self, op: PoolOperation) -> OperationOutcome:
        """Await an operation's outcome.

        Shielded: cancelling the waiter does not cancel the operation, which
        runs to completion and has its outcome discarded.
        """
        return await asyncio.shield(op.future)

    async def run(self, name: str, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        """Submit, await, and unwrap: returns the value or raises the error."""
        op = self.submit(name, fn, *args, **kwargs)
        outcome = await self.wait(op)
        return outcome.unwrap()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work. With wait=True, queued operations still finish."""
        self._closed = True
        self._executor.shutdown(wait=wait)
