"""Registry of pending executions keyed by execution id."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FutureTimeoutError

from .dispatch_contracts import CompletionCancelledError, CompletionTimeoutError, ExecutionResult

logger = logging.getLogger(__name__)


class CompletionRegistry:
    """One-shot completion futures keyed by execution id.

    An id must be registered before its run is dispatched so that a completion
    arriving before anyone waits is kept until it is awaited. Once `cancel_all`
    has run, the registry refuses new registrations.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._futures: dict[str, Future[ExecutionResult | None]] = {}
        self._cancelled = False

    def register(self, execution_id: str) -> None:
        with self._lock:
            if self._cancelled:
                raise CompletionCancelledError(
                    f"Cannot wait for execution {execution_id}: waits were cancelled."
                )
            self._futures.setdefault(execution_id, Future())

    def discard(self, execution_id: str) -> None:
        """Forget a registered id whose run never reached the engine."""
        with self._lock:
            future = self._futures.pop(execution_id, None)
        if future is not None:
            future.cancel()

    def resolve(self, execution_id: str, result: ExecutionResult | None) -> bool:
        """Complete the wait for `execution_id`; return False for unknown or settled ids."""
        with self._lock:
            future = self._futures.get(execution_id)
        if future is None:
            logger.debug("Ignoring completion for unregistered execution %s", execution_id)
            return False
        if future.done() or not future.set_running_or_notify_cancel():
            return False
        future.set_result(result)
        return True

    def await_completion(
        self, execution_id: str, timeout_seconds: float | None
    ) -> ExecutionResult | None:
        """Block until `execution_id` completes; safe after completion already arrived."""
        with self._lock:
            future = self._futures.get(execution_id)
            cancelled = self._cancelled
        if future is None:
            if cancelled:
                raise CompletionCancelledError(
                    f"Waiting for execution {execution_id} was cancelled."
                )
            raise KeyError(f"Execution {execution_id} was never registered.")
        try:
            result = future.result(timeout=timeout_seconds)
        except FutureTimeoutError as exc:
            raise CompletionTimeoutError(
                f"Execution {execution_id} did not finish within {timeout_seconds} seconds."
            ) from exc
        except CancelledError as exc:
            raise CompletionCancelledError(
                f"Waiting for execution {execution_id} was cancelled."
            ) from exc
        finally:
            with self._lock:
                self._futures.pop(execution_id, None)
        return result

    def cancel_all(self) -> int:
        """Cancel every pending wait, refuse new ones and return how many were cancelled."""
        with self._lock:
            self._cancelled = True
            pending = list(self._futures.values())
            self._futures.clear()
        return sum(1 for future in pending if future.cancel())

    @property
    def pending_count(self) -> int:
        with self._lock:
            return sum(1 for future in self._futures.values() if not future.done())
