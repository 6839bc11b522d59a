"""Kafka bridge to the workflow execution engine."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Mapping
from typing import Any, Protocol, cast

from confluent_kafka import Consumer, KafkaError, KafkaException, Producer

from workflow_replay_tester.configuration.runtime_settings import KafkaSettings
from workflow_replay_tester.execution_records.execution_trace import ExecutionTrace
from workflow_replay_tester.execution_records.flatted_codec import (
    FlattedDecodeError,
    parse,
    stringify,
)

from .completion_registry import CompletionRegistry
from .dispatch_contracts import DispatchError, ExecutionResult, WorkflowRunRequest

logger = logging.getLogger(__name__)

_KAFKA_CLIENT_LOGGER = logging.getLogger("workflow_replay_tester.kafka.client")
_KAFKA_CLIENT_LOGGER.addHandler(logging.NullHandler())
_KAFKA_CLIENT_LOGGER.propagate = False
_KAFKA_CLIENT_LOGGER.setLevel(logging.CRITICAL + 1)

_DEFAULT_GROUP_ID = "workflow-replay-tester"


class CompletionMessageError(Exception):
    """Raised when a completion message cannot be decoded."""


class KafkaProducerProtocol(Protocol):
    """Subset of the confluent producer API used for run requests."""

    def produce(
        self,
        topic: str,
        value: bytes | None = None,
        key: bytes | None = None,
        on_delivery: Callable[[Any, Any], None] | None = None,
    ) -> None: ...

    def flush(self, timeout: float) -> int: ...


class KafkaConsumerProtocol(Protocol):
    """Subset of the confluent consumer API used for completion messages."""

    def subscribe(
        self,
        topics: list[str],
        on_assign: Any = None,
        on_revoke: Any = None,
        on_lost: Any = None,
    ) -> None: ...

    def poll(self, timeout: float) -> _KafkaRawMessage | None: ...

    def close(self) -> None: ...


class _KafkaRawMessage(Protocol):
    """Subset of Kafka message API required by the listener."""

    def error(self) -> Any: ...

    def key(self) -> bytes | None: ...

    def value(self) -> bytes | None: ...


class KafkaExecutionDispatcher:
    """Publishes run requests and waits on the completion registry."""

    def __init__(
        self,
        kafka_settings: KafkaSettings,
        registry: CompletionRegistry,
        *,
        completion_timeout_seconds: float | None,
        producer: KafkaProducerProtocol | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._settings = kafka_settings
        self._registry = registry
        self._completion_timeout_seconds = completion_timeout_seconds
        self._producer = producer or self._create_producer()
        self._id_factory = id_factory or _new_execution_id

    def dispatch(self, request: WorkflowRunRequest) -> str:
        """Hand the request to the engine and return the new execution id."""
        execution_id = self._id_factory()
        self._registry.register(execution_id)
        delivery_errors: list[Any] = []

        def _on_delivery(error: Any, _message: Any) -> None:
            if error is not None:
                delivery_errors.append(error)

        try:
            payload = stringify(request.to_payload(execution_id)).encode("utf-8")
            self._producer.produce(
                self._settings.request_topic,
                value=payload,
                key=execution_id.encode("utf-8"),
                on_delivery=_on_delivery,
            )
            remaining = self._producer.flush(self._settings.flush_timeout_seconds)
        except (BufferError, KafkaException, TypeError) as exc:
            self._registry.discard(execution_id)
            raise DispatchError(f"Failed to publish run request {execution_id}: {exc}") from exc
        if remaining or delivery_errors:
            self._registry.discard(execution_id)
            reason = delivery_errors[0] if delivery_errors else "delivery not confirmed"
            raise DispatchError(f"Run request {execution_id} was not delivered: {reason}")
        logger.debug(
            "Dispatched execution %s of workflow %s in %s mode",
            execution_id,
            request.workflow.workflow_id,
            request.execution_mode.value,
        )
        return execution_id

    def await_completion(self, execution_id: str) -> ExecutionResult | None:
        return self._registry.await_completion(execution_id, self._completion_timeout_seconds)

    def _create_producer(self) -> KafkaProducerProtocol:
        config = {
            "bootstrap.servers": ",".join(self._settings.bootstrap_servers),
            "enable.idempotence": True,
        }
        config.update(self._settings.security)
        return cast(KafkaProducerProtocol, _create_client(Producer, config))


class CompletionListener:
    """Background consumer resolving registry entries from completion messages."""

    def __init__(
        self,
        kafka_settings: KafkaSettings,
        registry: CompletionRegistry,
        consumer: KafkaConsumerProtocol | None = None,
    ) -> None:
        self._settings = kafka_settings
        self._registry = registry
        self._consumer = consumer or self._create_consumer()
        self._assigned = threading.Event()
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    def __enter__(self) -> CompletionListener:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(self, assignment_timeout_seconds: float = 30.0) -> None:
        """Subscribe and poll in the background; return once partitions are assigned."""
        self._consumer.subscribe(
            [self._settings.completion_topic],
            on_assign=self._on_assign,
        )
        self._thread = threading.Thread(
            target=self._poll_loop,
            name="completion-listener",
            daemon=True,
        )
        self._thread.start()
        if not self._assigned.wait(timeout=assignment_timeout_seconds):
            self.stop()
            raise DispatchError(
                f"No partitions of {self._settings.completion_topic} were assigned "
                f"within {assignment_timeout_seconds} seconds."
            )

    def stop(self) -> None:
        self._stopping.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def handle_message(self, message: _KafkaRawMessage) -> bool:
        """Resolve the registry entry a message refers to; return True when resolved."""
        error = message.error()
        if error:
            partition_eof_code = getattr(KafkaError, "_PARTITION_EOF", None)
            if partition_eof_code is not None and error.code() == partition_eof_code:
                return False
            logger.error("Kafka error on %s: %s", self._settings.completion_topic, error)
            return False
        try:
            execution_id, result = decode_completion_message(message.value())
        except CompletionMessageError as exc:
            logger.warning("Skipping unreadable completion message: %s", exc)
            return False
        return self._registry.resolve(execution_id, result)

    def _on_assign(self, _consumer: Any, _partitions: Any) -> None:
        self._assigned.set()

    def _poll_loop(self) -> None:
        try:
            while not self._stopping.is_set():
                message = self._consumer.poll(timeout=self._settings.poll_interval_ms / 1000.0)
                if message is None:
                    continue
                self.handle_message(message)
        finally:
            self._consumer.close()

    def _create_consumer(self) -> KafkaConsumerProtocol:
        config = {
            "bootstrap.servers": ",".join(self._settings.bootstrap_servers),
            "group.id": self._settings.group_id or _DEFAULT_GROUP_ID,
            "enable.auto.commit": False,
            "auto.offset.reset": self._settings.auto_offset_reset,
        }
        config.update(self._settings.security)
        return cast(KafkaConsumerProtocol, _create_client(Consumer, config))


def _create_client(client_cls: Callable[..., Any], config: dict[str, Any]) -> Any:
    try:
        try:
            return client_cls(config, logger=_KAFKA_CLIENT_LOGGER)
        except TypeError:
            # Older/mock client implementations may not support the logger kwarg.
            return client_cls(config)
    except KafkaException as exc:
        raise DispatchError(f"Invalid Kafka client configuration: {exc}") from exc


def decode_completion_message(value: bytes | None) -> tuple[str, ExecutionResult | None]:
    """Decode `{"executionId", "status", "data"}`; a null `data` means no retrievable run."""
    if value is None:
        raise CompletionMessageError("Received empty completion payload.")
    try:
        decoded = parse(bytes(value))
    except FlattedDecodeError as exc:
        raise CompletionMessageError(str(exc)) from exc
    if not isinstance(decoded, Mapping):
        raise CompletionMessageError("Completion payload root must be an object.")
    execution_id = decoded.get("executionId")
    if not isinstance(execution_id, str) or not execution_id:
        raise CompletionMessageError("Completion payload is missing executionId.")
    data = decoded.get("data")
    if data is None:
        return execution_id, None
    if not isinstance(data, Mapping):
        raise CompletionMessageError(f"Completion data for {execution_id} must be an object.")
    status = decoded.get("status")
    return execution_id, ExecutionResult(
        execution_id=execution_id,
        status=status if isinstance(status, str) else "unknown",
        trace=ExecutionTrace.from_payload(data),
    )


def _new_execution_id() -> str:
    return uuid.uuid4().hex
