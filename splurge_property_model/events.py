"""Event system for build observability.

This module provides a thread-safe publish/subscribe ``EventBus`` and
the event dataclasses published while class models are built: step, task
and job lifecycle events, ``ClassModelBuiltEvent`` when a model is
published to the registry, and ``ErrorEvent`` when a build fails.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .context import BuildContext
from .model import ClassModel
from .result import Result

T = TypeVar("T")
EventHandler = Callable[[Any], None]


@dataclass(frozen=True)
class BaseEvent:
    """Base event class that carries common event metadata."""

    timestamp: float
    run_id: str

    def __post_init__(self) -> None:
        if self.timestamp < 0:
            raise ValueError("Timestamp cannot be negative")


@dataclass(frozen=True)
class StepStartedEvent(BaseEvent):
    """Event fired when a step starts execution."""

    context: BuildContext
    step_name: str
    step_type: str


@dataclass(frozen=True)
class StepCompletedEvent(BaseEvent):
    """Event fired when a step completes execution."""

    context: BuildContext
    step_name: str
    step_type: str
    result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class TaskStartedEvent(BaseEvent):
    """Event fired when a task starts execution."""

    context: BuildContext
    task_name: str
    step_count: int


@dataclass(frozen=True)
class TaskCompletedEvent(BaseEvent):
    """Event fired when a task completes execution."""

    context: BuildContext
    task_name: str
    final_result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class JobStartedEvent(BaseEvent):
    """Event fired when a job starts execution."""

    context: BuildContext
    job_name: str
    job_type: str
    task_count: int


@dataclass(frozen=True)
class JobCompletedEvent(BaseEvent):
    """Event fired when a job completes execution."""

    context: BuildContext
    job_name: str
    job_type: str
    final_result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class ClassModelBuiltEvent(BaseEvent):
    """Event fired when a class model is published to the registry."""

    context: BuildContext
    class_model: ClassModel
    property_count: int
    duration_ms: float


@dataclass(frozen=True)
class ErrorEvent(BaseEvent):
    """Event fired when building a class model fails."""

    context: BuildContext
    error: Exception
    error_type: str
    component: str


class EventBus:
    """Thread-safe event publication and subscription system.

    Handlers are invoked outside the internal lock so publishers are never
    blocked by slow subscribers. Handlers are callables taking a single
    event instance.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def clear_subscribers(self, event_type: type[T] | None = None) -> None:
        """Clear subscribers for a specific event type or all subscribers."""
        with self._lock:
            if event_type:
                self._subscribers[event_type].clear()
                self._logger.debug(f"Cleared subscribers for {event_type.__name__}")
            else:
                self._subscribers.clear()
                self._logger.debug("Cleared all subscribers")

    def get_subscriber_count(self, event_type: type[T]) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for events of a specific type.

        Args:
            event_type: The event dataclass/type to subscribe to.
            handler: Callable that accepts a single event instance.
        """
        with self._lock:
            self._subscribers[event_type].append(handler)
            self._logger.debug(f"Subscribed handler {handler} to {event_type.__name__}")

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            if event_type in self._subscribers and handler in self._subscribers[event_type]:
                self._subscribers[event_type].remove(handler)
                self._logger.debug(f"Unsubscribed handler {handler} from {event_type.__name__}")

    def publish(self, event: Any) -> None:
        """Publish an event to all subscribers of its concrete type.

        Errors raised by handlers are logged and do not interrupt delivery
        to other handlers.
        """
        event_type = type(event)

        with self._lock:
            handlers = self._subscribers.get(event_type, []).copy()

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(f"Event handler error for {event_type.__name__}: {e}", exc_info=True)


class EventSubscriber(ABC):
    """Base class for event subscribers."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._setup_subscriptions()

    @abstractmethod
    def _setup_subscriptions(self) -> None:
        """Register handlers with ``event_bus.subscribe``."""

    @abstractmethod
    def unsubscribe_all(self) -> None:
        """Remove every handler registered by ``_setup_subscriptions``."""


class LoggingSubscriber(EventSubscriber):
    """Event subscriber that writes build events to the log."""

    def __init__(self, event_bus: EventBus, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(__name__)
        super().__init__(event_bus)

    def _setup_subscriptions(self) -> None:
        self.event_bus.subscribe(JobStartedEvent, self._on_job_started)
        self.event_bus.subscribe(JobCompletedEvent, self._on_job_completed)
        self.event_bus.subscribe(StepStartedEvent, self._on_step_started)
        self.event_bus.subscribe(StepCompletedEvent, self._on_step_completed)
        self.event_bus.subscribe(ClassModelBuiltEvent, self._on_class_model_built)
        self.event_bus.subscribe(ErrorEvent, self._on_error)

    def unsubscribe_all(self) -> None:
        self.event_bus.unsubscribe(JobStartedEvent, self._on_job_started)
        self.event_bus.unsubscribe(JobCompletedEvent, self._on_job_completed)
        self.event_bus.unsubscribe(StepStartedEvent, self._on_step_started)
        self.event_bus.unsubscribe(StepCompletedEvent, self._on_step_completed)
        self.event_bus.unsubscribe(ClassModelBuiltEvent, self._on_class_model_built)
        self.event_bus.unsubscribe(ErrorEvent, self._on_error)

    def _on_job_started(self, event: JobStartedEvent) -> None:
        self._logger.debug(
            f"Job started: {event.job_name} for {event.context.descriptor.name} (run_id: {event.run_id})"
        )

    def _on_job_completed(self, event: JobCompletedEvent) -> None:
        status = "SUCCESS" if not event.final_result.is_error() else "FAILED"
        self._logger.debug(f"Job completed in {event.duration_ms:.2f}ms: {event.job_name} ({status})")

    def _on_step_started(self, event: StepStartedEvent) -> None:
        self._logger.debug(f"Step started: {event.step_name} ({event.step_type})")

    def _on_step_completed(self, event: StepCompletedEvent) -> None:
        status = event.result.status.value.upper()
        self._logger.debug(f"Step completed in {event.duration_ms:.2f}ms: {event.step_name} ({status})")

    def _on_class_model_built(self, event: ClassModelBuiltEvent) -> None:
        self._logger.info(
            f"Class model built: {event.class_model.type.name} "
            f"({event.property_count} properties, {event.duration_ms:.2f}ms)"
        )

    def _on_error(self, event: ErrorEvent) -> None:
        self._logger.error(f"Error in {event.component}: {event.error}")
