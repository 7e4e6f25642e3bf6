"""Pipeline architecture for building class models.

A class model is built by a ``Job`` made of ``Task`` instances, each a
sequence of ``Step`` instances. Steps are single-responsibility
transformations returning ``Result`` objects; tasks and jobs thread data
from one step to the next and stop at the first failure.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from .context import BuildContext
from .events import (
    EventBus,
    JobCompletedEvent,
    JobStartedEvent,
    StepCompletedEvent,
    StepStartedEvent,
    TaskCompletedEvent,
    TaskStartedEvent,
)
from .result import Result

T = TypeVar("T")
R = TypeVar("R")


class Step(ABC, Generic[T, R]):
    """Atomic operation with a single responsibility.

    A ``Step`` transforms input of type ``T`` into output of type ``R``.
    Concrete steps implement ``execute`` and are run with ``run``, which
    publishes start/completion events and converts exceptions into error
    results.
    """

    def __init__(self, name: str, event_bus: EventBus) -> None:
        """Initialize step.

        Args:
            name: Unique name for this step.
            event_bus: Event bus for publishing events.
        """
        self.name = name
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    @abstractmethod
    def execute(self, context: BuildContext, input_data: T) -> Result[R]:
        """Transformation implemented by subclasses.

        Args:
            context: Build context of the class model being built.
            input_data: Output of the previous step.

        Returns:
            ``Result`` containing transformed data or an error.
        """

    def run(self, context: BuildContext, input_data: T) -> Result[R]:
        """Execute the step with event publishing and error handling."""
        self.event_bus.publish(
            StepStartedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                step_name=self.name,
                step_type=self.__class__.__name__,
            )
        )
        start_time = time.time()

        try:
            self._logger.debug(f"Starting step: {self.name}")
            result = self.execute(context, input_data)
            self._logger.debug(f"Completed step: {self.name} ({result.status.value})")
        except Exception as e:
            self._logger.debug(f"Exception in step {self.name}: {e}", exc_info=True)
            result = Result.failure(e, {"step": self.name, "context": context.run_id})

        self.event_bus.publish(
            StepCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                step_name=self.name,
                step_type=self.__class__.__name__,
                result=result,
                duration_ms=(time.time() - start_time) * 1000,
            )
        )
        return result


class Task(Generic[T, R]):
    """Related steps executed sequentially.

    Data is threaded through the steps; the first error result stops the
    task and is returned with the failing step recorded in its metadata.
    """

    def __init__(self, name: str, steps: list[Step], event_bus: EventBus) -> None:
        self.name = name
        self.steps = steps
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    def execute(self, context: BuildContext, input_data: T) -> Result[R]:
        """Execute the configured steps in sequence.

        Args:
            context: Build context.
            input_data: Input data for the first step.

        Returns:
            ``Result`` containing the final data on success or the first
            error encountered.
        """
        self.event_bus.publish(
            TaskStartedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                task_name=self.name,
                step_count=len(self.steps),
            )
        )
        start_time = time.time()
        self._logger.debug(f"Starting task: {self.name} with {len(self.steps)} steps")

        current_data: Any = input_data
        warnings: list[str] = []
        final: Result[Any] = Result.success(current_data)

        for i, step in enumerate(self.steps):
            result = step.run(context, current_data)

            if result.is_error():
                self._logger.debug(f"Step {step.name} failed, aborting task {self.name}")
                error = result.error or RuntimeError(f"Task {self.name} failed at step {step.name}")
                final = Result.failure(
                    error,
                    {"task": self.name, "failed_step": step.name, "step_index": i, "context": context.run_id},
                )
                break

            if result.warnings:
                warnings.extend(result.warnings)
            if result.data is not None:
                current_data = result.data
            final = result
        else:
            if warnings:
                final = Result.warning(current_data, warnings, final.metadata)
            else:
                final = Result.success(current_data, final.metadata)

        self.event_bus.publish(
            TaskCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                task_name=self.name,
                final_result=final,
                duration_ms=(time.time() - start_time) * 1000,
            )
        )
        return final

    def get_step_count(self) -> int:
        return len(self.steps)


class Job(Generic[T, R]):
    """High-level processing unit composed of tasks."""

    def __init__(self, name: str, tasks: list[Task], event_bus: EventBus) -> None:
        self.name = name
        self.tasks = tasks
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    def execute(self, context: BuildContext, initial_input: Any = None) -> Result[R]:
        """Execute all tasks, threading data from one task to the next.

        Args:
            context: Build context.
            initial_input: Input for the first task.

        Returns:
            ``Result`` containing the final data on success or the first
            error encountered.
        """
        self.event_bus.publish(
            JobStartedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                job_name=self.name,
                job_type=self.__class__.__name__,
                task_count=len(self.tasks),
            )
        )
        self._logger.debug(f"Starting job: {self.name} with {len(self.tasks)} tasks")
        start_time = time.time()

        current_input = initial_input
        warnings: list[str] = []
        final: Result[Any] = Result.success(current_input)

        for i, task in enumerate(self.tasks):
            result = task.execute(context, current_input)

            if result.is_error():
                self._logger.debug(f"Task {task.name} failed, aborting job {self.name}")
                error = result.error or RuntimeError(f"Job {self.name} failed at task {task.name}")
                final = Result.failure(
                    error,
                    {
                        **(result.metadata or {}),
                        "job": self.name,
                        "failed_task": task.name,
                        "task_index": i,
                        "context": context.run_id,
                    },
                )
                break

            if result.warnings:
                warnings.extend(result.warnings)
            if result.data is not None:
                current_input = result.data
            final = result
        else:
            if warnings:
                final = Result.warning(current_input, warnings, final.metadata)
            else:
                final = Result.success(current_input, final.metadata)

        self.event_bus.publish(
            JobCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                job_name=self.name,
                job_type=self.__class__.__name__,
                final_result=final,
                duration_ms=(time.time() - start_time) * 1000,
            )
        )
        return final

    def add_task(self, task: Task) -> None:
        self.tasks.append(task)
        self._logger.debug(f"Added task {task.name} to job {self.name}")

    def get_task_count(self) -> int:
        return len(self.tasks)
