"""
Base pipeline module for model enrichment.

This module defines the abstract Pipeline class that serves
as the foundation for pipelines driving enrichment phases.
"""

import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from metagraph.phases.phase_utils import BasePhase, PhaseContext, PhaseResult

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Results from a pipeline execution.

    Metrics and messages are snapshots of the pipeline's own log at the
    time the result was created; outputs and phase results are added by
    the pipeline afterwards.
    """

    # Whether the pipeline completed successfully
    success: bool = False

    # Time taken to execute the pipeline
    execution_time: float = 0.0

    # Outputs produced by the pipeline (e.g. rendered diagrams)
    outputs: dict[str, Any] = field(default_factory=dict)

    # Metrics collected during execution
    metrics: dict[str, Any] = field(default_factory=dict)

    # Messages and logs
    messages: list[str] = field(default_factory=list)

    # Phase results by phase key
    phase_results: dict[str, PhaseResult] = field(default_factory=dict)

    def add_output(self, name: str, output: Any) -> None:
        """Add an output to the results."""
        self.outputs[name] = output

    def add_phase_result(self, phase_key: str, result: PhaseResult) -> None:
        """Add a phase result to the results."""
        self.phase_results[phase_key] = result


class Pipeline(ABC):
    """
    Abstract base class for enrichment pipelines.

    A pipeline is set up once and may be executed several times; messages
    and metrics accumulate over its lifetime while the phase results of
    the current run are collected in phase_results.
    """

    def __init__(self, name: str):
        """
        Initialize the pipeline.

        Args:
            name: Name of the pipeline
        """
        self.name = name
        self.messages = []
        self.metrics = {}
        self.phase_results: dict[str, PhaseResult] = {}
        self.start_time = None
        self.end_time = None

    @abstractmethod
    def setup(self, **kwargs) -> bool:
        """
        Set up the pipeline with the given parameters.

        Args:
            **kwargs: Pipeline-specific parameters

        Returns:
            True if setup successful, False otherwise
        """

    @abstractmethod
    def execute(self, **kwargs) -> PipelineResult:
        """
        Execute the pipeline.

        Args:
            **kwargs: Pipeline-specific parameters

        Returns:
            Result of the pipeline execution
        """

    def _start_execution(self) -> None:
        """Record the start of a run and forget the previous run's phases."""
        self.start_time = time.time()
        self.end_time = None
        self.phase_results = {}
        logger.info("Starting %s pipeline", self.name)

    def _end_execution(self) -> float:
        """
        Record the end time of execution.

        Returns:
            Execution time in seconds
        """
        self.end_time = time.time()
        execution_time = self.end_time - self.start_time
        logger.info("Completed %s pipeline in %.2f seconds", self.name, execution_time)
        return execution_time

    def run_phase(self, phase_key: str, phase: BasePhase, context: PhaseContext) -> PhaseResult:
        """
        Execute a phase and record its result under a key.

        Args:
            phase_key: Key of the phase in the pipeline result
            phase: Phase to execute
            context: Shared phase context

        Returns:
            The phase result
        """
        result = phase.execute(context)
        self.phase_results[phase_key] = result
        for message in result.messages:
            logger.debug("%s: %s", phase.name, message)
        if not result.success:
            self.add_error(f"Phase {phase.name} failed")
        return result

    def add_message(self, message: str) -> None:
        """
        Add a message to the pipeline log.

        Args:
            message: Message to add
        """
        self.messages.append(message)
        logger.info(message)

    def add_warning(self, message: str) -> None:
        """
        Add a warning message to the pipeline log.

        Args:
            message: Warning message to add
        """
        self.messages.append(f"WARNING: {message}")
        logger.warning(message)

    def add_error(self, message: str) -> None:
        """
        Add an error message to the pipeline log.

        Args:
            message: Error message to add
        """
        self.messages.append(f"ERROR: {message}")
        logger.error(message)

    def add_metric(self, name: str, value: Any) -> None:
        """
        Add a metric to the pipeline.

        Args:
            name: Metric name
            value: Metric value
        """
        self.metrics[name] = value
        logger.debug("Metric %s: %s", name, value)

    def create_result(self, success: bool) -> PipelineResult:
        """
        Create a pipeline result holding the phases run so far.

        Args:
            success: Whether the pipeline executed successfully

        Returns:
            PipelineResult object
        """
        execution_time = 0.0
        if self.start_time is not None:
            if self.end_time is None:
                self._end_execution()
            execution_time = self.end_time - self.start_time

        result = PipelineResult(
            success=success,
            execution_time=execution_time,
            metrics=self.metrics.copy(),
            messages=self.messages.copy(),
        )
        for phase_key, phase_result in self.phase_results.items():
            result.add_phase_result(phase_key, phase_result)
        return result
