"""
Utility classes and functions for enrichment phases.

This module provides common utilities used across the enrichment phases,
including context management, result tracking, and helper functions.
"""

import time
import logging
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from abc import ABC, abstractmethod

from metagraph.annotations.store import AnnotationStore
from metagraph.config.settings import Settings
from metagraph.core.model_graph import ModelGraph
from metagraph.resolution.behaviour import BehaviourResolver
from metagraph.resolution.names import NameResolver
from metagraph.resolution.operations import OperationResolutionEngine

logger = logging.getLogger(__name__)

INDENT = "      "


def pad(level: int, message: str) -> str:
    """Indent a log message by traversal depth."""
    return INDENT * level + message


@dataclass
class PhaseContext:
    """
    Context information shared across enrichment phases.

    This class encapsulates the model being enriched and the services
    operating on it, promoting loose coupling between phases.
    """

    # The model graph being enriched
    graph: ModelGraph

    # Annotation access
    store: AnnotationStore

    # Name resolution
    resolver: NameResolver

    # Operation resolution
    engine: OperationResolutionEngine

    # Behaviour resolution
    behaviours: BehaviourResolver

    # Settings in effect
    settings: Settings

    # Additional metadata/context
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, graph: ModelGraph, settings: Optional[Settings] = None, **metadata) -> "PhaseContext":
        """
        Build a context with default services for a graph.

        Args:
            graph: Model graph to enrich
            settings: Settings to use (defaults when omitted)
            **metadata: Initial metadata entries

        Returns:
            A new phase context
        """
        settings = settings or Settings()
        store = AnnotationStore(settings=settings)
        resolver = NameResolver(graph, settings=settings)
        return cls(
            graph=graph,
            store=store,
            resolver=resolver,
            engine=OperationResolutionEngine(store),
            behaviours=BehaviourResolver(store, resolver),
            settings=settings,
            metadata=dict(metadata),
        )


@dataclass
class PhaseResult:
    """
    Results and metrics from an enrichment phase.

    A phase starts from an empty result and fills it while it runs; the
    pipeline reads the metrics and keeps the result per phase.
    """

    # Phase name
    phase_name: str

    # Success status
    success: bool = True

    # Metrics and statistics
    metrics: Dict[str, Any] = field(default_factory=dict)

    # Messages and notes
    messages: List[str] = field(default_factory=list)

    # Artifacts produced (FQNames of the elements the phase touched)
    artifacts: Dict[str, Any] = field(default_factory=dict)

    # Execution time in seconds
    execution_time: float = 0.0

    def add_message(self, message: str) -> None:
        """Add a message to the results."""
        self.messages.append(message)

    def add_metric(self, name: str, value: Any) -> None:
        """Add a metric to the results."""
        self.metrics[name] = value

    def add_artifact(self, name: str, artifact: Any) -> None:
        """Add an artifact to the results."""
        self.artifacts[name] = artifact


class BasePhase(ABC):
    """
    Base class for enrichment phases.

    Subclasses implement enrich(); execute() wraps it with a fresh result and
    timing.
    """

    def __init__(self, name: str):
        """
        Initialize the base phase.

        Args:
            name: Name of the phase
        """
        self.name = name

    def execute(self, context: PhaseContext) -> PhaseResult:
        """
        Execute the enrichment phase.

        Args:
            context: The shared context information

        Returns:
            Results of the phase execution
        """
        start_time = time.time()
        result = PhaseResult(phase_name=self.name)
        self.enrich(context, result)
        result.execution_time = time.time() - start_time
        logger.debug("Phase %s finished in %.3f seconds", self.name, result.execution_time)
        return result

    @abstractmethod
    def enrich(self, context: PhaseContext, result: PhaseResult) -> None:
        """
        Enrich the model in the context (to be implemented by subclasses).

        Args:
            context: The shared context information
            result: Result to record metrics, messages and artifacts in
        """
