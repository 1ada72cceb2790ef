"""
External collaborator interfaces.

Loading and saving models, registering them with a host runtime and
running rule scripts against them are provided by other components.
This module only defines the contracts the enrichment pipeline relies on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from metagraph.core.model_graph import ModelGraph


@dataclass
class LoadResult:
    """
    Outcome of loading a model.

    A result flagged invalid carries the loader's diagnostics and must not
    be enriched.
    """

    # Loaded graph (None when loading failed outright)
    graph: Optional[ModelGraph] = None

    # Whether the loaded graph passed the loader's own checks
    valid: bool = True

    # Diagnostics reported by the loader
    diagnostics: List[str] = field(default_factory=list)


@dataclass
class RuleValidationResult:
    """Outcome of running a rule script against a model."""

    passed: bool = True
    messages: List[str] = field(default_factory=list)


class ModelLoader(ABC):
    """Loads a model graph from some persistent source."""

    @abstractmethod
    def load(self, source: Any) -> LoadResult:
        """
        Load a model.

        Args:
            source: Location or stream the model is read from

        Returns:
            Load result holding the graph and diagnostics
        """


class ModelSaver(ABC):
    """Writes a model graph to some persistent target."""

    @abstractmethod
    def save(self, graph: ModelGraph, target: Any) -> None:
        """
        Save a model.

        Args:
            graph: Graph to save
            target: Location or stream the model is written to
        """


class ModelRegistrar(ABC):
    """Publishes a model to a host runtime under a name and version."""

    @abstractmethod
    def register(self, graph: ModelGraph, name: str, version: Optional[str]) -> None:
        """
        Register a model.

        Args:
            graph: Graph to register
            name: Model name
            version: Model version
        """


class RuleValidator(ABC):
    """Runs an external rule script against a model."""

    @abstractmethod
    def validate(self, graph: ModelGraph, script: Any) -> RuleValidationResult:
        """
        Validate a model.

        Args:
            graph: Graph to validate
            script: Rule script to run

        Returns:
            Validation result
        """
