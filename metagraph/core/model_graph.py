"""
Model graph container module.

This module defines the ModelGraph class, which serves as the container
for an in-memory metamodel: the root packages and, through containment,
every package, classifier, feature, operation, parameter and annotation.
"""

import logging
from typing import Iterator, List, Optional, Type, TypeVar

from metagraph.core.element import ModelElement, Package

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=ModelElement)

MODEL_VERSION_SOURCE = "ModelVersion"


class ModelGraph:
    """
    Container for the entire metamodel.

    The graph owns its root packages; the first root package is the model
    itself. Traversals follow containment in declaration order so that
    results are deterministic for a given construction sequence.
    """

    def __init__(self, packages: Optional[List[Package]] = None):
        """
        Initialize a model graph.

        Args:
            packages: Initial root packages
        """
        self.packages: List[Package] = list(packages) if packages else []

    def add_package(self, package: Package) -> Package:
        """
        Add a root package to the graph.

        Args:
            package: Package to add

        Returns:
            The added package
        """
        self.packages.append(package)
        return package

    def root_package(self) -> Optional[Package]:
        """Get the model package (the first root package) or None for an empty graph."""
        return self.packages[0] if self.packages else None

    def contents(self) -> Iterator[object]:
        """
        Walk every element of the graph depth-first in containment order.

        Each element is yielded before its annotations, and its annotations
        before the elements it owns.

        Returns:
            Iterator over elements and annotations
        """
        stack: List[ModelElement] = list(reversed(self.packages))
        while stack:
            element = stack.pop()
            yield element
            yield from element.annotations
            stack.extend(reversed(list(element.children())))

    def all(self, kind: Type[T]) -> List[T]:
        """
        Get every element of the given class in traversal order.

        Args:
            kind: Element class to filter by (subclasses included)

        Returns:
            List of matching elements
        """
        return [element for element in self.contents() if isinstance(element, kind)]

    def version(self) -> Optional[str]:
        """
        Get the model version from the root package's ModelVersion annotation.

        Returns:
            The version string or None when not annotated
        """
        root = self.root_package()
        if root is None:
            return None
        for annotation in root.annotations:
            if annotation.source == MODEL_VERSION_SOURCE:
                return annotation.details.get("value")
        logger.debug("No %s annotation on model %s", MODEL_VERSION_SOURCE, root.name)
        return None

    def __repr__(self) -> str:
        return f"ModelGraph(packages={[p.name for p in self.packages]!r})"
