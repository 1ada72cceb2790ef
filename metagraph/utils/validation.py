"""
Model validation module.

This module provides structural validation of model graphs, ensuring the
invariants the enrichment algorithms rely on hold before they run.
"""

import logging
from typing import Dict, List, Set

from metagraph.core.element import ClassType, Classifier, Operation, Reference
from metagraph.core.model_graph import ModelGraph
from metagraph.resolution.names import classifier_fq_name, operation_fq_name, reference_fq_name

logger = logging.getLogger(__name__)


class ModelValidator:
    """
    Validates model graphs.

    Issues are violations the enrichment algorithms cannot cope with (a
    graph with issues must not be enriched); warnings point at suspicious
    but tolerated constructs.
    """

    def __init__(self, graph: ModelGraph):
        """
        Initialize the model validator.

        Args:
            graph: The model graph to validate
        """
        self.graph = graph
        self.issues = []
        self.warnings = []

    def validate(self) -> bool:
        """
        Validate the model.

        Returns:
            True if model is valid, False otherwise
        """
        self.issues = []
        self.warnings = []

        self._check_duplicate_fq_names()
        self._check_duplicate_ids()
        self._check_inheritance_cycles()
        self._check_operation_overloading()
        self._check_reference_targets()
        self._check_operation_exceptions()
        # closure based checks need acyclic inheritance
        if not self.issues:
            self._check_containment_cycles()

        for issue in self.issues:
            logger.error(f"Validation issue: {issue}")

        for warning in self.warnings:
            logger.warning(f"Validation warning: {warning}")

        return len(self.issues) == 0

    def _check_duplicate_fq_names(self) -> None:
        """Check that classifier FQNames are unique."""
        seen: Set[str] = set()
        for classifier in self.graph.all(Classifier):
            fq_name = classifier_fq_name(classifier)
            if fq_name in seen:
                self.issues.append(f"Duplicate classifier name: '{fq_name}'")
            seen.add(fq_name)

    def _check_duplicate_ids(self) -> None:
        """Check that element identifiers are unique."""
        counts: Dict[str, int] = {}
        for element in self.graph.contents():
            element_id = getattr(element, "element_id", None)
            if element_id is not None:
                counts[element_id] = counts.get(element_id, 0) + 1
        for element_id, count in counts.items():
            if count > 1:
                self.issues.append(f"Element id {element_id} must be unique (used {count} times)")

    def _check_inheritance_cycles(self) -> None:
        """Check for inheritance cycles."""
        for cls in self.graph.all(ClassType):
            if self._has_inheritance_cycle(cls, cls, set()):
                self.issues.append(f"Inheritance cycle detected involving class: {classifier_fq_name(cls)}")

    def _has_inheritance_cycle(self, start: ClassType, current: ClassType, visited: Set[int]) -> bool:
        """
        Check if a class is reachable from itself through supertypes.

        Args:
            start: Class to look for
            current: Class whose supertypes are followed
            visited: Identities of the classes already followed

        Returns:
            True if cycle detected, False otherwise
        """
        for supertype in current.supertypes:
            if supertype is start:
                return True
            if id(supertype) in visited:
                continue
            visited.add(id(supertype))
            if self._has_inheritance_cycle(start, supertype, visited):
                return True
        return False

    def _check_operation_overloading(self) -> None:
        """Check that a class declares at most one operation per name."""
        for cls in self.graph.all(ClassType):
            names: Set[str] = set()
            for operation in cls.operations:
                if operation.name in names:
                    self.issues.append(f"Operation overloading is not allowed: {operation_fq_name(operation)}")
                names.add(operation.name)

    def _check_reference_targets(self) -> None:
        """Check that every reference has a class as target."""
        for reference in self.graph.all(Reference):
            if reference.reference_type is None:
                self.warnings.append(f"Reference without target: {reference_fq_name(reference)}")
            elif not isinstance(reference.reference_type, ClassType):
                self.warnings.append(f"Reference target is not a class: {reference_fq_name(reference)}")

    def _check_operation_exceptions(self) -> None:
        """Check that declared exceptions are classes."""
        for operation in self.graph.all(Operation):
            for fault in operation.exceptions:
                if not isinstance(fault, ClassType):
                    self.warnings.append(
                        f"Exception type {fault.name} of {operation_fq_name(operation)} is not a class"
                    )

    def _check_containment_cycles(self) -> None:
        """Check for classes containing themselves (directly or transitively)."""
        for cls in self.graph.all(ClassType):
            stack: List[ClassType] = [cls]
            visited: Set[int] = set()
            while stack:
                current = stack.pop()
                for reference in current.all_references():
                    target = reference.reference_type
                    if not reference.containment or not isinstance(target, ClassType):
                        continue
                    if target is cls:
                        self.warnings.append(f"Containment cycle detected involving class: {classifier_fq_name(cls)}")
                        stack = []
                        break
                    if id(target) not in visited:
                        visited.add(id(target))
                        stack.append(target)
