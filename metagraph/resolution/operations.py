"""
Operation resolution over multiple inheritance.

A class declares at most one operation per name. Looking an operation up
by name returns the class's own declaration when present, otherwise the
union of what each direct supertype resolves to. Independent inheritance
branches may therefore yield several operations for one name; such
ambiguity is reported through logging and empty results, never raised.
"""

import logging
from typing import Iterable, List, Optional, Set

from metagraph.annotations.store import AnnotationStore
from metagraph.core.element import ClassType, Operation
from metagraph.resolution.names import classifier_fq_name, operation_fq_name

logger = logging.getLogger(__name__)


def unique(operations: Iterable[Operation]) -> List[Operation]:
    """De-duplicate operations by identity, keeping the first occurrence."""
    seen = set()
    result = []
    for operation in operations:
        if id(operation) not in seen:
            seen.add(id(operation))
            result.append(operation)
    return result


def without_overrides(operations: List[Operation]) -> List[Operation]:
    """Drop operations that override another member of the list."""
    return [o for o in operations if not any(o.is_override_of(other) for other in operations)]


class OperationResolutionEngine:
    """
    Computes declarations, implementations and abstract operation names.

    Abstractness of an operation is read from its "abstract" annotation.
    """

    def __init__(self, store: AnnotationStore):
        """
        Initialize the engine.

        Args:
            store: Annotation store used to read abstractness
        """
        self.store = store

    def all_operation_names(self, cls: ClassType) -> Set[str]:
        """Get the names of every operation declared by the class or its supertypes."""
        return {operation.name for operation in cls.all_operations()}

    def operations_by_name(self, cls: ClassType, name: str, ignore_abstract: bool = False) -> List[Operation]:
        """
        Get the operations a class resolves a name to.

        Args:
            cls: Class to start from
            name: Operation name
            ignore_abstract: Do not let abstract declarations shadow inherited ones

        Returns:
            The class's own declaration, or the union of the results of its
            direct supertypes
        """
        for operation in cls.operations:
            if operation.name == name and not (ignore_abstract and self.store.is_abstract(operation)):
                return [operation]

        inherited = []
        for supertype in cls.supertypes:
            inherited.extend(self.operations_by_name(supertype, name, ignore_abstract))
        return unique(inherited)

    def declarations_by_name(self, cls: ClassType, name: str) -> List[Operation]:
        """Get the declarations of a name that are not overrides of one another."""
        return without_overrides(self.operations_by_name(cls, name))

    def all_declarations(self, cls: ClassType, ignore_overrides: bool = False) -> List[Operation]:
        """
        Get the declarations of every operation name of a class.

        Args:
            cls: Class to inspect
            ignore_overrides: Also drop declarations overriding another one in the result

        Returns:
            Declarations ordered by operation name
        """
        declarations = unique(
            declaration
            for name in sorted(self.all_operation_names(cls))
            for declaration in self.declarations_by_name(cls, name)
        )
        if ignore_overrides:
            return without_overrides(declarations)
        return declarations

    def implementation_candidates(self, cls: ClassType, name: str) -> List[Operation]:
        """Get every non-abstract operation the name resolves to, skipping abstract declarations."""
        return [
            operation
            for operation in self.operations_by_name(cls, name, ignore_abstract=True)
            if not self.store.is_abstract(operation)
        ]

    def implementations_by_name(self, cls: ClassType, name: str) -> List[Operation]:
        """
        Get the implementation of an operation name as a list.

        Args:
            cls: Class to inspect
            name: Operation name

        Returns:
            A single-element list, or an empty list when there is no
            implementation (warning) or the implementation is ambiguous (error)
        """
        candidates = self.implementation_candidates(cls, name)
        if len(candidates) > 1:
            logger.error(
                "Multiple operation implementations found for %s#%s: %s",
                classifier_fq_name(cls),
                name,
                ", ".join(operation_fq_name(o) for o in candidates),
            )
            return []
        if not candidates:
            logger.warning("No operation implementation found for: %s#%s", classifier_fq_name(cls), name)
            return []
        return candidates

    def implementation_by_name(self, cls: ClassType, name: str) -> Optional[Operation]:
        implementations = self.implementations_by_name(cls, name)
        return implementations[0] if implementations else None

    def all_implementations(self, cls: ClassType) -> List[Operation]:
        """Get the unambiguous implementation of every operation name, ordered by name."""
        return unique(
            implementation
            for name in sorted(self.all_operation_names(cls))
            for implementation in self.implementations_by_name(cls, name)
        )

    def all_abstract_operation_names(self, cls: ClassType) -> Set[str]:
        """Get the operation names without a single implementation."""
        implemented = {operation.name for operation in self.all_implementations(cls)}
        return self.all_operation_names(cls) - implemented

    def implementation_of(self, operation: Operation) -> Optional[Operation]:
        """Get the implementation of an operation as seen from its owning class."""
        return self.implementation_by_name(operation.owner, operation.name)
