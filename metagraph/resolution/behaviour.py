"""
Resolution of built-in operation behaviours.

An operation may carry a "behaviour" annotation naming one of the CRUD-style
default behaviours and the element it acts on. Depending on the behaviour
type the owner is a classifier or a reference given as
"<classifier FQName>#<reference name>". A malformed owner means the model
itself is broken and is reported with MalformedModelError.
"""

import logging
from typing import Optional, Tuple, Union

from metagraph.annotations.facts import BehaviourFact
from metagraph.annotations.store import AnnotationStore
from metagraph.core.element import ClassType, Classifier, Operation, Reference
from metagraph.core.enums import BehaviourType
from metagraph.resolution.names import FEATURE_SEPARATOR, NameResolver, operation_fq_name

logger = logging.getLogger(__name__)


class MalformedModelError(ValueError):
    """Raised when a model contains an annotation that cannot be interpreted."""


class BehaviourResolver:
    """Reads behaviour annotations and resolves the elements they point to."""

    def __init__(self, store: AnnotationStore, resolver: NameResolver):
        """
        Initialize the behaviour resolver.

        Args:
            store: Annotation store to read behaviour facts from
            resolver: Name resolver for owners and relations
        """
        self.store = store
        self.resolver = resolver

    def get_fact(self, operation: Operation) -> Optional[BehaviourFact]:
        return self.store.get_fact(operation, BehaviourFact)

    def get_behaviour(self, operation: Operation) -> Optional[BehaviourType]:
        """
        Get the built-in behaviour of an operation.

        Args:
            operation: Operation to inspect

        Returns:
            Behaviour type, or None when the operation has no (known) behaviour
        """
        fact = self.get_fact(operation)
        if fact is None:
            return None
        behaviour = BehaviourType.resolve(fact.type)
        if behaviour is None:
            logger.warning("Unknown behaviour type '%s' of operation %s", fact.type, operation_fq_name(operation))
        return behaviour

    def _split_reference_path(self, path: Optional[str], operation: Operation) -> Tuple[str, str]:
        parts = path.split(FEATURE_SEPARATOR) if path else []
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise MalformedModelError(f"Invalid owner: {path} (operation {operation_fq_name(operation)})")
        return parts[0], parts[1]

    def _resolve_reference_path(self, path: Optional[str], operation: Operation) -> Reference:
        class_name, reference_name = self._split_reference_path(path, operation)
        classifier = self.resolver.resolve(class_name)
        if classifier is None:
            raise MalformedModelError(f"Unable to resolve owner: {path}")
        if not isinstance(classifier, ClassType):
            raise MalformedModelError(f"Invalid owner: {path}")
        for reference in classifier.all_references():
            if reference.name == reference_name:
                return reference
        raise MalformedModelError(f"Unable to resolve owner: {path}")

    def get_owner(self, operation: Operation) -> Optional[Union[Classifier, Reference]]:
        """
        Get the element a behaviour acts on.

        Args:
            operation: Operation with a behaviour annotation

        Returns:
            The owning classifier (update, delete, getTemplate) or reference
            (any other behaviour); None when the operation has no known
            behaviour or a classifier owner cannot be resolved

        Raises:
            MalformedModelError: If a reference owner is malformed or unresolvable
        """
        behaviour = self.get_behaviour(operation)
        if behaviour is None:
            return None
        owner = self.get_fact(operation).owner

        if behaviour.is_owned_by_classifier():
            classifier = self.resolver.resolve(owner) if owner else None
            if classifier is None:
                logger.error("Unable to resolve owner '%s' of operation %s", owner, operation_fq_name(operation))
            return classifier

        return self._resolve_reference_path(owner, operation)

    def get_relation(self, operation: Operation) -> Optional[Reference]:
        """
        Get the reference named by the "relation" detail of a behaviour.

        Raises:
            MalformedModelError: If the relation is malformed or unresolvable
        """
        fact = self.get_fact(operation)
        if fact is None or fact.relation is None:
            return None
        return self._resolve_reference_path(fact.relation, operation)

    def get_parameter_name(self, operation: Operation) -> Optional[str]:
        fact = self.get_fact(operation)
        return fact.parameter_name if fact is not None else None

    def get_output_parameter_name(self, operation: Operation) -> Optional[str]:
        fact = self.get_fact(operation)
        return fact.output_parameter_name if fact is not None else None
