"""
Extended metadata (annotation) store.

This module provides the AnnotationStore class, which reads and writes the
named annotations attached to model elements. Annotation names are mapped
to sources within a configurable namespace; values are plain strings with
boolean literals interpreted case-insensitively.
"""

import logging
from typing import Dict, List, Optional, Type, TypeVar

from metagraph.annotations.facts import (
    AbstractFact,
    AccessPointFact,
    BoundFact,
    ConstraintsFact,
    EmbeddedFact,
    EntityFact,
    ExposedServiceFact,
    Fact,
    IdentifierFact,
    MappedEntityTypeFact,
    StatefulFact,
    parse_bool,
)
from metagraph.config.settings import DEFAULT_NAMESPACE, Settings
from metagraph.core.element import Annotation, Attribute, ClassType, ModelElement, Operation, Reference

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Fact)
E = TypeVar("E", bound=ModelElement)

VALUE_KEY = "value"


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


class AnnotationStore:
    """
    Read/write access to annotations by name.

    Additions are idempotent: adding a name/value pair that is already
    present is a no-op. Nothing is ever removed.
    """

    def __init__(self, namespace: Optional[str] = None, settings: Optional[Settings] = None):
        """
        Initialize the store.

        Args:
            namespace: Annotation namespace (overrides settings)
            settings: Settings providing annotations.namespace
        """
        if namespace is None and settings is not None:
            namespace = settings.get("annotations", "namespace")
        self.namespace = (namespace or DEFAULT_NAMESPACE).rstrip("/")

    def annotation_uri(self, name: str) -> str:
        """
        Get the annotation source for a name.

        Args:
            name: Annotation name

        Returns:
            Source URI of the annotation
        """
        return f"{self.namespace}/{name}"

    def get_annotations(self, element: ModelElement, name: str) -> List[Annotation]:
        """Get every annotation of an element with the given name, in order."""
        source = self.annotation_uri(name)
        return [a for a in element.annotations if a.source == source]

    def get_annotation(self, element: ModelElement, name: str, create: bool = False) -> Optional[Annotation]:
        """
        Get the first annotation of an element with the given name.

        Args:
            element: Annotated element
            name: Annotation name
            create: Append an empty annotation when none exists

        Returns:
            Matching annotation or None
        """
        annotations = self.get_annotations(element, name)
        if annotations:
            return annotations[0]
        if create:
            return element.add_annotation(Annotation(self.annotation_uri(name)))
        return None

    def add_fact(self, element: ModelElement, name: str, value: str) -> bool:
        """
        Add a name/value annotation unless it is already present.

        Args:
            element: Element to annotate
            name: Annotation name
            value: Annotation value

        Returns:
            True if a new annotation was added, False if it already existed
        """
        for annotation in self.get_annotations(element, name):
            if annotation.details.get(VALUE_KEY) == value:
                logger.debug("Annotation %s=%s already present on %r", name, value, element)
                return False

        annotation = element.add_annotation(Annotation(self.annotation_uri(name), {VALUE_KEY: value}))
        if element.element_id is not None:
            annotation.element_id = f"{element.element_id}/{upper_first(name)}/{upper_first(value)}"
        return True

    def add_details(self, element: ModelElement, name: str, details: Dict[str, str]) -> Annotation:
        """
        Merge details into the annotation of the given name (created if absent).

        Args:
            element: Element to annotate
            name: Annotation name
            details: Details to merge

        Returns:
            The updated annotation
        """
        annotation = self.get_annotation(element, name, create=True)
        annotation.details.update(details)
        return annotation

    def get_custom_value(
        self, element: ModelElement, name: str, key: str, log_if_missing: bool = False
    ) -> Optional[str]:
        """
        Get a detail of the first annotation with the given name.

        Args:
            element: Annotated element
            name: Annotation name
            key: Detail key
            log_if_missing: Log a warning when the annotation or key is missing

        Returns:
            Detail value or None
        """
        annotation = self.get_annotation(element, name)
        if annotation is None:
            if log_if_missing:
                logger.warning("No annotation %s found on element %r", name, element)
            return None
        value = annotation.details.get(key)
        if value is None and log_if_missing:
            logger.warning("No annotation value %s/%s found on element %r", name, key, element)
        return value

    def get_value(self, element: ModelElement, name: str, log_if_missing: bool = False) -> Optional[str]:
        """Get the value of the first annotation with the given name."""
        return self.get_custom_value(element, name, VALUE_KEY, log_if_missing)

    def is_true(self, element: ModelElement, name: str) -> bool:
        """Check if the annotation value is a true literal (False when absent)."""
        value = self.get_value(element, name)
        return value is not None and parse_bool(value)

    def is_false(self, element: ModelElement, name: str) -> bool:
        """Check if the annotation is present with a value other than a true literal."""
        value = self.get_value(element, name)
        return value is not None and not parse_bool(value)

    # Typed facade

    def get_facts(self, element: ModelElement, fact_type: Type[F]) -> List[F]:
        """
        Get every fact of a type attached to an element.

        Args:
            element: Annotated element
            fact_type: Fact class to read

        Returns:
            Facts in annotation order
        """
        return [fact_type.from_details(a.details) for a in self.get_annotations(element, fact_type.NAME)]

    def get_fact(self, element: ModelElement, fact_type: Type[F]) -> Optional[F]:
        """Get the first fact of a type attached to an element."""
        annotation = self.get_annotation(element, fact_type.NAME)
        return fact_type.from_details(annotation.details) if annotation is not None else None

    def add_typed_fact(self, element: ModelElement, fact: Fact) -> bool:
        """
        Attach a typed fact to an element.

        Facts with a single value follow add_fact semantics; facts with
        several details are appended unless an identical one exists.

        Args:
            element: Element to annotate
            fact: Fact to attach

        Returns:
            True if a new annotation was added, False otherwise
        """
        details = fact.to_details()
        if set(details) == {VALUE_KEY}:
            return self.add_fact(element, fact.NAME, details[VALUE_KEY])
        for annotation in self.get_annotations(element, fact.NAME):
            if annotation.details == details:
                return False
        element.add_annotation(Annotation(self.annotation_uri(fact.NAME), details))
        return True

    def get_annotated(self, annotation: Annotation, kind: Type[E]) -> Optional[E]:
        """
        Get the owner of an annotation when it is of the given kind.

        Args:
            annotation: Annotation to inspect
            kind: Expected element class

        Returns:
            The owning element or None
        """
        owner = annotation.owner
        return owner if isinstance(owner, kind) else None

    # Domain predicates

    def is_entity_type(self, cls: ClassType) -> bool:
        return self.is_true(cls, EntityFact.NAME)

    def is_access_point(self, cls: ClassType) -> bool:
        return self.is_true(cls, AccessPointFact.NAME)

    def is_mapped_type(self, cls: ClassType) -> bool:
        """Check if a class carries a mappedEntityType fact, whatever its value."""
        return self.get_annotation(cls, MappedEntityTypeFact.NAME) is not None

    def is_abstract(self, operation: Operation) -> bool:
        return self.is_true(operation, AbstractFact.NAME)

    def is_bound(self, operation: Operation) -> bool:
        return self.is_true(operation, BoundFact.NAME)

    def is_unbound(self, operation: Operation) -> bool:
        """Check if an operation is explicitly not bound to an instance."""
        return self.is_false(operation, BoundFact.NAME)

    def is_stateful(self, operation: Operation) -> bool:
        return self.is_true(operation, StatefulFact.NAME)

    def is_stateless(self, operation: Operation) -> bool:
        return self.is_false(operation, StatefulFact.NAME)

    def is_identifier(self, attribute: Attribute) -> bool:
        return self.is_true(attribute, IdentifierFact.NAME)

    def is_exposed_service(self, reference: Reference) -> bool:
        return self.is_true(reference, ExposedServiceFact.NAME)

    def is_embedded(self, reference: Reference) -> bool:
        """Check if a reference carries an embedded annotation (whatever its value)."""
        return self.get_annotation(reference, EmbeddedFact.NAME) is not None

    def _embedded_flag(self, reference: Reference, key: str) -> bool:
        return parse_bool(self.get_custom_value(reference, EmbeddedFact.NAME, key))

    def is_allowed_to_create_embedded(self, reference: Reference) -> bool:
        return self._embedded_flag(reference, "create")

    def is_allowed_to_update_embedded(self, reference: Reference) -> bool:
        return self._embedded_flag(reference, "update")

    def is_allowed_to_delete_embedded(self, reference: Reference) -> bool:
        return self._embedded_flag(reference, "delete")

    def get_constraints(self, element: ModelElement) -> Dict[str, str]:
        """
        Get the constraints of an element.

        Returns:
            Constraint details (empty when the element is unconstrained)
        """
        fact = self.get_fact(element, ConstraintsFact)
        return fact.values if fact is not None else {}
