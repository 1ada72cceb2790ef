"""
Exposure propagation phase.

This module implements the phase that marks everything reachable from an
access point as exposed by it. Transfer object types, their features and
operations get an exposedBy fact naming the access point; elements reached
through one of the access point's graph references additionally get an
exposedGraph fact naming that reference.
"""

import logging
from typing import List, Optional, Set, Tuple

from metagraph.annotations.facts import ExposedByFact, ExposedGraphFact
from metagraph.annotations.store import AnnotationStore
from metagraph.config.settings import Settings
from metagraph.core.element import (
    Annotation,
    ClassType,
    Classifier,
    Feature,
    ModelElement,
    Operation,
    Reference,
)
from metagraph.phases.mapped_types import MappedTypeDeriver
from metagraph.phases.phase_utils import BasePhase, PhaseContext, PhaseResult, pad
from metagraph.resolution.behaviour import BehaviourResolver
from metagraph.resolution.names import (
    NameResolver,
    classifier_fq_name,
    feature_fq_name,
    operation_fq_name,
    reference_fq_name,
)
from metagraph.resolution.operations import OperationResolutionEngine

logger = logging.getLogger(__name__)

# (type, graph reference, include unbound operations, depth)
WorkItem = Tuple[ClassType, Optional[Reference], bool, int]


def same_element(first: Optional[ModelElement], second: Optional[ModelElement]) -> bool:
    """Check if two elements are the same or denote the same named element."""
    if first is second:
        return True
    if first is None or second is None or type(first) is not type(second):
        return False
    if isinstance(first, Classifier):
        return classifier_fq_name(first) == classifier_fq_name(second)
    if isinstance(first, (Feature, Operation)):
        return first.owner is not None and second.owner is not None and feature_fq_name(first) == feature_fq_name(second)
    return False


class ExposureAnnotator(BasePhase):
    """
    Propagates exposure facts from access points.

    Every (type, graph, include_unbound) combination is processed at most
    once per propagation, so reference cycles terminate.
    """

    def __init__(
        self,
        store: AnnotationStore,
        resolver: NameResolver,
        engine: OperationResolutionEngine,
        behaviours: BehaviourResolver,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the annotator.

        Args:
            store: Annotation store to read and write facts
            resolver: Name resolver for annotation values
            engine: Operation resolution engine for implementations
            behaviours: Behaviour resolver for unbound operations
            settings: Settings providing exposure.include_unbound
        """
        super().__init__("Exposure Propagation")
        self.store = store
        self.resolver = resolver
        self.engine = engine
        self.behaviours = behaviours
        self.mapping = MappedTypeDeriver(store, resolver)
        settings = settings or Settings()
        self.include_unbound = bool(settings.get("exposure", "include_unbound", default=True))
        self.added_count = 0

    def _expose(self, element: ModelElement, access_point: str) -> bool:
        added = self.store.add_fact(element, ExposedByFact.NAME, access_point)
        if added:
            self.added_count += 1
        return added

    def _expose_graph(self, element: ModelElement, graph: Reference) -> bool:
        added = self.store.add_fact(element, ExposedGraphFact.NAME, reference_fq_name(graph))
        if added:
            self.added_count += 1
        return added

    def propagate(
        self,
        root: ClassType,
        access_point: str,
        graph: Optional[Reference] = None,
        include_unbound: bool = True,
        depth: int = 0,
    ) -> None:
        """
        Mark a transfer object type and everything reachable from it as exposed.

        Args:
            root: Transfer object type to start from
            access_point: FQName of the exposing access point
            graph: Graph reference the type is reached through (None for
                direct exposure by the access point)
            include_unbound: Expose every operation when no graph is given
            depth: Depth used to indent debug traces
        """
        processed: Set[Tuple[int, Optional[int], bool]] = set()
        stack: List[WorkItem] = [(root, graph, include_unbound, depth)]

        while stack:
            current, current_graph, current_unbound, level = stack.pop()
            key = (id(current), id(current_graph) if current_graph is not None else None, current_unbound)
            if key in processed:
                continue
            processed.add(key)

            queued = self._propagate_type(current, access_point, current_graph, current_unbound, level)
            stack.extend(reversed(queued))

    def _propagate_type(
        self,
        current: ClassType,
        access_point: str,
        graph: Optional[Reference],
        include_unbound: bool,
        level: int,
    ) -> List[WorkItem]:
        logger.debug(pad(level, "- transfer object type: %s"), classifier_fq_name(current))
        queued: List[WorkItem] = []

        exposed_by_added = self._expose(current, access_point)
        graph_added = self._expose_graph(current, graph) if graph is not None else False
        added = exposed_by_added or graph_added

        for attribute in current.all_attributes():
            self._expose(attribute, access_point)

        for reference in current.all_references():
            self._expose(reference, access_point)
            if reference.containment and isinstance(reference.reference_type, ClassType):
                queued.append((reference.reference_type, None, include_unbound, level + 1))

        if added:
            for supertype in current.all_supertypes():
                queued.append((supertype, graph, include_unbound, level + 1))

        if self.mapping.is_mapped_transfer_object_type(current):
            entity = self.mapping.get_mapped_entity_type(current)
            if entity is not None:
                self._expose(entity, access_point)

        for operation in self.engine.all_implementations(current):
            if self._is_operation_exposed(operation, graph, include_unbound, graph_added):
                queued.extend(self._expose_operation(operation, access_point, graph, level))

        return queued

    def _is_operation_exposed(
        self,
        operation: Operation,
        graph: Optional[Reference],
        include_unbound: bool,
        graph_added: bool,
    ) -> bool:
        if graph is None:
            return include_unbound
        if not graph_added:
            return False
        if self.store.is_bound(operation):
            return True
        if self.behaviours.get_behaviour(operation) is None:
            return True
        return same_element(self.behaviours.get_owner(operation), graph)

    def _expose_operation(
        self,
        operation: Operation,
        access_point: str,
        graph: Optional[Reference],
        level: int,
    ) -> List[WorkItem]:
        logger.debug(pad(level, "    - operation: %s"), operation_fq_name(operation))
        queued: List[WorkItem] = []

        self._expose(operation, access_point)
        if graph is not None:
            self._expose_graph(operation, graph)

        for parameter in operation.parameters:
            if isinstance(parameter.type, ClassType):
                self._expose(parameter, access_point)
                queued.append((parameter.type, None, False, level + 1))
            else:
                logger.error(
                    "Input parameters must be transfer object types: %s (%s)",
                    parameter.name,
                    operation_fq_name(operation),
                )

        if operation.return_type is not None:
            if isinstance(operation.return_type, ClassType):
                queued.append((operation.return_type, None, False, level + 1))
            else:
                logger.error("Output parameter must be transfer object type: %s", operation_fq_name(operation))

        for fault in operation.exceptions:
            if isinstance(fault, ClassType):
                queued.append((fault, None, False, level + 1))
            else:
                logger.error("Fault parameters must be transfer object types: %s", operation_fq_name(operation))

        return queued

    def get_access_points(self) -> List[ClassType]:
        return [c for c in self.resolver.graph.all(ClassType) if self.store.is_access_point(c)]

    def graph_references(self, access_point: ClassType) -> List[Reference]:
        """
        Get the graph references of an access point.

        Args:
            access_point: Access point class

        Returns:
            References (own and inherited) targeting mapped transfer object
            types, exposed services excluded
        """
        return [
            reference
            for reference in access_point.all_references()
            if isinstance(reference.reference_type, ClassType)
            and self.mapping.is_mapped_transfer_object_type(reference.reference_type)
            and not self.store.is_exposed_service(reference)
        ]

    def annotate(self, access_point: ClassType) -> None:
        """
        Propagate exposure from one access point and each of its graphs.

        Args:
            access_point: Access point class
        """
        fq_name = classifier_fq_name(access_point)
        logger.debug("Access point: %s", fq_name)
        self.propagate(access_point, fq_name, None, self.include_unbound, 0)
        for reference in self.graph_references(access_point):
            logger.debug(pad(1, "- graph: %s"), reference_fq_name(reference))
            self.propagate(reference.reference_type, fq_name, reference, self.include_unbound, 0)

    def annotate_all(self) -> List[ClassType]:
        """
        Propagate exposure from every access point of the graph.

        Returns:
            The access points processed
        """
        access_points = self.get_access_points()
        for access_point in access_points:
            self.annotate(access_point)
        return access_points

    def get_resolved_exposed_by(self, annotation: Annotation) -> Optional[ClassType]:
        """
        Resolve an exposedBy annotation to its access point.

        Args:
            annotation: Annotation to resolve

        Returns:
            The access point, or None when the annotation is not an exposedBy
            fact or does not name an access point (logged as an error)
        """
        if annotation.source != self.store.annotation_uri(ExposedByFact.NAME):
            return None
        fq_name = annotation.details.get("value")
        if fq_name is None:
            return None
        resolved = self.resolver.get_class_by_fq_name(fq_name)
        if resolved is None:
            return None
        if not self.store.is_access_point(resolved):
            logger.error("Exposed by is not an access point: %s", fq_name)
            return None
        return resolved

    def get_access_points_of(self, element: ModelElement) -> List[ClassType]:
        """Get the access points exposing an element."""
        result: List[ClassType] = []
        for annotation in self.store.get_annotations(element, ExposedByFact.NAME):
            access_point = self.get_resolved_exposed_by(annotation)
            if access_point is not None and access_point not in result:
                result.append(access_point)
        return result

    def get_exposed_graphs_of(self, element: ModelElement) -> List[Reference]:
        """Get the graph references an element is exposed through."""
        result: List[Reference] = []
        for fact in self.store.get_facts(element, ExposedGraphFact):
            reference = self.resolver.resolve_reference(fact.value)
            if reference is not None and reference not in result:
                result.append(reference)
        return result

    def get_exposed_operations(self, access_point: ClassType) -> List[Operation]:
        return [
            operation
            for operation in self.resolver.graph.all(Operation)
            if access_point in self.get_access_points_of(operation)
        ]

    def enrich(self, context: PhaseContext, result: PhaseResult) -> None:
        """
        Propagate exposure from every access point.

        Args:
            context: The shared context information
            result: Result receiving the propagation metrics
        """
        self.added_count = 0

        access_points = self.annotate_all()

        result.add_metric("access_points", len(access_points))
        result.add_metric("exposure_facts_added", self.added_count)
        result.add_artifact("access_points", [classifier_fq_name(a) for a in access_points])
        result.add_message(f"Exposure propagation complete. Processed {len(access_points)} access points.")
