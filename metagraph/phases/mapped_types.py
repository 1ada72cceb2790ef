"""
Mapped transfer object type derivation.

This module implements the phase that turns entity types into mapped
transfer object types: every entity reachable from a starting entity
through references and inheritance is marked with a mappedEntityType fact
and each of its features is bound to the entity feature of the same name.
"""

import logging
from typing import List, Optional, Set

from metagraph.annotations.facts import BindingFact, MappedEntityTypeFact
from metagraph.annotations.store import AnnotationStore
from metagraph.core.element import Attribute, ClassType, Feature, Reference
from metagraph.phases.phase_utils import BasePhase, PhaseContext, PhaseResult, pad
from metagraph.resolution.names import (
    NameResolver,
    attribute_fq_name,
    classifier_fq_name,
    package_fq_name,
    reference_fq_name,
)

logger = logging.getLogger(__name__)


class MappedTypeDeriver(BasePhase):
    """
    Derives mapped transfer object types from entity types.

    Derivation is idempotent: classes that already carry a mappedEntityType
    fact and features that already carry a binding are left untouched.
    """

    def __init__(self, store: AnnotationStore, resolver: NameResolver):
        """
        Initialize the deriver.

        Args:
            store: Annotation store to read and write facts
            resolver: Name resolver used by the mapping lookups
        """
        super().__init__("Mapped Type Derivation")
        self.store = store
        self.resolver = resolver

    def _bind(self, feature: Feature) -> None:
        if self.store.get_annotation(feature, BindingFact.NAME) is None:
            self.store.add_fact(feature, BindingFact.NAME, feature.name)

    def derive_from(self, cls: ClassType, visited: Optional[Set[int]] = None) -> List[ClassType]:
        """
        Mark an entity type and everything reachable from it as mapped.

        Args:
            cls: Entity type to start from
            visited: Identities of classes already processed (shared across
                calls when supplied)

        Returns:
            Classes newly marked as mapped transfer object types, in
            processing order
        """
        if visited is None:
            visited = set()

        marked: List[ClassType] = []
        stack = [(cls, 0)]
        while stack:
            current, depth = stack.pop()
            if (
                id(current) in visited
                or not self.store.is_entity_type(current)
                or self.is_mapped_transfer_object_type(current)
            ):
                continue

            logger.debug(pad(depth, "- mapped type: %s"), classifier_fq_name(current))
            # records the owning package, not the class itself
            mapped_name = package_fq_name(current.package) if current.package is not None else ""
            self.store.add_fact(current, MappedEntityTypeFact.NAME, mapped_name)
            visited.add(id(current))
            marked.append(current)

            queued: List[ClassType] = []
            for reference in current.all_references():
                self._bind(reference)
                if reference.reference_type is not None:
                    queued.append(reference.reference_type)
            for attribute in current.all_attributes():
                self._bind(attribute)
            queued.extend(current.all_supertypes())

            stack.extend((target, depth + 1) for target in reversed(queued))

        return marked

    def is_mapped_transfer_object_type(self, cls: ClassType) -> bool:
        """Check if a class carries a mappedEntityType fact."""
        return self.store.is_mapped_type(cls)

    def get_mapped_entity_type(self, cls: ClassType) -> Optional[ClassType]:
        """
        Resolve the entity type a mapped transfer object type is mapped onto.

        Args:
            cls: Mapped transfer object type

        Returns:
            The entity type, or None when there is no mapping or the mapping
            does not name an entity type (logged as an error)
        """
        cache = self.resolver.cache.mapped_entities
        if self.resolver.cache_enabled and id(cls) in cache:
            return cache[id(cls)]

        entity = None
        fq_name = self.store.get_value(cls, MappedEntityTypeFact.NAME)
        if fq_name is not None:
            resolved = self.resolver.get_class_by_fq_name(fq_name)
            if resolved is not None:
                if self.store.is_entity_type(resolved):
                    entity = resolved
                else:
                    logger.error("Invalid entity type: %s", fq_name)

        if self.resolver.cache_enabled:
            cache[id(cls)] = entity
        return entity

    def _mapped_feature(self, feature: Feature, fq_name: str, kind: type) -> Optional[Feature]:
        binding = self.store.get_value(feature, BindingFact.NAME)
        if binding is None:
            return None
        entity = self.get_mapped_entity_type(feature.owner)
        if entity is None:
            logger.warning("Mapped feature container class is not mapped: %s", fq_name)
            return None
        mapped = entity.feature(binding)
        if not isinstance(mapped, kind):
            logger.warning("The given mapped alias is not a %s: %s", kind.__name__.lower(), fq_name)
            return None
        return mapped

    def get_mapped_attribute(self, attribute: Attribute) -> Optional[Attribute]:
        """Get the entity attribute a mapped attribute is bound to."""
        return self._mapped_feature(attribute, attribute_fq_name(attribute), Attribute)

    def get_mapped_reference(self, reference: Reference) -> Optional[Reference]:
        """Get the entity reference a mapped reference is bound to."""
        return self._mapped_feature(reference, reference_fq_name(reference), Reference)

    def all_mapped_transfer_object_types(self) -> List[ClassType]:
        return [c for c in self.resolver.graph.all(ClassType) if self.is_mapped_transfer_object_type(c)]

    def enrich(self, context: PhaseContext, result: PhaseResult) -> None:
        """
        Derive mapped types from the requested entity types.

        The entity FQNames to start from are read from the "entity_types"
        metadata entry; every entity type of the graph is used when it is
        not set.

        Args:
            context: The shared context information
            result: Result receiving the derivation metrics
        """
        names = context.metadata.get("entity_types")
        if names is None:
            roots = [c for c in context.graph.all(ClassType) if self.store.is_entity_type(c)]
        else:
            roots = []
            for name in names:
                cls = self.resolver.get_class_by_fq_name(name)
                if cls is None:
                    result.add_message(f"Entity type not found: {name}")
                    logger.warning("Entity type not found: %s", name)
                else:
                    roots.append(cls)

        visited: Set[int] = set()
        derived: List[ClassType] = []
        for cls in roots:
            derived.extend(self.derive_from(cls, visited))

        result.add_metric("requested_entity_types", len(roots))
        result.add_metric("derived_types", len(derived))
        result.add_artifact("derived_types", [classifier_fq_name(c) for c in derived])
        result.add_message(f"Mapped type derivation complete. Marked {len(derived)} types.")
