"""
Extended metadata components.

This package contains the annotation store and the typed facts that
describe the semantics attached to model elements.
"""

from metagraph.annotations.facts import (
    FACT_TYPES,
    AbstractFact,
    AccessPointFact,
    BehaviourFact,
    BindingFact,
    BoundFact,
    ConstraintsFact,
    EmbeddedFact,
    EntityFact,
    ExposedByFact,
    ExposedGraphFact,
    ExposedServiceFact,
    Fact,
    IdentifierFact,
    MappedEntityTypeFact,
    StatefulFact,
)
from metagraph.annotations.store import AnnotationStore

__all__ = [
    'FACT_TYPES',
    'AbstractFact',
    'AccessPointFact',
    'BehaviourFact',
    'BindingFact',
    'BoundFact',
    'ConstraintsFact',
    'EmbeddedFact',
    'EntityFact',
    'ExposedByFact',
    'ExposedGraphFact',
    'ExposedServiceFact',
    'Fact',
    'IdentifierFact',
    'MappedEntityTypeFact',
    'StatefulFact',
    'AnnotationStore',
]
