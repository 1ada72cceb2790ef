"""
Core metamodel components.

This package contains the foundational data structures for representing
an object-oriented metamodel: element types, the model graph container,
enumerations and the interfaces of external collaborators.
"""

from metagraph.core.enums import BehaviourType, InstanceKind
from metagraph.core.element import (
    Annotation,
    Attribute,
    ClassType,
    Classifier,
    DataType,
    EnumType,
    Feature,
    ModelElement,
    Operation,
    Package,
    Parameter,
    Reference,
)
from metagraph.core.model_graph import ModelGraph
from metagraph.core.collaborators import (
    LoadResult,
    ModelLoader,
    ModelRegistrar,
    ModelSaver,
    RuleValidationResult,
    RuleValidator,
)

__all__ = [
    'BehaviourType',
    'InstanceKind',
    'Annotation',
    'Attribute',
    'ClassType',
    'Classifier',
    'DataType',
    'EnumType',
    'Feature',
    'ModelElement',
    'Operation',
    'Package',
    'Parameter',
    'Reference',
    'ModelGraph',
    'LoadResult',
    'ModelLoader',
    'ModelRegistrar',
    'ModelSaver',
    'RuleValidationResult',
    'RuleValidator',
]
