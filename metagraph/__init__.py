"""
metagraph - semantic reasoning over in-memory object-oriented metamodels.

This package answers structural questions about a graph of packages,
classes, features and operations: fully qualified naming and resolution,
annotation lookup, multiple-inheritance operation resolution, derivation
of mapped transfer object types and propagation of exposure from access
points.
"""

__version__ = "0.1.0"
__author__ = "metagraph developers"

from metagraph.core.enums import BehaviourType, InstanceKind
from metagraph.core.element import (
    Annotation,
    Attribute,
    ClassType,
    DataType,
    EnumType,
    Operation,
    Package,
    Reference,
)
from metagraph.core.model_graph import ModelGraph
from metagraph.config.settings import Settings
from metagraph.annotations.store import AnnotationStore
from metagraph.resolution.names import NameResolver, ResolverCache
from metagraph.resolution.operations import OperationResolutionEngine
from metagraph.resolution.behaviour import BehaviourResolver, MalformedModelError
from metagraph.phases.mapped_types import MappedTypeDeriver
from metagraph.phases.exposure import ExposureAnnotator
from metagraph.pipelines.enrichment import EnrichmentPipeline
