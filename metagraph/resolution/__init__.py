"""
Name and operation resolution.

This package contains fully qualified naming, the cached name resolver,
the multiple-inheritance operation resolution engine and the resolver of
built-in operation behaviours.
"""

from metagraph.resolution.names import (
    NameResolver,
    ResolverCache,
    attribute_fq_name,
    classifier_fq_name,
    feature_fq_name,
    operation_fq_name,
    package_fq_name,
    reference_fq_name,
    safe_name,
)
from metagraph.resolution.operations import OperationResolutionEngine
from metagraph.resolution.behaviour import BehaviourResolver, MalformedModelError

__all__ = [
    'NameResolver',
    'ResolverCache',
    'attribute_fq_name',
    'classifier_fq_name',
    'feature_fq_name',
    'operation_fq_name',
    'package_fq_name',
    'reference_fq_name',
    'safe_name',
    'OperationResolutionEngine',
    'BehaviourResolver',
    'MalformedModelError',
]
