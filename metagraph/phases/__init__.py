"""
Enrichment phases.

This package contains the phases that enrich a model with derived
annotations: mapped transfer object type derivation and exposure
propagation from access points.
"""

from metagraph.phases.phase_utils import BasePhase, PhaseContext, PhaseResult, pad
from metagraph.phases.mapped_types import MappedTypeDeriver
from metagraph.phases.exposure import ExposureAnnotator

__all__ = [
    'BasePhase',
    'PhaseContext',
    'PhaseResult',
    'pad',
    'MappedTypeDeriver',
    'ExposureAnnotator',
]
