"""
Output generators for model graphs.

This package provides generators for creating diagrams
from enriched model graphs.
"""

from metagraph.generators.plantuml import PlantUMLGenerator

__all__ = ['PlantUMLGenerator']
