"""
Pipeline components for model enrichment.

This package provides pipeline implementations that orchestrate
validation and enrichment of a model graph.
"""

from metagraph.pipelines.base_pipeline import Pipeline, PipelineResult
from metagraph.pipelines.enrichment import EnrichmentPipeline

__all__ = ['Pipeline', 'PipelineResult', 'EnrichmentPipeline']
