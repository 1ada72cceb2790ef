"""
Utility functions and classes for model enrichment.

This package provides model validation and data type classification.
"""

from metagraph.utils.validation import ModelValidator
from metagraph.utils import type_classification

__all__ = [
    'ModelValidator',
    'type_classification'
]
