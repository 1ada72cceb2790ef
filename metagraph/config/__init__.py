"""
Configuration settings for model enrichment.

This package contains settings and configuration utilities
for the metagraph library.
"""

from metagraph.config.settings import DEFAULT_NAMESPACE, Settings

__all__ = ['DEFAULT_NAMESPACE', 'Settings']
