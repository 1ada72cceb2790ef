"""
metagraph Package Setup Configuration

This file defines the metadata for the 'metagraph' package, a semantic
reasoning layer over in-memory object-oriented metamodels.

Key Components:
- Fully qualified naming and name resolution
- Annotation (extended metadata) store
- Multiple-inheritance operation resolution
- Mapped transfer object type derivation and exposure propagation
- License: MIT License
"""

from setuptools import setup, find_packages

setup(
    name="metagraph",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    author="metagraph developers",
    description="metagraph: semantic reasoning over in-memory object-oriented metamodels",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
)
