"""
Scanner module for Model Sweep.

This module implements the Strategy Pattern for scanning model caches:
- Hugging Face hub cache (repo-snapshot layout)
- llama.cpp download cache (flat-file layout)

Each layout is a separate strategy producing raw ArtifactFile records;
grouping into models happens downstream in ``model_sweep.grouping``.
"""

from .base import ScanStrategy, ArtifactFile, ArtifactType, ModelSource
from .strategies import (
    ScanUtils,
    HuggingFaceStrategy,
    LlamaCppStrategy,
)
from .engine import ScannerEngine, quick_scan

__all__ = [
    "ScanStrategy",
    "ArtifactFile",
    "ArtifactType",
    "ModelSource",
    "ScanUtils",
    "HuggingFaceStrategy",
    "LlamaCppStrategy",
    "ScannerEngine",
    "quick_scan",
]
