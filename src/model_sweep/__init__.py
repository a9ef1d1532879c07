"""
Model Sweep - inventory and clean up locally cached AI models.

This package finds model files stored by two caching conventions:
- Hugging Face hub cache (models--<owner>--<name>/snapshots/<rev>/...)
- llama.cpp download cache (flat *.gguf files with *.gguf.json sidecars)

Architecture:
- Scanner Layer: one strategy per cache layout, producing raw file records
- Grouping Layer: merges files into logical models with size/type/mtime
- Interface Layer: ModelInventory (scan/delete) and the ``msweep`` CLI
"""

__version__ = "0.1.0"

# Configuration
from .config import ConfigManager, get_config

# Scanner (Strategy Pattern)
from .scanner import (
    ScanStrategy,
    ArtifactFile,
    ArtifactType,
    ModelSource,
    ScannerEngine,
    HuggingFaceStrategy,
    LlamaCppStrategy,
)
from .scanner.engine import quick_scan

# Grouping
from .grouping import ModelGroup, ModelGrouper

# Core inventory
from .core import ModelInventory, ModelGroupNotFoundError, scan_all_models
from .deletion import delete_model_group

from .utils import format_bytes

__all__ = [
    # Config
    "ConfigManager",
    "get_config",
    # Scanner
    "ScanStrategy",
    "ArtifactFile",
    "ArtifactType",
    "ModelSource",
    "ScannerEngine",
    "HuggingFaceStrategy",
    "LlamaCppStrategy",
    "quick_scan",
    # Grouping
    "ModelGroup",
    "ModelGrouper",
    # Inventory
    "ModelInventory",
    "ModelGroupNotFoundError",
    "scan_all_models",
    "delete_model_group",
    # Utils
    "format_bytes",
    # Version
    "__version__",
]
