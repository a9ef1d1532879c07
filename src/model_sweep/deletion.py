# src/model_sweep/deletion.py
"""
Deletion of a whole model group from disk.

Files are removed one by one in group order. The first hard error stops
the run; files already removed stay removed (no rollback).
"""

import os

from rich.console import Console

from .grouping import ModelGroup


console = Console(stderr=True)

GGUF_SUFFIX = ".gguf"
SIDECAR_SUFFIX = ".json"


def _remove_sidecar(file_path: str) -> None:
    """Remove "<file>.gguf.json" if present. Sidecar trouble never fails a group."""
    sidecar = file_path + SIDECAR_SUFFIX
    try:
        os.unlink(sidecar)
    except FileNotFoundError:
        pass
    except OSError as e:
        console.print(f"[yellow]⚠️ Could not remove sidecar {sidecar}: {e}[/yellow]")


def delete_model_group(group: ModelGroup) -> bool:
    """
    Delete every file of a model group.

    GGUF files also lose their llama.cpp metadata sidecar. Paths are used
    as given; they are not checked against the cache roots.

    Args:
        group: A group returned by a previous scan

    Returns:
        True if every file is gone, False on the first failure
    """
    for file in group.files:
        try:
            os.unlink(file.path)
        except FileNotFoundError:
            # Already gone counts as deleted
            pass
        except OSError as e:
            console.print(f"[red]❌ Failed to delete model group '{group.repo}': {file.path}: {e}[/red]")
            return False

        if file.name.endswith(GGUF_SUFFIX):
            _remove_sidecar(file.path)

    return True
