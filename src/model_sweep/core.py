"""
Core module for Model Sweep.

Contains ModelInventory - the boundary a front end (CLI, desktop shell,
RPC handler) talks to. Two operations matter:
- scan_all(): rebuild the full model list from disk
- delete(group): remove one model group from disk

Nothing is cached between calls; every scan re-reads the filesystem.
"""

from pathlib import Path
from typing import List, Optional, Dict, Any, Sequence, Union

from .config import ConfigManager, get_config
from .deletion import delete_model_group
from .grouping import ModelGroup
from .scanner.base import ModelSource
from .scanner.engine import ScannerEngine
from .utils import format_bytes


class ModelGroupNotFoundError(KeyError):
    """Raised when no scanned group has the requested id."""
    pass


class ModelInventory:
    """
    Entry point for listing and deleting cached models.

    Example:
        >>> inventory = ModelInventory()
        >>> groups = inventory.scan_all()
        >>> inventory.delete(groups[0])
        True
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        hf_cache_dir: Optional[Union[str, Path]] = None,
        llama_cache_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Args:
            config: Configuration manager instance (uses global if None)
            hf_cache_dir: Override for the Hugging Face hub cache root
            llama_cache_dir: Override for the llama.cpp cache root
        """
        self.config = config or get_config()
        self.hf_cache_dir = hf_cache_dir
        self.llama_cache_dir = llama_cache_dir

    def _engine(self) -> ScannerEngine:
        return ScannerEngine(
            self.config,
            hf_cache_dir=self.hf_cache_dir,
            llama_cache_dir=self.llama_cache_dir,
        )

    def scan_all(self, verbose: bool = False) -> List[ModelGroup]:
        """
        Scan both caches and return every model group.

        Args:
            verbose: Whether to print progress

        Returns:
            Groups from both sources, largest first. Empty when nothing
            is cached; never raises for missing directories.
        """
        return self._engine().run(verbose=verbose)

    def delete(self, group: ModelGroup) -> bool:
        """
        Delete all files of a group.

        Args:
            group: A group returned by :meth:`scan_all`

        Returns:
            True if every deletion succeeded
        """
        return delete_model_group(group)

    def get(self, group_id: str, groups: Optional[Sequence[ModelGroup]] = None) -> ModelGroup:
        """
        Find a group by id.

        Args:
            group_id: Group id as returned by a scan
            groups: Groups to search (a fresh scan if None)

        Returns:
            The matching ModelGroup

        Raises:
            ModelGroupNotFoundError: If no group has that id
        """
        if groups is None:
            groups = self.scan_all()

        for group in groups:
            if group.id == group_id:
                return group

        raise ModelGroupNotFoundError(group_id)

    @staticmethod
    def filter(
        groups: Sequence[ModelGroup],
        source: Optional[Union[ModelSource, str]] = None,
        query: str = "",
    ) -> List[ModelGroup]:
        """
        Filter groups by source and a free-text query.

        Args:
            groups: Groups to filter
            source: Keep only this source ("all" or None keeps every source)
            query: Case-insensitive substring of repo or subtitle

        Returns:
            Matching groups in their original order
        """
        if isinstance(source, ModelSource):
            source = source.value
        if source == "all":
            source = None

        needle = query.strip().lower()
        result = []

        for group in groups:
            if source and group.source != source:
                continue
            if needle and needle not in group.repo.lower() and needle not in (group.subtitle or "").lower():
                continue
            result.append(group)

        return result

    @staticmethod
    def stats(groups: Sequence[ModelGroup]) -> Dict[str, Any]:
        """
        Summarize a list of groups.

        Returns:
            Dictionary with model count, total size and per-source counts
        """
        total_size = sum(g.total_size for g in groups)
        by_source = {s.value: 0 for s in ModelSource}
        for group in groups:
            by_source[group.source] = by_source.get(group.source, 0) + 1

        return {
            "total_models": len(groups),
            "total_size": total_size,
            "total_size_formatted": format_bytes(total_size),
            "by_source": by_source,
        }


def scan_all_models() -> List[ModelGroup]:
    """
    Scan the configured caches and return all model groups.

    This is the listing entry point for front ends.
    """
    return ModelInventory().scan_all()


__all__ = [
    "ModelInventory",
    "ModelGroupNotFoundError",
    "scan_all_models",
    "delete_model_group",
]
