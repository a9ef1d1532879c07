"""
Base classes for the scanner module.

Defines the per-file record (ArtifactFile) and the abstract interface
(ScanStrategy) that every cache-layout scanner implements. This enables
the Strategy Pattern: one scanner per on-disk convention, one shared
grouping pipeline downstream.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import List, Dict, Any, Optional

from ..utils import format_timestamp


class ArtifactType(Enum):
    """File type, derived from the file extension only."""
    GGUF = "gguf"
    SAFETENSORS = "safetensors"
    PYTORCH = "pytorch"
    OTHER = "other"


class ModelSource(Enum):
    """Which cache convention a record came from."""
    HUGGINGFACE = "huggingface"
    LLAMACPP = "llamacpp"


@dataclass
class ArtifactFile:
    """
    One physical file found in a model cache.

    Attributes:
        id: Key derived from the file location, unique within one scan
        name: Base filename
        path: Absolute filesystem path (used for deletion)
        size: Size in bytes at scan time
        type: One of the ArtifactType values
        last_modified: ISO-8601 mtime at scan time
        revision: Snapshot revision (repo-snapshot layout only)
        repo: Inferred source repository; transient, not serialized
    """
    id: str
    name: str
    path: str
    size: int
    type: str
    last_modified: str
    revision: Optional[str] = None
    repo: Optional[str] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        The transient ``repo`` field is left out.
        """
        data = asdict(self)
        data.pop("repo", None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArtifactFile":
        """
        Create ArtifactFile from a dictionary.

        Args:
            data: Dictionary as produced by :meth:`to_dict`

        Returns:
            ArtifactFile instance
        """
        return cls(
            id=data["id"],
            name=data.get("name", os.path.basename(data["path"])),
            path=data["path"],
            size=data.get("size", 0),
            type=data.get("type", ArtifactType.OTHER.value),
            last_modified=data.get("last_modified", ""),
            revision=data.get("revision"),
        )


class ScanStrategy(ABC):
    """
    Abstract base class for all cache-layout scanners.

    Each strategy is responsible for:
    1. Walking its own root directory layout
    2. Inferring the source repository of each file when possible
    3. Returning raw ArtifactFile records

    Grouping is not a strategy concern; see ``model_sweep.grouping``.

    Example:
        class MyLayoutStrategy(ScanStrategy):
            @property
            def name(self) -> str:
                return "my_layout"

            @property
            def source(self) -> ModelSource:
                return ModelSource.LLAMACPP

            def scan(self, root: Path) -> List[ArtifactFile]:
                ...
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this scanning strategy.

        Returns:
            Strategy name (e.g., "huggingface", "llamacpp")
        """
        pass

    @property
    @abstractmethod
    def source(self) -> ModelSource:
        """Source tag attached to every group built from this strategy."""
        pass

    @abstractmethod
    def scan(self, root: Path) -> List[ArtifactFile]:
        """
        Scan a cache root for artifact files.

        Args:
            root: Cache root directory (does not have to exist)

        Returns:
            List of ArtifactFile records

        Note:
            - Must handle non-existent paths gracefully
            - Files that vanish mid-scan are skipped, not errors
        """
        pass

    def supports_path(self, path: Path) -> bool:
        """
        Check if this strategy can scan a given path.

        Args:
            path: Path to check

        Returns:
            True if the path is an existing, checkable directory
        """
        try:
            return path.is_dir()
        except OSError:
            return False

    def stat_file(self, path: Path) -> Optional[os.stat_result]:
        """
        Stat a file, following symlinks when the target resolves.

        A dangling symlink falls back to the link's own metadata.

        Args:
            path: File or symlink to stat

        Returns:
            stat result, or None if the entry has vanished
        """
        try:
            return path.stat()
        except OSError:
            pass
        try:
            return path.lstat()
        except OSError:
            return None

    def make_file(
        self,
        file_id: str,
        path: Path,
        artifact_type: ArtifactType,
        revision: Optional[str] = None,
        repo: Optional[str] = None,
    ) -> Optional[ArtifactFile]:
        """
        Build an ArtifactFile from a path on disk.

        Args:
            file_id: Location-derived identifier
            path: File path
            artifact_type: Type inferred from the filename
            revision: Snapshot revision, if any
            repo: Inferred repository, if any

        Returns:
            ArtifactFile, or None if the file vanished before it was stat-ed
        """
        stats = self.stat_file(path)
        if stats is None:
            return None

        return ArtifactFile(
            id=file_id,
            name=path.name,
            path=str(path),
            size=max(stats.st_size, 0),
            type=artifact_type.value,
            last_modified=format_timestamp(stats.st_mtime),
            revision=revision,
            repo=repo,
        )
