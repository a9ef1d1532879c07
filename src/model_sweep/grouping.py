# src/model_sweep/grouping.py
"""
Grouping of raw artifact files into logical models.

A scanner produces one record per file. Users think in models: a
Hugging Face repository with its config and weight shards, or a single
GGUF download. ModelGrouper turns the former into the latter:

1. Bucket files by inferred repository (exact string match)
2. Aggregate each bucket (total size, newest mtime, common type)
3. Emit files without a repository as single-file groups
4. Sort by total size, largest first (stable)
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence, Union

from .scanner.base import ArtifactFile, ModelSource
from .scanner.strategies import ScanUtils
from .utils import format_bytes, parse_timestamp


MIXED_TYPE = "mixed"


@dataclass
class ModelGroup:
    """
    One logical model as shown to the user.

    Attributes:
        id: "group-<repo>" for grouped files, the file id otherwise
        repo: Repository name, or the filename for ungrouped files
        files: Constituent files in scan order
        total_size: Sum of the file sizes in bytes
        size_formatted: Human-readable total_size
        source: "huggingface" or "llamacpp"
        type: Common file type, or "mixed"
        last_modified: Newest file mtime (ISO-8601)
        subtitle: Filename for one file, "<n> files" otherwise
        file_list_tooltip: Comma-joined filenames
    """
    id: str
    repo: str
    files: List[ArtifactFile]
    total_size: int
    size_formatted: str
    source: str
    type: str
    last_modified: str
    subtitle: Optional[str] = None
    file_list_tooltip: Optional[str] = None

    @property
    def file_count(self) -> int:
        return len(self.files)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "repo": self.repo,
            "subtitle": self.subtitle,
            "files": [f.to_dict() for f in self.files],
            "total_size": self.total_size,
            "size_formatted": self.size_formatted,
            "source": self.source,
            "type": self.type,
            "last_modified": self.last_modified,
            "file_list_tooltip": self.file_list_tooltip,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelGroup":
        """
        Create ModelGroup from a dictionary.

        Args:
            data: Dictionary as produced by :meth:`to_dict`

        Returns:
            ModelGroup instance
        """
        files = [ArtifactFile.from_dict(f) for f in data.get("files", [])]
        total_size = data.get("total_size", sum(f.size for f in files))
        return cls(
            id=data["id"],
            repo=data.get("repo", ""),
            files=files,
            total_size=total_size,
            size_formatted=data.get("size_formatted", format_bytes(total_size)),
            source=data.get("source", ""),
            type=data.get("type", MIXED_TYPE),
            last_modified=data.get("last_modified", ""),
            subtitle=data.get("subtitle"),
            file_list_tooltip=data.get("file_list_tooltip"),
        )


class ModelGrouper:
    """
    Builds ModelGroups from the raw output of one scanner.

    Groups never mix sources: call :meth:`group` once per scanner.

    Example:
        >>> files = HuggingFaceStrategy().scan(Path("~/.cache/huggingface/hub"))
        >>> groups = ModelGrouper.group(files, ModelSource.HUGGINGFACE)
    """

    GROUP_ID_PREFIX = "group-"

    @classmethod
    def resolve_repo(cls, file: ArtifactFile, source: ModelSource) -> Optional[str]:
        """
        Repository a file belongs to, or None if it stands alone.

        Uses the repository attached during scanning; for the Hugging Face
        layout it falls back to decoding the directory segment of the id.
        """
        if file.repo:
            return file.repo
        if source is ModelSource.HUGGINGFACE:
            return ScanUtils.parse_hf_repo_name(file.id.split("/")[0])
        return None

    @classmethod
    def group(
        cls,
        files: Sequence[ArtifactFile],
        source: Union[ModelSource, str],
    ) -> List[ModelGroup]:
        """
        Group one scanner's files into sorted ModelGroups.

        Args:
            files: Raw files from a single scanner
            source: That scanner's source tag

        Returns:
            Groups sorted by total size, largest first
        """
        source = ModelSource(source)

        buckets: Dict[str, List[ArtifactFile]] = {}
        ungrouped: List[ArtifactFile] = []

        for file in files:
            repo = cls.resolve_repo(file, source)
            if repo:
                buckets.setdefault(repo, []).append(file)
            else:
                ungrouped.append(file)

        groups = [cls._build_group(repo, repo_files, source) for repo, repo_files in buckets.items()]
        groups.extend(cls._build_single(file, source) for file in ungrouped)

        return cls.sort_groups(groups)

    @staticmethod
    def sort_groups(groups: Sequence[ModelGroup]) -> List[ModelGroup]:
        """Sort by total size descending; equal sizes keep their order."""
        return sorted(groups, key=lambda g: -g.total_size)

    @classmethod
    def _build_group(cls, repo: str, files: List[ArtifactFile], source: ModelSource) -> ModelGroup:
        total_size = sum(f.size for f in files)
        types = {f.type for f in files}
        newest = max(files, key=lambda f: parse_timestamp(f.last_modified))

        return ModelGroup(
            id=f"{cls.GROUP_ID_PREFIX}{repo}",
            repo=repo,
            files=list(files),
            total_size=total_size,
            size_formatted=format_bytes(total_size),
            source=source.value,
            type=types.pop() if len(types) == 1 else MIXED_TYPE,
            last_modified=newest.last_modified,
            subtitle=files[0].name if len(files) == 1 else f"{len(files)} files",
            file_list_tooltip=", ".join(f.name for f in files),
        )

    @staticmethod
    def _build_single(file: ArtifactFile, source: ModelSource) -> ModelGroup:
        return ModelGroup(
            id=file.id,
            repo=file.name,
            files=[file],
            total_size=file.size,
            size_formatted=format_bytes(file.size),
            source=source.value,
            type=file.type,
            last_modified=file.last_modified,
        )
