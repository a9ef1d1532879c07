"""
Concrete scanning strategies for the supported cache layouts.

This module contains implementations for:
- HuggingFaceStrategy: repo-snapshot layout
  (<root>/models--<owner>--<name>/snapshots/<revision>/<file>)
- LlamaCppStrategy: flat-file layout
  (<root>/<file>.gguf with an optional <root>/<file>.gguf.json sidecar)
"""

import json
import re
from pathlib import Path
from typing import List, Optional, Dict, Any, Iterator

from rich.console import Console

from .base import ScanStrategy, ArtifactFile, ArtifactType, ModelSource


console = Console(stderr=True)


# ============================================================
# Scan Utilities
# ============================================================

class ScanUtils:
    """
    Pure helpers for type detection and repository inference.

    Inference helpers are pure; the filesystem helpers (``read_sidecar_repo``,
    ``list_dir`` and the entry checks) fail soft instead of raising.
    """

    HF_DIR_PREFIX = "models--"
    HF_DIR_SEPARATOR = "--"
    SNAPSHOTS_DIR = "snapshots"

    METADATA_SUFFIX = ".json"

    # Pattern: https://huggingface.co/<owner>/<name>/resolve/main/x.gguf
    RE_HF_URL = re.compile(r"huggingface\.co/([^/]+/[^/]+)")

    EXTENSION_TYPES: Dict[str, ArtifactType] = {
        ".gguf": ArtifactType.GGUF,
        ".safetensors": ArtifactType.SAFETENSORS,
        ".bin": ArtifactType.PYTORCH,
        ".pt": ArtifactType.PYTORCH,
        ".pth": ArtifactType.PYTORCH,
    }

    @classmethod
    def artifact_type(cls, filename: str) -> ArtifactType:
        """
        Infer the artifact type from a filename extension.

        Examples:
            model.gguf -> GGUF
            model-00001-of-00002.safetensors -> SAFETENSORS
            pytorch_model.bin -> PYTORCH
            config.json -> OTHER

        Args:
            filename: Base filename

        Returns:
            ArtifactType for the extension (case-insensitive)
        """
        return cls.EXTENSION_TYPES.get(Path(filename).suffix.lower(), ArtifactType.OTHER)

    @classmethod
    def parse_hf_repo_name(cls, dir_name: str) -> Optional[str]:
        """
        Decode a repo-snapshot directory name into "<owner>/<name>".

        The first segment after the prefix is the owner, the rest are
        joined with "-" to form the name.

        Examples:
            models--acme--tiny-llm -> "acme/tiny-llm"
            models--acme--tiny--llm -> "acme/tiny-llm"
            models--gpt2 -> None
            datasets--acme--data -> None

        Args:
            dir_name: Directory name under the cache root

        Returns:
            Repository identifier, or None if the name does not encode one
        """
        if not dir_name.startswith(cls.HF_DIR_PREFIX):
            return None

        parts = dir_name[len(cls.HF_DIR_PREFIX):].split(cls.HF_DIR_SEPARATOR)
        if len(parts) < 2:
            return None
        return f"{parts[0]}/{'-'.join(parts[1:])}"

    @classmethod
    def repo_from_url(cls, url: str) -> str:
        """
        Extract "<owner>/<name>" from a Hugging Face download URL.

        URLs from other hosts are returned unchanged so they still group
        files fetched from the same place.

        Args:
            url: Source URL from a sidecar file

        Returns:
            Repository identifier
        """
        match = cls.RE_HF_URL.search(url)
        return match.group(1) if match else url

    @classmethod
    def repo_from_sidecar(cls, metadata: Any) -> Optional[str]:
        """
        Infer the repository from parsed sidecar metadata.

        Args:
            metadata: Decoded JSON content of the sidecar

        Returns:
            Repository identifier, or None if there is no usable ``url``
        """
        if not isinstance(metadata, dict):
            return None
        url = metadata.get("url")
        if not isinstance(url, str) or not url:
            return None
        return cls.repo_from_url(url)

    @classmethod
    def read_sidecar_repo(cls, sidecar_path: Path) -> Optional[str]:
        """
        Read a sidecar file and infer the repository from it.

        Missing or malformed sidecars yield None.

        Args:
            sidecar_path: Path to "<file>.gguf.json"

        Returns:
            Repository identifier, or None
        """
        try:
            with open(sidecar_path, "r", encoding="utf-8") as f:
                metadata = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            console.print(f"[dim]Ignoring unreadable sidecar {sidecar_path}: {e}[/dim]")
            return None

        return cls.repo_from_sidecar(metadata)

    @staticmethod
    def list_dir(path: Path) -> List[Path]:
        """
        List a directory, sorted by name.

        A missing or unreadable directory lists as empty.
        """
        try:
            return sorted(path.iterdir())
        except OSError:
            return []

    @staticmethod
    def is_dir(path: Path) -> bool:
        """Path.is_dir(), with an entry that cannot be checked counted as absent."""
        try:
            return path.is_dir()
        except OSError:
            return False

    @staticmethod
    def is_file(path: Path) -> bool:
        """Path.is_file(), with an entry that cannot be checked counted as absent."""
        try:
            return path.is_file()
        except OSError:
            return False

    @classmethod
    def is_file_entry(cls, path: Path) -> bool:
        """Regular files and symlinks, except links that point at directories."""
        try:
            is_link = path.is_symlink()
        except OSError:
            return False
        if is_link:
            return not cls.is_dir(path)
        return cls.is_file(path)


class HuggingFaceStrategy(ScanStrategy):
    """
    Scanner for the Hugging Face hub cache (repo-snapshot layout).

    Layout:
        <root>/models--<owner>--<name>/snapshots/<revision>/<file>

    Snapshot entries are usually symlinks into ``blobs/``; the blob size
    is reported when the link resolves.

    Kept files: recognized weight formats plus ``*.json`` metadata.
    """

    @property
    def name(self) -> str:
        return "huggingface"

    @property
    def source(self) -> ModelSource:
        return ModelSource.HUGGINGFACE

    def scan(self, root: Path) -> List[ArtifactFile]:
        """
        Scan a hub cache root.

        Args:
            root: Hub cache directory (e.g. ~/.cache/huggingface/hub)

        Returns:
            One ArtifactFile per kept file per revision
        """
        root = Path(root).expanduser().absolute()
        files: List[ArtifactFile] = []

        for repo_dir in ScanUtils.list_dir(root):
            if not repo_dir.name.startswith(ScanUtils.HF_DIR_PREFIX) or not ScanUtils.is_dir(repo_dir):
                continue
            files.extend(self._scan_repo(repo_dir))

        return files

    def _scan_repo(self, repo_dir: Path) -> Iterator[ArtifactFile]:
        """
        Yield the files of every snapshot revision of one repository.

        Args:
            repo_dir: A ``models--*`` directory
        """
        repo = ScanUtils.parse_hf_repo_name(repo_dir.name)
        snapshots_dir = repo_dir / ScanUtils.SNAPSHOTS_DIR

        for revision_dir in ScanUtils.list_dir(snapshots_dir):
            if not ScanUtils.is_dir(revision_dir):
                continue

            for file_path in ScanUtils.list_dir(revision_dir):
                if not ScanUtils.is_file_entry(file_path):
                    continue

                artifact_type = ScanUtils.artifact_type(file_path.name)
                if artifact_type is ArtifactType.OTHER and not file_path.name.endswith(ScanUtils.METADATA_SUFFIX):
                    continue

                artifact = self.make_file(
                    file_id=f"{repo_dir.name}/{revision_dir.name}/{file_path.name}",
                    path=file_path,
                    artifact_type=artifact_type,
                    revision=revision_dir.name,
                    repo=repo,
                )
                if artifact:
                    yield artifact


class LlamaCppStrategy(ScanStrategy):
    """
    Scanner for the llama.cpp download cache (flat-file layout).

    Layout:
        <root>/<file>.gguf
        <root>/<file>.gguf.json   (optional sidecar with a "url" field)

    The sidecar URL, when it points at huggingface.co, gives the
    "<owner>/<name>" repository used for grouping.
    """

    ARTIFACT_SUFFIXES = (".gguf",)
    ID_PREFIX = "llamacpp-"

    @property
    def name(self) -> str:
        return "llamacpp"

    @property
    def source(self) -> ModelSource:
        return ModelSource.LLAMACPP

    def scan(self, root: Path) -> List[ArtifactFile]:
        """
        Scan a llama.cpp cache root (non-recursive).

        Args:
            root: llama.cpp cache directory

        Returns:
            One ArtifactFile per GGUF file, with ``repo`` set when a
            sidecar names one
        """
        root = Path(root).expanduser().absolute()
        files: List[ArtifactFile] = []

        for file_path in ScanUtils.list_dir(root):
            name = file_path.name
            if not name.endswith(self.ARTIFACT_SUFFIXES) or name.endswith(ScanUtils.METADATA_SUFFIX):
                continue
            if not ScanUtils.is_file(file_path):
                continue

            repo = ScanUtils.read_sidecar_repo(file_path.with_name(name + ScanUtils.METADATA_SUFFIX))

            artifact = self.make_file(
                file_id=f"{self.ID_PREFIX}{name}",
                path=file_path,
                artifact_type=ScanUtils.artifact_type(name),
                repo=repo,
            )
            if artifact:
                files.append(artifact)

        return files
