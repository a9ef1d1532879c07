"""
Shared fixtures for the Model Sweep tests.

Every test runs with its own config file location and without the cache
environment variables of the host, so no real user cache is touched.
"""

import json
import os
from pathlib import Path
from typing import Optional

import pytest

from model_sweep import config as config_module
from model_sweep.config import ConfigManager


def write_file(path: Path, size: int = 0, mtime: Optional[float] = None) -> Path:
    """Create a (sparse) file of the given size, optionally with a fixed mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.truncate(size)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def write_sidecar(gguf_path: Path, data) -> Path:
    """Write "<file>.gguf.json" next to a GGUF file."""
    sidecar = gguf_path.with_name(gguf_path.name + ".json")
    sidecar.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return sidecar


def hf_snapshot(root: Path, repo_dir: str, revision: str, filename: str,
                size: int = 0, mtime: Optional[float] = None) -> Path:
    """Create <root>/<repo_dir>/snapshots/<revision>/<filename>."""
    return write_file(root / repo_dir / "snapshots" / revision / filename, size, mtime)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temp dir and reset the singleton."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_dir / "config.json")
    for var in ("HF_HUB_CACHE", "HF_HOME", "LLAMA_CACHE"):
        monkeypatch.delenv(var, raising=False)

    ConfigManager._instance = None
    yield config_dir
    ConfigManager._instance = None


@pytest.fixture
def hf_root(tmp_path) -> Path:
    root = tmp_path / "hub"
    root.mkdir()
    return root


@pytest.fixture
def llama_root(tmp_path) -> Path:
    root = tmp_path / "llama.cpp"
    root.mkdir()
    return root
