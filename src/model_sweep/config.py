"""
Configuration management for Model Sweep.

Handles the two cache roots that are scanned: the Hugging Face hub cache
(repo-snapshot layout) and the llama.cpp download cache (flat-file
layout). Defaults depend on the host platform and can be overridden by
the config file or by the environment variables the owning tools use.
"""

import os
import sys
import json
from pathlib import Path
from typing import Dict, Any, Optional


# Default configuration file location
CONFIG_DIR = Path.home() / ".config" / "model_sweep"
CONFIG_FILE = CONFIG_DIR / "config.json"


def default_hf_cache_dir() -> Path:
    """Default Hugging Face hub cache directory."""
    return Path.home() / ".cache" / "huggingface" / "hub"


def default_llama_cache_dir(platform: Optional[str] = None) -> Path:
    """
    Default llama.cpp cache directory for a platform.

    Args:
        platform: A ``sys.platform`` value (current platform if None)

    Returns:
        ~/Library/Caches/llama.cpp on macOS, ~/.cache/llama.cpp elsewhere
    """
    platform = platform or sys.platform
    if platform == "darwin":
        return Path.home() / "Library" / "Caches" / "llama.cpp"
    return Path.home() / ".cache" / "llama.cpp"


class ConfigManager:
    """
    Centralized configuration manager for Model Sweep.

    Manages:
    - Hugging Face hub cache location
    - llama.cpp cache location

    Precedence (highest first): environment variables, config file,
    platform defaults.

    Example:
        >>> config = ConfigManager()
        >>> config.get_hf_cache_dir()
        PosixPath('/home/me/.cache/huggingface/hub')
        >>> config.set_llama_cache_dir("/data/llama-cache")
    """

    _instance: Optional["ConfigManager"] = None

    def __new__(cls) -> "ConfigManager":
        """Singleton pattern - ensure only one config manager exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.config: Dict[str, Any] = self._load_config()
        self._initialized = True

    def _default_config(self) -> Dict[str, Any]:
        """
        Return default configuration values.

        Returns:
            Default configuration dictionary
        """
        return {
            "hf_cache_dir": str(default_hf_cache_dir()),
            "llama_cache_dir": str(default_llama_cache_dir()),
        }

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from disk, merging with defaults.

        Returns:
            Configuration dictionary
        """
        if not CONFIG_FILE.exists():
            return self._default_config()

        try:
            with open(CONFIG_FILE, "r", encoding="utf-8") as f:
                user_config = json.load(f)
            if not isinstance(user_config, dict):
                return self._default_config()
            # Merge with defaults (user config takes precedence)
            return {**self._default_config(), **user_config}
        except (json.JSONDecodeError, IOError):
            return self._default_config()

    def save(self) -> None:
        """Save current configuration to disk."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(self.config, f, indent=4, ensure_ascii=False)

    def get_hf_cache_dir(self) -> Path:
        """
        Get the Hugging Face hub cache directory.

        ``HF_HUB_CACHE`` wins, then ``HF_HOME``/hub, then the config value.

        Returns:
            Path to the hub cache
        """
        if os.environ.get("HF_HUB_CACHE"):
            return Path(os.environ["HF_HUB_CACHE"]).expanduser()
        if os.environ.get("HF_HOME"):
            return Path(os.environ["HF_HOME"]).expanduser() / "hub"
        return Path(self.config["hf_cache_dir"]).expanduser()

    def get_llama_cache_dir(self) -> Path:
        """
        Get the llama.cpp cache directory.

        ``LLAMA_CACHE`` wins over the config value.

        Returns:
            Path to the llama.cpp cache
        """
        if os.environ.get("LLAMA_CACHE"):
            return Path(os.environ["LLAMA_CACHE"]).expanduser()
        return Path(self.config["llama_cache_dir"]).expanduser()

    def set_hf_cache_dir(self, path: str) -> None:
        """
        Set the Hugging Face hub cache directory.

        Args:
            path: New cache path
        """
        self.config["hf_cache_dir"] = str(Path(path).expanduser().resolve())
        self.save()

    def set_llama_cache_dir(self, path: str) -> None:
        """
        Set the llama.cpp cache directory.

        Args:
            path: New cache path
        """
        self.config["llama_cache_dir"] = str(Path(path).expanduser().resolve())
        self.save()

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self.config = self._default_config()
        self.save()

    @property
    def config_file_path(self) -> Path:
        """Return the path to the configuration file."""
        return CONFIG_FILE


def get_config() -> ConfigManager:
    """
    Get the global ConfigManager instance.

    Returns:
        ConfigManager singleton instance
    """
    return ConfigManager()
