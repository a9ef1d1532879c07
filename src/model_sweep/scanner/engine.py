"""
Scanner execution engine.

Runs every cache-layout strategy against its root, groups each
strategy's files on their own (so groups never mix sources) and returns
one combined list, largest models first.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Dict, Optional, Union

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .base import ScanStrategy, ArtifactFile
from .strategies import HuggingFaceStrategy, LlamaCppStrategy
from ..config import ConfigManager, get_config
from ..grouping import ModelGroup, ModelGrouper


console = Console(stderr=True)

PathLike = Union[str, Path]


class ScannerEngine:
    """
    Central scanning engine that coordinates the layout strategies.

    The engine:
    1. Resolves one root per strategy (explicit argument, else config)
    2. Runs all strategies concurrently and collects their files
    3. Groups each strategy's files separately
    4. Concatenates and re-sorts by total size

    Example:
        >>> engine = ScannerEngine(hf_cache_dir="/tmp/hub", llama_cache_dir="/tmp/llama")
        >>> groups = engine.run()
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        hf_cache_dir: Optional[PathLike] = None,
        llama_cache_dir: Optional[PathLike] = None,
        strategies: Optional[Dict[ScanStrategy, PathLike]] = None,
    ):
        """
        Initialize the scanner engine.

        Args:
            config: Configuration manager instance (uses global if None)
            hf_cache_dir: Root for the Hugging Face strategy (config if None)
            llama_cache_dir: Root for the llama.cpp strategy (config if None)
            strategies: Custom strategy -> root mapping (replaces defaults)
        """
        if strategies is not None:
            self.strategies: Dict[ScanStrategy, Path] = {s: Path(root) for s, root in strategies.items()}
            return

        config = config or get_config()
        self.strategies = {
            HuggingFaceStrategy(): Path(hf_cache_dir) if hf_cache_dir else config.get_hf_cache_dir(),
            LlamaCppStrategy(): Path(llama_cache_dir) if llama_cache_dir else config.get_llama_cache_dir(),
        }

    def run(self, verbose: bool = False) -> List[ModelGroup]:
        """
        Run all strategies and return the combined, sorted groups.

        Never raises for scan trouble: a failing strategy contributes
        nothing.

        Args:
            verbose: Whether to print progress to console

        Returns:
            All model groups, largest first
        """
        if verbose:
            console.print("[bold blue]🔍 Scanning caches:[/bold blue]")
            for strategy, root in self.strategies.items():
                exists = "✓" if strategy.supports_path(root) else "✗"
                console.print(f"   • [{exists}] {strategy.name}: {root}")
            console.print()

        with ThreadPoolExecutor(max_workers=max(len(self.strategies), 1)) as pool:
            futures = [
                (strategy, pool.submit(strategy.scan, root))
                for strategy, root in self.strategies.items()
            ]

            all_groups: List[ModelGroup] = []
            if verbose:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    console=console,
                ) as progress:
                    for strategy, future in futures:
                        task = progress.add_task(f"Running {strategy.name} scanner...", total=None)
                        found = self._collect(strategy, future)
                        progress.update(
                            task,
                            description=f"[green]✓[/green] {strategy.name}: found {len(found)} files",
                        )
                        all_groups.extend(ModelGrouper.group(found, strategy.source))
            else:
                for strategy, future in futures:
                    found = self._collect(strategy, future)
                    all_groups.extend(ModelGrouper.group(found, strategy.source))

        groups = ModelGrouper.sort_groups(all_groups)

        if verbose:
            console.print(f"[bold green]✅ Found {len(groups)} models[/bold green]")

        return groups

    def run_single(self, strategy_name: str) -> List[ModelGroup]:
        """
        Run a single strategy by name and group its files.

        Args:
            strategy_name: Name of the strategy to run

        Returns:
            Groups found by that strategy

        Raises:
            ValueError: If strategy name is not found
        """
        for strategy, root in self.strategies.items():
            if strategy.name == strategy_name:
                return ModelGrouper.group(strategy.scan(root), strategy.source)

        raise ValueError(f"Unknown strategy: {strategy_name}")

    @staticmethod
    def _collect(strategy: ScanStrategy, future) -> List[ArtifactFile]:
        try:
            return future.result()
        except Exception as e:
            console.print(f"[red]✗ {strategy.name} scan failed: {e}[/red]")
            return []

    @property
    def strategy_names(self) -> List[str]:
        """Get list of all registered strategy names."""
        return [s.name for s in self.strategies]

    @property
    def roots(self) -> Dict[str, Path]:
        """Strategy name -> root directory."""
        return {s.name: root for s, root in self.strategies.items()}


def quick_scan(
    hf_cache_dir: Optional[PathLike] = None,
    llama_cache_dir: Optional[PathLike] = None,
    verbose: bool = False,
) -> List[ModelGroup]:
    """
    Convenience function for quick scanning.

    Args:
        hf_cache_dir: Hugging Face hub cache root (config if None)
        llama_cache_dir: llama.cpp cache root (config if None)
        verbose: Whether to print progress

    Returns:
        List of model groups, largest first
    """
    engine = ScannerEngine(hf_cache_dir=hf_cache_dir, llama_cache_dir=llama_cache_dir)
    return engine.run(verbose=verbose)
