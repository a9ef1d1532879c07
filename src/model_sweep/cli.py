# src/model_sweep/cli.py
"""
CLI module for Model Sweep.

Provides command-line interface using Click and Rich.

Commands:
    msweep list     - Scan caches and list models
    msweep stats    - Show totals per source
    msweep delete   - Delete a model group
    msweep config   - Manage cache locations
"""

import click
from pathlib import Path
from typing import Optional
import json

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from . import __version__
from .core import ModelInventory, ModelGroupNotFoundError
from .config import ConfigManager

console = Console()
err_console = Console(stderr=True)


def get_config() -> ConfigManager:
    """Get or create the config manager singleton."""
    return ConfigManager()


def get_inventory(ctx: click.Context) -> ModelInventory:
    """Build an inventory honoring the --hf-cache/--llama-cache overrides."""
    obj = ctx.obj or {}
    return ModelInventory(
        hf_cache_dir=obj.get("hf_cache"),
        llama_cache_dir=obj.get("llama_cache"),
    )


# ============================================================
# Main CLI Group
# ============================================================

@click.group()
@click.version_option(version=__version__, prog_name="Model Sweep")
@click.option(
    "--hf-cache",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Hugging Face hub cache to scan (overrides config)"
)
@click.option(
    "--llama-cache",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="llama.cpp cache to scan (overrides config)"
)
@click.pass_context
def main(ctx: click.Context, hf_cache: Optional[Path], llama_cache: Optional[Path]):
    """
    🧹 Model Sweep - see what your local model caches hold, and clean up.

    Scans the Hugging Face hub cache and the llama.cpp cache, groups
    files into models and shows how much space each one takes.

    \b
    Quick Start:
      msweep list                    # All cached models
      msweep list -s llamacpp        # Only llama.cpp downloads
      msweep delete group-acme/tiny  # Remove a model
    """
    ctx.ensure_object(dict)
    ctx.obj["hf_cache"] = hf_cache
    ctx.obj["llama_cache"] = llama_cache


# ============================================================
# List Command
# ============================================================

@main.command("list")
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["table", "json", "paths"]),
    default="table",
    help="Output format"
)
@click.option(
    "--source", "-s",
    type=click.Choice(["all", "huggingface", "llamacpp"]),
    default="all",
    help="Only show models from this cache"
)
@click.option(
    "--search", "-q",
    type=str,
    default="",
    help="Filter by name (case-insensitive)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show scanning progress"
)
@click.pass_context
def list_models(ctx: click.Context, output_format: str, source: str, search: str, verbose: bool):
    """
    Scan caches and list models, largest first.

    \b
    Examples:
      msweep list
      msweep list -s huggingface
      msweep list -q llama -f json
      msweep list -f paths > files.txt
    """
    inventory = get_inventory(ctx)
    groups = inventory.filter(inventory.scan_all(verbose=verbose), source=source, query=search)

    if output_format == "json":
        click.echo(json.dumps([g.to_dict() for g in groups], indent=2))
        return

    if output_format == "paths":
        for group in groups:
            for file in group.files:
                click.echo(file.path)
        return

    if not groups:
        console.print("[yellow]No models found.[/yellow]")
        return

    table = Table(title=f"📦 Cached Models ({len(groups)})")
    table.add_column("Model", style="cyan", max_width=40)
    table.add_column("Files", style="dim", max_width=30)
    table.add_column("Type", style="green", width=11)
    table.add_column("Source", width=11)
    table.add_column("Size", style="yellow", justify="right", width=10)
    table.add_column("Modified", style="dim", width=10)

    for group in groups:
        table.add_row(
            group.repo,
            group.subtitle or "",
            group.type,
            group.source,
            group.size_formatted,
            group.last_modified[:10],
        )

    console.print(table)


# ============================================================
# Stats Command
# ============================================================

@main.command()
@click.pass_context
def stats(ctx: click.Context):
    """Show model count and disk usage per cache."""
    inventory = get_inventory(ctx)
    stats_data = inventory.stats(inventory.scan_all())

    console.print(Panel.fit("📊 Cache Statistics", style="bold blue"))

    console.print(f"\n[bold]Total Models:[/bold] [cyan]{stats_data['total_models']}[/cyan]")
    console.print(f"[bold]Total Size:[/bold] [cyan]{stats_data['total_size_formatted']}[/cyan]")

    console.print("\n[bold]By Source:[/bold]")
    table = Table(show_header=False, box=None)
    table.add_column("Source", style="green", width=15)
    table.add_column("Count", style="cyan", width=10)

    for source, count in stats_data["by_source"].items():
        table.add_row(source, str(count))

    console.print(table)


# ============================================================
# Delete Command
# ============================================================

@main.command()
@click.argument("group_id")
@click.option(
    "--yes", "-y",
    is_flag=True,
    help="Do not ask for confirmation"
)
@click.pass_context
def delete(ctx: click.Context, group_id: str, yes: bool):
    """
    Delete every file of a model group.

    GROUP_ID is the id shown by 'msweep list -f json'.

    \b
    Examples:
      msweep delete group-TheBloke/Llama-2-7B-GGUF
      msweep delete llamacpp-llama-7b.gguf --yes
    """
    inventory = get_inventory(ctx)

    try:
        group = inventory.get(group_id)
    except ModelGroupNotFoundError:
        err_console.print(f"[red]✗ Not found: {group_id}[/red]")
        raise SystemExit(1)

    count = group.file_count
    if not yes:
        click.confirm(
            f'Are you sure you want to delete "{group.repo}"?\n'
            f"This will delete {count} file{'s' if count > 1 else ''} "
            f"({group.size_formatted})",
            abort=True,
        )

    if not inventory.delete(group):
        err_console.print(f"[red]✗ Failed to delete {group.repo}[/red]")
        raise SystemExit(1)

    console.print(f"[green]✓ Deleted {group.repo}[/green] ({group.size_formatted} freed)")


# ============================================================
# Config Command
# ============================================================

@main.group()
def config():
    """Manage Model Sweep configuration."""
    pass


@config.command("show")
def config_show():
    """Show current configuration."""
    cfg = get_config()

    console.print(Panel.fit("⚙️ Model Sweep Configuration", style="bold"))

    console.print("\n[bold cyan]Cache Directories:[/bold cyan]")
    for label, path in (
        ("huggingface", cfg.get_hf_cache_dir()),
        ("llamacpp", cfg.get_llama_cache_dir()),
    ):
        exists = "✓" if path.exists() else "✗"
        console.print(f"  [{exists}] {label}: {path}")

    console.print(f"\n[bold cyan]Config File:[/bold cyan] {cfg.config_file_path}")


@config.command("set-hf-cache")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
def config_set_hf_cache(path: Path):
    """Set the Hugging Face hub cache directory."""
    cfg = get_config()
    cfg.set_hf_cache_dir(str(path))
    console.print(f"[green]✓ Hugging Face cache set to:[/green] {path.absolute()}")


@config.command("set-llama-cache")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
def config_set_llama_cache(path: Path):
    """Set the llama.cpp cache directory."""
    cfg = get_config()
    cfg.set_llama_cache_dir(str(path))
    console.print(f"[green]✓ llama.cpp cache set to:[/green] {path.absolute()}")


@config.command("reset")
@click.confirmation_option(prompt="Reset all configuration?")
def config_reset():
    """Reset configuration to defaults."""
    cfg = get_config()
    cfg.reset()
    console.print("[green]✓ Configuration reset to defaults[/green]")


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    main()
