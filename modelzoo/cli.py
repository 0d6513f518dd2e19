"""
Command Line Interface for ModelZoo.
"""

from pathlib import Path
from typing import Optional, List, Dict

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, DownloadColumn

from modelzoo import setup_logging
from modelzoo.config import load_config
from modelzoo.exceptions import ModelZooError
from modelzoo.models import ModelZoo


# Initialize CLI app
app = typer.Typer(
    name="modelzoo",
    help="Pretrained model zoo for MXNet model families",
    add_completion=False,
)

console = Console()


def get_zoo(config: Optional[Path] = None, verbose: bool = False) -> ModelZoo:
    """Get ModelZoo instance."""
    zoo_config = load_config(str(config) if config else None)
    setup_logging("DEBUG" if verbose else zoo_config.log_level)
    return ModelZoo.create(zoo_config)


def parse_filters(filters: Optional[List[str]]) -> Dict[str, str]:
    """Turn ["key=value", ...] into a criteria dict."""
    criteria = {}
    for item in filters or []:
        if "=" not in item:
            raise typer.BadParameter(f"Filter must be key=value, got: {item}")
        key, value = item.split("=", 1)
        criteria[key.strip()] = value.strip()
    return criteria


@app.command()
def families(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """
    List the model families in the zoo.

    Examples:
        modelzoo families
    """
    try:
        zoo = get_zoo(config)
    except ModelZooError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Model Families ({zoo.repository.name})")
    table.add_column("Family", style="cyan", no_wrap=True)
    table.add_column("Application", style="magenta")
    table.add_column("Artifact", style="green")
    table.add_column("MRL")

    for family, loader in zoo.loaders().items():
        table.add_row(
            family.name,
            family.application,
            f"{loader.group_id}:{family.artifact_id}",
            loader.mrl.path,
        )

    console.print(table)


@app.command()
def info(
    family: str = typer.Argument(..., help="Model family, e.g. ssd or resnet"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show a model family and the artifacts published for it.

    Examples:
        modelzoo info resnet
    """
    try:
        zoo = get_zoo(config, verbose)
        loader = zoo.get_loader(family)
        artifacts = loader.list_artifacts()
    except ModelZooError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1)

    details = loader.describe()
    console.print(Panel(
        "\n".join(f"{key}: {value}" for key, value in details.items()),
        title=f"Loader: {loader.family.name}",
        border_style="blue",
    ))

    if not artifacts:
        console.print("[yellow]No artifacts published.[/]")
        return

    table = Table(title="Artifacts")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Version", style="green")
    table.add_column("Properties")
    table.add_column("Files", justify="right")

    for artifact in artifacts:
        table.add_row(
            artifact.name,
            artifact.version,
            ", ".join(f"{k}={v}" for k, v in sorted(artifact.properties.items())) or "-",
            str(len(artifact.files)),
        )

    console.print(table)


@app.command()
def download(
    family: str = typer.Argument(..., help="Model family, e.g. ssd or resnet"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="Artifact property key=value"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Download the newest model matching the filters.

    Examples:
        modelzoo download resnet -f layers=50
        modelzoo download ssd -f backbone=resnet50 -f dataset=voc
    """
    criteria = parse_filters(filters)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        console=console,
    ) as progress:
        tasks = {}

        def on_progress(key: str, done: int, total: Optional[int]):
            if key not in tasks:
                tasks[key] = progress.add_task(f"Downloading {key}...", total=total)
            progress.update(tasks[key], completed=done)

        try:
            zoo = get_zoo(config, verbose)
            model = zoo.get_loader(family).load_model(criteria, progress=on_progress)
        except ModelZooError as e:
            console.print(f"[bold red]Error:[/] {e}")
            raise typer.Exit(1)

    table = Table(title=f"{model.artifact.summary()}")
    table.add_column("File", style="cyan")
    table.add_column("Path")
    for key, path in model.files.items():
        table.add_row(key, str(path))

    console.print(table)


@app.command()
def cache_dir(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """
    Print the local cache directory.
    """
    zoo_config = load_config(str(config) if config else None)
    console.print(str(zoo_config.repository.cache_dir))


@app.command()
def clear_cache(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """
    Delete downloaded artifacts of the configured repository.
    """
    try:
        zoo = get_zoo(config)
    except ModelZooError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Clear cached models of {zoo.repository.name}?")
        if not confirm:
            raise typer.Abort()

    zoo.cache.clear(zoo.repository)
    console.print(f"[green]Cleared cache of {zoo.repository.name}[/]")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
