"""
Drivethru CLI - Command-line interface.

Inspect the menu and build, hash or script artifacts from the terminal
exactly as the HTTP endpoints would.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from drivethru.core.config import load_menu
from drivethru.core.exceptions import DrivethruError, format_exception
from drivethru.core.models import Menu
from drivethru.delivery import DeliveryService
from drivethru.scripts.generator import generate_script

app = typer.Typer(
    name="drivethru",
    help="Drivethru - On-demand artifact archives, hashes and install scripts",
    no_args_is_help=True,
)
console = Console()

CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Menu file (default: $DRIVETHRU_CONFIG or /etc/drivethru/drivethru.yaml)"
)


def _load(config: Optional[Path]) -> Menu:
    try:
        return load_menu(config)
    except DrivethruError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(1)


@app.command()
def profiles(config: Optional[Path] = CONFIG_OPTION):
    """List configured artifact profiles."""
    menu = _load(config)

    table = Table(title=f"Artifact Profiles ({len(menu.profiles)})")
    table.add_column("Name", style="cyan")
    table.add_column("Source")
    table.add_column("Destination")
    table.add_column("Universal", style="magenta")
    table.add_column("Extra", style="green")

    for profile in menu.profiles:
        table.add_row(
            profile.name,
            profile.source,
            profile.destination,
            "yes" if profile.universal else "no",
            ", ".join(profile.extra) or "-",
        )

    console.print(table)
    console.print(f"\nRoot: {menu.root}")
    console.print(f"URL: {menu.url}")


@app.command()
def resolve(
    name: str = typer.Argument(..., help="Artifact name"),
    os_name: Optional[str] = typer.Option(None, "--os", help="Operating system"),
    arch_name: Optional[str] = typer.Option(None, "--arch", help="CPU architecture"),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Print the source path an artifact request resolves to."""
    service = DeliveryService(_load(config))
    try:
        artifact = service.resolve(name, os_name, arch_name)
    except DrivethruError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(1)

    typer.echo(str(artifact.source_path))
    if not artifact.source_path.exists():
        console.print("[yellow]Source path does not exist[/yellow]")


@app.command()
def pack(
    name: str = typer.Argument(..., help="Artifact name"),
    output: Path = typer.Option(..., "--output", "-o", help="Archive file to write"),
    os_name: Optional[str] = typer.Option(None, "--os", help="Operating system"),
    arch_name: Optional[str] = typer.Option(None, "--arch", help="CPU architecture"),
    compress: bool = typer.Option(True, "--compress/--no-compress", help="gzip the tar stream"),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Write an artifact archive to a file."""
    service = DeliveryService(_load(config))
    try:
        artifact = service.resolve(name, os_name, arch_name)
        with output.open("wb") as sink:
            summary = service.write_archive(artifact, sink, compress=compress)
    except DrivethruError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        if output.exists() and output.stat().st_size == 0:
            output.unlink()
        raise typer.Exit(1)

    console.print(
        f"[green]Wrote {summary.entries} entries ({summary.bytes_written:,} bytes) to:[/green] {output}"
    )


@app.command("hash")
def hash_cmd(
    name: str = typer.Argument(..., help="Artifact name"),
    os_name: Optional[str] = typer.Option(None, "--os", help="Operating system"),
    arch_name: Optional[str] = typer.Option(None, "--arch", help="CPU architecture"),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Print the digest the /hash endpoint returns for an artifact."""
    service = DeliveryService(_load(config))
    try:
        artifact = service.resolve(name, os_name, arch_name)
        digest = service.compute_hash(artifact)
    except DrivethruError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(1)

    typer.echo(digest)


@app.command()
def script(
    name: str = typer.Argument(..., help="Artifact name"),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Print the install script served by /get for an artifact."""
    menu = _load(config)
    # Plain output so the script can be piped to a file or shell
    typer.echo(generate_script(menu, name), nl=False)


@app.command()
def version():
    """Show Drivethru version."""
    from drivethru import __version__

    console.print(f"Drivethru v{__version__}")


if __name__ == "__main__":
    app()
