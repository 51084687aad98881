"""CLI for building the static site pages from FitDegree data."""
import asyncio
from pathlib import Path
from typing import List, Optional, Type

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..builders import BUILDERS, BaseBuilder
from ..config import settings
from ..errors import StudioSiteError
from ..models import BuildResult
from ..services.cache import TTLCache
from ..services.fitdegree_client import FitDegreeClient
from ..services.site_writer import SiteWriter

app = typer.Typer(help="Build static site pages from FitDegree data.")
console = Console()

PublishDirOption = typer.Option(
    None, "--publish-dir", help="Site root to update (defaults to PUBLISH_DIR)"
)


async def run_builders(
    builders: List[Type[BaseBuilder]], publish_dir: Optional[Path] = None
) -> List[BuildResult]:
    """Run builders sequentially over one client and one run-scoped cache.

    Stops at the first failure.
    """
    writer = SiteWriter(publish_dir or settings.publish_path)
    results = []
    async with FitDegreeClient(cache=TTLCache()) as client:
        for builder_cls in builders:
            results.append(await builder_cls(client, writer=writer).build())
    return results


def create_summary(results: List[BuildResult]) -> Table:
    """Create a rich table summarising the build."""
    table = Table(show_header=True, header_style="cyan bold")
    table.add_column("Page")
    table.add_column("Rendered", justify="right")
    table.add_column("Fetched", justify="right")
    table.add_column("Extra files", justify="right")

    for result in results:
        table.add_row(
            str(result.target),
            str(result.count),
            str(result.total),
            str(len(result.extra_files)),
        )
    return table


def execute(builders: List[Type[BaseBuilder]], publish_dir: Optional[Path]) -> None:
    names = ", ".join(b.name for b in builders)
    console.print(f"\n[bold cyan]Building:[/bold cyan] {names}\n")

    try:
        results = asyncio.run(run_builders(builders, publish_dir))
    except (StudioSiteError, httpx.HTTPError) as e:
        console.print(f"[red]Build failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(create_summary(results))
    console.print("[green]Done.[/green]")


@app.command()
def instructors(publish_dir: Optional[Path] = PublishDirOption):
    """Build the Instructor Team page (and detail pages when enabled)."""
    execute([BUILDERS["instructors"]], publish_dir)


@app.command()
def schedule(publish_dir: Optional[Path] = PublishDirOption):
    """Build the upcoming schedule on the booking page."""
    execute([BUILDERS["schedule"]], publish_dir)


@app.command("classes-services")
def classes_services(publish_dir: Optional[Path] = PublishDirOption):
    """Build class types and one-on-one services."""
    execute([BUILDERS["classes-services"]], publish_dir)


@app.command("teacher-training")
def teacher_training(publish_dir: Optional[Path] = PublishDirOption):
    """Build the teacher training listing."""
    execute([BUILDERS["teacher-training"]], publish_dir)


@app.command("all")
def build_all(publish_dir: Optional[Path] = PublishDirOption):
    """
    Build every page, stopping at the first failure.

    Examples:

        python -m studio_site.cli.build all

        python -m studio_site.cli.build schedule --publish-dir dist
    """
    execute(list(BUILDERS.values()), publish_dir)


if __name__ == "__main__":
    app()
