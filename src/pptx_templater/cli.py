# src/pptx_templater/cli.py
from __future__ import annotations

import json
import logging
from importlib.metadata import PackageNotFoundError, version as pkg_version
from pathlib import Path
from typing import Optional, Union

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pptx_templater.core.errors import PptxTemplaterError
from pptx_templater.core.settings import settings
from pptx_templater.ingest.json_loader import load_template_data
from pptx_templater.ppt.document import Access, TemplateDocument
from pptx_templater.ppt.filler import TemplateFiller

logger = logging.getLogger(__name__)

console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True)


def _configure_logging(level: Union[str, int] = logging.INFO) -> None:
    """
    Configures logging with RichHandler.
    Should be called once at the application entry point for commands that use it.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    # Clear existing handlers from the root logger from any basicConfig calls
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",  # Rich handles formatting
        handlers=[RichHandler(rich_tracebacks=True, markup=True)],
    )
    logging.getLogger("pptx_templater").setLevel(level)


def _default_output_for(template: Path) -> Path:
    return template.with_name(f"{template.stem}-filled{template.suffix}")


@app.command()
def fill(
    template: Path = typer.Argument(..., exists=True, readable=True, resolve_path=True, help="Path to the PowerPoint template (.pptx) file."),
    data: Path = typer.Argument(..., exists=True, readable=True, resolve_path=True, help="Path to the JSON fill data."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", writable=True, resolve_path=True, help="Path for the output PPTX file. Defaults to <template>-filled.pptx."),
    keep_unused_rows: bool = typer.Option(False, "--keep-unused-rows", help="Keep the table template rows that received no data."),
    log_level: str = typer.Option(settings.log_level, "--log-level", "-l", show_default=False, help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Overridden by -v."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Fills a PowerPoint template with the tags, pictures and table rows of a JSON file."""
    _configure_logging("DEBUG" if verbose else log_level)

    output = output or _default_output_for(template)

    console.rule("[bold cyan]pptx-templater • fill")
    logger.info(f"Template   : [cyan]{template}[/cyan]", extra={"markup": True})
    logger.info(f"Data       : [magenta]{data}[/magenta]", extra={"markup": True})
    logger.info(f"Destination: [green]{output}[/green]", extra={"markup": True})

    try:
        template_data = load_template_data(data)
        prune_unused_rows = False if keep_unused_rows else settings.prune_unused_rows
        filled = TemplateFiller(prune_unused_rows=prune_unused_rows).fill(template, template_data, output)
        console.print(f"\n[bold green]Presentation filled:[/] {filled}")
    except (PptxTemplaterError, ValidationError, ValueError, FileNotFoundError) as exc:
        logger.error(f"Fill failed: {exc}", exc_info=settings.debug)
        console.print(f"[bold red]Processing error:[/] {exc}")
        raise typer.Exit(code=1) from exc
    except Exception as exc:
        logger.error(f"Unexpected error: {exc}", exc_info=settings.debug)
        console.print(f"[bold red]Unexpected failure:[/] {exc}")
        raise typer.Exit(code=2) from exc


@app.command()
def inspect(
    template: Path = typer.Argument(..., exists=True, readable=True, resolve_path=True, help="Path to the PowerPoint template (.pptx) file."),
    as_json: bool = typer.Option(False, "--json", help="Print the description as JSON."),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", show_default=False, help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Overridden by -v."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Lists the tags, pictures and tables of each slide of a template."""
    _configure_logging("DEBUG" if verbose else log_level)

    try:
        document = TemplateDocument(template, access=Access.READ)
    except (PptxTemplaterError, FileNotFoundError) as exc:
        console.print(f"[bold red]Cannot open template:[/] {exc}")
        raise typer.Exit(code=1) from exc

    with document:
        slides = []
        for index, slide in enumerate(document.get_slides()):
            slides.append({
                "index": index,
                "title": slide.get_title(),
                "tags": slide.find_tags(),
                "pictures": slide.get_picture_titles(),
                "tables": [
                    {"tag": table.title, "columns": table.column_titles(), "capacity": table.capacity()}
                    for table in slide.get_tables()
                ],
            })

    if as_json:
        console.print_json(json.dumps({"slides": slides}))
        return

    summary = Table(title=f"{template.name} • {len(slides)} slide(s)")
    summary.add_column("#", justify="right", style="bold")
    summary.add_column("Title", style="cyan")
    summary.add_column("Tags", style="magenta")
    summary.add_column("Pictures", style="green")
    summary.add_column("Tables", style="yellow")
    for slide in slides:
        summary.add_row(
            str(slide["index"]),
            slide["title"],
            "\n".join(slide["tags"]),
            "\n".join(slide["pictures"]),
            "\n".join(
                f"{table['tag']} ({table['capacity']} rows): {', '.join(table['columns'])}"
                for table in slide["tables"]
            ),
        )
    console.print(summary)


@app.command()
def version() -> None:
    """Shows the application version."""
    package_name = "pptx-templater"
    try:
        console.print(f"{package_name} : [bold green]{pkg_version(package_name)}[/]", markup=True)
    except PackageNotFoundError:
        from pptx_templater import __version__
        console.print(f"{package_name} : [bold green]{__version__}[/] (not installed)", markup=True)
        logger.warning(f"Package '{package_name}' not found. Running in editable or test mode?")


def _entrypoint() -> None:
    """Main application entry point."""
    app()


if __name__ == "__main__":
    _entrypoint()
