# wikigrams/utils.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, TypeVar

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from wikigrams import config

T = TypeVar("T")

INPUT_SUFFIXES = config.DUMP_SUFFIXES + (config.EXCHANGE_SUFFIX,)


def setup_logging(verbose: bool = False) -> None:
    """
    Route log records through rich; DEBUG when verbose, INFO otherwise.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def ensure_input_file(path: Path, suffixes: tuple[str, ...] = INPUT_SUFFIXES) -> None:
    """
    Checks that an input file exists and has a supported extension,
    and exits before any processing starts otherwise.
    """
    if not path.is_file():
        print(Panel.fit(f"[bold red]Could not find input file:[/bold red] {path}"))
        raise typer.Exit(code=2)

    if not path.name.lower().endswith(suffixes):
        print(
            Panel.fit(
                f"[bold red]Unsupported input:[/bold red] {path}\n"
                f"Expected one of: {', '.join(suffixes)}\n"
                "[dim]Download an extracted dump from https://dumps.wikimedia.org/enwiki/[/dim]"
            )
        )
        raise typer.Exit(code=2)


def track_pages(items: Iterable[T], description: str = "Pages") -> Iterator[T]:
    """
    Pass items through while showing a live counter on the console.
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}[/bold]"),
        TextColumn("{task.completed:,.0f}"),
        TimeElapsedColumn(),
        console=Console(stderr=True),
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=None)
        for item in items:
            yield item
            progress.advance(task)
