# wikigrams/cli/store.py
from __future__ import annotations

import json
import sqlite3
from itertools import islice
from pathlib import Path

import typer
from rich import print
from rich.panel import Panel
from rich.table import Table

from wikigrams import config
from wikigrams.store import SqliteFrequencyStore
from wikigrams.tokenizer import display_rows

store_app = typer.Typer(add_completion=False, no_args_is_help=True)


def _open(db: Path) -> SqliteFrequencyStore:
    """
    Open an existing store; never create an empty one by mistake.
    """
    if not db.is_file():
        print(Panel.fit(f"[bold red]Store not found:[/bold red] {db}"))
        raise typer.Exit(code=2)
    try:
        return SqliteFrequencyStore(db)
    except sqlite3.Error as exc:
        print(Panel.fit(f"[bold red]Could not open store:[/bold red] {db} ({exc})"))
        raise typer.Exit(code=2)


@store_app.command("peek")
def store_peek(
    db: Path = typer.Argument(..., help="SQLite store written by 'ngrams --db'"),
    cutoff: int = typer.Option(config.DEFAULT_CUTOFF, min=0, help="Minimum frequency"),
    limit: int = typer.Option(20, min=1, help="Number of rows to display"),
    json_out: bool = typer.Option(False, "--json", help="Emit JSON instead of table"),
) -> None:
    """
    Show the most frequent n-grams in a store.
    """
    with _open(db) as store:
        rows = list(islice(display_rows(store.frequencies(cutoff)), limit))
        progress = store.progress()
        total = len(store)

    if json_out:
        typer.echo(
            json.dumps(
                {
                    "store": str(db),
                    "distinct": total,
                    "progress": (
                        {"page_index": progress.page_index, "title": progress.title}
                        if progress
                        else None
                    ),
                    "rows": [{"term": term, "count": count} for term, count in rows],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    table = Table(title=f"Top n-grams in {db.name} (cutoff={cutoff}, limit={limit})")
    table.add_column("#", justify="right", style="bold")
    table.add_column("Term")
    table.add_column("Count", justify="right")
    for i, (term, count) in enumerate(rows, start=1):
        table.add_row(str(i), term, f"{count:,}")
    if not rows:
        table.caption = "[bold yellow]No n-grams above the cutoff.[/bold yellow]"
    print(table)
    print(f"[dim]{total:,} distinct n-grams stored.[/dim]")


@store_app.command("progress")
def store_progress(
    db: Path = typer.Argument(..., help="SQLite store written by 'ngrams --db'"),
) -> None:
    """
    Show the resume checkpoint of a store.
    """
    with _open(db) as store:
        progress = store.progress()

    if progress is None:
        print(Panel.fit("[bold yellow]No batch has been committed yet.[/bold yellow]"))
        return

    state = "[bold green]complete[/bold green]" if progress.completed else "in progress"
    print(
        Panel.fit(
            f"[bold]Pages folded:[/bold] {progress.page_index:,}\n"
            f"[bold]Last title:[/bold] {progress.title}\n"
            f"[bold]State:[/bold] {state}"
        )
    )
