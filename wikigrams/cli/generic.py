# wikigrams/cli/generic.py
from __future__ import annotations

import sqlite3
from itertools import islice
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.panel import Panel
from rich.tree import Tree

from wikigrams import config
from wikigrams.aggregate import aggregate, query
from wikigrams.dump import find_page, open_pages
from wikigrams.exchange import write_pages
from wikigrams.store import BACKENDS, StoreCommitError, open_store
from wikigrams.tokenizer import display_rows
from wikigrams.utils import ensure_input_file, setup_logging, track_pages

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Strip markup from encyclopedia dumps and count word n-grams.
    """
    setup_logging(verbose)


@app.command()
def ngrams(
    input_path: Path = typer.Argument(..., help="Dump (.xml, .xml.bz2) or .jsonl file"),
    output_path: Path = typer.Argument(..., help="Output TSV of term and count"),
    db: Optional[Path] = typer.Option(
        None, "--db", help="SQLite store; keeps counts on disk and allows resuming"
    ),
    articles: int = typer.Option(
        -1, "--articles", help="Only read this many articles (default: all)"
    ),
    n: int = typer.Option(
        config.DEFAULT_NGRAM_SIZE, "-n", "--n", min=1, help="N-gram size in words"
    ),
    cutoff: int = typer.Option(
        config.DEFAULT_CUTOFF, min=0, help="Minimum frequency to report"
    ),
    remove_parens: bool = typer.Option(
        False, "--remove-parens", help="Drop parenthetical text before counting"
    ),
    batch_size: int = typer.Option(
        config.DEFAULT_BATCH_SIZE, min=1, help="Pages counted in memory between flushes"
    ),
    backend: str = typer.Option(
        config.DEFAULT_BACKEND, help="In-memory backend when --db is not given (dict, trie)"
    ),
) -> None:
    """
    Count n-grams across a corpus and write them sorted by frequency.
    """
    ensure_input_file(input_path)
    if backend not in BACKENDS:
        print(Panel.fit(f"[bold red]Unknown backend:[/bold red] {backend!r}"))
        raise typer.Exit(code=2)

    pages = open_pages(input_path, remove_parentheticals=remove_parens)
    if articles > 0:
        pages = islice(pages, articles)

    try:
        store = open_store(db, backend=backend)
    except (sqlite3.Error, OSError) as exc:
        print(Panel.fit(f"[bold red]Could not open store:[/bold red] {db} ({exc})"))
        raise typer.Exit(code=2)

    with store:
        try:
            result = aggregate(track_pages(pages), store, n=n, batch_size=batch_size)
        except StoreCommitError as exc:
            print(
                Panel.fit(
                    f"[bold red]Could not commit counts:[/bold red] {exc}\n"
                    "Rerun the same command to resume from the last checkpoint."
                )
            )
            raise typer.Exit(code=4)

        written = 0
        with open(output_path, "w", encoding="utf-8") as out_file:
            for term, count in display_rows(query(store, cutoff)):
                out_file.write(f"{term}\t{count}\n")
                written += 1

    resumed = (
        f" (resumed after {result.pages_skipped:,})" if result.pages_skipped else ""
    )
    print(
        Panel.fit(
            f"[bold green]Counted {result.pages_processed:,} pages{resumed}[/bold green]\n"
            f"Wrote {written:,} {n}-grams with count >= {cutoff} to [bold]{output_path}[/bold]"
        )
    )


@app.command()
def extract(
    input_path: Path = typer.Argument(..., help="Dump file (.xml or .xml.bz2)"),
    output_path: Path = typer.Argument(..., help="Output .jsonl, or a text file with --title"),
    articles: int = typer.Option(
        -1, "--articles", help="Only keep this many articles (default: all)"
    ),
    remove_parens: bool = typer.Option(
        False, "--remove-parens", help="Drop parenthetical text"
    ),
    title: Optional[str] = typer.Option(
        None, "--title", help="Write only the article with this title"
    ),
    raw: bool = typer.Option(
        False, "--raw", help="With --title, write the raw markup instead of plaintext"
    ),
) -> None:
    """
    Convert a dump into the plaintext exchange format, or pull out one article.
    """
    ensure_input_file(input_path, config.DUMP_SUFFIXES)
    pages = open_pages(input_path, remove_parentheticals=remove_parens)

    if title is not None:
        page = find_page(pages, title)
        if page is None:
            print(Panel.fit(f"[bold red]Could not find article:[/bold red] {title!r}"))
            raise typer.Exit(code=1)
        output_path.write_text(page.raw_text if raw else page.plaintext, encoding="utf-8")
        print(Panel.fit(f"[bold green]Wrote[/bold green] {page.title} -> {output_path}"))
        return

    if articles > 0:
        pages = islice(pages, articles)

    written = write_pages(track_pages(pages), output_path)
    print(Panel.fit(f"[bold green]Wrote {written:,} articles to[/bold green] {output_path}"))


@app.command()
def outline(
    input_path: Path = typer.Argument(..., help="Dump file (.xml or .xml.bz2)"),
    title: str = typer.Argument(..., help="Article title"),
) -> None:
    """
    Show the section tree of one article.
    """
    ensure_input_file(input_path, config.DUMP_SUFFIXES)
    page = find_page(open_pages(input_path), title)
    if page is None:
        print(Panel.fit(f"[bold red]Could not find article:[/bold red] {title!r}"))
        raise typer.Exit(code=1)

    tree = Tree(f"[bold]{page.title}[/bold]")
    branches = {0: tree}
    for depth, node in page.sections.walk():
        if depth == 0:
            continue
        words = len(node.content.split())
        branches[depth] = branches[depth - 1].add(f"{node.name} [dim]({words} words)[/dim]")

    print(tree)
