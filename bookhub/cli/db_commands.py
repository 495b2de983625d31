"""Database commands: create tables, reset them, seed from CSV."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from bookhub.config import DATA_DIR
from bookhub.db import get_session, init_db, reset_db
from bookhub.db.seed_data import seed_data

from .shared import console, logger


def init_db_command(
    reset: bool = typer.Option(False, "--reset", help="Drop and recreate every table (destroys data)"),
) -> None:
    """Create database tables; with --reset, drop them first."""
    log = logger.bind(command="init-db", reset=reset)
    if reset:
        typer.confirm("This deletes all data. Continue?", abort=True)
        reset_db()
        console.print("[yellow]Database reset.[/yellow]")
    else:
        init_db()
        console.print("[green]Database ready.[/green]")
    log.info("init_db.done")


def seed(
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", "-d", help=f"Directory with the CSV files (default: {DATA_DIR})"
    ),
) -> None:
    """Load classes, publications, customers, stationery and books from CSV files."""
    log = logger.bind(command="seed", data_dir=str(data_dir or DATA_DIR))
    if data_dir is not None and not data_dir.is_dir():
        console.print(f"[red]Not a directory: {data_dir}[/red]")
        log.warning("seed.missing_dir")
        raise typer.Exit(1)

    with get_session() as session:
        counts = seed_data(session, data_dir)

    table = Table(title="Seeded rows")
    table.add_column("Table", style="cyan")
    table.add_column("Inserted", justify="right", style="green")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)
    if counts.get("books_skipped"):
        console.print(f"[yellow]{counts['books_skipped']} book row(s) skipped; see the log for reasons.[/yellow]")
    log.info("seed.done", **counts)
