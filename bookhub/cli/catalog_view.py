"""Catalog command: print catalog entries and their prices as a table."""

from typing import Optional

import typer
from rich.table import Table

from bookhub.db.repositories import catalog_repo

from .shared import console, logger


def _format_prices(entry: dict) -> str:
    if entry["kind"] == "common":
        return f"{entry['common_price']:.2f}"
    prices = entry.get("prices_by_class") or {}
    return ", ".join(f"{cls}: {amount:.2f}" for cls, amount in sorted(prices.items()))


def catalog(
    publication_id: Optional[int] = typer.Option(None, "--publication", "-p", help="Only this publication"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Match book or subtitle name"),
    status: Optional[str] = typer.Option(None, "--status", help="active or inactive"),
) -> None:
    """List catalog entries with their price rule."""
    log = logger.bind(command="catalog")
    entries = catalog_repo.list_entries(publication_id=publication_id, status=status, search=search)
    log.info("catalog.list", count=len(entries))

    if not entries:
        console.print("[yellow]No catalog entries found.[/yellow]")
        return

    table = Table(title="Book catalog")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Publication")
    table.add_column("Subtitle")
    table.add_column("Kind", justify="center")
    table.add_column("Price(s)", style="green")
    table.add_column("Disc %", justify="right")
    table.add_column("Status", justify="center")
    for e in entries:
        table.add_row(
            str(e["id"]),
            e["name"],
            e["publication"] or "",
            e["subtitle"] or "",
            e["kind"],
            _format_prices(e),
            f"{e['discount_percent']:g}",
            e["status"],
        )
    console.print(table)
