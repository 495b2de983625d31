"""CLI commands: one module per command group (serve, database, catalog)."""

from typer import Typer

from bookhub.cli import catalog_view, db_commands, serve_mode

app = Typer(help="Bookstore catalog pricing and order reconciliation")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_mode.serve)
    app.command(name="init-db")(db_commands.init_db_command)
    app.command()(db_commands.seed)
    app.command()(catalog_view.catalog)


register_commands()
