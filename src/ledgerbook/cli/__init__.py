"""ledgerbook CLI - command-line interface for personal double-entry books."""

from ledgerbook.cli.app import app

# Import command modules to register them with the app
from ledgerbook.cli.commands import accounts, book, entries, ledgers, rates, reports

# Register sub-apps
app.add_typer(book.app, name="book", help="Create, inspect and validate the book.")
app.add_typer(ledgers.app, name="ledgers", help="Ledger management.")
app.add_typer(accounts.app, name="accounts", help="Chart of accounts.")
app.add_typer(entries.app, name="entries", help="Journal entries.")
app.add_typer(rates.app, name="rates", help="Exchange rates.")
app.add_typer(reports.app, name="reports", help="Summaries, snapshots and trends.")


def main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "main"]
