import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from gastos.catalog import CATEGORIES, valid_category_ids
from gastos.categorizer import categorize_store
from gastos.errors import MissingInputError
from gastos.models import INCOME, Transaction
from gastos.pipeline import run_import
from gastos.reports import (
    filter_by_category, filter_by_date_range, filter_by_type, search,
    get_cashflow, get_category_spending, get_invalid_categories, get_pending_status, get_totals,
)
from gastos.reviewer import apply_override, run_review
from gastos.settings import (
    DEFAULTS, MOVEMENTS_DIRNAME, get_account, get_layout, get_movements_dir, get_store_path,
    load_settings, save_settings,
)
from gastos.store import load_transactions, save_transactions

app = typer.Typer(help="Gastos: import bank statements and categorize spending.", invoke_without_command=True)

report_app = typer.Typer(help="Generate reports.")
app.add_typer(report_app, name="report")

console = Console()


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("gastos")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(show_time=False, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output")):
    """Gastos: import bank statements and categorize spending."""
    _configure_logging(verbose)


def _store(store: Path | None) -> Path:
    return store if store is not None else get_store_path()


def _load(store_path: Path) -> list[Transaction]:
    try:
        return load_transactions(store_path)
    except MissingInputError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)


def _money(txn: Transaction) -> str:
    color = "green" if txn.type == INCOME else "red"
    sign = "+" if txn.type == INCOME else "-"
    return f"[{color}]{sign}{txn.amount:,.2f} €[/{color}]"


@app.command()
def init(
    data_dir: str = typer.Option(None, "--data-dir", help="Path for gastos data (default: ~/Documents/gastos)"),
):
    """Choose a data directory and create the movements folder."""
    settings = load_settings()

    if data_dir:
        settings["data_dir"] = str(Path(data_dir).expanduser().resolve())
    elif settings == DEFAULTS:
        chosen = typer.prompt("Data directory", default=settings["data_dir"])
        settings["data_dir"] = str(Path(chosen).expanduser().resolve())

    save_settings(settings)

    resolved = Path(settings["data_dir"])
    resolved.mkdir(parents=True, exist_ok=True)
    (resolved / MOVEMENTS_DIRNAME).mkdir(exist_ok=True)

    typer.echo(f"Initialized gastos at {resolved}")


# --- Import ---


@app.command("import")
def import_cmd(
    movements: Path = typer.Option(None, "--movements", help="Directory of statement CSVs"),
    store: Path = typer.Option(None, "--store", help="Transaction store JSON"),
):
    """Import all statements, merge them into the store and categorize."""
    movements_dir = movements if movements is not None else get_movements_dir()
    try:
        result = run_import(
            _store(store), movements_dir, layout=get_layout(), account=get_account(),
        )
    except (MissingInputError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(
        f"{result['files']} file(s), {result['parsed']} parsed, "
        f"{result['batch_duplicates']} duplicates skipped, {result['row_errors']} rows rejected"
    )
    typer.echo(f"{result['added']} added, {result['total']} total")
    typer.echo(f"{result['categorized']} categorized, {result['pending']} pending")
    if result["duplicate_ids"]:
        typer.echo(f"Warning: {result['duplicate_ids']} duplicate id(s) in store", err=True)


@app.command()
def categorize(store: Path = typer.Option(None, "--store", help="Transaction store JSON")):
    """Re-run categorization rules over the whole store."""
    store_path = _store(store)
    try:
        result = categorize_store(store_path)
    except MissingInputError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{result['categorized']} categorized, {result['pending']} pending")


@app.command()
def categories():
    """List the category catalog."""
    table = Table(title="Categories")
    table.add_column("ID")
    table.add_column("Name")
    for cat in CATEGORIES:
        table.add_row(cat.id, cat.name)
    console.print(table)


# --- Review ---


@app.command()
def review(store: Path = typer.Option(None, "--store", help="Transaction store JSON")):
    """Interactively assign categories to pending transactions."""
    store_path = _store(store)
    try:
        run_review(store_path)
    except MissingInputError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)


@app.command()
def edit(
    transaction_id: str = typer.Argument(help="Transaction id, e.g. tx_1a2b3c4d5e6f"),
    category: str = typer.Option(None, help="Category override (empty string clears it)"),
    description: str = typer.Option(None, help="Description override (empty string clears it)"),
    store: Path = typer.Option(None, "--store", help="Transaction store JSON"),
):
    """Set or clear manual overrides on a transaction."""
    if category is None and description is None:
        typer.echo("Nothing to change: pass --category and/or --description")
        raise typer.Exit(1)
    store_path = _store(store)
    transactions = _load(store_path)
    try:
        transactions = apply_override(transactions, transaction_id, category=category, description=description)
    except KeyError:
        typer.echo(f"Unknown transaction: {transaction_id}")
        raise typer.Exit(1)
    except ValueError as exc:
        typer.echo(str(exc))
        raise typer.Exit(1)
    save_transactions(store_path, transactions)
    typer.echo(f"Updated {transaction_id}")


# --- Reports ---


@report_app.command("pending")
def report_pending(
    list_: bool = typer.Option(False, "--list", "-l", help="List the 20 most recent pending transactions"),
    store: Path = typer.Option(None, "--store", help="Transaction store JSON"),
):
    """Categorization status and pending transactions."""
    data = get_pending_status(_load(_store(store)))

    table = Table(title="Categorization Status")
    table.add_column("")
    table.add_column("Count", justify="right")
    table.add_column("%", justify="right")
    table.add_row("Total", f"{data['total']:,}", "")
    table.add_row("Categorized", f"{data['categorized']:,}", f"{100 - data['pending_pct']:.1f}%")
    table.add_row("Pending (no override)", f"{data['pending']:,}", f"{data['pending_pct']:.1f}%")
    if data["overrides"]:
        table.add_row("Manual overrides", f"{data['overrides']:,}", "")
    console.print(table)

    if not list_:
        if data["pending"]:
            typer.echo("Run with --list to see the most recent pending transactions.")
        return
    if not data["pending"]:
        typer.echo("No pending transactions!")
        return

    recent = Table(title=f"Most Recent Pending ({len(data['recent'])} of {data['pending']})")
    recent.add_column("Date")
    recent.add_column("ID", style="dim")
    recent.add_column("Amount", justify="right")
    recent.add_column("Description")
    for t in data["recent"]:
        recent.add_row(t.date, t.id, _money(t), t.effective_description)
    console.print(recent)


@report_app.command("invalid")
def report_invalid(
    list_: bool = typer.Option(False, "--list", "-l", help="List every transaction with an invalid category"),
    store: Path = typer.Option(None, "--store", help="Transaction store JSON"),
):
    """Find categories that are not in the catalog."""
    data = get_invalid_categories(_load(_store(store)), valid_category_ids())

    typer.echo(f"Total transactions: {data['total']:,}")
    typer.echo(f"Valid category IDs: {data['valid_ids']}")
    typer.echo(f"Transactions with invalid categories: {len(data['entries']):,}")

    if not data["entries"]:
        typer.echo("All transactions have valid categories!")
        return

    table = Table(title="Invalid Categories")
    table.add_column("Category")
    table.add_column("Count", justify="right")
    for item in data["by_category"]:
        table.add_row(item["category"], str(item["count"]))
    console.print(table)

    if not list_:
        typer.echo("Run with --list to see every affected transaction.")
        return

    detail = Table(title="Transactions with Invalid Categories")
    detail.add_column("Date")
    detail.add_column("ID", style="dim")
    detail.add_column("Amount", justify="right")
    detail.add_column("Field")
    detail.add_column("Invalid")
    detail.add_column("Description")
    for entry in data["entries"]:
        t = entry["transaction"]
        detail.add_row(t.date, t.id, _money(t), entry["field"], entry["invalid"], t.effective_description)
    console.print(detail)


def _filtered(
    store: Path | None,
    from_date: str | None,
    to_date: str | None,
    txn_type: str,
    category: list[str] | None,
    query: str | None,
) -> list[Transaction]:
    transactions = _load(_store(store))
    transactions = filter_by_date_range(transactions, from_date, to_date)
    try:
        transactions = filter_by_type(transactions, txn_type)
    except ValueError as exc:
        typer.echo(str(exc))
        raise typer.Exit(1)
    transactions = filter_by_category(transactions, category or [])
    return search(transactions, query or "")


@report_app.command("summary")
def report_summary(
    from_date: str = typer.Option(None, "--from", help="Start date: YYYY-MM-DD"),
    to_date: str = typer.Option(None, "--to", help="End date: YYYY-MM-DD"),
    txn_type: str = typer.Option("all", "--type", help="all, income or expense"),
    category: list[str] = typer.Option(None, "--category", help="Category id (repeatable)"),
    query: str = typer.Option(None, "--search", help="Text to look for in description or category"),
    store: Path = typer.Option(None, "--store", help="Transaction store JSON"),
):
    """Income, expenses and net."""
    totals = get_totals(_filtered(store, from_date, to_date, txn_type, category, query))

    table = Table(title="Summary")
    table.add_column("")
    table.add_column("Amount", justify="right")
    table.add_row("[green]Income[/green]", f"{totals['income']:,.2f} €")
    table.add_row("[red]Expenses[/red]", f"{totals['expenses']:,.2f} €")
    color = "green" if totals["net"] >= 0 else "red"
    table.add_row(f"[bold {color}]Net[/bold {color}]", f"[bold {color}]{totals['net']:,.2f} €[/bold {color}]")
    table.add_row("Transactions", str(totals["count"]))
    console.print(table)


@report_app.command("spending")
def report_spending(
    from_date: str = typer.Option(None, "--from", help="Start date: YYYY-MM-DD"),
    to_date: str = typer.Option(None, "--to", help="End date: YYYY-MM-DD"),
    category: list[str] = typer.Option(None, "--category", help="Category id (repeatable)"),
    query: str = typer.Option(None, "--search", help="Text to look for in description or category"),
    store: Path = typer.Option(None, "--store", help="Transaction store JSON"),
):
    """Expense breakdown by category."""
    rows = get_category_spending(_filtered(store, from_date, to_date, "expense", category, query))

    table = Table(title="Spending by Category")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Count", justify="right")
    for item in rows:
        table.add_row(item["name"], f"{item['total']:,.2f} €", f"{item['pct']:.1f}%", str(item["count"]))
    table.add_row("[bold]Total[/bold]", f"[bold]{sum(r['total'] for r in rows):,.2f} €[/bold]", "", "")
    console.print(table)


@report_app.command("cashflow")
def report_cashflow(
    by: str = typer.Option("month", "--by", help="Grouping: day, week or month"),
    from_date: str = typer.Option(None, "--from", help="Start date: YYYY-MM-DD"),
    to_date: str = typer.Option(None, "--to", help="End date: YYYY-MM-DD"),
    category: list[str] = typer.Option(None, "--category", help="Category id (repeatable)"),
    query: str = typer.Option(None, "--search", help="Text to look for in description or category"),
    store: Path = typer.Option(None, "--store", help="Transaction store JSON"),
):
    """Income and expenses over time."""
    transactions = _filtered(store, from_date, to_date, "all", category, query)
    try:
        periods = get_cashflow(transactions, by)
    except ValueError as exc:
        typer.echo(str(exc))
        raise typer.Exit(1)

    table = Table(title="Cash Flow")
    table.add_column("Period")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Net", justify="right")
    for p in periods:
        color = "green" if p["net"] >= 0 else "red"
        table.add_row(
            p["period"],
            f"{p['income']:,.2f} €",
            f"{p['expenses']:,.2f} €",
            f"[{color}]{p['net']:,.2f} €[/{color}]",
        )
    console.print(table)


if __name__ == "__main__":
    app()
