import dataclasses
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt
from rich.rule import Rule
from rich.table import Table

from gastos.catalog import CATEGORIES, valid_category_ids
from gastos.models import INCOME, PENDING, Transaction
from gastos.store import load_transactions, save_transactions

console = Console()


def get_pending_transactions(transactions: list[Transaction]) -> list[Transaction]:
    pending = [t for t in transactions if t.category == PENDING and not t.has_category_override]
    return sorted(pending, key=lambda t: t.date)


def apply_override(
    transactions: list[Transaction],
    transaction_id: str,
    category: str | None = None,
    description: str | None = None,
) -> list[Transaction]:
    """Set manual overrides on one transaction. A blank value clears that override.

    Returns a new list; the pipeline never writes these fields itself.
    """
    if category is not None and category.strip() and category not in valid_category_ids():
        raise ValueError(f"Unknown category: {category}")

    found = False
    result: list[Transaction] = []
    for txn in transactions:
        if txn.id != transaction_id:
            result.append(txn)
            continue
        found = True
        changes = {}
        if category is not None:
            changes["category_override"] = category.strip() or None
        if description is not None:
            changes["description_override"] = description.strip() or None
        result.append(dataclasses.replace(txn, **changes))

    if not found:
        raise KeyError(transaction_id)
    return result


def run_review(store_path: Path) -> None:
    """Interactive review loop for pending transactions."""
    transactions = load_transactions(store_path)
    pending = get_pending_transactions(transactions)
    if not pending:
        console.print("[green]No pending transactions to review.[/green]")
        return

    categories = [c for c in CATEGORIES if c.id != PENDING]
    console.print(f"\n[bold]{len(pending)} transactions to review[/bold]\n")

    cat_table = Table(title="Categories", show_lines=False)
    cat_table.add_column("#", style="dim")
    cat_table.add_column("ID")
    cat_table.add_column("Name")
    for i, cat in enumerate(categories, 1):
        cat_table.add_row(str(i), cat.id, cat.name)
    console.print(cat_table)
    console.print()

    for txn in pending:
        console.print(Rule())
        console.print(f"  [bold]Date:[/bold]        {txn.date}")
        console.print(f"  [bold]Description:[/bold] {txn.effective_description}")
        color = "green" if txn.type == INCOME else "red"
        console.print(f"  [bold]Amount:[/bold]      [{color}]{txn.signed_amount:,.2f} €[/{color}]")
        console.print(f"  [bold]ID:[/bold]          {txn.id}")
        console.print()

        choice = Prompt.ask("Category # (or [bold]s[/bold]kip, [bold]q[/bold]uit)")

        if choice.lower() == "q":
            console.print("[yellow]Review paused.[/yellow]")
            return
        if choice.lower() == "s":
            continue

        try:
            idx = int(choice) - 1
            if idx < 0:
                raise IndexError(idx)
            cat = categories[idx]
        except (ValueError, IndexError):
            console.print("[red]Invalid choice, skipping.[/red]")
            continue

        description = Prompt.ask("Description override (or Enter to keep)", default="")

        transactions = apply_override(
            transactions,
            txn.id,
            category=cat.id,
            description=description if description else None,
        )
        save_transactions(store_path, transactions)
        console.print(f"[green]→ Categorized as {cat.name}[/green]\n")

    console.print("[green]Review complete![/green]")
