import logging
import warnings
from pathlib import Path

from gastos.categorizer import DEFAULT_RULES, apply_rules, count_categories
from gastos.errors import IntegrityWarning, MissingInputError
from gastos.importer import DEFAULT_ACCOUNT, build_transactions, read_statement
from gastos.models import DEFAULT_LAYOUT, CategorizationRule, StatementLayout, Transaction
from gastos.reconciler import dedupe_batch, find_duplicate_ids, merge_transactions
from gastos.store import load_transactions, save_transactions

logger = logging.getLogger(__name__)

STATEMENT_SUFFIX = ".csv"


def discover_statements(movements_dir: Path) -> list[Path]:
    """Statement files in a directory, sorted by name for a stable import order."""
    if not movements_dir.is_dir():
        raise MissingInputError(f"Movements directory not found: {movements_dir}")
    files = sorted(
        p for p in movements_dir.iterdir()
        if p.is_file() and p.suffix.lower() == STATEMENT_SUFFIX
    )
    if not files:
        raise MissingInputError(f"No CSV files found in {movements_dir}")
    return files


def run_import(
    store_path: Path,
    movements_dir: Path,
    layout: StatementLayout = DEFAULT_LAYOUT,
    account: str = DEFAULT_ACCOUNT,
    rules: tuple[CategorizationRule, ...] = DEFAULT_RULES,
) -> dict:
    """Import every statement in `movements_dir` into the store. Returns counts.

    Nothing is written unless every file and the existing store could be read.
    """
    existing = load_transactions(store_path)
    logger.info("Found %d existing transactions", len(existing))

    files = discover_statements(movements_dir)
    logger.info("Found %d statement file(s) in %s", len(files), movements_dir)

    incoming: list[Transaction] = []
    seen: set[str] = set()
    parsed = 0
    batch_duplicates = 0
    row_errors = 0
    for file_path in files:
        rows = read_statement(file_path, layout)
        built = build_transactions(rows, account)
        unique, skipped = dedupe_batch(built.transactions, seen)
        incoming.extend(unique)
        parsed += len(built.transactions)
        batch_duplicates += skipped
        row_errors += len(built.errors)
        logger.info(
            "%s: %d rows, %d parsed, %d duplicates skipped",
            file_path.name, len(rows), len(built.transactions), skipped,
        )

    incoming = apply_rules(incoming, preserve_manual=False, rules=rules)
    merged = merge_transactions(existing, incoming)
    logger.info("Added %d new transactions", merged.added)

    transactions = apply_rules(merged.transactions, preserve_manual=False, rules=rules)
    counts = count_categories(transactions)

    duplicate_ids = find_duplicate_ids(transactions)
    if duplicate_ids:
        message = f"Found {len(duplicate_ids)} duplicate transaction id(s): {', '.join(duplicate_ids[:5])}"
        logger.warning(message)
        warnings.warn(message, IntegrityWarning, stacklevel=2)

    save_transactions(store_path, transactions)

    return {
        "files": len(files),
        "existing": len(existing),
        "parsed": parsed,
        "batch_duplicates": batch_duplicates,
        "row_errors": row_errors,
        "added": merged.added,
        "total": len(transactions),
        "categorized": counts["categorized"],
        "pending": counts["pending"],
        "overrides": counts["overrides"],
        "duplicate_ids": len(duplicate_ids),
    }
