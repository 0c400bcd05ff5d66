from dataclasses import dataclass, field

from gastos.models import Transaction


@dataclass
class MergeResult:
    transactions: list[Transaction] = field(default_factory=list)
    added: int = 0


def merge_transactions(existing: list[Transaction], incoming: list[Transaction]) -> MergeResult:
    """Union incoming records into the existing set, keyed by id.

    On an id collision the existing record wins, so overrides survive a
    re-import. The result is ordered by date, newest first; same-day records
    keep their insertion order.
    """
    seen = {t.id for t in existing}
    merged = list(existing)
    added = 0
    for txn in incoming:
        if txn.id in seen:
            continue
        merged.append(txn)
        seen.add(txn.id)
        added += 1
    merged.sort(key=lambda t: t.date, reverse=True)
    return MergeResult(transactions=merged, added=added)


def dedupe_batch(transactions: list[Transaction], seen: set[str] | None = None) -> tuple[list[Transaction], int]:
    """Drop repeats within one import run, first occurrence wins.

    `seen` is updated in place so it can be shared across the files of a run.
    Returns the unique records and how many were skipped.
    """
    if seen is None:
        seen = set()
    unique: list[Transaction] = []
    for txn in transactions:
        if txn.id in seen:
            continue
        seen.add(txn.id)
        unique.append(txn)
    return unique, len(transactions) - len(unique)


def find_duplicate_ids(transactions: list[Transaction]) -> list[str]:
    counts: dict[str, int] = {}
    for txn in transactions:
        counts[txn.id] = counts.get(txn.id, 0) + 1
    return [txn_id for txn_id, count in counts.items() if count > 1]
