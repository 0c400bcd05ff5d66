from datetime import date, timedelta

from gastos.catalog import CATEGORIES, category_name
from gastos.models import EXPENSE, INCOME, PENDING, Category, Transaction

GRANULARITIES = ("day", "week", "month")


def _newest_first(transactions: list[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def get_pending_status(transactions: list[Transaction], limit: int = 20) -> dict:
    total = len(transactions)
    pending = [t for t in transactions if t.category == PENDING and not t.has_category_override]
    overrides = sum(1 for t in transactions if t.has_category_override)
    pending_pct = (len(pending) / total * 100) if total else 0.0
    return {
        "total": total,
        "categorized": total - len(pending) - overrides,
        "pending": len(pending),
        "overrides": overrides,
        "pending_pct": pending_pct,
        "recent": _newest_first(pending)[:limit],
    }


def get_invalid_categories(transactions: list[Transaction], valid_ids: list[str]) -> dict:
    """Records whose category or override is not in the catalog."""
    valid = set(valid_ids)
    entries = []
    for txn in transactions:
        if txn.category not in valid:
            entries.append({"transaction": txn, "field": "category", "invalid": txn.category})
        if txn.has_category_override and txn.category_override not in valid:
            entries.append({"transaction": txn, "field": "categoryOverride", "invalid": txn.category_override})

    counts: dict[str, int] = {}
    for entry in entries:
        counts[entry["invalid"]] = counts.get(entry["invalid"], 0) + 1
    by_category = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    return {
        "total": len(transactions),
        "valid_ids": len(valid),
        "entries": entries,
        "by_category": [{"category": cat, "count": count} for cat, count in by_category],
    }


# --- Filters ---


def filter_by_date_range(transactions: list[Transaction], start: str | None, end: str | None) -> list[Transaction]:
    """Inclusive ISO date bounds; a missing bound is open."""
    return [
        t for t in transactions
        if (start is None or t.date >= start) and (end is None or t.date <= end)
    ]


def filter_by_category(transactions: list[Transaction], category_ids: list[str]) -> list[Transaction]:
    if not category_ids:
        return transactions
    wanted = set(category_ids)
    return [t for t in transactions if t.effective_category in wanted]


def filter_by_type(transactions: list[Transaction], txn_type: str) -> list[Transaction]:
    if txn_type == "all":
        return transactions
    if txn_type not in (INCOME, EXPENSE):
        raise ValueError(f"Unknown transaction type: {txn_type}")
    return [t for t in transactions if t.type == txn_type]


def search(transactions: list[Transaction], query: str) -> list[Transaction]:
    if not query.strip():
        return transactions
    needle = query.lower()
    return [
        t for t in transactions
        if needle in t.effective_description.lower() or needle in t.effective_category.lower()
    ]


# --- Aggregates ---


def get_totals(transactions: list[Transaction]) -> dict:
    income = sum(t.amount for t in transactions if t.type == INCOME)
    expenses = sum(t.amount for t in transactions if t.type == EXPENSE)
    return {
        "income": income,
        "expenses": expenses,
        "net": income - expenses,
        "count": len(transactions),
    }


def get_category_spending(
    transactions: list[Transaction], catalog: tuple[Category, ...] = CATEGORIES
) -> list[dict]:
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for txn in transactions:
        if txn.type != EXPENSE:
            continue
        cat = txn.effective_category
        totals[cat] = totals.get(cat, 0.0) + txn.amount
        counts[cat] = counts.get(cat, 0) + 1

    grand_total = sum(totals.values())
    rows = [
        {
            "category": cat,
            "name": category_name(cat, catalog),
            "total": total,
            "count": counts[cat],
            "pct": (total / grand_total * 100) if grand_total else 0.0,
        }
        for cat, total in totals.items()
    ]
    rows.sort(key=lambda r: r["total"], reverse=True)
    return rows


def _period_key(iso_date: str, granularity: str) -> str:
    if granularity == "day":
        return iso_date
    if granularity == "week":
        day = date.fromisoformat(iso_date)
        return (day - timedelta(days=day.weekday())).isoformat()
    return iso_date[:7]


def get_cashflow(transactions: list[Transaction], granularity: str = "month") -> list[dict]:
    """Income and expenses per day, week (keyed by its Monday) or month."""
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity: {granularity}")
    buckets: dict[str, dict] = {}
    for txn in transactions:
        key = _period_key(txn.date, granularity)
        bucket = buckets.setdefault(key, {"income": 0.0, "expenses": 0.0})
        if txn.type == INCOME:
            bucket["income"] += txn.amount
        else:
            bucket["expenses"] += txn.amount

    periods = []
    for key in sorted(buckets):
        bucket = buckets[key]
        periods.append({
            "period": key,
            "income": bucket["income"],
            "expenses": bucket["expenses"],
            "net": bucket["income"] - bucket["expenses"],
        })
    return periods
