import dataclasses
from pathlib import Path

from gastos.models import INCOME, OTHER, PENDING, CategorizationRule, Transaction
from gastos.store import load_transactions, save_transactions


def contains_any(description: str, keywords: tuple[str, ...]) -> bool:
    desc_lower = description.lower()
    return any(keyword.lower() in desc_lower for keyword in keywords)


def keyword_rule(name: str, category: str, keywords: tuple[str, ...], income_only: bool = False) -> CategorizationRule:
    def match(txn: Transaction) -> bool:
        if income_only and txn.type != INCOME:
            return False
        return contains_any(txn.description, keywords)

    return CategorizationRule(name=name, category=category, match=match)


# Evaluated top to bottom; the first match wins, so order is priority.
DEFAULT_RULES: tuple[CategorizationRule, ...] = (
    keyword_rule("Salary", "salary", ("payroll", "salary", "paycheck", "direct deposit"), income_only=True),
    keyword_rule("Rent", "rent", ("rent", "lease")),
    keyword_rule("Groceries", "groceries", ("grocery", "market", "supermart", "fresh mart")),
    keyword_rule("Dining", "dining", ("cafe", "restaurant", "bistro", "diner", "takeout")),
    keyword_rule("Transport", "transport", ("transit", "metro", "bus", "rail", "uber", "lyft", "fuel", "gas")),
    keyword_rule("Utilities", "utilities", ("electric", "water", "utility", "internet", "phone")),
    keyword_rule("Subscriptions", "subscriptions", ("subscription", "streaming", "music", "cloud", "software")),
    keyword_rule("Shopping", "shopping", ("store", "online order", "retail", "shop")),
    keyword_rule("Entertainment", "entertainment", ("cinema", "movie", "concert", "theater", "game")),
    keyword_rule("Health", "health", ("pharmacy", "clinic", "hospital", "dentist")),
    keyword_rule("Travel", "travel", ("airlines", "hotel", "airbnb", "booking")),
    keyword_rule("Education", "education", ("course", "tuition", "academy", "workshop")),
    keyword_rule("Pets", "pets", ("pet", "vet", "pet food")),
    keyword_rule("Savings", "savings", ("transfer to savings", "savings transfer")),
)


def categorize(txn: Transaction, rules: tuple[CategorizationRule, ...] = DEFAULT_RULES) -> str:
    """Return the category of the first matching rule, or pending."""
    for rule in rules:
        if rule.match(txn):
            return rule.category
    return PENDING


def apply_rules(
    transactions: list[Transaction],
    preserve_manual: bool = True,
    rules: tuple[CategorizationRule, ...] = DEFAULT_RULES,
) -> list[Transaction]:
    """Recompute categories, returning new records.

    A non-blank category override is never touched. With `preserve_manual`,
    anything already out of pending is kept as well; without it every other
    record is reclassified, so rule edits apply to history.
    """
    result: list[Transaction] = []
    for txn in transactions:
        if txn.has_category_override:
            result.append(txn)
            continue
        if preserve_manual and txn.category != PENDING:
            result.append(txn)
            continue
        result.append(dataclasses.replace(txn, category=categorize(txn, rules)))
    return result


def count_categories(transactions: list[Transaction]) -> dict:
    pending = sum(1 for t in transactions if t.category == PENDING)
    overrides = sum(1 for t in transactions if t.has_category_override)
    return {
        "categorized": sum(1 for t in transactions if t.category not in (PENDING, OTHER)),
        "pending": pending,
        "overrides": overrides,
    }


def categorize_store(store_path: Path, rules: tuple[CategorizationRule, ...] = DEFAULT_RULES) -> dict:
    """Reclassify every non-override record in a persisted store."""
    transactions = apply_rules(load_transactions(store_path), preserve_manual=False, rules=rules)
    save_transactions(store_path, transactions)
    return {"total": len(transactions), **count_categories(transactions)}
