import json
from pathlib import Path

from gastos.errors import MissingInputError
from gastos.models import Transaction


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


def transaction_to_dict(txn: Transaction) -> dict:
    """Serialize a transaction. Blank overrides are left out entirely."""
    data = {
        "id": txn.id,
        "date": txn.date,
        "description": txn.description,
        "amount": int(txn.amount) if float(txn.amount).is_integer() else txn.amount,
        "category": txn.category,
        "account": txn.account,
        "type": txn.type,
    }
    if _present(txn.category_override):
        data["categoryOverride"] = txn.category_override
    if _present(txn.description_override):
        data["descriptionOverride"] = txn.description_override
    return data


def transaction_from_dict(data: dict) -> Transaction:
    category_override = data.get("categoryOverride")
    description_override = data.get("descriptionOverride")
    return Transaction(
        id=data["id"],
        date=data["date"],
        description=data["description"],
        amount=float(data["amount"]),
        category=data["category"],
        account=data["account"],
        type=data["type"],
        category_override=category_override if _present(category_override) else None,
        description_override=description_override if _present(description_override) else None,
    )


def load_transactions(store_path: Path) -> list[Transaction]:
    """Read the persisted store. A missing store is an empty one."""
    if not store_path.exists():
        return []
    try:
        with open(store_path, encoding="utf-8") as f:
            raw = json.loads(f.read())
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MissingInputError(f"Could not read transaction store {store_path}: {exc}") from exc
    if not isinstance(raw, list):
        raise MissingInputError(f"Transaction store {store_path} is not a list")
    try:
        return [transaction_from_dict(item) for item in raw]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MissingInputError(f"Malformed record in transaction store {store_path}: {exc}") from exc


def save_transactions(store_path: Path, transactions: list[Transaction]) -> None:
    """Write the store through a temporary sibling file, then move it into place."""
    store_path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps([transaction_to_dict(t) for t in transactions], indent=2, ensure_ascii=False)
    tmp_path = store_path.with_name(store_path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(payload + "\n")
    tmp_path.replace(store_path)
