from dataclasses import dataclass
from typing import Callable

PENDING = "pending"
OTHER = "other"

INCOME = "income"
EXPENSE = "expense"


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


@dataclass
class Transaction:
    id: str
    date: str  # ISO 8601, from the value-date column
    description: str
    amount: float  # magnitude only; sign lives in `type`
    category: str
    account: str
    type: str  # income or expense
    category_override: str | None = None
    description_override: str | None = None

    @property
    def has_category_override(self) -> bool:
        return not _is_blank(self.category_override)

    @property
    def effective_category(self) -> str:
        return self.category if _is_blank(self.category_override) else self.category_override

    @property
    def effective_description(self) -> str:
        return self.description if _is_blank(self.description_override) else self.description_override

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == INCOME else -self.amount


@dataclass
class RawRow:
    """Trimmed statement fields before any parsing."""
    value_date: str
    secondary_date: str
    description: str
    movement: str
    amount: str
    balance: str


@dataclass
class StatementLayout:
    """Where the fields live in a statement export.

    Defaults match the bank's semicolon export: five metadata
    lines, then one movement per line with an unused column at index 6.
    """
    preamble_lines: int = 5
    delimiter: str = ";"
    min_fields: int = 6
    value_date_col: int = 1
    secondary_date_col: int = 2
    description_col: int = 3
    movement_col: int = 4
    amount_col: int = 5
    balance_col: int = 7


DEFAULT_LAYOUT = StatementLayout()


@dataclass(frozen=True)
class CategorizationRule:
    name: str
    category: str
    match: Callable[[Transaction], bool]


@dataclass(frozen=True)
class Category:
    id: str
    name: str
