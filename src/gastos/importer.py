import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path

from gastos.errors import FormatError, MissingInputError
from gastos.identity import derive_id
from gastos.models import DEFAULT_LAYOUT, EXPENSE, INCOME, PENDING, RawRow, StatementLayout, Transaction

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT = "checking"

_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def parse_date(raw: str) -> str:
    """Convert DD/MM/YYYY to ISO 8601 YYYY-MM-DD."""
    match = _DATE_RE.match(raw.strip())
    if match is None:
        raise FormatError(f"Invalid date format: {raw!r}")
    day, month, year = match.groups()
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def parse_amount(raw: str) -> float:
    """Parse a comma-decimal amount such as "-2,2" or "1231,65". Sign is kept."""
    normalized = raw.strip().replace(",", ".", 1)
    try:
        amount = float(normalized)
    except ValueError:
        raise FormatError(f"Invalid amount format: {raw!r}") from None
    if not math.isfinite(amount):
        raise FormatError(f"Invalid amount format: {raw!r}")
    return amount


def _column(fields: list[str], index: int) -> str:
    if index < len(fields):
        return fields[index].strip()
    return ""


def extract_rows(content: str, layout: StatementLayout = DEFAULT_LAYOUT) -> list[RawRow]:
    """Split a statement export into raw rows, skipping the metadata preamble.

    The preamble is dropped without looking at it. Rows with too few fields, or
    missing the value date, concept or amount, are discarded.
    """
    rows: list[RawRow] = []
    for line in content.split("\n")[layout.preamble_lines:]:
        if not line.strip():
            continue
        fields = line.split(layout.delimiter)
        if len(fields) < layout.min_fields:
            continue
        row = RawRow(
            value_date=_column(fields, layout.value_date_col),
            secondary_date=_column(fields, layout.secondary_date_col),
            description=_column(fields, layout.description_col),
            movement=_column(fields, layout.movement_col),
            amount=_column(fields, layout.amount_col),
            balance=_column(fields, layout.balance_col),
        )
        if not row.value_date or not row.description or not row.amount:
            continue
        rows.append(row)
    return rows


def read_statement(file_path: Path, layout: StatementLayout = DEFAULT_LAYOUT) -> list[RawRow]:
    try:
        content = file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise MissingInputError(f"Could not read statement {file_path}: {exc}") from exc
    return extract_rows(content, layout)


@dataclass
class BuildResult:
    transactions: list[Transaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def build_transaction(row: RawRow, account: str = DEFAULT_ACCOUNT) -> Transaction:
    date = parse_date(row.value_date)
    secondary_date = parse_date(row.secondary_date) if row.secondary_date else date
    amount = parse_amount(row.amount)
    absolute_amount = abs(amount)
    return Transaction(
        id=derive_id(date, secondary_date, row.description, row.movement, absolute_amount, row.balance),
        date=date,
        description=row.description,
        amount=absolute_amount,
        category=PENDING,
        account=account,
        type=EXPENSE if amount < 0 else INCOME,
    )


def build_transactions(rows: list[RawRow], account: str = DEFAULT_ACCOUNT) -> BuildResult:
    """Turn raw rows into pending transactions. Bad rows are skipped and reported."""
    result = BuildResult()
    for row in rows:
        try:
            result.transactions.append(build_transaction(row, account))
        except FormatError as exc:
            message = f"Skipped row {row.description!r}: {exc}"
            logger.warning(message)
            result.errors.append(message)
    return result
