import hashlib

ID_PREFIX = "tx_"
ID_HEX_LENGTH = 12
FIELD_DELIMITER = "|"


def format_amount(value: float) -> str:
    """Render a number the way the statement tooling always has: no trailing `.0`."""
    if value == int(value):
        return str(int(value))
    return repr(value)


def derive_id(
    value_date: str,
    secondary_date: str,
    description: str,
    movement: str,
    absolute_amount: float,
    balance: str,
) -> str:
    """Content-addressed transaction id.

    Statements carry no native id. The running balance makes otherwise identical
    movements (two coffees on the same day) distinct. The digest is truncated to
    12 hex characters, so ids are only unique in practice, not by construction.
    """
    combined = FIELD_DELIMITER.join([
        value_date,
        secondary_date,
        description,
        movement,
        format_amount(abs(absolute_amount)),
        balance,
    ])
    digest = hashlib.sha256(combined.encode("utf-8")).hexdigest()
    return f"{ID_PREFIX}{digest[:ID_HEX_LENGTH]}"
