import pytest

from gastos.models import EXPENSE, PENDING, Transaction

PREAMBLE = [
    "Cuenta;ES00 1234 5678 9012 3456 7890",
    "Titular;JUAN PEREZ GARCIA",
    "Periodo;01/03/2024;31/03/2024",
    "",
    "N;F.Valor;Fecha;Concepto;Movimiento;Importe;Divisa;Disponible",
]


@pytest.fixture
def statement():
    """Build statement file content: the 5-line preamble followed by `rows`."""
    def _build(*rows: str) -> str:
        return "\n".join([*PREAMBLE, *rows]) + "\n"
    return _build


@pytest.fixture
def make_txn():
    def _make(id: str = "tx_000000000001", date: str = "2024-03-15", description: str = "SUPERMART MADRID",
              amount: float = 45.3, category: str = PENDING, type: str = EXPENSE, **kwargs) -> Transaction:
        return Transaction(
            id=id, date=date, description=description, amount=amount,
            category=category, account="checking", type=type, **kwargs,
        )
    return _make


@pytest.fixture
def movements_dir(tmp_path):
    path = tmp_path / "movements"
    path.mkdir()
    return path


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "transactions.json"
