import pytest

from gastos.catalog import valid_category_ids
from gastos.models import INCOME, PENDING
from gastos.reports import (
    filter_by_category, filter_by_date_range, filter_by_type, get_cashflow, get_category_spending,
    get_invalid_categories, get_pending_status, get_totals, search,
)


@pytest.fixture
def sample(make_txn):
    return [
        make_txn(id="tx_1", date="2024-03-01", description="NOMINA ACME", amount=2000.0, type=INCOME, category="salary"),
        make_txn(id="tx_2", date="2024-03-04", description="SUPERMART MADRID", amount=60.0, category="groceries"),
        make_txn(id="tx_3", date="2024-03-05", description="CAFE CENTRAL", amount=40.0, category="dining"),
        make_txn(id="tx_4", date="2024-03-10", description="XYZZY", amount=100.0, category=PENDING),
        make_txn(id="tx_5", date="2024-04-02", description="FARMACIA", amount=20.0, category=PENDING,
                 category_override="health", description_override="Pharmacy visit"),
    ]


def test_pending_status(sample):
    data = get_pending_status(sample)
    assert data["total"] == 5
    assert data["pending"] == 1
    assert data["overrides"] == 1
    assert data["categorized"] == 3
    assert data["pending_pct"] == 20.0
    assert [t.id for t in data["recent"]] == ["tx_4"]


def test_pending_status_limits_and_orders_recent(make_txn):
    txns = [make_txn(id=f"tx_{i}", date=f"2024-01-{i:02d}") for i in range(1, 26)]
    data = get_pending_status(txns, limit=20)
    assert len(data["recent"]) == 20
    assert data["recent"][0].date == "2024-01-25"


def test_pending_status_empty():
    assert get_pending_status([])["pending_pct"] == 0.0


def test_invalid_categories(make_txn):
    txns = [
        make_txn(id="tx_1", category="groceries"),
        make_txn(id="tx_2", category="pendiente"),
        make_txn(id="tx_3", category="pendiente", category_override="comida"),
        make_txn(id="tx_4", category="dining", category_override="health"),
    ]
    data = get_invalid_categories(txns, valid_category_ids())
    assert [(e["transaction"].id, e["field"]) for e in data["entries"]] == [
        ("tx_2", "category"), ("tx_3", "category"), ("tx_3", "categoryOverride"),
    ]
    assert data["by_category"] == [{"category": "pendiente", "count": 2}, {"category": "comida", "count": 1}]


def test_filter_by_date_range(sample):
    assert [t.id for t in filter_by_date_range(sample, "2024-03-04", "2024-03-10")] == ["tx_2", "tx_3", "tx_4"]
    assert [t.id for t in filter_by_date_range(sample, "2024-04-01", None)] == ["tx_5"]
    assert filter_by_date_range(sample, None, None) == sample


def test_filter_by_category_uses_override(sample):
    assert [t.id for t in filter_by_category(sample, ["health"])] == ["tx_5"]
    assert filter_by_category(sample, []) == sample


def test_filter_by_type(sample):
    assert [t.id for t in filter_by_type(sample, "income")] == ["tx_1"]
    assert len(filter_by_type(sample, "expense")) == 4
    assert filter_by_type(sample, "all") == sample
    with pytest.raises(ValueError):
        filter_by_type(sample, "transfer")


def test_search_effective_fields(sample):
    assert [t.id for t in search(sample, "pharmacy")] == ["tx_5"]
    assert [t.id for t in search(sample, "GROCER")] == ["tx_2"]
    assert search(sample, "  ") == sample


def test_totals(sample):
    totals = get_totals(sample)
    assert totals == {"income": 2000.0, "expenses": 220.0, "net": 1780.0, "count": 5}


def test_category_spending(sample):
    rows = get_category_spending(sample)
    assert [r["category"] for r in rows] == [PENDING, "groceries", "dining", "health"]
    assert rows[0]["name"] == "Pending Review"
    assert rows[1]["pct"] == pytest.approx(60 / 220 * 100)
    assert sum(r["pct"] for r in rows) == pytest.approx(100)


def test_cashflow_by_month(sample):
    periods = get_cashflow(sample, "month")
    assert [p["period"] for p in periods] == ["2024-03", "2024-04"]
    assert periods[0]["income"] == 2000.0
    assert periods[0]["expenses"] == 200.0
    assert periods[0]["net"] == 1800.0


def test_cashflow_by_week_and_day(sample):
    # 2024-03-04 is a Monday; 2024-03-01 belongs to the week of 2024-02-26.
    weeks = [p["period"] for p in get_cashflow(sample, "week")]
    assert weeks == ["2024-02-26", "2024-03-04", "2024-04-01"]
    days = [p["period"] for p in get_cashflow(sample, "day")]
    assert days == ["2024-03-01", "2024-03-04", "2024-03-05", "2024-03-10", "2024-04-02"]


def test_cashflow_rejects_unknown_granularity(sample):
    with pytest.raises(ValueError):
        get_cashflow(sample, "year")
