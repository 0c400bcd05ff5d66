import pytest

from gastos.models import PENDING
from gastos.reviewer import apply_override, get_pending_transactions, run_review
from gastos.store import load_transactions, save_transactions


def test_get_pending_transactions_oldest_first(make_txn):
    txns = [
        make_txn(id="tx_1", date="2024-03-20"),
        make_txn(id="tx_2", date="2024-03-01"),
        make_txn(id="tx_3", date="2024-03-05", category="groceries"),
        make_txn(id="tx_4", date="2024-03-02", category_override="health"),
    ]
    assert [t.id for t in get_pending_transactions(txns)] == ["tx_2", "tx_1"]


def test_apply_override_sets_fields(make_txn):
    original = [make_txn(id="tx_1"), make_txn(id="tx_2")]
    updated = apply_override(original, "tx_1", category="groceries", description="Weekly shop")

    assert updated[0].category_override == "groceries"
    assert updated[0].description_override == "Weekly shop"
    assert updated[0].category == PENDING
    assert updated[1] == original[1]
    assert original[0].category_override is None


def test_apply_override_blank_clears(make_txn):
    txns = [make_txn(id="tx_1", category_override="dining", description_override="Lunch")]
    updated = apply_override(txns, "tx_1", category="", description="  ")
    assert updated[0].category_override is None
    assert updated[0].description_override is None


def test_apply_override_leaves_unspecified_field(make_txn):
    txns = [make_txn(id="tx_1", description_override="Lunch")]
    updated = apply_override(txns, "tx_1", category="dining")
    assert updated[0].description_override == "Lunch"


def test_apply_override_rejects_unknown_category(make_txn):
    with pytest.raises(ValueError):
        apply_override([make_txn(id="tx_1")], "tx_1", category="not-a-category")


def test_apply_override_unknown_id(make_txn):
    with pytest.raises(KeyError):
        apply_override([make_txn(id="tx_1")], "tx_missing", category="dining")


def test_run_review_saves_choices(make_txn, store_path, monkeypatch):
    save_transactions(store_path, [
        make_txn(id="tx_1", date="2024-03-01", description="XYZZY"),
        make_txn(id="tx_2", date="2024-03-02", description="PLUGH"),
    ])
    # First pending gets category #3 (groceries) with a new description; the second is skipped.
    answers = iter(["3", "Corner shop", "s"])
    monkeypatch.setattr("gastos.reviewer.Prompt.ask", lambda *args, **kwargs: next(answers))

    run_review(store_path)

    stored = {t.id: t for t in load_transactions(store_path)}
    assert stored["tx_1"].category_override == "groceries"
    assert stored["tx_1"].description_override == "Corner shop"
    assert stored["tx_2"].category_override is None


def test_run_review_quit_keeps_store(make_txn, store_path, monkeypatch):
    save_transactions(store_path, [make_txn(id="tx_1")])
    monkeypatch.setattr("gastos.reviewer.Prompt.ask", lambda *args, **kwargs: "q")

    run_review(store_path)

    assert load_transactions(store_path)[0].category_override is None
