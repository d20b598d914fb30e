from __future__ import annotations

import pytest

from fleet_rental.db.document_store import where


def test_insert_and_get(store):
    doc_id = store.insert("brands", {"name": "Kia", "logo": ""})

    document = store.get("brands", doc_id)

    assert document == {"id": doc_id, "name": "Kia", "logo": ""}
    assert store.get("models", doc_id) is None


def test_get_missing_returns_none(store):
    assert store.get("brands", "missing") is None


def test_update_merges_fields(store):
    doc_id = store.insert("vehicles", {"registration": "1 TU 1", "active": True})

    assert store.update("vehicles", doc_id, {"active": False})

    assert store.get("vehicles", doc_id) == {
        "id": doc_id,
        "registration": "1 TU 1",
        "active": False,
    }


def test_update_and_delete_missing_return_false(store):
    assert not store.update("vehicles", "missing", {"active": False})
    assert not store.delete("vehicles", "missing")


def test_delete(store):
    doc_id = store.insert("brands", {"name": "Kia"})

    assert store.delete("brands", doc_id)
    assert store.get("brands", doc_id) is None


def test_query_filters_order_and_limit(store):
    for number, status in [("2025-00002", "open"), ("2025-00001", "open"), ("2025-00003", "done")]:
        store.insert("invoices", {"invoice_number": number, "status": status})

    open_docs = store.query(
        "invoices", [where("status", "==", "open")], order_by="invoice_number"
    )
    assert [doc["invoice_number"] for doc in open_docs] == ["2025-00001", "2025-00002"]

    latest = store.query("invoices", order_by="invoice_number", descending=True, limit=1)
    assert [doc["invoice_number"] for doc in latest] == ["2025-00003"]

    selected = store.query("invoices", [where("status", "in", ["done", "other"])])
    assert [doc["invoice_number"] for doc in selected] == ["2025-00003"]


def test_query_range_and_null(store):
    store.insert("payment_lines", {"due_date": "2025-06-10T00:00:00"})
    store.insert("payment_lines", {"due_date": "2025-07-10T00:00:00"})
    store.insert("payment_lines", {"due_date": None})

    in_june = store.query(
        "payment_lines",
        [
            where("due_date", ">=", "2025-06-01T00:00:00"),
            where("due_date", "<", "2025-07-01T00:00:00"),
        ],
    )
    without_due = store.query("payment_lines", [where("due_date", "==", None)])

    assert [doc["due_date"] for doc in in_june] == ["2025-06-10T00:00:00"]
    assert len(without_due) == 1


def test_empty_in_matches_nothing(store):
    store.insert("brands", {"name": "Kia"})

    assert store.query("brands", [where("name", "in", [])]) == []


def test_where_rejects_bad_operator_and_field():
    with pytest.raises(ValueError):
        where("name", "like", "K%")
    with pytest.raises(ValueError):
        where("name; DROP", "==", "x")
