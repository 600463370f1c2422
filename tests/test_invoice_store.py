"""
Contract tests run against every invoice store backend.
"""

import pytest
from invoice_analyzer.core.errors import NotFound
from invoice_analyzer.services.storage import InMemoryInvoiceStore, SQLiteInvoiceStore


@pytest.fixture(params=["memory", "sqlite"])
def invoice_store(request, tmp_path):
    if request.param == "memory":
        store = InMemoryInvoiceStore()
    else:
        store = SQLiteInvoiceStore(str(tmp_path / "invoices.db"))
    yield store
    store.close()


def make_record(vendor, number, uploaded, items=None):
    record = {"vendorName": vendor, "invoiceNumber": number, "uploadDate": uploaded}
    if items is not None:
        record["items"] = items
    return record


@pytest.fixture
def seeded(invoice_store):
    ids = {
        "old": invoice_store.insert(make_record(
            "Contoso Pty Ltd", "INV-100", "2025-01-01T09:00:00+00:00",
            items=[{"description": "Consulting hours", "amount": "$500"}],
        )),
        "new": invoice_store.insert(make_record(
            "ACME Corp", "A-2", "2025-03-01T09:00:00+00:00",
            items=[{"description": "Steel bolts"}, "malformed item"],
        )),
        "mid": invoice_store.insert(make_record(
            "Globex", "G-77", "2025-02-01T09:00:00+00:00", items="not a list",
        )),
    }
    return ids


def test_insert_assigns_unique_ids(invoice_store):
    first = invoice_store.insert({"vendorName": "A"})
    second = invoice_store.insert({"vendorName": "A"})
    assert first != second


def test_insert_ignores_supplied_id(invoice_store):
    invoice_id = invoice_store.insert({"_id": "chosen-by-model", "vendorName": "A"})
    assert invoice_id != "chosen-by-model"
    assert invoice_store.get_by_id(invoice_id)["_id"] == invoice_id


def test_get_by_id_round_trips_document(invoice_store):
    record = make_record("ACME", "X1", "2025-01-01T00:00:00+00:00", items=[{"amount": 5, "note": None}])
    invoice_id = invoice_store.insert(record)

    stored = invoice_store.get_by_id(invoice_id)

    assert stored["_id"] == invoice_id
    assert stored["vendorName"] == "ACME"
    assert stored["items"] == [{"amount": 5, "note": None}]


def test_get_missing_raises_not_found(invoice_store):
    with pytest.raises(NotFound):
        invoice_store.get_by_id("does-not-exist")


def test_list_all_newest_first(invoice_store, seeded):
    ids = [record["_id"] for record in invoice_store.list_all()]
    assert ids == [seeded["new"], seeded["mid"], seeded["old"]]


def test_delete_removes_record(invoice_store, seeded):
    assert invoice_store.delete_by_id(seeded["mid"]) is True

    with pytest.raises(NotFound):
        invoice_store.get_by_id(seeded["mid"])
    assert len(invoice_store.list_all()) == 2


def test_delete_missing_raises_not_found(invoice_store, seeded):
    with pytest.raises(NotFound):
        invoice_store.delete_by_id("nonexistent-id-12345")
    assert len(invoice_store.list_all()) == 3


@pytest.mark.parametrize(
    "query,expected",
    [
        ("acme", ["new"]),
        ("inv-1", ["old"]),
        ("BOLTS", ["new"]),
        ("consult", ["old"]),
        ("o", ["new", "mid", "old"]),
        ("no such vendor", []),
    ],
)
def test_search_matches_vendor_number_and_items(invoice_store, seeded, query, expected):
    ids = [record["_id"] for record in invoice_store.search(query)]
    assert ids == [seeded[key] for key in expected]


@pytest.mark.parametrize("query", ["", None])
def test_empty_search_equals_list_all(invoice_store, seeded, query):
    assert invoice_store.search(query) == invoice_store.list_all()


def test_search_treats_query_literally(invoice_store):
    invoice_store.insert({"vendorName": "Smith & Co. (Pty)"})
    invoice_store.insert({"vendorName": "Smithy"})

    assert [r["vendorName"] for r in invoice_store.search("(pty)")] == ["Smith & Co. (Pty)"]
    assert invoice_store.search(".*") == []
