from datetime import datetime, UTC
import pytest
from invoice_analyzer.core.errors import MalformedResponseError
from invoice_analyzer.services.response_parser import merge_metadata, parse_invoice_json


def test_parse_json_wrapped_in_prose():
    raw = "Here is the data:\n{\"invoiceNumber\":\"A1\"}\nThanks"
    assert parse_invoice_json(raw) == {"invoiceNumber": "A1"}


def test_parse_json_in_markdown_fence():
    raw = '```json\n{"vendorName": "ACME", "items": [{"description": "Bolts", "amount": 4.5}]}\n```'
    data = parse_invoice_json(raw)
    assert data["vendorName"] == "ACME"
    assert data["items"][0]["amount"] == 4.5


def test_parse_plain_json():
    assert parse_invoice_json('{"totalAmount": "$10.00"}') == {"totalAmount": "$10.00"}


@pytest.mark.parametrize(
    "raw",
    [
        "I could not read this invoice.",
        "",
        "closing only }",
        "} reversed {",
        "{not: valid json}",
        "Two objects {\"a\": 1} and {\"b\": 2}",
        "[1, 2, 3]",
    ],
)
def test_parse_fails_closed(raw):
    with pytest.raises(MalformedResponseError):
        parse_invoice_json(raw)


def test_parse_none_fails_closed():
    with pytest.raises(MalformedResponseError):
        parse_invoice_json(None)


@pytest.mark.parametrize(
    "raw",
    [
        '{"totalAmount": NaN}',
        '{"totalAmount": Infinity}',
        '{"taxAmount": -Infinity}',
        '{"totalAmount": 1e400}',
        '{"totalAmount": ' + "9" * 5000 + '}',
        '{"items": ' + "[" * 100_000 + "]" * 100_000 + '}',
    ],
)
def test_parse_rejects_values_the_api_cannot_serve(raw):
    with pytest.raises(MalformedResponseError) as excinfo:
        parse_invoice_json(raw)
    assert excinfo.value.status_code == 500


def test_parse_keeps_large_finite_numbers():
    data = parse_invoice_json('{"totalAmount": 1e300, "quantity": ' + "9" * 40 + '}')
    assert data["totalAmount"] == 1e300
    assert data["quantity"] == int("9" * 40)


def test_malformed_response_is_server_error():
    with pytest.raises(MalformedResponseError) as excinfo:
        parse_invoice_json("nothing here")
    assert excinfo.value.status_code == 500


def test_merge_metadata_system_fields_win():
    now = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
    data = {
        "_id": "hallucinated",
        "invoiceNumber": "INV-9",
        "originalFilename": "model-guess.pdf",
        "filePath": "/tmp/elsewhere",
        "uploadDate": "1999-01-01",
    }

    record = merge_metadata(data, "real.pdf", "uploads/123-real.pdf", now=now)

    assert record["invoiceNumber"] == "INV-9"
    assert record["originalFilename"] == "real.pdf"
    assert record["filePath"] == "uploads/123-real.pdf"
    assert record["uploadDate"] == "2025-01-02T03:04:05+00:00"
    assert "_id" not in record
    # Input is left untouched
    assert data["originalFilename"] == "model-guess.pdf"


def test_merge_metadata_defaults_to_now():
    record = merge_metadata({}, "a.png", "uploads/a.png")
    stamp = datetime.fromisoformat(record["uploadDate"])
    assert (datetime.now(UTC) - stamp).total_seconds() < 5
