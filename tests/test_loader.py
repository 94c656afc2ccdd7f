import pytest

from core.diagnostics import RunLog
from core.errors import BadInvoiceRoot, ErrorCodes, InvoiceReadFailed
from services.loader import load_config, load_document, merge_config


def test_load_document_reads_mapping(tmp_path, log):
    path = tmp_path / "invoice.yaml"
    path.write_text("name: Jane\nhourly_rate: 100\ninvoice:\n  - [Dates, Hours]\n")

    document = load_document(path, log)

    assert document == {"name": "Jane", "hourly_rate": 100, "invoice": [["Dates", "Hours"]]}
    assert log.details == []


def test_load_document_drops_non_string_keys(tmp_path, log):
    path = tmp_path / "invoice.yaml"
    path.write_text("name: Jane\n2024: year\n")

    document = load_document(path, log)

    assert document == {"name": "Jane"}
    assert log.kinds() == [ErrorCodes.NON_STRING_KEY]


def test_load_document_missing_file(tmp_path, log):
    with pytest.raises(InvoiceReadFailed):
        load_document(tmp_path / "missing.yaml", log)


def test_load_document_malformed_yaml(tmp_path, log):
    path = tmp_path / "invoice.yaml"
    path.write_text("name: [unclosed\n")

    with pytest.raises(InvoiceReadFailed):
        load_document(path, log)


@pytest.mark.parametrize("content", ["- a\n- b\n", "just text\n", ""])
def test_load_document_rejects_non_mapping_root(tmp_path, log, content):
    path = tmp_path / "invoice.yaml"
    path.write_text(content)

    with pytest.raises(BadInvoiceRoot):
        load_document(path, log)


def test_load_config_failure_is_silent(tmp_path, capsys):
    log = RunLog()
    assert load_config(tmp_path / "missing.yaml", log) == {}

    bad = tmp_path / "config.yaml"
    bad.write_text("- not a mapping\n")
    assert load_config(bad, log) == {}

    assert capsys.readouterr().err == ""


def test_merge_config_only_fills_missing_keys():
    invoice = {"name": "Jane", "currency": None, "invoice": []}
    config = {"name": "Default", "currency": "AUD", "hourly_rate": 90}

    merged = merge_config(invoice, config)

    assert merged is invoice
    assert merged == {"name": "Jane", "currency": "AUD", "invoice": [], "hourly_rate": 90}


def test_merge_config_is_shallow():
    invoice = {"bank": {"bsb": "123"}}
    merge_config(invoice, {"bank": {"account": "456"}})

    assert invoice == {"bank": {"bsb": "123"}}


def test_load_document_keeps_dates_as_strings(tmp_path, log):
    path = tmp_path / "invoice.yaml"
    path.write_text(
        "date: 2024-02-30\ndue: 2024-01-15\ninvoice:\n  - [Dates, Hours]\n  - [2024-01-15, 8]\n"
    )

    document = load_document(path, log)

    assert document["date"] == "2024-02-30"
    assert document["due"] == "2024-01-15"
    assert document["invoice"][1] == ["2024-01-15", 8]


def test_load_document_not_utf8(tmp_path, log):
    path = tmp_path / "invoice.yaml"
    path.write_bytes(b"name: \xff\xfe\n")

    with pytest.raises(InvoiceReadFailed):
        load_document(path, log)


def test_load_config_not_utf8_is_silent(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_bytes(b"name: \xff\xfe\n")

    assert load_config(path, RunLog()) == {}
    assert capsys.readouterr().err == ""
