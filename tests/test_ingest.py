import textwrap

import pytest

from ingest.transactions import load_records, split_streams


def _write(tmp_path, name, text):
    p = tmp_path / name
    p.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return p


def test_load_records_csv(tmp_path):
    p = _write(
        tmp_path,
        "export.csv",
        """
        ID,Description,Amount,Date,Category
        a1,Coffee,4.50,06/10,Food
        ,,12,2024-06-01,Income
        a3,,,2024-06-02,
        """,
    )
    records = load_records(p)
    assert records[0] == {"id": "a1", "title": "Coffee", "amount": "4.50", "date": "06/10", "category": "Food"}
    assert records[1]["id"] == "export-1"
    assert "title" not in records[1]
    assert records[2] == {"id": "a3", "date": "2024-06-02"}


def test_missing_required_columns(tmp_path):
    p = _write(tmp_path, "bad.csv", "title,amount\nx,1\n")
    with pytest.raises(ValueError):
        load_records(p)


def test_unsupported_file_type(tmp_path):
    p = _write(tmp_path, "export.json", "[]")
    with pytest.raises(ValueError):
        load_records(p)


def test_split_streams():
    records = [
        {"id": "1", "category": "Food"},
        {"id": "2", "category": "income"},
        {"id": "3"},
    ]
    expenses, income = split_streams(records)
    assert [r["id"] for r in expenses] == ["1", "3"]
    assert [r["id"] for r in income] == ["2"]
