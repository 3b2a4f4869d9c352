"""Tests for formatting, decoding, output and frame validation helpers."""

import json

import pandas as pd
import pytest

from raiseplanner.utils.formatting import format_currency, format_date, format_months, format_percentage
from raiseplanner.utils.io import decode_rows, file_extension, read_csv_bytes, write_output
from raiseplanner.utils.validators import validate_unique


class TestFormatting:
    @pytest.mark.parametrize(
        ("amount", "currency", "expected"),
        [
            (82500, "USD", "$82,500"),
            (82500.4, None, "$82,500"),
            (1200, "eur", "€1,200"),
            (2500000, "INR", "₹2,500,000"),
            (1000, "PLN", "1,000 zł"),
            (1000, "CHF", "1,000 CHF"),
            (-500, "USD", "-$500"),
            (None, "USD", "$0"),
        ],
    )
    def test_currency(self, amount, currency, expected):
        assert format_currency(amount, currency) == expected

    def test_percentage(self):
        assert format_percentage(12.345) == "12.3%"
        assert format_percentage(75, 0) == "75%"
        assert format_percentage(None) == "Not Available"
        assert format_percentage(float("nan")) == "Not Available"

    def test_months(self):
        assert format_months(30) == "2 years, 6 months"
        assert format_months(0) == "0 years, 0 months"

    def test_date(self):
        assert format_date("2024-03-05") == "Mar 05, 2024"
        assert format_date("junk") == "Not Available"
        assert format_date(None) == "Not Available"


class TestDecoding:
    def test_extension(self):
        assert file_extension("Report.XLSX") == "xlsx"
        assert file_extension("README") == "readme"

    def test_csv_rows_trimmed_and_blank_rows_dropped(self):
        content = b"Employee ID , Name,Unnamed: 2\n E1 , Ann ,\n,,\nE2,Bob,\n"
        assert read_csv_bytes(content) == [
            {"employee id": "E1", "name": "Ann"},
            {"employee id": "E2", "name": "Bob"},
        ]

    def test_empty_csv(self):
        assert read_csv_bytes(b"") == []

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported file type: txt"):
            decode_rows("notes.txt", b"x")


class TestWriteOutput:
    def test_csv_and_json(self, tmp_path):
        df = pd.DataFrame([{"employeeId": "E1", "recommendedAmount": 9000}])
        write_output(df, tmp_path / "out" / "recs.csv", "csv")
        write_output(df, tmp_path / "recs.json", "json")

        assert pd.read_csv(tmp_path / "out" / "recs.csv").iloc[0]["recommendedAmount"] == 9000
        assert json.loads((tmp_path / "recs.json").read_text())[0]["employeeId"] == "E1"

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported output format: xml"):
            write_output(pd.DataFrame(), tmp_path / "recs.xml", "xml")


def test_validate_unique():
    df = pd.DataFrame({"employeeId": ["E1", "E2", "E1"]})
    outcome = validate_unique(df, ["employeeId"])
    assert not outcome["valid"]
    assert "Found 2 duplicate rows" in outcome["errors"][0]
    assert validate_unique(df.drop_duplicates(), ["employeeId"])["valid"]
