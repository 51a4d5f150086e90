from __future__ import annotations

import io
import sys
from pathlib import Path

import pandas as pd

sys.path.append(str(Path(__file__).resolve().parents[1]))

from godown.core.csv_records import parse_records, split_line


def test_split_line_keeps_quoted_delimiters_and_drops_quotes():
    assert split_line('a,"1,299",c') == ["a", "1,299", "c"]
    assert split_line('"x";y', delimiter=";") == ["x", "y"]


def test_records_clean_headers_and_leading_backtick():
    text = '\ufeff"Order Date", Product Name ,Selling Price\n1/5/24,`Kurta,"1,299"\n'
    records = list(parse_records(text))

    assert parse_records(text).columns == ["Order Date", "Product Name", "Selling Price"]
    assert records == [{"Order Date": "1/5/24", "Product Name": "Kurta", "Selling Price": "1,299"}]


def test_short_rows_leave_trailing_columns_unset_and_blank_lines_are_skipped():
    text = "a,b,c\n1,2\n\n4,5,6\n"
    records = list(parse_records(text))

    assert records[0] == {"a": "1", "b": "2"}
    assert "c" not in records[0]
    assert records[1] == {"a": "4", "b": "5", "c": "6"}


def test_only_newlines_end_a_record():
    text = "Product Name,Selling Price\r\nKurta\u2028Blue,100\r\nTiffin\x0cSteel,\x85 40\n"
    records = list(parse_records(text))

    assert records == [
        {"Product Name": "Kurta\u2028Blue", "Selling Price": "100"},
        {"Product Name": "Tiffin\x0cSteel", "Selling Price": "40"},
    ]


def test_records_can_be_iterated_more_than_once():
    records = parse_records("a\n1\n2\n")

    assert [row["a"] for row in records] == ["1", "2"]
    assert [row["a"] for row in records] == ["1", "2"]
    assert len(records) == 2


def test_empty_text_has_no_columns_or_records():
    records = parse_records("")
    assert records.columns == []
    assert list(records) == []


def test_parsed_rows_match_pandas_for_well_formed_csv():
    frame = pd.DataFrame(
        {
            "Marketplace Name": ["Amazon", "Flipkart"],
            "Order Status": ["Delivered", "Cancelled"],
            "Product Name": ["Steel Tiffin", "Copper Bottle"],
        }
    )
    buffer = io.StringIO()
    frame.to_csv(buffer, index=False)

    records = list(parse_records(buffer.getvalue()))

    assert records == frame.to_dict(orient="records")
