"""Tolerant parser for CSV exports of hosted spreadsheets.

Exports from the spreadsheet host are not always well formed: rows can be
short, quoted cells may contain the delimiter and some cells carry a stray
leading backtick that was typed in to keep the sheet from reformatting the
value.  ``parse_records`` never raises on such input; it splits each line on
a best-effort basis and leaves missing trailing columns unset.
"""
from __future__ import annotations

from typing import Iterator

QUOTE = '"'
FIELD_MARKER = "`"


def _clean_header(name: str) -> str:
    return name.strip().strip(QUOTE).strip()


def _clean_field(value: str) -> str:
    value = value.strip()
    if value.startswith(FIELD_MARKER):
        value = value[1:].strip()
    return value


def split_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one line, ignoring delimiters that sit inside quotes.

    Quote characters only toggle the quoted state; they are never part of
    the emitted value.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


class CsvRecords:
    """Lazy, restartable view over the records contained in ``text``."""

    def __init__(self, text: str, delimiter: str = ",") -> None:
        self._text = text or ""
        self._delimiter = delimiter
        self._columns: list[str] | None = None

    def _lines(self) -> list[str]:
        # Only "\n" (optionally preceded by "\r") ends a line.
        lines = self._text.lstrip("\ufeff").split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return [line[:-1] if line.endswith("\r") else line for line in lines]

    @property
    def columns(self) -> list[str]:
        if self._columns is None:
            lines = self._lines()
            if not lines:
                self._columns = []
            else:
                self._columns = [_clean_header(name) for name in split_line(lines[0], self._delimiter)]
        return list(self._columns)

    def __iter__(self) -> Iterator[dict[str, str]]:
        columns = self.columns
        if not columns:
            return
        for line in self._lines()[1:]:
            if not line.strip():
                continue
            values = split_line(line, self._delimiter)
            record: dict[str, str] = {}
            for column, value in zip(columns, values):
                record[column] = _clean_field(value)
            yield record

    def __len__(self) -> int:
        return sum(1 for _ in self)


def parse_records(text: str, delimiter: str = ",") -> CsvRecords:
    return CsvRecords(text, delimiter=delimiter)


__all__ = ["CsvRecords", "parse_records", "split_line"]
