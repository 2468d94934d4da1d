import re

import pytest
from gspread.exceptions import WorksheetNotFound

import sheet_store
from column import SHEETS

_RANGE_RE = re.compile(r"^([A-Z]+)(\d*)(?::([A-Z]+)(\d*))?$")


def _col_number(letters: str) -> int:
    number = 0
    for ch in letters:
        number = number * 26 + (ord(ch) - 64)
    return number


def _parse_range(range_name):
    match = _RANGE_RE.match(range_name)
    if match is None:
        raise ValueError(f"Unsupported range {range_name!r}")
    start_col, start_row, end_col, end_row = match.groups()
    return (
        int(start_row) if start_row else 1,
        _col_number(start_col),
        int(end_row) if end_row else None,
        _col_number(end_col) if end_col else _col_number(start_col),
    )


class FakeWorksheet:
    """In-memory stand-in for the gspread worksheet calls the store uses."""

    def __init__(self, title, rows=None):
        self.title = title
        self.rows = [list(r) for r in (rows or [])]
        self.calls = []

    def _trimmed(self):
        rows = []
        for row in self.rows:
            row = list(row)
            while row and row[-1] == "":
                row.pop()
            rows.append(row)
        while rows and not rows[-1]:
            rows.pop()
        return rows

    def get(self, range_name=None, **kwargs):
        self.calls.append(("get", range_name))
        start_row, _, end_row, end_col = _parse_range(range_name)
        rows = self._trimmed()
        selected = rows[start_row - 1:end_row] if end_row else rows[start_row - 1:]
        result = []
        for row in selected:
            row = row[:end_col]
            while row and row[-1] == "":
                row.pop()
            result.append(row)
        while result and not result[-1]:
            result.pop()
        return result

    def update(self, values=None, range_name=None, **kwargs):
        self.calls.append(("update", range_name))
        start_row, start_col, _, _ = _parse_range(range_name)
        for offset, row in enumerate(values):
            index = start_row - 1 + offset
            while len(self.rows) <= index:
                self.rows.append([])
            target = self.rows[index]
            needed = start_col - 1 + len(row)
            while len(target) < needed:
                target.append("")
            for col, value in enumerate(row):
                target[start_col - 1 + col] = "" if value is None else str(value)
        return {"updatedRange": range_name}

    def append_row(self, values, **kwargs):
        self.calls.append(("append_row", kwargs.get("table_range")))
        self.rows = self._trimmed()
        self.rows.append(["" if v is None else str(v) for v in values])

    def delete_rows(self, start_index, end_index=None):
        self.calls.append(("delete_rows", start_index))
        end = end_index if end_index is not None else start_index
        del self.rows[start_index - 1:end]


class FakeSpreadsheet:
    def __init__(self, titles=()):
        self.worksheets = {title: FakeWorksheet(title) for title in titles}

    def worksheet(self, title):
        try:
            return self.worksheets[title]
        except KeyError:
            raise WorksheetNotFound(title) from None


@pytest.fixture()
def spreadsheet():
    return FakeSpreadsheet(SHEETS.values())


@pytest.fixture()
def seed(spreadsheet):
    """Write a header plus records into a sheet through the store itself."""
    def _seed(sheet_name, mapping, rows):
        for row in rows:
            sheet_store.append_row(sheet_name, mapping, row, spreadsheet)
        return spreadsheet.worksheet(sheet_name)
    return _seed
