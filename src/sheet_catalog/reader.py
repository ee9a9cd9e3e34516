"""Workbook reader: sheet listing and raw string rows over openpyxl."""

from __future__ import annotations

import zipfile
from datetime import date, datetime, time
from io import BytesIO
from types import TracebackType
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from sheet_catalog.errors import OpenError, RowReadError, SheetNotFound

_OPEN_ERRORS = (zipfile.BadZipFile, InvalidFileException, KeyError, ValueError, TypeError, OSError)


def cell_to_text(value: Any) -> str:
    """Render a cached cell value the way the workbook displays it, roughly."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def _trim_trailing_empty(cells: list[str]) -> list[str]:
    end = len(cells)
    while end and cells[end - 1] == "":
        end -= 1
    return cells[:end]


class SpreadsheetReader:
    """One open workbook handle over an immutable byte buffer.

    Each instance wraps its own ``BytesIO`` view, so several readers may be
    opened over the same bytes. A single instance must not be shared.
    """

    def __init__(self, data: bytes) -> None:
        try:
            self._wb = load_workbook(BytesIO(data), read_only=True, data_only=True)
        except _OPEN_ERRORS as exc:
            raise OpenError(f"Cannot open workbook: {exc}") from exc
        self._closed = False

    def __enter__(self) -> SpreadsheetReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def list_sheets(self) -> list[str]:
        return list(self._wb.sheetnames)

    def get_rows(self, sheet_name: str) -> list[list[str]]:
        """Return every row of *sheet_name* as ragged lists of strings.

        Trailing empty cells are dropped from each row and trailing blank
        rows from the sheet; blank rows in the middle are kept as ``[]``.
        """
        if sheet_name not in self._wb.sheetnames:
            raise SheetNotFound([sheet_name])
        ws = self._wb[sheet_name]
        if not hasattr(ws, "iter_rows"):
            raise RowReadError(f"Sheet {sheet_name!r} is not a worksheet")
        try:
            rows = [
                _trim_trailing_empty([cell_to_text(v) for v in row])
                for row in ws.iter_rows(values_only=True)
            ]
        except Exception as exc:
            raise RowReadError(f"Failed reading rows from sheet {sheet_name!r}: {exc}") from exc
        while rows and not rows[-1]:
            rows.pop()
        return rows

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._wb.close()
