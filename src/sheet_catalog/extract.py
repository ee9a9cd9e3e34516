"""Sheet extraction: spreadsheet rows to typed records.

Pure apart from diagnostic logging: every call opens its own reader, walks
the rows once and closes the reader before returning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar, Union

from sheet_catalog import SENTINEL
from sheet_catalog.errors import SheetNotFound
from sheet_catalog.io import Source, resolve_source
from sheet_catalog.models import (
    ColumnSpec,
    CustomerRecord,
    ProductRecord,
    RecordSet,
    _to_non_negative_int,
)
from sheet_catalog.reader import SpreadsheetReader

logger = logging.getLogger(__name__)

R = TypeVar("R")
ColumnMapLike = Iterable[Union[ColumnSpec, tuple[str, int]]]

# ── Default schemas ──────────────────────────────────────────────

CUSTOMER_SHEETS: list[str] = ["Data Base", "Database", "Sheet1", "Data"]
CUSTOMER_HEADER_ROWS = 1
CUSTOMER_COLUMNS: list[ColumnSpec] = [
    ColumnSpec("branch", 0),
    ColumnSpec("cust_id", 1),
    ColumnSpec("cust_name", 2),
    ColumnSpec("alamat", 3),
    ColumnSpec("kota", 4),
    ColumnSpec("sales_name", 5),
    ColumnSpec("channel", 6),
    ColumnSpec("avg_2023", 7),
    ColumnSpec("avg_2024", 8),
    ColumnSpec("avg_2025", 9),
    ColumnSpec("max", 10),
]

# Price lists carry a three-row title block above the data.
PRODUCT_SHEETS: list[str] = ["APL", "DaftarHarga", "Product", "Products", "Sheet2"]
PRODUCT_HEADER_ROWS = 3
PRODUCT_COLUMNS: list[ColumnSpec] = [
    ColumnSpec("code", 0),
    ColumnSpec("name_product", 1),
    ColumnSpec("hna", 2),
    ColumnSpec("ppn", 3, optional=True),
]


# ── Cell helpers ─────────────────────────────────────────────────


def handle_null_value(value: str) -> str:
    """Return *value*, or the sentinel if it is empty."""
    return SENTINEL if value == "" else value


def row_value(row: Sequence[str], index: int) -> str:
    """Return ``row[index]`` null-coalesced; the sentinel if the row is too short."""
    if index < len(row):
        return handle_null_value(row[index])
    return SENTINEL


def _as_column_specs(column_map: ColumnMapLike) -> list[ColumnSpec]:
    specs: list[ColumnSpec] = []
    for entry in column_map:
        if isinstance(entry, ColumnSpec):
            specs.append(entry)
        else:
            field_name, index = entry
            specs.append(ColumnSpec(field_name, index))
    return specs


def map_row(row: Sequence[str], column_map: Sequence[ColumnSpec]) -> dict[str, str]:
    """Build the field values for one row according to *column_map*."""
    values: dict[str, str] = {}
    for spec in column_map:
        if spec.optional and spec.index >= len(row):
            values[spec.field] = ""
        else:
            values[spec.field] = row_value(row, spec.index)
    return values


# ── Extraction ───────────────────────────────────────────────────


def find_sheet_rows(
    reader: SpreadsheetReader, sheet_candidates: Sequence[str]
) -> tuple[str, list[list[str]]]:
    """Return ``(name, rows)`` for the first candidate that exists in *reader*.

    Raises
    ------
    SheetNotFound
        Listing every name tried, if none of the candidates exist.
    """
    attempted: list[str] = []
    for name in sheet_candidates:
        attempted.append(name)
        try:
            rows = reader.get_rows(name)
        except SheetNotFound:
            continue
        return name, rows
    logger.debug("Workbook sheets: %s", ", ".join(reader.list_sheets()))
    raise SheetNotFound(attempted)


def extract(
    source: Source,
    sheet_candidates: Sequence[str],
    header_rows: int,
    column_map: ColumnMapLike,
    record_type: Callable[..., R],
) -> RecordSet[R]:
    """Extract one record per data row of the first matching sheet.

    The first *header_rows* rows are discarded regardless of content. Fully
    blank rows still produce a record. Errors from resolving, opening or
    reading the source propagate unchanged.
    """
    header_rows = _to_non_negative_int(header_rows, "header_rows")
    specs = _as_column_specs(column_map)
    data = resolve_source(source)

    with SpreadsheetReader(data) as reader:
        sheet_name, rows = find_sheet_rows(reader, sheet_candidates)
        logger.info("Found %s data in sheet: %s", _kind(record_type), sheet_name)
        records = [record_type(**map_row(row, specs)) for row in rows[header_rows:]]
    return RecordSet(records)


def _kind(record_type: Callable[..., Any]) -> str:
    name = getattr(record_type, "__name__", "record")
    return name.removesuffix("Record").lower() or "record"


def extract_customers(
    source: Source,
    sheet_candidates: Sequence[str] = CUSTOMER_SHEETS,
    header_rows: int = CUSTOMER_HEADER_ROWS,
    column_map: ColumnMapLike = CUSTOMER_COLUMNS,
) -> RecordSet[CustomerRecord]:
    return extract(source, sheet_candidates, header_rows, column_map, CustomerRecord)


def extract_products(
    source: Source,
    sheet_candidates: Sequence[str] = PRODUCT_SHEETS,
    header_rows: int = PRODUCT_HEADER_ROWS,
    column_map: ColumnMapLike = PRODUCT_COLUMNS,
) -> RecordSet[ProductRecord]:
    return extract(source, sheet_candidates, header_rows, column_map, ProductRecord)
