from __future__ import annotations

from collections.abc import Callable, Sequence
from io import BytesIO
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

Sheets = dict[str, Sequence[Sequence[Any]]]

CUSTOMER_HEADER = [
    "Branch", "Cust ID", "Cust Name", "Alamat", "Kota", "Sales",
    "Channel", "Avg 2023", "Avg 2024", "Avg 2025", "Max",
]
CUSTOMER_ROWS = [
    ["JOG", "C001", "Acme", "Jl. X", "Jogja", "Budi", "GT", "10", "12", "", "15"],
    ["PWK", "C002", "Beta", "Jl. Y", "Purwokerto", "Sari", "MT", "20", "22", "24", "30"],
]
PRODUCT_TITLE = [["DAFTAR HARGA"], ["Periode 2025"], ["KODE APL", "PRODUK", "HNA", "PPN"]]
PRODUCT_ROWS = [
    ["APL001", "Paracetamol", "15000"],
    ["APL002", "Amoxicillin", "22000", "11%"],
]


def workbook_bytes(sheets: Sheets) -> bytes:
    """Build an .xlsx in memory with one worksheet per entry, in order."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(list(row))
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def make_workbook() -> Callable[[Sheets], bytes]:
    return workbook_bytes


@pytest.fixture
def write_workbook(tmp_path: Path) -> Callable[[str, Sheets], Path]:
    def _write(name: str, sheets: Sheets) -> Path:
        path = tmp_path / name
        path.write_bytes(workbook_bytes(sheets))
        return path

    return _write


@pytest.fixture
def customer_file(write_workbook: Callable[[str, Sheets], Path]) -> Path:
    return write_workbook("jogja.xlsx", {"Data Base": [CUSTOMER_HEADER, *CUSTOMER_ROWS]})


@pytest.fixture
def product_file(write_workbook: Callable[[str, Sheets], Path]) -> Path:
    return write_workbook("harga_jogja.xlsx", {"APL": [*PRODUCT_TITLE, *PRODUCT_ROWS]})


class FakeFetcher:
    """Stand-in for RemoteFetcher that serves canned bytes per URL."""

    def __init__(self, responses: dict[str, bytes | Exception]) -> None:
        self.responses = responses
        self.calls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result
