"""Catalog settings and column-map overrides."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from sheet_catalog.extract import (
    CUSTOMER_COLUMNS,
    CUSTOMER_HEADER_ROWS,
    CUSTOMER_SHEETS,
    PRODUCT_COLUMNS,
    PRODUCT_HEADER_ROWS,
    PRODUCT_SHEETS,
)
from sheet_catalog.models import ColumnSpec, _to_non_negative_int, _to_string_list

KINDS = ("customer", "product")


def _to_source(value: Any, field_name: str) -> bytes | str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, Path):
        return str(value)
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a path, URL or bytes")
    if not value.strip():
        raise ValueError(f"{field_name} must not be empty")
    return value


@dataclass
class CatalogSettings:
    """Where the catalogs live and how to read them."""

    customer_source: bytes | str
    product_source: bytes | str
    customer_sheets: list[str] = field(default_factory=lambda: list(CUSTOMER_SHEETS))
    product_sheets: list[str] = field(default_factory=lambda: list(PRODUCT_SHEETS))
    customer_header_rows: int = CUSTOMER_HEADER_ROWS
    product_header_rows: int = PRODUCT_HEADER_ROWS
    customer_columns: list[ColumnSpec] = field(default_factory=lambda: list(CUSTOMER_COLUMNS))
    product_columns: list[ColumnSpec] = field(default_factory=lambda: list(PRODUCT_COLUMNS))
    timeout: float = 30.0

    def __post_init__(self) -> None:
        self.customer_source = _to_source(self.customer_source, "customer_source")
        self.product_source = _to_source(self.product_source, "product_source")
        self.customer_sheets = _to_string_list(self.customer_sheets, "customer_sheets")
        self.product_sheets = _to_string_list(self.product_sheets, "product_sheets")
        if not self.customer_sheets:
            raise ValueError("customer_sheets must name at least one sheet")
        if not self.product_sheets:
            raise ValueError("product_sheets must name at least one sheet")
        self.customer_header_rows = _to_non_negative_int(
            self.customer_header_rows, "customer_header_rows"
        )
        self.product_header_rows = _to_non_negative_int(
            self.product_header_rows, "product_header_rows"
        )
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise TypeError("timeout must be a number")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")


# ── Column overrides ─────────────────────────────────────────────


def load_profile_map(profile: Path | None) -> list[str]:
    """Return the ``kind.field=index`` lines of a profile file."""
    if not profile:
        return []
    if not profile.exists():
        raise ValueError(f"Profile not found: {profile} (expected lines like customer.kota=4)")
    if profile.is_dir():
        raise ValueError(f"Profile is a directory, not a file: {profile}")
    try:
        text = profile.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read profile {profile}: {exc}") from exc

    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        lines.append(stripped)
    return lines


def parse_column_overrides(raw: Sequence[str] | None) -> dict[str, dict[str, int]]:
    """Parse ``kind.field=index`` pairs into ``{kind: {field: index}}``.

    Later entries win.
    """
    overrides: dict[str, dict[str, int]] = {}
    if not raw:
        return overrides
    for item in raw:
        if "=" not in item:
            raise ValueError(f"Invalid --map value: {item!r}  (expected kind.field=index)")
        target, index_text = (part.strip() for part in item.split("=", 1))
        kind, dot, field_name = target.partition(".")
        kind = kind.strip().lower()
        field_name = field_name.strip()
        if not dot or kind not in KINDS or not field_name:
            raise ValueError(
                f"Invalid --map target: {target!r}  (expected customer.<field> or product.<field>)"
            )
        try:
            index = int(index_text)
        except ValueError:
            raise ValueError(f"Invalid column index in --map {item!r}") from None
        if index < 0:
            raise ValueError(f"Column index must be >= 0 in --map {item!r}")
        overrides.setdefault(kind, {})[field_name] = index
    return overrides


def apply_column_overrides(
    columns: Sequence[ColumnSpec], overrides: dict[str, int]
) -> list[ColumnSpec]:
    """Return *columns* with the indices in *overrides* replaced."""
    known = {spec.field for spec in columns}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(
            f"Unknown column field(s): {', '.join(unknown)}. Known: {', '.join(sorted(known))}"
        )
    return [
        replace(spec, index=overrides[spec.field]) if spec.field in overrides else spec
        for spec in columns
    ]


def build_settings(
    customer_source: bytes | str | Path,
    product_source: bytes | str | Path,
    *,
    customer_sheets: Sequence[str] | None = None,
    product_sheets: Sequence[str] | None = None,
    customer_header_rows: int = CUSTOMER_HEADER_ROWS,
    product_header_rows: int = PRODUCT_HEADER_ROWS,
    column_map: Sequence[str] | None = None,
    timeout: float = 30.0,
) -> CatalogSettings:
    """Assemble :class:`CatalogSettings` from launcher options."""
    overrides = parse_column_overrides(column_map)
    return CatalogSettings(
        customer_source=customer_source,  # type: ignore[arg-type]
        product_source=product_source,  # type: ignore[arg-type]
        customer_sheets=list(customer_sheets) if customer_sheets else list(CUSTOMER_SHEETS),
        product_sheets=list(product_sheets) if product_sheets else list(PRODUCT_SHEETS),
        customer_header_rows=customer_header_rows,
        product_header_rows=product_header_rows,
        customer_columns=apply_column_overrides(
            CUSTOMER_COLUMNS, overrides.get("customer", {})
        ),
        product_columns=apply_column_overrides(PRODUCT_COLUMNS, overrides.get("product", {})),
        timeout=timeout,
    )
