"""Data models used across the package."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime
from numbers import Integral
from typing import Any, Generic, TypeVar, overload

TIME_FMT = "%Y-%m-%d %H:%M:%S"


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_string_list(values: Sequence[Any] | None, field_name: str) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        raise TypeError(f"{field_name} must be a sequence of strings")
    normalized: list[str] = []
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} items must be strings")
        normalized.append(item)
    return normalized


# ── Records ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class CustomerRecord:
    """One customer row. Values are kept verbatim as text."""

    branch: str
    cust_id: str
    cust_name: str
    alamat: str
    kota: str
    sales_name: str
    channel: str
    avg_2023: str
    avg_2024: str
    avg_2025: str
    max: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class ProductRecord:
    """One price-list row. ``ppn`` is ``""`` when the sheet has no PPN column."""

    code: str
    name_product: str
    hna: str
    ppn: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


R = TypeVar("R")


class RecordSet(Generic[R]):
    """Immutable, ordered collection of records in spreadsheet row order."""

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[R] = ()) -> None:
        self._records: tuple[R, ...] = tuple(records)

    def __iter__(self) -> Iterator[R]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @overload
    def __getitem__(self, index: int) -> R: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[R, ...]: ...

    def __getitem__(self, index: int | slice) -> R | tuple[R, ...]:
        return self._records[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordSet):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"RecordSet({list(self._records)!r})"

    def find_by_customer_id(self, cust_id: str) -> R | None:
        """Return the first record whose ``cust_id`` equals *cust_id*, else ``None``."""
        for record in self._records:
            if getattr(record, "cust_id", None) == cust_id:
                return record
        return None


# ── Column maps ──────────────────────────────────────────────────


@dataclass(frozen=True)
class ColumnSpec:
    """Maps one record field to a 0-based spreadsheet column.

    An *optional* column that is absent from a row yields ``""`` rather than
    the sentinel. Rows arrive with trailing empty cells trimmed, so an empty
    optional cell at the end of a row counts as absent.
    """

    field: str
    index: int
    optional: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or not self.field:
            raise TypeError("field must be a non-empty string")
        object.__setattr__(self, "index", _to_non_negative_int(self.index, "index"))


# ── Page ─────────────────────────────────────────────────────────


@dataclass
class CatalogPage:
    """Everything the page template needs for one render."""

    customers: RecordSet[CustomerRecord] = field(default_factory=RecordSet)
    products: RecordSet[ProductRecord] = field(default_factory=RecordSet)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def generated_at_text(self) -> str:
        return self.generated_at.strftime(TIME_FMT)

    def find_by_customer_id(self, cust_id: str) -> CustomerRecord | None:
        return self.customers.find_by_customer_id(cust_id)
