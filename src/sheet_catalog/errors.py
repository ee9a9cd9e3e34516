"""Error taxonomy for catalog extraction and its collaborators."""

from __future__ import annotations

from collections.abc import Sequence


class CatalogError(Exception):
    """Base exception for sheet-catalog errors."""


class PathResolutionError(CatalogError):
    """The source path cannot be made absolute or is not a readable file."""


class OpenError(CatalogError):
    """The spreadsheet container is malformed or unreadable."""


class SheetNotFound(CatalogError):
    """None of the candidate sheet names exist in the workbook."""

    def __init__(self, attempted: Sequence[str]) -> None:
        self.attempted = list(attempted)
        names = ", ".join(repr(name) for name in self.attempted) or "(none)"
        super().__init__(f"No matching sheet found; tried: {names}")


class RowReadError(CatalogError):
    """The reader failed while iterating a sheet's rows."""


class FetchError(CatalogError):
    """A remote spreadsheet could not be downloaded."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)
