"""sheet-catalog: browse spreadsheet customer and product catalogs as HTML."""

__version__ = "0.1.0"

SENTINEL: str = " "
"""Stand-in for an empty or missing cell."""
