"""Catalog assembly: resolve sources, extract both sheets, build the page."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from sheet_catalog.config import CatalogSettings
from sheet_catalog.extract import extract
from sheet_catalog.fetch import RemoteFetcher
from sheet_catalog.io import is_remote
from sheet_catalog.models import CatalogPage, CustomerRecord, ProductRecord, RecordSet

Fetched = Mapping[str, bytes]


def fetch_sources(
    settings: CatalogSettings,
    fetcher: RemoteFetcher | None = None,
    *,
    products: bool = True,
) -> Fetched:
    """Download each distinct remote source once, keyed by URL.

    When customers and products share a URL both extractions get the same
    immutable bytes and each opens its own reader over them. With *products*
    false only the customer source is fetched.
    """
    fetcher = fetcher or RemoteFetcher(timeout=settings.timeout)
    fetched: dict[str, bytes] = {}
    sources = [settings.customer_source]
    if products:
        sources.append(settings.product_source)
    for source in sources:
        if isinstance(source, str) and is_remote(source) and source not in fetched:
            fetched[source] = fetcher.fetch(source)
    return fetched


def _resolved(source: bytes | str, fetched: Fetched) -> bytes | str:
    if isinstance(source, str):
        return fetched.get(source, source)
    return source


def load_customers(settings: CatalogSettings, fetched: Fetched) -> RecordSet[CustomerRecord]:
    return extract(
        _resolved(settings.customer_source, fetched),
        settings.customer_sheets,
        settings.customer_header_rows,
        settings.customer_columns,
        CustomerRecord,
    )


def load_products(settings: CatalogSettings, fetched: Fetched) -> RecordSet[ProductRecord]:
    return extract(
        _resolved(settings.product_source, fetched),
        settings.product_sheets,
        settings.product_header_rows,
        settings.product_columns,
        ProductRecord,
    )


def load_catalog(
    settings: CatalogSettings,
    fetcher: RemoteFetcher | None = None,
    now: datetime | None = None,
) -> CatalogPage:
    """Extract customers and products as configured and return the page data.

    Any error from fetching or extraction propagates; there are no partial
    pages.
    """
    fetched = fetch_sources(settings, fetcher)
    return CatalogPage(
        customers=load_customers(settings, fetched),
        products=load_products(settings, fetched),
        generated_at=now or datetime.now(),
    )
