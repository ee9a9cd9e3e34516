"""HTTP surface: serves the rendered catalog page."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse
from jinja2 import TemplateError

from sheet_catalog import __version__
from sheet_catalog.catalog import fetch_sources, load_customers, load_products
from sheet_catalog.config import CatalogSettings
from sheet_catalog.errors import CatalogError
from sheet_catalog.fetch import RemoteFetcher
from sheet_catalog.models import CatalogPage
from sheet_catalog.render import PageRenderer

logger = logging.getLogger(__name__)


def _server_error(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=500)


def create_app(
    settings: CatalogSettings,
    fetcher: RemoteFetcher | None = None,
    renderer: PageRenderer | None = None,
) -> FastAPI:
    """Build the FastAPI application for *settings*.

    Every request re-reads the workbooks; nothing is cached between requests.
    """
    fetcher = fetcher or RemoteFetcher(timeout=settings.timeout)
    renderer = renderer or PageRenderer()

    app = FastAPI(title="sheet-catalog", version=__version__)

    @app.get("/", response_class=HTMLResponse)
    def index():
        try:
            fetched = fetch_sources(settings, fetcher)
        except CatalogError as exc:
            logger.error("Error downloading catalog data: %s", exc)
            return _server_error("Error downloading catalog data")

        try:
            customers = load_customers(settings, fetched)
        except CatalogError as exc:
            logger.error("Error reading customer data: %s", exc)
            return _server_error("Error reading customer data")

        try:
            products = load_products(settings, fetched)
        except CatalogError as exc:
            logger.error("Error reading product data: %s", exc)
            return _server_error("Error reading product data")

        page = CatalogPage(customers=customers, products=products, generated_at=datetime.now())
        try:
            html = renderer.render(page)
        except TemplateError as exc:
            logger.error("Error rendering page: %s", exc)
            return _server_error("Error rendering page")
        return HTMLResponse(html)

    @app.get("/customers/{cust_id}")
    def customer_detail(cust_id: str):
        try:
            fetched = fetch_sources(settings, fetcher, products=False)
            customers = load_customers(settings, fetched)
        except CatalogError as exc:
            logger.error("Error reading customer data: %s", exc)
            return _server_error("Error reading customer data")

        record = customers.find_by_customer_id(cust_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"Customer {cust_id!r} not found")
        return record.to_dict()

    return app
