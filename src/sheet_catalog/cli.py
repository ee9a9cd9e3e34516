"""CLI entry point for sheet-catalog."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from sheet_catalog import __version__
from sheet_catalog.catalog import load_catalog
from sheet_catalog.config import CatalogSettings, build_settings, load_profile_map
from sheet_catalog.errors import CatalogError
from sheet_catalog.extract import CUSTOMER_HEADER_ROWS, PRODUCT_HEADER_ROWS
from sheet_catalog.render import PageRenderer
from sheet_catalog.web import create_app

app = typer.Typer(
    name="scatalog",
    help="sheet-catalog: browse spreadsheet customer and product catalogs as HTML.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {msg}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sheet-catalog v{__version__}")
        raise typer.Exit()


def _configure_logging(quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _settings_or_exit(
    *,
    customers: str,
    products: str,
    customer_sheet: list[str] | None,
    product_sheet: list[str] | None,
    customer_header_rows: int,
    product_header_rows: int,
    col_map: list[str] | None,
    profile: Path | None,
    timeout: float,
) -> CatalogSettings:
    try:
        return build_settings(
            customers,
            products,
            customer_sheets=customer_sheet,
            product_sheets=product_sheet,
            customer_header_rows=customer_header_rows,
            product_header_rows=product_header_rows,
            column_map=load_profile_map(profile) + (col_map or []),
            timeout=timeout,
        )
    except (ValueError, TypeError) as exc:
        _err(str(exc))
        raise typer.Exit(code=2)


# ── Shared options ───────────────────────────────────────────────

CUSTOMERS_OPT = typer.Option(
    ..., "--customers", "-c",
    help="Customer workbook: local .xlsx path or http(s) URL.",
)
PRODUCTS_OPT = typer.Option(
    ..., "--products", "-p",
    help="Product price-list workbook: local .xlsx path or http(s) URL.",
)
CUSTOMER_SHEET_OPT = typer.Option(
    None, "--customer-sheet",
    help="Candidate customer sheet name, tried in order (repeatable).",
)
PRODUCT_SHEET_OPT = typer.Option(
    None, "--product-sheet",
    help="Candidate product sheet name, tried in order (repeatable).",
)
CUSTOMER_HEADER_OPT = typer.Option(
    CUSTOMER_HEADER_ROWS, "--customer-header-rows", min=0,
    help="Leading rows to skip on the customer sheet.",
)
PRODUCT_HEADER_OPT = typer.Option(
    PRODUCT_HEADER_ROWS, "--product-header-rows", min=0,
    help="Leading rows to skip on the product sheet.",
)
MAP_OPT = typer.Option(
    None, "--map", "-m",
    help="Column override: kind.field=index. E.g. --map customer.kota=5 --map product.ppn=4",
)
PROFILE_OPT = typer.Option(
    None, "--profile",
    help="Profile file containing column overrides (kind.field=index lines).",
)
TIMEOUT_OPT = typer.Option(
    30.0, "--timeout",
    help="Download timeout in seconds for remote workbooks.",
)


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """sheet-catalog CLI."""


# ── render command ───────────────────────────────────────────────


@app.command()
def render(
    customers: str = CUSTOMERS_OPT,
    products: str = PRODUCTS_OPT,
    out: Path = typer.Option(
        Path("catalog.html"), "--out", "-o",
        help="Where to write the rendered HTML page.",
    ),
    customer_sheet: list[str] | None = CUSTOMER_SHEET_OPT,
    product_sheet: list[str] | None = PRODUCT_SHEET_OPT,
    customer_header_rows: int = CUSTOMER_HEADER_OPT,
    product_header_rows: int = PRODUCT_HEADER_OPT,
    col_map: list[str] | None = MAP_OPT,
    profile: Path | None = PROFILE_OPT,
    timeout: float = TIMEOUT_OPT,
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output.",
    ),
) -> None:
    """Extract both catalogs and write the HTML page to a file."""
    _configure_logging(quiet)
    echo = _printer(quiet)
    settings = _settings_or_exit(
        customers=customers,
        products=products,
        customer_sheet=customer_sheet,
        product_sheet=product_sheet,
        customer_header_rows=customer_header_rows,
        product_header_rows=product_header_rows,
        col_map=col_map,
        profile=profile,
        timeout=timeout,
    )

    if not quiet:
        console.print(Panel(
            f"[bold]sheet-catalog[/bold] v{__version__}\n"
            f"Customers: {customers}\nProducts:  {products}",
            title="Render", border_style="blue",
        ))

    echo("[blue]>[/blue] Reading workbooks …")
    try:
        page = load_catalog(settings)
    except CatalogError as exc:
        _err(str(exc))
        raise typer.Exit(code=2)
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)

    echo(f"  {len(page.customers)} customers, {len(page.products)} products")

    echo("[blue]>[/blue] Writing page …")
    try:
        out_path = PageRenderer().write_page(out, page)
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)

    if not quiet:
        console.print(Panel(
            f"[green]Done[/green] page -> {out_path}",
            title="Render Complete", border_style="green",
        ))


# ── serve command ────────────────────────────────────────────────


@app.command()
def serve(
    customers: str = CUSTOMERS_OPT,
    products: str = PRODUCTS_OPT,
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind."),
    port: int = typer.Option(8080, "--port", help="Port to listen on."),
    customer_sheet: list[str] | None = CUSTOMER_SHEET_OPT,
    product_sheet: list[str] | None = PRODUCT_SHEET_OPT,
    customer_header_rows: int = CUSTOMER_HEADER_OPT,
    product_header_rows: int = PRODUCT_HEADER_OPT,
    col_map: list[str] | None = MAP_OPT,
    profile: Path | None = PROFILE_OPT,
    timeout: float = TIMEOUT_OPT,
) -> None:
    """Serve the catalog page over HTTP; workbooks are re-read per request."""
    _configure_logging(quiet=False)
    settings = _settings_or_exit(
        customers=customers,
        products=products,
        customer_sheet=customer_sheet,
        product_sheet=product_sheet,
        customer_header_rows=customer_header_rows,
        product_header_rows=product_header_rows,
        col_map=col_map,
        profile=profile,
        timeout=timeout,
    )
    console.print(Panel(
        f"[bold]sheet-catalog[/bold] v{__version__}\n"
        f"Listening on http://{host}:{port}/",
        title="Serve", border_style="blue",
    ))
    uvicorn.run(create_app(settings), host=host, port=port)
