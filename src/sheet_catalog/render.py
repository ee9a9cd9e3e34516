"""HTML page rendering over Jinja2 templates."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sheet_catalog.io import write_text
from sheet_catalog.models import CatalogPage

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
PAGE_TEMPLATE = "index.html"


class PageRenderer:
    def __init__(self, template_dir: Path | None = None):
        self.template_dir = Path(template_dir) if template_dir else TEMPLATE_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, page: CatalogPage) -> str:
        """Render the catalog page to an HTML string."""
        template = self.env.get_template(PAGE_TEMPLATE)
        return template.render(
            page=page,
            customer=list(page.customers),
            product=list(page.products),
            time=page.generated_at_text,
        )

    def write_page(self, path: Path, page: CatalogPage) -> Path:
        """Render *page* and write it to *path* atomically."""
        return write_text(path, self.render(page))
