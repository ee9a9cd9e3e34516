from sheet_catalog.cli import app

app()
