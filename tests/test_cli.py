"""CLI integration tests for sheet-catalog."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

import sheet_catalog.cli as cli_mod
from sheet_catalog.cli import app

runner = CliRunner()


def _render_args(customer_file: Path, product_file: Path, out: Path, *extra: str) -> list[str]:
    return [
        "render",
        "--customers", str(customer_file),
        "--products", str(product_file),
        "--out", str(out),
        *extra,
    ]


def test_render_writes_page(customer_file: Path, product_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "site" / "catalog.html"

    result = runner.invoke(app, _render_args(customer_file, product_file, out, "--quiet"))

    assert result.exit_code == 0, result.output
    html = out.read_text(encoding="utf-8")
    assert "Acme" in html
    assert "Paracetamol" in html


def test_render_nonquiet_shows_progress(
    customer_file: Path, product_file: Path, tmp_path: Path
) -> None:
    out = tmp_path / "catalog.html"

    result = runner.invoke(app, _render_args(customer_file, product_file, out))

    assert result.exit_code == 0, result.output
    assert "2 customers, 2 products" in result.output
    assert "Render Complete" in result.output


def test_render_missing_customer_file_exits_2(product_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "catalog.html"

    result = runner.invoke(
        app, _render_args(tmp_path / "nope.xlsx", product_file, out, "--quiet")
    )

    assert result.exit_code == 2
    assert "not found" in result.output
    assert not out.exists()


def test_render_unknown_sheet_exits_2(
    customer_file: Path, product_file: Path, tmp_path: Path
) -> None:
    out = tmp_path / "catalog.html"

    result = runner.invoke(
        app,
        _render_args(customer_file, product_file, out, "--customer-sheet", "Pelanggan", "-q"),
    )

    assert result.exit_code == 2
    assert "Pelanggan" in result.output


def test_render_custom_sheet_and_header_rows(
    write_workbook: Any, product_file: Path, tmp_path: Path
) -> None:
    customers = write_workbook(
        "custom.xlsx",
        {"Pelanggan": [["title"], ["header"], ["JOG", "C777", "Delta"]]},
    )
    out = tmp_path / "catalog.html"

    result = runner.invoke(
        app,
        _render_args(
            customers, product_file, out,
            "--customer-sheet", "Pelanggan",
            "--customer-header-rows", "2",
            "--quiet",
        ),
    )

    assert result.exit_code == 0, result.output
    assert "C777" in out.read_text(encoding="utf-8")


def test_render_map_moves_columns(write_workbook: Any, product_file: Path, tmp_path: Path) -> None:
    customers = write_workbook(
        "swapped.xlsx", {"Data Base": [["h"], ["Zeta", "C321", "JOG"]]}
    )
    out = tmp_path / "catalog.html"

    result = runner.invoke(
        app,
        _render_args(
            customers, product_file, out,
            "--map", "customer.branch=2",
            "--map", "customer.cust_name=0",
            "--quiet",
        ),
    )

    assert result.exit_code == 0, result.output
    html = out.read_text(encoding="utf-8")
    assert "<td>JOG</td><td>C321</td><td>Zeta</td>" in html


def test_render_profile_file(
    customer_file: Path, product_file: Path, tmp_path: Path
) -> None:
    profile = tmp_path / "layout.map"
    profile.write_text("# swap name and id\ncustomer.cust_id=2\ncustomer.cust_name=1\n")
    out = tmp_path / "catalog.html"

    result = runner.invoke(
        app,
        _render_args(customer_file, product_file, out, "--profile", str(profile), "-q"),
    )

    assert result.exit_code == 0, result.output
    assert 'data-cust-id="Acme"' in out.read_text(encoding="utf-8")


@pytest.mark.parametrize("bad", ["customer.kota", "customer.nope=3", "vendor.kota=1"])
def test_render_bad_map_exits_2(
    customer_file: Path, product_file: Path, tmp_path: Path, bad: str
) -> None:
    out = tmp_path / "catalog.html"

    result = runner.invoke(
        app, _render_args(customer_file, product_file, out, "--map", bad, "-q")
    )

    assert result.exit_code == 2
    assert not out.exists()


def test_render_unexpected_error_exits_1(
    customer_file: Path, product_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _boom(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("kaboom")

    monkeypatch.setattr(cli_mod, "load_catalog", _boom)

    result = runner.invoke(
        app, _render_args(customer_file, product_file, tmp_path / "c.html", "-q")
    )

    assert result.exit_code == 1
    assert "Unexpected internal error: kaboom" in result.output


def test_serve_builds_app_and_runs_uvicorn(
    customer_file: Path, product_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[dict[str, Any]] = []

    def _fake_run(application: Any, **kwargs: Any) -> None:
        calls.append({"app": application, **kwargs})

    monkeypatch.setattr(cli_mod.uvicorn, "run", _fake_run)

    result = runner.invoke(
        app,
        [
            "serve",
            "--customers", str(customer_file),
            "--products", str(product_file),
            "--host", "127.0.0.1",
            "--port", "9090",
        ],
    )

    assert result.exit_code == 0, result.output
    assert len(calls) == 1
    assert calls[0]["host"] == "127.0.0.1"
    assert calls[0]["port"] == 9090
    assert calls[0]["app"].title == "sheet-catalog"


def test_serve_bad_map_exits_before_listening(
    customer_file: Path, product_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli_mod.uvicorn, "run", lambda *a, **k: pytest.fail("should not run"))

    result = runner.invoke(
        app,
        ["serve", "-c", str(customer_file), "-p", str(product_file), "-m", "customer.x=1"],
    )

    assert result.exit_code == 2


def test_version_flag_prints_and_exits() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "sheet-catalog v" in result.output
