import io
import zipfile
from datetime import date
from decimal import Decimal

import pytest

from factories import fake_account, fake_record
from services import exports, reports


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("1234.5"), "Q 1,234.50"),
        ("0", "Q 0.00"),
        (None, "Q 0.00"),
        (-50, "-Q 50.00"),
        ("1000000", "Q 1,000,000.00"),
    ],
)
def test_format_currency(value, expected) -> None:
    assert exports.format_currency(value) == expected


def test_flags_and_dates() -> None:
    assert exports.format_flag(True) == "SÍ"
    assert exports.format_flag(False) == "NO"
    assert exports.format_date(date(2024, 3, 5)) == "05/03/2024"
    assert exports.period_label(date(2024, 3, 1), date(2024, 3, 31)) == "Del 01/03/2024 al 31/03/2024"
    assert exports.period_label(None, None) == "Todas las fechas"


def test_export_filename() -> None:
    name = exports.export_filename("reporte-detalle", "xlsx", date(2024, 3, 1), date(2024, 3, 31))
    assert name == "reporte-detalle_2024-03-01_2024-03-31.xlsx"
    assert exports.export_filename("resumen-sucursal", "pdf") == "resumen-sucursal.pdf"


def _records():
    special = fake_account(2, is_special=True)
    return [
        fake_record(date(2024, 3, 1), 1, "Centro", special, monto_depositado=100, total_sistema=300),
        fake_record(date(2024, 3, 1), 2, "Norte", None, monto_depositado=50, total_sistema=40),
    ]


def _sheet_names(buffer: io.BytesIO) -> str:
    with zipfile.ZipFile(buffer) as zf:
        return zf.read("xl/workbook.xml").decode("utf-8")


def test_xlsx_single_sheet() -> None:
    buffer = exports.report_to_xlsx(reports.detail_report(_records()))
    data = buffer.getvalue()
    assert data[:2] == b"PK"
    assert 'name="Detalle por Turno"' in _sheet_names(io.BytesIO(data))


def test_xlsx_multiple_sheets() -> None:
    records = _records()
    buffer = exports.build_workbook([reports.branch_summary_report(records), reports.branch_daily_summary_report(records)])
    workbook = _sheet_names(buffer)
    assert 'name="Resumen Global"' in workbook
    assert 'name="Resumen Global Diario"' in workbook


def test_xlsx_without_reports_is_still_valid() -> None:
    assert 'name="Reporte"' in _sheet_names(exports.build_workbook([]))


def test_pdf_output() -> None:
    report = reports.branch_pdf_report(_records())
    buffer = exports.report_to_pdf(report, date(2024, 3, 1), date(2024, 3, 31))
    assert buffer.getvalue().startswith(b"%PDF")
