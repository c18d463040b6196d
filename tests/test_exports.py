# tests/test_exports.py

import csv
from datetime import date
from io import StringIO
from unittest import mock

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

from finance.exports import (
    EXPORT_COLUMNS,
    ROWS_PER_PAGE,
    export_filename,
    export_rows,
    render_csv,
    render_pdf,
    summary_lines,
)
from finance.models import MonthlyBills, MonthlyExpenses


def _month():
    expenses = MonthlyExpenses.model_validate({
        "expenses": [
            {"_id": "e1", "amount": 12.5, "category": "Groceries", "date": "2025-03-04T00:00:00.000Z",
             "description": "Milk,\nbread"},
        ],
        "summary": {"totalAmount": 12.5, "totalCount": 1, "averageAmount": 12.5,
                    "categoryBreakdown": [{"category": "Groceries", "total": 12.5, "count": 1}]},
    })
    bills = MonthlyBills.model_validate({
        "bills": [
            {"_id": "b1", "name": "Rent", "amount": 900, "category": "Rent / Mortgage",
             "dueDate": "2025-03-01", "isPaid": True},
            {"_id": "b2", "name": "Water", "amount": 30, "category": "Water", "dueDate": "2025-03-05"},
            {"_id": "b3", "name": "Internet", "amount": 45, "category": "Internet", "dueDate": "2025-03-20"},
        ],
        "summary": {"totalAmount": 975, "paidAmount": 900, "unpaidAmount": 75,
                    "totalCount": 3, "paidCount": 1, "unpaidCount": 2},
    })
    return expenses, bills


def test_export_rows():
    expenses, bills = _month()
    rows = export_rows(expenses, bills, today=date(2025, 3, 10))
    assert rows == [
        ["Expense", "2025-03-04", "Milk, bread", "Groceries", "12.50", ""],
        ["Bill", "2025-03-01", "Rent", "Rent / Mortgage", "900.00", "Paid"],
        ["Bill", "2025-03-05", "Water", "Water", "30.00", "Overdue"],
        ["Bill", "2025-03-20", "Internet", "Internet", "45.00", "Pending"],
    ]


def test_render_csv_has_header_and_quotes_commas():
    expenses, bills = _month()
    text = render_csv(export_rows(expenses, bills, today=date(2025, 3, 10)))
    parsed = list(csv.reader(StringIO(text)))
    assert parsed[0] == EXPORT_COLUMNS
    assert parsed[1][2] == "Milk, bread"
    assert len(parsed) == 5


def test_summary_lines_use_currency():
    expenses, bills = _month()
    lines = summary_lines(expenses, bills, "EUR")
    assert lines[0] == "Total expenses: EUR 12.50 (1 transactions)"
    assert lines[3] == "Unpaid bills: EUR 75.00 (2 pending)"


def test_render_pdf_paginates():
    rows = [["Expense", "2025-03-01", f"Item {n}", "Groceries", "1.00", ""] for n in range(ROWS_PER_PAGE + 1)]
    original = PdfPages.savefig
    with mock.patch.object(PdfPages, "savefig", autospec=True, side_effect=original) as savefig:
        pdf = render_pdf("March 2025", ["Total"], rows)
    assert pdf.startswith(b"%PDF")
    assert savefig.call_count == 2


def test_render_pdf_draws_standalone_figures():
    original = PdfPages.savefig
    with mock.patch.object(PdfPages, "savefig", autospec=True, side_effect=original) as savefig:
        render_pdf("March 2025", ["Total"], [["Bill", "2025-03-01", "Rent", "Rent / Mortgage", "900.00", "Paid"]])
    fig = savefig.call_args.args[1]
    assert isinstance(fig, Figure)
    assert fig.canvas.manager is None                           # never registered with pyplot


def test_render_pdf_for_an_empty_month():
    original = PdfPages.savefig
    with mock.patch.object(PdfPages, "savefig", autospec=True, side_effect=original) as savefig:
        pdf = render_pdf("March 2025", [], [])
    assert pdf.startswith(b"%PDF")
    assert savefig.call_count == 1


def test_export_filename():
    assert export_filename(2025, 3, "csv") == "smartspend_2025_03.csv"
