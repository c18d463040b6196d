# finance/exports.py
# ─────────────────────────────────────────────────────────────────────────────
# 📥 Monthly breakdown exports.
#   • CSV: one row per expense and bill (Section, Date, Description, Category,
#     Amount, Status)
#   • PDF: title, summary lines and the same table, split over as many pages
#     as needed (matplotlib Figure objects, no pyplot state and no display)
# ─────────────────────────────────────────────────────────────────────────────

import csv
from io import BytesIO, StringIO

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

EXPORT_COLUMNS = ["Section", "Date", "Description", "Category", "Amount", "Status"]
ROWS_PER_PAGE = 28                                              # table rows on one A4 page
A4_PORTRAIT = (8.27, 11.69)


def export_rows(monthly_expenses, monthly_bills, today=None):
    """Flatten the month's expenses and bills into table rows (strings)."""
    rows = []
    for expense in monthly_expenses.expenses:
        rows.append([
            "Expense",
            expense.date.strftime("%Y-%m-%d"),
            (expense.description or "").replace("\n", " ").strip(),
            expense.category,
            f"{expense.amount:.2f}",
            "",
        ])
    for bill in monthly_bills.bills:
        rows.append([
            "Bill",
            bill.due_date.strftime("%Y-%m-%d"),
            bill.name,
            bill.category,
            f"{bill.amount:.2f}",
            bill.status(today),
        ])
    return rows


def summary_lines(monthly_expenses, monthly_bills, currency):
    expenses, bills = monthly_expenses.summary, monthly_bills.summary
    return [
        f"Total expenses: {currency} {expenses.total_amount:,.2f} ({expenses.total_count} transactions)",
        f"Total bills: {currency} {bills.total_amount:,.2f} ({bills.total_count} bills)",
        f"Paid bills: {currency} {bills.paid_amount:,.2f} ({bills.paid_count} paid)",
        f"Unpaid bills: {currency} {bills.unpaid_amount:,.2f} ({bills.unpaid_count} pending)",
    ]


def render_csv(rows):
    """Return the CSV text for the export rows (header first)."""
    buffer = StringIO()                                         # 🧰 in-memory text buffer
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    writer.writerows(rows)
    return buffer.getvalue()


def _chunks(rows, size):
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def render_pdf(title, summary, rows):
    """
    Build the PDF report and return its bytes.
    The first page carries the title and summary; every page repeats the
    table header. An empty month still yields one page.
    """
    pages = list(_chunks(rows, ROWS_PER_PAGE)) or [[]]
    buffer = BytesIO()

    with PdfPages(buffer) as pdf:
        for number, page_rows in enumerate(pages, start=1):
            fig = Figure(figsize=A4_PORTRAIT)
            top = 0.95
            if number == 1:
                fig.text(0.07, top, title, fontsize=16, fontweight="bold")
                for offset, line in enumerate(summary, start=1):
                    fig.text(0.07, top - 0.03 * offset - 0.01, line, fontsize=10)
                top -= 0.03 * (len(summary) + 2)

            ax = fig.add_axes([0.05, 0.05, 0.9, top - 0.07])
            ax.axis("off")
            if page_rows:
                table = ax.table(cellText=page_rows, colLabels=EXPORT_COLUMNS, loc="upper center",
                                 cellLoc="left", colWidths=[0.11, 0.13, 0.32, 0.2, 0.12, 0.12])
                table.auto_set_font_size(False)
                table.set_fontsize(8)
                table.scale(1, 1.3)
            else:
                ax.text(0.5, 0.9, "No expenses or bills this month.", ha="center", fontsize=10)

            fig.text(0.5, 0.02, f"Page {number} of {len(pages)}", ha="center", fontsize=8, color="#64748b")
            pdf.savefig(fig)

    return buffer.getvalue()


def export_filename(year, month, extension):
    return f"smartspend_{year}_{month:02d}.{extension}"
