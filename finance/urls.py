# finance/urls.py
# ✅ URL routes for the Finance app.

from django.urls import path                   # 🔗 path() maps URL patterns to views
from . import views                            # 📦 import our class-based views from finance/views.py

# 🏷️ Namespace for reverse() and {% url %} lookups: use 'finance:route_name'
app_name = "finance"

urlpatterns = [
    # ───────────── Dashboard ─────────────
    path("", views.DashboardView.as_view(), name="dashboard"),

    # ───────────── Bank accounts (CRUD) ─────────────
    path("bank-accounts/", views.BankAccountListView.as_view(), name="bankaccount_list"),
    path("bank-accounts/add/", views.BankAccountCreateView.as_view(), name="bankaccount_create"),
    path("bank-accounts/<str:pk>/edit/", views.BankAccountUpdateView.as_view(), name="bankaccount_update"),
    path("bank-accounts/<str:pk>/delete/", views.BankAccountDeleteView.as_view(), name="bankaccount_delete"),

    # ───────────── Bills (CRUD + actions) ─────────────
    path("bills/", views.BillListView.as_view(), name="bill_list"),
    path("bills/add/", views.BillCreateView.as_view(), name="bill_create"),
    path("bills/bulk-edit/", views.BillBulkEditView.as_view(), name="bill_bulk_edit"),
    path("bills/bulk-delete/", views.BillBulkDeleteView.as_view(), name="bill_bulk_delete"),
    path("bills/<str:pk>/edit/", views.BillUpdateView.as_view(), name="bill_update"),
    path("bills/<str:pk>/delete/", views.BillDeleteView.as_view(), name="bill_delete"),
    path("bills/<str:pk>/pay/", views.BillPayView.as_view(), name="bill_pay"),            # ✅ mark paid
    path("bills/<str:pk>/unpay/", views.BillUnpayView.as_view(), name="bill_unpay"),      # ↩ back to unpaid

    # ───────────── Expenses (CRUD) ─────────────
    path("expenses/", views.ExpenseListView.as_view(), name="expense_list"),
    path("expenses/add/", views.ExpenseCreateView.as_view(), name="expense_create"),
    path("expenses/<str:pk>/edit/", views.ExpenseUpdateView.as_view(), name="expense_update"),
    path("expenses/<str:pk>/delete/", views.ExpenseDeleteView.as_view(), name="expense_delete"),

    # ───────────── Incomes (CRUD) ─────────────
    path("incomes/", views.IncomeListView.as_view(), name="income_list"),
    path("incomes/add/", views.IncomeCreateView.as_view(), name="income_create"),
    path("incomes/<str:pk>/edit/", views.IncomeUpdateView.as_view(), name="income_update"),
    path("incomes/<str:pk>/delete/", views.IncomeDeleteView.as_view(), name="income_delete"),

    # ───────────── Goals & achievements ─────────────
    path("goals/", views.GoalListView.as_view(), name="goal_list"),
    path("goals/add/", views.GoalCreateView.as_view(), name="goal_create"),
    path("goals/<str:pk>/edit/", views.GoalUpdateView.as_view(), name="goal_update"),
    path("goals/<str:pk>/delete/", views.GoalDeleteView.as_view(), name="goal_delete"),
    path("goals/<str:pk>/contribute/", views.GoalContributeView.as_view(), name="goal_contribute"),
    path("achievements/", views.AchievementsView.as_view(), name="achievements"),

    # ───────────── Monthly breakdown (+ CSV / PDF export) ─────────────
    path("monthly/", views.MonthlyBreakdownView.as_view(), name="monthly_breakdown"),
    path("monthly/export.csv", views.MonthlyCsvExportView.as_view(), name="monthly_export_csv"),
    path("monthly/export.pdf", views.MonthlyPdfExportView.as_view(), name="monthly_export_pdf"),
]
