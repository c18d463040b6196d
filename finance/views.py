# finance/views.py
# ─────────────────────────────────────────────────────────────────────────────
# ✅ All views for the Finance app live here.
#    This file includes:
#      • Helpers (month selection + navigation, API error → message)
#      • Dashboard (greeting, yearly total, upcoming bills, charts, financial health)
#      • Bank account, bill, expense and income views: list/create/update/delete
#      • Bill actions: pay, mark unpaid, bulk edit, bulk delete
#      • Goals (search/filter/sort/paginate) + contributions, achievements
#      • Monthly breakdown (+ CSV / PDF export)
#    Data comes from the SmartSpend API (finance/api.py); nothing is stored here.
# ─────────────────────────────────────────────────────────────────────────────

# ===== Standard library imports =============================================
import logging
from datetime import MAXYEAR, MINYEAR, date                # 🗓️ work with dates + ranges

# ===== Django imports ========================================================
from django.contrib import messages                        # 🔔 flash messages for user feedback
from django.http import Http404, HttpResponse              # 🌐 return CSV/PDF downloads
from django.shortcuts import redirect                      # 🔀 redirects after post actions
from django.urls import reverse, reverse_lazy              # 🔗 build URLs safely
from django.utils import timezone
from django.views import View                              # 🧱 base class for simple custom views
from django.views.generic import FormView, ListView, TemplateView

# ===== Local app imports =====================================================
from accounts.models import DEFAULT_CURRENCY
from accounts.session import LoginRequiredMixin, current_user
from smartspend.exceptions import ApiAuthenticationError, ApiConflictError, ApiError

from . import api
from .exports import export_filename, export_rows, render_csv, render_pdf, summary_lines
from .forms import (
    BankAccountForm,
    BillBulkEditForm,
    BillFilterForm,
    BillForm,
    BillPayForm,
    BillSelectionForm,
    ContributionForm,
    ExpenseForm,
    GoalFilterForm,
    GoalForm,
    IncomeForm,
    TransactionFilterForm,
)
from .goals import filter_goals, sort_goals
from .models import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    MonthlyBills,
    MonthlyExpenses,
    group_achievements,
)

logger = logging.getLogger(__name__)

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
URGENT_BILL_DAYS = 3                                       # due within 0..3 days → urgent


# ─────────────────────────────────────────────────────────────────────────────
# 🔎 Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _positive_int(value, default=1):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _greeting(hour):
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    return "Good evening"


def _shift_month(year, month, delta):
    """(year, month) moved by delta months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _selected_month(request, today):
    """?year=&month= from the query string, defaulting to the current month."""
    year = _positive_int(request.GET.get("year"), today.year)
    month = _positive_int(request.GET.get("month"), today.month)
    if not MINYEAR < year < MAXYEAR:
        year = today.year                                  # keep prev/next months inside date()'s range
    if not 1 <= month <= 12:
        month = today.month
    return year, month


def _currency(request):
    user = current_user(request)
    return user.currency if user else DEFAULT_CURRENCY


def _report_api_error(request, exc, fallback):
    """Show the API's message (or our fallback) as a flash message."""
    if isinstance(exc, ApiAuthenticationError):
        raise exc                                          # middleware signs the user out
    logger.warning("%s: %s (status=%s)", fallback, exc.message, exc.status)
    messages.error(request, exc.detail or fallback)


def _bank_accounts(request):
    """The user's accounts for select boxes; empty (with a message) if the API fails."""
    try:
        return api.list_bank_accounts(request)
    except ApiError as exc:
        _report_api_error(request, exc, "Failed to load bank accounts")
        return []


def _flash_form_errors(request, form):
    for errors in form.errors.values():
        for error in errors:
            messages.error(request, error)


def _plural_bills(count):
    return f"{count} bill{'s' if count != 1 else ''}"


def _page_links(pagination):
    return list(range(1, max(pagination.pages, 1) + 1))


# ─────────────────────────────────────────────────────────────────────────────
# 🧱 Base views
#   ApiFormView: a FormView whose form_valid() hands the data to the API.
#   ApiDeleteView: a confirmation page (GET) + delete (POST).
# ─────────────────────────────────────────────────────────────────────────────
class ApiFormView(LoginRequiredMixin, FormView):
    """Validate a form, send it to the API, flash the outcome."""

    template_name = "finance/form.html"
    success_message = "Saved."
    error_message = "Something went wrong. Please try again."
    uses_accounts = False                                   # pass the user's bank accounts to the form
    title = ""

    def get_object(self):
        """Existing record for edit views (None for create views)."""
        return None

    @property
    def object(self):
        if not hasattr(self, "_object"):
            self._object = self.get_object()
        return self._object

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()                  # 🔌 base kwargs
        if self.uses_accounts:
            kwargs["accounts"] = _bank_accounts(self.request)
        if self.object is not None:
            kwargs["instance"] = self.object                # ✏️ prefill from the record
        return kwargs

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx.update({"title": self.title, "object": self.object, "cancel_url": self.get_success_url()})
        return ctx

    def save(self, form):
        raise NotImplementedError

    def handle_api_error(self, form, exc):
        """Attach the API failure to the form and show it again."""
        if isinstance(exc, ApiAuthenticationError):
            raise exc
        logger.warning("%s failed: %s (status=%s)", type(self).__name__, exc.message, exc.status)
        form.add_error(None, exc.detail or self.error_message)
        return self.form_invalid(form)

    def form_valid(self, form):
        try:
            self.save(form)
        except ApiError as exc:
            return self.handle_api_error(form, exc)
        messages.success(self.request, self.success_message)   # ✅ nice feedback
        return super().form_valid(form)


class ApiDeleteView(LoginRequiredMixin, TemplateView):
    """GET: 'are you sure?' page. POST: delete through the API."""

    template_name = "finance/confirm_delete.html"
    success_url = None
    success_message = "Deleted."
    error_message = "Failed to delete. Please try again."
    kind = "record"

    def get_object(self):
        raise NotImplementedError

    def delete(self, object_id):
        raise NotImplementedError

    def describe(self, obj):
        return str(obj)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        obj = self.get_object()
        if obj is None:
            raise Http404(f"{self.kind.capitalize()} not found")
        ctx.update({
            "object": obj,
            "kind": self.kind,
            "label": self.describe(obj),
            "cancel_url": self.success_url,
        })
        return ctx

    def post(self, request, *args, **kwargs):
        try:
            self.delete(kwargs["pk"])                      # 🗑️ attempt delete
        except ApiError as exc:
            _report_api_error(request, exc, self.error_message)
        else:
            messages.success(request, self.success_message)
        return redirect(self.success_url)


# ─────────────────────────────────────────────────────────────────────────────
# 📊 DASHBOARD VIEW
#   • Greeting by local hour
#   • Total expenses this year (sum of the 12 monthly buckets)
#   • Upcoming bills (urgent when one is due within 0–3 days)
#   • Line chart (monthly expenses) + doughnut (expenses by category)
#   • Financial health card (left out if the API cannot compute it)
# ─────────────────────────────────────────────────────────────────────────────
class DashboardView(LoginRequiredMixin, TemplateView):
    template_name = "finance/dashboard.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        now = timezone.localtime()
        today = now.date()

        monthly, categories, upcoming = [], [], []
        try:
            monthly = api.expense_monthly_summary(self.request)
            categories = api.expense_category_summary(self.request)
            upcoming = api.upcoming_bills(self.request)
        except ApiError as exc:
            _report_api_error(self.request, exc, "Failed to load dashboard data. Please try again.")

        health = None
        try:
            health = api.financial_health(self.request)
        except ApiAuthenticationError:
            raise
        except ApiError as exc:
            logger.warning("Financial health unavailable: %s (status=%s)", exc.message, exc.status)

        # 🧱 Densify to Jan..Dec so the line always spans the whole year
        by_month = {row.month: row.total for row in monthly}
        line_values = [by_month.get(number, 0) for number in range(1, 13)]

        urgent = any(0 <= bill.days_until_due(today) <= URGENT_BILL_DAYS for bill in upcoming)

        ctx.update({
            "greeting": _greeting(now.hour),
            "today": today,
            "total_expenses": sum(row.total for row in monthly),
            "upcoming_bills": upcoming,
            "upcoming_count": len(upcoming),
            "urgent": urgent,
            "category_totals": categories,
            "health": health,                               # 🩺 None → card hidden

            "line_labels": MONTH_LABELS,                    # 📈 x-axis labels
            "line_values": line_values,                     # 📈 y-series
            "pie_labels": [row.category or "Uncategorised" for row in categories],
            "pie_values": [row.total for row in categories],
        })
        return ctx


# ─────────────────────────────────────────────────────────────────────────────
# 🏦 BANK ACCOUNT VIEWS (CRUD)
# ─────────────────────────────────────────────────────────────────────────────
class BankAccountListView(LoginRequiredMixin, TemplateView):
    """Cards with current balance, initial balance and the change since."""
    template_name = "finance/bankaccount_list.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        accounts = []
        try:
            accounts = api.list_bank_accounts(self.request)
        except ApiError as exc:
            _report_api_error(self.request, exc, "Failed to fetch bank accounts")
        ctx["accounts"] = accounts
        ctx["total_balance"] = sum(account.current_balance for account in accounts)
        return ctx


class _BankAccountFormView(ApiFormView):
    form_class = BankAccountForm
    success_url = reverse_lazy("finance:bankaccount_list")

    def handle_api_error(self, form, exc):
        # 🛡️ duplicate account name → show it on the field
        if isinstance(exc, ApiConflictError):
            form.add_error("account_name", exc.detail or "An account with this name already exists.")
            return self.form_invalid(form)
        return super().handle_api_error(form, exc)


class BankAccountCreateView(_BankAccountFormView):
    title = "Add bank account"
    success_message = "Bank account added."
    error_message = "Failed to add bank account"

    def save(self, form):
        return api.create_bank_account(self.request, form.to_payload())


class BankAccountUpdateView(_BankAccountFormView):
    title = "Edit bank account"
    success_message = "Bank account updated."
    error_message = "Failed to update bank account"

    def get_object(self):
        account = api.get_bank_account(self.request, self.kwargs["pk"])
        if account is None:
            raise Http404("Bank account not found")
        return account

    def save(self, form):
        return api.update_bank_account(self.request, self.kwargs["pk"], form.to_payload())


class BankAccountDeleteView(ApiDeleteView):
    success_url = reverse_lazy("finance:bankaccount_list")
    success_message = "Bank account deleted."
    error_message = "Failed to delete bank account"
    kind = "bank account"

    def get_object(self):
        return api.get_bank_account(self.request, self.kwargs["pk"])

    def delete(self, object_id):
        return api.delete_bank_account(self.request, object_id)


# ─────────────────────────────────────────────────────────────────────────────
# 🧾 BILL VIEWS (CRUD + pay / unpay / bulk edit)
# ─────────────────────────────────────────────────────────────────────────────
class BillListView(LoginRequiredMixin, TemplateView):
    """Bills page: status filter + server-side pagination."""
    template_name = "finance/bill_list.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        filter_form = BillFilterForm(self.request.GET or None)
        page = _positive_int(self.request.GET.get("page"))

        bills, pagination = [], None
        try:
            bills, pagination = api.list_bills(self.request, page=page, **filter_form.api_filters())
        except ApiError as exc:
            _report_api_error(self.request, exc, "Failed to fetch bills")

        ctx.update({
            "bills": bills,
            "pagination": pagination,
            "page_links": _page_links(pagination) if pagination else [],
            "filter_form": filter_form,
            "bulk_form": BillBulkEditForm(),
            "status_query": self.request.GET.get("status", ""),
        })
        return ctx


class _BillFormView(ApiFormView):
    form_class = BillForm
    uses_accounts = True
    success_url = reverse_lazy("finance:bill_list")


class BillCreateView(_BillFormView):
    title = "Add bill"
    success_message = "Bill added."
    error_message = "Failed to add bill"

    def save(self, form):
        return api.create_bill(self.request, form.to_payload())


class BillUpdateView(_BillFormView):
    title = "Edit bill"
    success_message = "Bill updated."
    error_message = "Failed to update bill"

    def get_object(self):
        bill = api.find_bill(self.request, self.kwargs["pk"])
        if bill is None:
            raise Http404("Bill not found")
        return bill

    def save(self, form):
        return api.update_bill(self.request, self.kwargs["pk"], form.to_payload())


class BillDeleteView(ApiDeleteView):
    success_url = reverse_lazy("finance:bill_list")
    success_message = "Bill deleted."
    error_message = "Failed to delete bill"
    kind = "bill"

    def get_object(self):
        return api.find_bill(self.request, self.kwargs["pk"])

    def describe(self, obj):
        return obj.name

    def delete(self, object_id):
        return api.delete_bill(self.request, object_id)


class BillPayView(ApiFormView):
    """Mark a bill as paid (optionally from another account)."""
    form_class = BillPayForm
    template_name = "finance/bill_pay.html"
    uses_accounts = True
    title = "Pay bill"
    success_message = "Bill marked as paid."
    error_message = "Failed to update bill status"
    success_url = reverse_lazy("finance:bill_list")

    def get_object(self):
        bill = api.find_bill(self.request, self.kwargs["pk"])
        if bill is None:
            raise Http404("Bill not found")
        return bill

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["bill"] = kwargs.pop("instance")            # BillPayForm wants the bill, not an instance
        return kwargs

    def get(self, request, *args, **kwargs):
        if self.object.is_paid:
            messages.info(request, "Bill is already paid")
            return redirect(self.success_url)
        return super().get(request, *args, **kwargs)

    def save(self, form):
        return api.pay_bill(self.request, self.kwargs["pk"], form.cleaned_data.get("bank_account") or None)


class BillUnpayView(LoginRequiredMixin, View):
    """POST: flip a paid bill back to unpaid."""
    def post(self, request, pk):
        try:
            api.mark_bill_unpaid(request, pk)
        except ApiError as exc:
            _report_api_error(request, exc, "Failed to update bill status")
        else:
            messages.success(request, "Bill marked as unpaid.")
        return redirect("finance:bill_list")


class BillBulkEditView(LoginRequiredMixin, View):
    """POST from the bills list: same status/category for the selected bills."""
    def post(self, request):
        form = BillBulkEditForm(request.POST)
        if not form.is_valid():
            _flash_form_errors(request, form)
            return redirect("finance:bill_list")

        ids = form.cleaned_data["ids"]
        try:
            api.bulk_update_bills(request, ids, form.to_updates())
        except ApiError as exc:
            _report_api_error(request, exc, "Failed to update bills")
        else:
            messages.success(request, f"Updated {_plural_bills(len(ids))}.")
        return redirect("finance:bill_list")


class BillBulkDeleteView(LoginRequiredMixin, View):
    """POST from the bills list: delete every selected bill."""
    def post(self, request):
        form = BillSelectionForm(request.POST)
        if not form.is_valid():
            _flash_form_errors(request, form)
            return redirect("finance:bill_list")

        try:
            deleted = api.bulk_delete_bills(request, form.cleaned_data["ids"])
        except ApiError as exc:
            _report_api_error(request, exc, "Failed to delete selected bills")
        else:
            messages.success(request, f"Deleted {_plural_bills(deleted)}.")   # 🗑️
        return redirect("finance:bill_list")


# ─────────────────────────────────────────────────────────────────────────────
# 💳 EXPENSE + INCOME VIEWS (CRUD)
#   Both lists share the same filters (date range, category, search) and the
#   API's pagination.
# ─────────────────────────────────────────────────────────────────────────────
class _TransactionListView(LoginRequiredMixin, TemplateView):
    categories = ()
    kind = ""

    def fetch(self, page, filters):
        raise NotImplementedError

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        filter_form = TransactionFilterForm(self.request.GET or None, categories=self.categories)
        page = _positive_int(self.request.GET.get("page"))

        items, pagination = [], None
        try:
            items, pagination = self.fetch(page, filter_form.api_filters())
        except ApiError as exc:
            _report_api_error(self.request, exc, f"Failed to fetch {self.kind}")

        # keep the filters in pagination links
        query = self.request.GET.copy()
        query.pop("page", None)

        ctx.update({
            "items": items,
            "page_total": sum(item.amount for item in items),
            "pagination": pagination,
            "page_links": _page_links(pagination) if pagination else [],
            "filter_form": filter_form,
            "filter_query": query.urlencode(),
        })
        return ctx


class ExpenseListView(_TransactionListView):
    template_name = "finance/expense_list.html"
    categories = EXPENSE_CATEGORIES
    kind = "expenses"

    def fetch(self, page, filters):
        return api.list_expenses(self.request, page=page, **filters)


class IncomeListView(_TransactionListView):
    template_name = "finance/income_list.html"
    categories = INCOME_CATEGORIES
    kind = "incomes"

    def fetch(self, page, filters):
        return api.list_incomes(self.request, page=page, **filters)


class ExpenseCreateView(ApiFormView):
    form_class = ExpenseForm
    uses_accounts = True
    title = "Add expense"
    success_message = "Expense added."
    error_message = "Failed to add expense"
    success_url = reverse_lazy("finance:expense_list")

    def save(self, form):
        return api.create_expense(self.request, form.to_payload())


class ExpenseUpdateView(ExpenseCreateView):
    title = "Edit expense"
    success_message = "Expense updated."
    error_message = "Failed to update expense"

    def get_object(self):
        expense = api.find_expense(self.request, self.kwargs["pk"])
        if expense is None:
            raise Http404("Expense not found")
        return expense

    def save(self, form):
        return api.update_expense(self.request, self.kwargs["pk"], form.to_payload())


class ExpenseDeleteView(ApiDeleteView):
    success_url = reverse_lazy("finance:expense_list")
    success_message = "Expense deleted."
    error_message = "Failed to delete expense"
    kind = "expense"

    def get_object(self):
        return api.find_expense(self.request, self.kwargs["pk"])

    def describe(self, obj):
        return obj.description

    def delete(self, object_id):
        return api.delete_expense(self.request, object_id)


class IncomeCreateView(ApiFormView):
    form_class = IncomeForm
    uses_accounts = True
    title = "Add income"
    success_message = "Income added."
    error_message = "Failed to add income"
    success_url = reverse_lazy("finance:income_list")

    def save(self, form):
        return api.create_income(self.request, form.to_payload())


class IncomeUpdateView(IncomeCreateView):
    title = "Edit income"
    success_message = "Income updated."
    error_message = "Failed to update income"

    def get_object(self):
        income = api.find_income(self.request, self.kwargs["pk"])
        if income is None:
            raise Http404("Income not found")
        return income

    def save(self, form):
        return api.update_income(self.request, self.kwargs["pk"], form.to_payload())


class IncomeDeleteView(ApiDeleteView):
    success_url = reverse_lazy("finance:income_list")
    success_message = "Income deleted."
    error_message = "Failed to delete income"
    kind = "income"

    def get_object(self):
        return api.find_income(self.request, self.kwargs["pk"])

    def describe(self, obj):
        return obj.description

    def delete(self, object_id):
        return api.delete_income(self.request, object_id)


# ─────────────────────────────────────────────────────────────────────────────
# 🎯 GOAL VIEWS
#   The API returns every goal; search, status filter, sorting and the
#   12-per-page pagination happen here.
# ─────────────────────────────────────────────────────────────────────────────
class GoalListView(LoginRequiredMixin, ListView):
    template_name = "finance/goal_list.html"
    context_object_name = "goals"
    paginate_by = 12

    def get_filter_form(self):
        if not hasattr(self, "_filter_form"):
            self._filter_form = GoalFilterForm(self.request.GET or None)
        return self._filter_form

    def get_queryset(self):
        try:
            self.all_goals = api.list_goals(self.request)
        except ApiError as exc:
            _report_api_error(self.request, exc, "Failed to fetch goals")
            self.all_goals = []
        search, status, sort, direction = self.get_filter_form().options()
        return sort_goals(filter_goals(self.all_goals, search, status), sort, direction)

    def paginate_queryset(self, queryset, page_size):
        """Like ListView's, but an out-of-range page shows the last page instead of a 404."""
        paginator = self.get_paginator(queryset, page_size)
        page = paginator.get_page(self.request.GET.get(self.page_kwarg))
        return paginator, page, page.object_list, page.has_other_pages()

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        completed = [goal for goal in self.all_goals if goal.is_completed]
        query = self.request.GET.copy()
        query.pop("page", None)
        ctx.update({
            "filter_form": self.get_filter_form(),
            "filter_query": query.urlencode(),
            "total_goals": len(self.all_goals),
            "completed_count": len(completed),
            "active_count": len(self.all_goals) - len(completed),
            "total_saved": sum(goal.saved_amount for goal in self.all_goals),
            "total_target": sum(goal.target_amount for goal in self.all_goals),
        })
        return ctx


class GoalCreateView(ApiFormView):
    form_class = GoalForm
    title = "New goal"
    success_message = "Goal created."
    error_message = "Failed to create goal"
    success_url = reverse_lazy("finance:goal_list")

    def save(self, form):
        return api.create_goal(self.request, form.to_payload())


class GoalUpdateView(GoalCreateView):
    title = "Edit goal"
    success_message = "Goal updated."
    error_message = "Failed to update goal"

    def get_object(self):
        try:
            return api.get_goal(self.request, self.kwargs["pk"])
        except ApiError as exc:
            if exc.status == 404:
                raise Http404("Goal not found") from exc
            raise

    def save(self, form):
        return api.update_goal(self.request, self.kwargs["pk"], form.to_payload())


class GoalDeleteView(ApiDeleteView):
    success_url = reverse_lazy("finance:goal_list")
    success_message = "Goal deleted."
    error_message = "Failed to delete goal"
    kind = "goal"

    def get_object(self):
        try:
            return api.get_goal(self.request, self.kwargs["pk"])
        except ApiError as exc:
            if exc.status == 404:
                return None
            raise

    def describe(self, obj):
        return obj.name

    def delete(self, object_id):
        return api.delete_goal(self.request, object_id)


class GoalContributeView(GoalUpdateView):
    """Add money to a goal (optionally taken from a bank account)."""
    form_class = ContributionForm
    template_name = "finance/goal_contribute.html"
    uses_accounts = True
    title = "Add contribution"
    success_message = "Contribution added."
    error_message = "Failed to add contribution"

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs.pop("instance", None)                       # the goal is shown, not edited
        return kwargs

    def save(self, form):
        data = form.cleaned_data
        return api.add_contribution(
            self.request,
            self.kwargs["pk"],
            float(data["amount"]),
            data.get("description") or "",
            data.get("bank_account") or None,
        )


# ─────────────────────────────────────────────────────────────────────────────
# 🏆 ACHIEVEMENTS
# ─────────────────────────────────────────────────────────────────────────────
class AchievementsView(LoginRequiredMixin, TemplateView):
    """Badges grouped by kind; opening the page marks new ones as seen."""
    template_name = "finance/achievements.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        achievements = []
        try:
            achievements = api.list_achievements(self.request)
        except ApiError as exc:
            _report_api_error(self.request, exc, "Failed to fetch achievements")

        new_ids = []
        for achievement in achievements:
            if achievement.is_seen:
                continue
            try:
                api.mark_achievement_seen(self.request, achievement.id)
            except ApiError as exc:
                if isinstance(exc, ApiAuthenticationError):
                    raise
                logger.warning("Could not mark achievement %s as seen: %s", achievement.id, exc.message)
            else:
                new_ids.append(achievement.id)

        ctx.update({
            "groups": group_achievements(achievements),
            "achievement_count": len(achievements),
            "new_ids": new_ids,
        })
        return ctx


# ─────────────────────────────────────────────────────────────────────────────
# 🗓️ MONTHLY BREAKDOWN (+ CSV / PDF EXPORT)
# ─────────────────────────────────────────────────────────────────────────────
class _MonthMixin:
    """Reads ?year=&month= and fetches that month's expenses and bills."""

    def month(self):
        return _selected_month(self.request, timezone.localdate())

    def fetch_month(self, year, month):
        return api.monthly_expenses(self.request, year, month), api.monthly_bills(self.request, year, month)


class MonthlyBreakdownView(LoginRequiredMixin, _MonthMixin, TemplateView):
    template_name = "finance/monthly_breakdown.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        year, month = self.month()
        tab = self.request.GET.get("tab", "expenses")
        if tab not in ("expenses", "bills"):
            tab = "expenses"

        expenses, bills = MonthlyExpenses(), MonthlyBills()
        try:
            expenses, bills = self.fetch_month(year, month)
        except ApiError as exc:
            _report_api_error(self.request, exc, "Failed to fetch monthly data")

        prev_year, prev_month = _shift_month(year, month, -1)
        next_year, next_month = _shift_month(year, month, 1)
        ctx.update({
            "year": year,
            "month": month,
            "month_start": date(year, month, 1),
            "prev": {"year": prev_year, "month": prev_month},
            "next": {"year": next_year, "month": next_month},
            "tab": tab,
            "expenses": expenses,
            "bills": bills,
            "has_data": bool(expenses.expenses or bills.bills),
        })
        return ctx


class _MonthlyExportView(LoginRequiredMixin, _MonthMixin, View):
    content_type = ""
    extension = ""

    def render(self, year, month, expenses, bills):
        raise NotImplementedError

    def get(self, request, *args, **kwargs):
        year, month = self.month()
        try:
            expenses, bills = self.fetch_month(year, month)
        except ApiError as exc:
            _report_api_error(request, exc, "Failed to export monthly data")
            return redirect(f"{reverse('finance:monthly_breakdown')}?year={year}&month={month}")

        body = self.render(year, month, expenses, bills)
        response = HttpResponse(body, content_type=self.content_type)
        response["Content-Disposition"] = f'attachment; filename="{export_filename(year, month, self.extension)}"'
        logger.info("Exported %s-%02d as %s", year, month, self.extension)
        return response


class MonthlyCsvExportView(_MonthlyExportView):
    """📥 CSV download for the selected month."""
    content_type = "text/csv"
    extension = "csv"

    def render(self, year, month, expenses, bills):
        return render_csv(export_rows(expenses, bills, timezone.localdate()))


class MonthlyPdfExportView(_MonthlyExportView):
    """📥 PDF download for the selected month."""
    content_type = "application/pdf"
    extension = "pdf"

    def render(self, year, month, expenses, bills):
        title = f"SmartSpend: {date(year, month, 1):%B %Y}"
        summary = summary_lines(expenses, bills, _currency(self.request))
        return render_pdf(title, summary, export_rows(expenses, bills, timezone.localdate()))
