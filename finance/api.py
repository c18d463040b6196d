# finance/api.py
# 🔌 Finance endpoints of the SmartSpend API.
#    Views call these; each returns finance.models objects (or plain dicts for
#    write calls). ApiError subclasses propagate to the caller.

from smartspend.client import client_for

from .models import (
    Achievement,
    BankAccount,
    Bill,
    CategorySpend,
    Expense,
    FinancialHealth,
    Goal,
    Income,
    MonthlyBills,
    MonthlyExpenses,
    MonthTotal,
    Pagination,
)

DEFAULT_PAGE_SIZE = 12


def _params(**values):
    """Drop empty query parameters; dates become ISO strings."""
    params = {}
    for key, value in values.items():
        if value in (None, ""):
            continue
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        elif isinstance(value, bool):
            value = "true" if value else "false"
        params[key] = value
    return params


def _page(data, key, model):
    """Split a {<key>: [...], pagination: {...}} answer (or a bare list)."""
    if isinstance(data, list):
        items = data
        pagination = Pagination(total=len(items))
    else:
        data = data or {}
        items = data.get(key) or []
        pagination = Pagination.model_validate(data.get("pagination") or {"total": len(items)})
    return model.parse_list(items), pagination


def _find_in_pages(list_func, request, object_id, limit=100):
    """
    Bills, expenses and incomes have no single-record GET route:
    walk the paginated list until the id turns up (None when it never does).
    """
    page = 1
    while True:
        items, pagination = list_func(request, page=page, limit=limit)
        for item in items:
            if item.id == object_id:
                return item
        if not items or page >= pagination.pages:
            return None
        page += 1


# ===== Bank accounts =========================================================

def list_bank_accounts(request):
    return BankAccount.parse_list(client_for(request).get("/bank-accounts"))


def create_bank_account(request, data):
    return BankAccount.model_validate(client_for(request).post("/bank-accounts", data))


def update_bank_account(request, account_id, data):
    return BankAccount.model_validate(client_for(request).put(f"/bank-accounts/{account_id}", data))


def delete_bank_account(request, account_id):
    return client_for(request).delete(f"/bank-accounts/{account_id}")


def get_bank_account(request, account_id):
    """The API has no single-account route; pick it out of the list."""
    for account in list_bank_accounts(request):
        if account.id == account_id:
            return account
    return None


# ===== Bills =================================================================

def list_bills(request, is_paid=None, upcoming=False, page=1, limit=DEFAULT_PAGE_SIZE):
    data = client_for(request).get("/bills", params=_params(
        isPaid=is_paid, upcoming=upcoming or None, page=page, limit=limit,
    ))
    return _page(data, "bills", Bill)


def create_bill(request, data):
    return Bill.model_validate(client_for(request).post("/bills", data))


def update_bill(request, bill_id, data):
    return Bill.model_validate(client_for(request).put(f"/bills/{bill_id}", data))


def delete_bill(request, bill_id):
    return client_for(request).delete(f"/bills/{bill_id}")


def pay_bill(request, bill_id, bank_account=None):
    """
    PUT /bills/:id/pay; the API charges the bill's own account and books the
    matching expense. A different account is saved on the bill first.
    """
    client = client_for(request)
    if bank_account:
        client.put(f"/bills/{bill_id}", {"bankAccount": bank_account})
    return Bill.model_validate(client.put(f"/bills/{bill_id}/pay"))


def mark_bill_unpaid(request, bill_id):
    return Bill.model_validate(client_for(request).put(f"/bills/{bill_id}", {"isPaid": False}))


def find_bill(request, bill_id):
    return _find_in_pages(list_bills, request, bill_id)


def bulk_update_bills(request, ids, updates):
    """PATCH /bills/bulk-update with {ids, updates}."""
    return client_for(request).patch("/bills/bulk-update", {"ids": list(ids), "updates": updates})


def bulk_delete_bills(request, ids):
    """No bulk endpoint for deletes: DELETE /bills/:id for each selected bill."""
    for bill_id in ids:
        delete_bill(request, bill_id)
    return len(ids)


def upcoming_bills(request):
    return Bill.parse_list(client_for(request).get("/bills/upcoming/reminders"))


def monthly_bills(request, year, month):
    return MonthlyBills.model_validate(client_for(request).get(f"/bills/monthly/{year}/{month}") or {})


# ===== Expenses ==============================================================

def list_expenses(request, start_date=None, end_date=None, category=None, search=None,
                  page=1, limit=DEFAULT_PAGE_SIZE):
    data = client_for(request).get("/expenses", params=_params(
        startDate=start_date, endDate=end_date, category=category, search=search, page=page, limit=limit,
    ))
    return _page(data, "expenses", Expense)


def create_expense(request, data):
    return Expense.model_validate(client_for(request).post("/expenses", data))


def update_expense(request, expense_id, data):
    return Expense.model_validate(client_for(request).put(f"/expenses/{expense_id}", data))


def find_expense(request, expense_id):
    return _find_in_pages(list_expenses, request, expense_id)


def delete_expense(request, expense_id):
    return client_for(request).delete(f"/expenses/{expense_id}")


def expense_monthly_summary(request, year=None):
    """Twelve {month, total, count} rows for the year (current year by default)."""
    data = client_for(request).get("/expenses/summary/monthly", params=_params(year=year))
    return [MonthTotal.model_validate(row) for row in data or []]


def expense_category_summary(request, start_date=None, end_date=None):
    data = client_for(request).get("/expenses/summary/category", params=_params(
        startDate=start_date, endDate=end_date,
    ))
    return [CategorySpend.model_validate(row) for row in data or []]


def monthly_expenses(request, year, month):
    return MonthlyExpenses.model_validate(client_for(request).get(f"/expenses/monthly/{year}/{month}") or {})


# ===== Incomes ===============================================================

def list_incomes(request, start_date=None, end_date=None, category=None, search=None,
                 page=1, limit=DEFAULT_PAGE_SIZE):
    data = client_for(request).get("/incomes", params=_params(
        startDate=start_date, endDate=end_date, category=category, search=search, page=page, limit=limit,
    ))
    return _page(data, "incomes", Income)


def create_income(request, data):
    return Income.model_validate(client_for(request).post("/incomes", data))


def update_income(request, income_id, data):
    return Income.model_validate(client_for(request).put(f"/incomes/{income_id}", data))


def find_income(request, income_id):
    return _find_in_pages(list_incomes, request, income_id)


def delete_income(request, income_id):
    return client_for(request).delete(f"/incomes/{income_id}")


# ===== Goals & achievements ==================================================

def list_goals(request):
    return Goal.parse_list(client_for(request).get("/goals"))


def get_goal(request, goal_id):
    return Goal.model_validate(client_for(request).get(f"/goals/{goal_id}"))


def create_goal(request, data):
    return Goal.model_validate(client_for(request).post("/goals", data))


def update_goal(request, goal_id, data):
    return Goal.model_validate(client_for(request).put(f"/goals/{goal_id}", data))


def delete_goal(request, goal_id):
    return client_for(request).delete(f"/goals/{goal_id}")


def add_contribution(request, goal_id, amount, description="", bank_account=None):
    body = {"amount": amount, "description": description, "bankAccountId": bank_account or None}
    return Goal.model_validate(client_for(request).post(f"/goals/{goal_id}/contributions", body))


def list_achievements(request):
    return Achievement.parse_list(client_for(request).get("/achievements"))


def mark_achievement_seen(request, achievement_id):
    return client_for(request).put(f"/achievements/{achievement_id}/mark-seen")


# ===== Financial health ======================================================

def financial_health(request):
    """GET /financial-health → this month's surplus/deficit, comparison and tips."""
    return FinancialHealth.model_validate(client_for(request).get("/financial-health") or {})
