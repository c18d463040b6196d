# tests/test_forms.py

from datetime import date, timedelta

from django.http import QueryDict

from finance.forms import (
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

TODAY = date.today()


def _bill_data(**overrides):
    data = {
        "name": "  Water   bill ",
        "amount": "30.00",
        "due_date": (TODAY + timedelta(days=5)).isoformat(),
        "reminder_date": TODAY.isoformat(),
        "category": "Water",
        "bank_account": "acc1",
    }
    data.update(overrides)
    return data


# ── Bank accounts ────────────────────────────────────────────────────────────
def test_bank_account_payload():
    form = BankAccountForm({"bank_name": " HSBC ", "account_name": "Every  day",
                            "account_type": "Savings", "initial_balance": "100.50"})
    assert form.is_valid(), form.errors
    assert form.to_payload() == {
        "bankName": "HSBC", "accountName": "Every day", "accountType": "Savings", "initialBalance": 100.5,
    }


# ── Bills ────────────────────────────────────────────────────────────────────
def test_bill_form_payload(account):
    form = BillForm(_bill_data(), accounts=[account])
    assert form.is_valid(), form.errors
    payload = form.to_payload()
    assert payload["name"] == "Water bill"
    assert payload["amount"] == 30.0
    assert payload["bankAccount"] == "acc1"
    assert payload["isPaid"] is False


def test_bill_name_needs_a_letter(account):
    form = BillForm(_bill_data(name="1234"), accounts=[account])
    assert not form.is_valid()
    assert form.errors["name"] == ["Bill name must contain at least one alphabetic character"]


def test_bill_amount_must_be_covered_by_the_account(account):
    form = BillForm(_bill_data(amount="5000"), accounts=[account])
    assert not form.is_valid()
    assert form.errors["bank_account"] == ["Insufficient balance in the selected account."]


def test_paid_bill_edit_skips_the_balance_check(account, bill):
    paid = bill.model_copy(update={"is_paid": True})
    form = BillForm(_bill_data(amount="5000", is_paid="on"), accounts=[account], instance=paid)
    assert form.is_valid(), form.errors


def test_bill_form_prefills_from_instance(account, bill):
    form = BillForm(accounts=[account], instance=bill)
    assert form.initial["name"] == "Electricity"
    assert form.initial["bank_account"] == "acc1"


def test_pay_form_needs_an_account(bill):
    unassigned = bill.model_copy(update={"bank_account": None})
    form = BillPayForm({}, accounts=[], bill=unassigned)
    assert not form.is_valid()
    assert form.non_field_errors() == ["No bank account selected for this bill."]


def test_pay_form_uses_the_bill_account(account, bill):
    form = BillPayForm({}, accounts=[account], bill=bill)
    assert form.is_valid(), form.errors


def test_bulk_edit_form():
    data = QueryDict(mutable=True)
    data.setlist("ids", ["b1", "b2"])
    data["is_paid"] = "true"
    form = BillBulkEditForm(data)
    assert form.is_valid(), form.errors
    assert form.cleaned_data["ids"] == ["b1", "b2"]
    assert form.to_updates() == {"isPaid": True}


def test_bulk_edit_needs_a_selection_and_a_change():
    form = BillBulkEditForm(QueryDict("is_paid=false"))
    assert not form.is_valid()
    assert "ids" in form.errors

    form = BillBulkEditForm(QueryDict("ids=b1"))
    assert not form.is_valid()
    assert form.non_field_errors() == ["Choose at least one change to apply."]


def test_bill_selection_only_needs_ids():
    form = BillSelectionForm(QueryDict("ids=b1&ids=&ids=b3"))
    assert form.is_valid(), form.errors
    assert form.cleaned_data["ids"] == ["b1", "b3"]
    assert not BillSelectionForm(QueryDict("ids=")).is_valid()


# ── Expenses / incomes ───────────────────────────────────────────────────────
def _expense_data(**overrides):
    data = {"description": "Groceries run", "amount": "25", "date": TODAY.isoformat(),
            "category": "Groceries", "bank_account": "acc1"}
    data.update(overrides)
    return data


def test_expense_in_the_future_is_rejected(account):
    form = ExpenseForm(_expense_data(date=(TODAY + timedelta(days=1)).isoformat()), accounts=[account])
    assert not form.is_valid()
    assert form.errors["date"] == ["Expense date cannot be in the future"]


def test_recurring_expense_needs_an_interval(account):
    form = ExpenseForm(_expense_data(is_recurring="on"), accounts=[account])
    assert not form.is_valid()
    assert "recurring_interval" in form.errors

    form = ExpenseForm(_expense_data(is_recurring="on", recurring_interval="monthly"), accounts=[account])
    assert form.is_valid(), form.errors
    assert form.to_payload()["recurringInterval"] == "monthly"


def test_expense_create_checks_balance(account):
    form = ExpenseForm(_expense_data(amount="2000"), accounts=[account])
    assert not form.is_valid()
    assert "bank_account" in form.errors


def test_income_notes_limit(account):
    form = IncomeForm({"description": "Salary", "amount": "3000", "date": TODAY.isoformat(),
                       "category": "Salary", "bank_account": "acc1", "notes": "x" * 501}, accounts=[account])
    assert not form.is_valid()
    assert form.errors["notes"] == ["Notes must be less than 500 characters"]


# ── Goals ────────────────────────────────────────────────────────────────────
def test_goal_target_date_must_be_in_the_future():
    form = GoalForm({"name": "Car", "target_amount": "5000", "target_date": TODAY.isoformat()})
    assert not form.is_valid()
    assert form.errors["target_date"] == ["Target date must be in the future"]


def test_goal_payload():
    target = TODAY + timedelta(days=90)
    form = GoalForm({"name": "Car", "target_amount": "5000", "target_date": target.isoformat(),
                     "monthly_contribution": "250"})
    assert form.is_valid(), form.errors
    assert form.to_payload() == {
        "name": "Car", "targetAmount": 5000.0, "targetDate": target.isoformat(),
        "description": "", "monthlyContribution": 250.0,
    }


def test_contribution_amount_must_be_positive(account):
    form = ContributionForm({"amount": "0"}, accounts=[account])
    assert not form.is_valid()
    assert form.errors["amount"] == ["Please enter a valid amount"]


# ── Filters ──────────────────────────────────────────────────────────────────
def test_bill_filter_form():
    assert BillFilterForm(None).api_filters() == {"is_paid": None, "upcoming": False}
    assert BillFilterForm({"status": "paid"}).api_filters() == {"is_paid": True, "upcoming": False}
    assert BillFilterForm({"status": "upcoming"}).api_filters() == {"is_paid": None, "upcoming": True}


def test_transaction_filter_form():
    form = TransactionFilterForm({"start_date": "2025-03-01", "category": "Groceries", "search": " milk "},
                                 categories=["Groceries"])
    assert form.api_filters() == {
        "start_date": date(2025, 3, 1), "end_date": None, "category": "Groceries", "search": "milk",
    }

    backwards = TransactionFilterForm({"start_date": "2025-03-10", "end_date": "2025-03-01"}, categories=[])
    assert backwards.api_filters() == {}


def test_goal_filter_defaults():
    assert GoalFilterForm(None).options() == ("", "all", "targetDate", "asc")
    assert GoalFilterForm({"sort": "progress", "direction": "desc", "status": "completed"}).options() == (
        "", "completed", "progress", "desc",
    )


def test_goal_filter_keeps_valid_fields_when_one_is_bad():
    form = GoalFilterForm({"status": "bogus", "search": "car", "sort": "name", "direction": "desc"})
    assert form.options() == ("car", "all", "name", "desc")
