# finance/forms.py
# ─────────────────────────────────────────────────────────────────────────────
# All the forms for the Finance app live here.
# This file defines:
#   1) BankAccountForm – add/edit a bank account
#   2) BillForm / BillPayForm / BillBulkEditForm – bills, paying, bulk edits
#   3) ExpenseForm / IncomeForm – transactions tied to a bank account
#   4) GoalForm / ContributionForm – savings goals
#   5) Filter forms for the list pages (GET)
# The API stores the data; each form validates input and builds the JSON body
# (camelCase keys) with to_payload().
# ─────────────────────────────────────────────────────────────────────────────

from datetime import date
from decimal import Decimal

from django import forms                                  # ← Django form building blocks
from django.core.exceptions import ValidationError        # ← To raise user-friendly errors

from .goals import GOAL_SORT_KEYS, GOAL_STATUSES
from .models import (
    ACCOUNT_TYPES,
    BILL_CATEGORIES,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    RECURRING_INTERVALS,
)

DATE_INPUT = forms.DateInput(attrs={"type": "date"})      # browser date picker
MONEY_INPUT = forms.NumberInput(attrs={"step": "0.01", "min": "0"})


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _norm_name(name: str) -> str:
    """Return a neatly spaced version of the name (no double spaces)."""
    name = (name or "").strip()
    return " ".join(name.split())


def _choices(values):
    return [(value, value) for value in values]


def _has_letter(text):
    return any(ch.isalpha() for ch in text)


def _money(value):
    """Decimal from the form → float for the JSON body."""
    return float(value) if value is not None else None


class _AccountFieldMixin:
    """
    Fills the `bank_account` select from the user's accounts.
    Views pass `accounts=[BankAccount, ...]`.
    """

    account_empty_label = "Select a bank account"

    def _setup_accounts(self, accounts):
        self.accounts = {account.id: account for account in accounts or []}
        if "bank_account" in self.fields:
            self.fields["bank_account"].choices = [("", self.account_empty_label)] + [
                (account.id, f"{account.bank_name} • {account.account_name} ({account.current_balance:,.2f})")
                for account in self.accounts.values()
            ]

    def _check_balance(self, cleaned, amount_field="amount"):
        """The selected account must cover the amount."""
        account = self.accounts.get(cleaned.get("bank_account"))
        amount = cleaned.get(amount_field)
        if account is not None and amount is not None and account.current_balance < float(amount):
            self.add_error("bank_account", "Insufficient balance in the selected account.")


# ─────────────────────────────────────────────────────────────────────────────
# 1) BankAccountForm
# ─────────────────────────────────────────────────────────────────────────────
class BankAccountForm(forms.Form):
    bank_name = forms.CharField(max_length=100, widget=forms.TextInput(attrs={"placeholder": "e.g., Chase, HSBC"}))
    account_name = forms.CharField(max_length=100, widget=forms.TextInput(attrs={"placeholder": "e.g., Everyday Checking"}))
    account_type = forms.ChoiceField(choices=ACCOUNT_TYPES)
    initial_balance = forms.DecimalField(max_digits=14, decimal_places=2, widget=MONEY_INPUT)

    def __init__(self, *args, **kwargs):
        self.instance = kwargs.pop("instance", None)               # ← editing an existing account?
        if self.instance is not None:
            kwargs.setdefault("initial", {
                "bank_name": self.instance.bank_name,
                "account_name": self.instance.account_name,
                "account_type": self.instance.account_type,
                "initial_balance": self.instance.initial_balance,
            })
        super().__init__(*args, **kwargs)

    def clean_bank_name(self):
        return _norm_name(self.cleaned_data.get("bank_name"))

    def clean_account_name(self):
        return _norm_name(self.cleaned_data.get("account_name"))

    def to_payload(self):
        data = self.cleaned_data
        return {
            "bankName": data["bank_name"],
            "accountName": data["account_name"],
            "accountType": data["account_type"],
            "initialBalance": _money(data["initial_balance"]),
        }


# ─────────────────────────────────────────────────────────────────────────────
# 2) Bills
# ─────────────────────────────────────────────────────────────────────────────
class BillForm(_AccountFieldMixin, forms.Form):
    """
    Add/edit a bill.
      • name needs at least one letter
      • a bank account is required and must cover the amount
    """

    name = forms.CharField(max_length=100, widget=forms.TextInput(attrs={"placeholder": "e.g., Electricity"}))
    amount = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), widget=MONEY_INPUT)
    due_date = forms.DateField(widget=DATE_INPUT)
    reminder_date = forms.DateField(widget=DATE_INPUT)
    category = forms.ChoiceField(choices=[("", "Select a category")] + _choices(BILL_CATEGORIES))
    bank_account = forms.ChoiceField(choices=())
    is_paid = forms.BooleanField(required=False, label="Already paid")
    notes = forms.CharField(required=False, max_length=500, widget=forms.Textarea(attrs={"rows": 3}))

    def __init__(self, *args, **kwargs):
        accounts = kwargs.pop("accounts", [])
        self.instance = kwargs.pop("instance", None)
        if self.instance is not None:
            kwargs.setdefault("initial", {
                "name": self.instance.name,
                "amount": self.instance.amount,
                "due_date": self.instance.due_date,
                "reminder_date": self.instance.reminder_date or self.instance.due_date,
                "category": self.instance.category,
                "bank_account": self.instance.bank_account_id,
                "is_paid": self.instance.is_paid,
                "notes": self.instance.notes,
            })
        super().__init__(*args, **kwargs)
        self._setup_accounts(accounts)

    def clean_name(self):
        name = _norm_name(self.cleaned_data.get("name"))
        if not _has_letter(name):
            raise ValidationError("Bill name must contain at least one alphabetic character")
        return name

    def clean(self):
        cleaned = super().clean()
        # an already-paid bill has been charged; don't re-check the balance
        if not (self.instance is not None and self.instance.is_paid):
            self._check_balance(cleaned)
        return cleaned

    def to_payload(self):
        data = self.cleaned_data
        return {
            "name": data["name"],
            "amount": _money(data["amount"]),
            "dueDate": data["due_date"].isoformat(),
            "reminderDate": data["reminder_date"].isoformat(),
            "category": data["category"],
            "bankAccount": data["bank_account"],
            "isPaid": data["is_paid"],
            "notes": data.get("notes") or "",
        }


class BillPayForm(_AccountFieldMixin, forms.Form):
    """Mark a bill paid, optionally charging a different account."""

    account_empty_label = "Use the bill's account"
    bank_account = forms.ChoiceField(choices=(), required=False)

    def __init__(self, *args, **kwargs):
        accounts = kwargs.pop("accounts", [])
        self.bill = kwargs.pop("bill", None)
        super().__init__(*args, **kwargs)
        self._setup_accounts(accounts)

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get("bank_account") and self.bill is not None and not self.bill.bank_account_id:
            raise ValidationError("No bank account selected for this bill.")
        account = self.accounts.get(cleaned.get("bank_account") or (self.bill.bank_account_id if self.bill else None))
        if account is not None and self.bill is not None and account.current_balance < self.bill.amount:
            self.add_error("bank_account", "Insufficient balance in the selected account.")
        return cleaned


class BillSelectionForm(forms.Form):
    """The bills ticked on the list page (bulk delete posts just this)."""

    ids = forms.Field(widget=forms.MultipleHiddenInput, error_messages={"required": "Select at least one bill."})

    def clean_ids(self):
        ids = [value for value in self.cleaned_data.get("ids") or [] if value]   # 🧹 drop blanks
        if not ids:
            raise ValidationError("Select at least one bill.")
        return ids


class BillBulkEditForm(BillSelectionForm):
    """Apply the same paid status and/or category to many bills."""

    PAID_CHOICES = (("", "Keep as is"), ("true", "Paid"), ("false", "Unpaid"))

    is_paid = forms.ChoiceField(choices=PAID_CHOICES, required=False, label="Status")
    category = forms.ChoiceField(choices=[("", "Keep as is")] + _choices(BILL_CATEGORIES), required=False)

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get("is_paid") and not cleaned.get("category"):
            raise ValidationError("Choose at least one change to apply.")
        return cleaned

    def to_updates(self):
        updates = {}
        if self.cleaned_data.get("is_paid"):
            updates["isPaid"] = self.cleaned_data["is_paid"] == "true"
        if self.cleaned_data.get("category"):
            updates["category"] = self.cleaned_data["category"]
        return updates


# ─────────────────────────────────────────────────────────────────────────────
# 3) Expenses / incomes
# ─────────────────────────────────────────────────────────────────────────────
class ExpenseForm(_AccountFieldMixin, forms.Form):
    description = forms.CharField(max_length=200, widget=forms.TextInput(attrs={"placeholder": "Short description"}))
    amount = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), widget=MONEY_INPUT)
    date = forms.DateField(widget=DATE_INPUT)
    category = forms.ChoiceField(choices=[("", "Select a category")] + _choices(EXPENSE_CATEGORIES))
    bank_account = forms.ChoiceField(choices=())
    is_recurring = forms.BooleanField(required=False, label="Recurring expense")
    recurring_interval = forms.ChoiceField(choices=[("", "—")] + list(RECURRING_INTERVALS), required=False)
    recurring_end_date = forms.DateField(required=False, widget=DATE_INPUT)

    def __init__(self, *args, **kwargs):
        accounts = kwargs.pop("accounts", [])
        self.instance = kwargs.pop("instance", None)
        if self.instance is not None:
            kwargs.setdefault("initial", {
                "description": self.instance.description,
                "amount": self.instance.amount,
                "date": self.instance.date,
                "category": self.instance.category,
                "bank_account": self.instance.bank_account_id,
                "is_recurring": self.instance.is_recurring,
                "recurring_interval": self.instance.recurring_interval or "",
                "recurring_end_date": self.instance.recurring_end_date,
            })
        else:
            kwargs.setdefault("initial", {"date": date.today()})
        super().__init__(*args, **kwargs)
        self._setup_accounts(accounts)

    def clean_description(self):
        text = _norm_name(self.cleaned_data.get("description"))
        if not _has_letter(text):
            raise ValidationError("Description must contain at least one alphabetic character")
        return text

    def clean_date(self):
        value = self.cleaned_data.get("date")
        if value and value > date.today():
            raise ValidationError("Expense date cannot be in the future")
        return value

    def clean(self):
        cleaned = super().clean()
        if self.instance is None:                                # edits were charged already
            self._check_balance(cleaned)
        if cleaned.get("is_recurring"):
            if not cleaned.get("recurring_interval"):
                self.add_error("recurring_interval", "Please select a recurring interval")
            end, start = cleaned.get("recurring_end_date"), cleaned.get("date")
            if end and start and end < start:
                self.add_error("recurring_end_date", "End date must be after the start date")
        return cleaned

    def to_payload(self):
        data = self.cleaned_data
        payload = {
            "description": data["description"],
            "amount": _money(data["amount"]),
            "date": data["date"].isoformat(),
            "category": data["category"],
            "bankAccount": data["bank_account"],
            "isRecurring": data["is_recurring"],
        }
        if data["is_recurring"]:
            payload["recurringInterval"] = data["recurring_interval"]
            if data.get("recurring_end_date"):
                payload["recurringEndDate"] = data["recurring_end_date"].isoformat()
        return payload


class IncomeForm(_AccountFieldMixin, forms.Form):
    description = forms.CharField(max_length=200, widget=forms.TextInput(attrs={"placeholder": "e.g., October salary"}))
    amount = forms.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), widget=MONEY_INPUT)
    date = forms.DateField(widget=DATE_INPUT)
    category = forms.ChoiceField(choices=[("", "Select a category")] + _choices(INCOME_CATEGORIES))
    bank_account = forms.ChoiceField(choices=())
    notes = forms.CharField(
        required=False,
        max_length=500,
        error_messages={"max_length": "Notes must be less than 500 characters"},
        widget=forms.Textarea(attrs={"rows": 3, "placeholder": "Optional notes"}),
    )

    def __init__(self, *args, **kwargs):
        accounts = kwargs.pop("accounts", [])
        self.instance = kwargs.pop("instance", None)
        if self.instance is not None:
            kwargs.setdefault("initial", {
                "description": self.instance.description,
                "amount": self.instance.amount,
                "date": self.instance.date,
                "category": self.instance.category,
                "bank_account": self.instance.bank_account_id,
                "notes": self.instance.notes,
            })
        else:
            kwargs.setdefault("initial", {"date": date.today()})
        super().__init__(*args, **kwargs)
        self._setup_accounts(accounts)

    def clean_description(self):
        text = _norm_name(self.cleaned_data.get("description"))
        if not _has_letter(text):
            raise ValidationError("Description must contain at least one alphabetic character")
        return text

    def clean_date(self):
        value = self.cleaned_data.get("date")
        if value and value > date.today():
            raise ValidationError("Income date cannot be in the future")
        return value

    def to_payload(self):
        data = self.cleaned_data
        return {
            "description": data["description"],
            "amount": _money(data["amount"]),
            "date": data["date"].isoformat(),
            "category": data["category"],
            "bankAccount": data["bank_account"],
            "notes": data.get("notes") or "",
        }


# ─────────────────────────────────────────────────────────────────────────────
# 4) Goals
# ─────────────────────────────────────────────────────────────────────────────
class GoalForm(forms.Form):
    name = forms.CharField(max_length=100, widget=forms.TextInput(attrs={"placeholder": "e.g., Emergency fund"}))
    target_amount = forms.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01"), widget=MONEY_INPUT,
        error_messages={"min_value": "Please enter a valid target amount"},
    )
    target_date = forms.DateField(widget=DATE_INPUT)
    description = forms.CharField(required=False, max_length=500, widget=forms.Textarea(attrs={"rows": 3}))
    monthly_contribution = forms.DecimalField(
        required=False, max_digits=12, decimal_places=2, min_value=0, widget=MONEY_INPUT,
        help_text="Leave empty to have it worked out from the target date.",
    )

    def __init__(self, *args, **kwargs):
        self.instance = kwargs.pop("instance", None)
        if self.instance is not None:
            kwargs.setdefault("initial", {
                "name": self.instance.name,
                "target_amount": self.instance.target_amount,
                "target_date": self.instance.target_date,
                "description": self.instance.description,
                "monthly_contribution": self.instance.monthly_contribution,
            })
        super().__init__(*args, **kwargs)

    def clean_name(self):
        name = _norm_name(self.cleaned_data.get("name"))
        if not name:
            raise ValidationError("Goal name is required")
        return name

    def clean_target_date(self):
        value = self.cleaned_data.get("target_date")
        if value and value <= date.today():
            raise ValidationError("Target date must be in the future")
        return value

    def to_payload(self):
        data = self.cleaned_data
        payload = {
            "name": data["name"],
            "targetAmount": _money(data["target_amount"]),
            "targetDate": data["target_date"].isoformat(),
            "description": data.get("description") or "",
        }
        if data.get("monthly_contribution") is not None:
            payload["monthlyContribution"] = _money(data["monthly_contribution"])
        return payload


class ContributionForm(_AccountFieldMixin, forms.Form):
    account_empty_label = "No bank account"

    amount = forms.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01"), widget=MONEY_INPUT,
        error_messages={"min_value": "Please enter a valid amount"},
    )
    description = forms.CharField(required=False, max_length=200)
    bank_account = forms.ChoiceField(choices=(), required=False)

    def __init__(self, *args, **kwargs):
        accounts = kwargs.pop("accounts", [])
        super().__init__(*args, **kwargs)
        self._setup_accounts(accounts)

    def clean(self):
        cleaned = super().clean()
        self._check_balance(cleaned)
        return cleaned


# ─────────────────────────────────────────────────────────────────────────────
# 5) Filters (GET forms for the list pages)
# ─────────────────────────────────────────────────────────────────────────────
class BillFilterForm(forms.Form):
    STATUS_CHOICES = (("all", "All"), ("unpaid", "Unpaid"), ("paid", "Paid"), ("upcoming", "Upcoming"))

    status = forms.ChoiceField(choices=STATUS_CHOICES, required=False)

    def api_filters(self):
        """{is_paid, upcoming} for finance.api.list_bills."""
        status = self.cleaned_data.get("status") if self.is_valid() else "all"
        return {
            "is_paid": {"paid": True, "unpaid": False}.get(status),
            "upcoming": status == "upcoming",
        }


class TransactionFilterForm(forms.Form):
    """Date range, category and search text for expenses and incomes."""

    start_date = forms.DateField(required=False, widget=DATE_INPUT)
    end_date = forms.DateField(required=False, widget=DATE_INPUT)
    category = forms.ChoiceField(required=False)
    search = forms.CharField(required=False, widget=forms.TextInput(attrs={"placeholder": "Search description"}))

    def __init__(self, *args, **kwargs):
        categories = kwargs.pop("categories", [])
        super().__init__(*args, **kwargs)
        self.fields["category"].choices = [("", "All categories")] + _choices(categories)

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end and start > end:
            self.add_error("end_date", "End date must be on or after the start date.")
        return cleaned

    def api_filters(self):
        if not self.is_valid():
            return {}
        data = self.cleaned_data
        return {
            "start_date": data.get("start_date"),
            "end_date": data.get("end_date"),
            "category": data.get("category") or None,
            "search": _norm_name(data.get("search")) or None,
        }


class GoalFilterForm(forms.Form):
    DIRECTION_CHOICES = (("asc", "Ascending"), ("desc", "Descending"))

    search = forms.CharField(required=False, widget=forms.TextInput(attrs={"placeholder": "Search goals"}))
    status = forms.ChoiceField(choices=[(s, s.title()) for s in GOAL_STATUSES], required=False)
    sort = forms.ChoiceField(choices=[
        ("targetDate", "Target date"),
        ("name", "Name"),
        ("targetAmount", "Target amount"),
        ("savedAmount", "Saved amount"),
        ("progress", "Progress"),
    ], required=False)
    direction = forms.ChoiceField(choices=DIRECTION_CHOICES, required=False)

    def options(self):
        """Validated (search, status, sort, direction); a bad field falls back on its own."""
        self.is_valid()                                  # invalid fields stay out of cleaned_data
        data = getattr(self, "cleaned_data", {})         # unbound form → all defaults
        sort = data.get("sort") or "targetDate"
        return (
            data.get("search") or "",
            data.get("status") or "all",
            sort if sort in GOAL_SORT_KEYS else "targetDate",
            data.get("direction") or "asc",
        )
