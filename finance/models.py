# finance/models.py

# ✅ The records the SmartSpend API hands us (bank accounts, bills, expenses,
#    incomes, goals, achievements) as pydantic models.
#    Nothing here touches a database; the API owns the data, we only display it
#    and compute a few derived values (deltas, goal progress, bill status).

import math
from datetime import date
from typing import Any, List, Optional

from pydantic import Field

from smartspend.dto import ApiDate, ApiDocument, ApiModel, OptionalApiDate

# ✅ Bank account kinds the API accepts (value, label)
ACCOUNT_TYPES = (
    ("Checking", "Checking"),
    ("Savings", "Savings"),
    ("Credit Card", "Credit Card"),
    ("Investment", "Investment"),
    ("Other", "Other"),
)

# ✅ Fixed category lists (the API validates against the same names)
BILL_CATEGORIES = [
    "Rent / Mortgage",
    "Electricity",
    "Water",
    "Internet",
    "Mobile Phone",
    "Streaming Services",
    "Credit Card Payments",
    "Loan Payments",
    "Insurance (Health/Auto/Home)",
    "Gym Membership",
    "School Tuition / Fees",
    "Cloud / SaaS Services",
    "Taxes",
    "Security / Alarm Services",
    "Other Utilities",
]

EXPENSE_CATEGORIES = [
    "Groceries",
    "Transportation",
    "Rent/Housing",
    "Utilities",
    "Debit",
    "Health & Fitness",
    "Dining Out",
    "Education",
    "Insurance",
    "Other Expense",
    "Paid Bill",
]

INCOME_CATEGORIES = ["Salary", "Freelance", "Investment", "Business", "Rental", "Gift", "Other"]

RECURRING_INTERVALS = (
    ("daily", "Daily"),
    ("weekly", "Weekly"),
    ("monthly", "Monthly"),
    ("yearly", "Yearly"),
)


def _round_half_up(value):
    """0.5 always rounds up (Python's round() would round half to even)."""
    return math.floor(value + 0.5)


def _months_between(start, end):
    """Calendar months from start to end; the day of the month is ignored."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def _account_ref(value):
    """A bank account reference is either an id or an embedded account object."""
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value or None


def _account_label(value):
    if isinstance(value, dict):
        return " • ".join(part for part in (value.get("bankName"), value.get("accountName")) if part)
    return ""


class BankAccount(ApiDocument):
    bank_name: str = ""
    account_name: str = ""
    account_type: str = "Checking"
    initial_balance: float = 0                   # 💰 balance when the account was added
    current_balance: float = 0                   # 💰 after every income, expense and paid bill

    def __str__(self):
        return f"{self.bank_name} • {self.account_name}"

    @property
    def delta(self):
        """How far the balance moved since the account was added."""
        return self.current_balance - self.initial_balance

    @property
    def delta_percentage(self):
        if not self.initial_balance:
            return 0                             # ← avoid dividing by zero
        return self.delta / self.initial_balance * 100


class Bill(ApiDocument):
    """
    A payable with a due date.
    Status: Paid, Overdue (due before today) or Pending (today or later).
    """

    name: str = ""
    amount: float = 0
    due_date: ApiDate
    category: str = ""
    is_paid: bool = False
    reminder_date: OptionalApiDate = None        # 🔔 optional reminder day
    notes: Optional[str] = None
    bank_account: Any = None                     # id string, or the populated account

    def status(self, today=None):
        if self.is_paid:
            return "Paid"
        today = today or date.today()
        if self.due_date < today:                # 📅 due today is still Pending
            return "Overdue"
        return "Pending"

    def days_until_due(self, today=None):
        # ⏳ 0 = due today, negative = overdue
        return (self.due_date - (today or date.today())).days

    @property
    def bank_account_id(self):
        return _account_ref(self.bank_account)

    @property
    def bank_account_label(self):
        return _account_label(self.bank_account)


class Expense(ApiDocument):
    amount: float = 0
    category: str = ""
    date: ApiDate
    description: str = ""
    bank_account: Any = None
    is_recurring: bool = False
    recurring_interval: Optional[str] = None     # daily | weekly | monthly | yearly
    recurring_end_date: OptionalApiDate = None

    @property
    def bank_account_id(self):
        return _account_ref(self.bank_account)

    @property
    def bank_account_label(self):
        return _account_label(self.bank_account)


class Income(ApiDocument):
    amount: float = 0
    category: str = ""
    date: ApiDate
    description: str = ""
    notes: Optional[str] = None
    bank_account: Any = None

    @property
    def bank_account_id(self):
        return _account_ref(self.bank_account)

    @property
    def bank_account_label(self):
        return _account_label(self.bank_account)


class Contribution(ApiModel):
    amount: float = 0
    date: OptionalApiDate = None
    description: Optional[str] = ""
    bank_account: Any = None                     # 🏦 debited account (optional)


class Goal(ApiDocument):
    """
    A savings target.
    - progress: percent saved, rounded half-up and capped at 100
    - monthly_saving: what to put aside each month to hit the target date
    """

    name: str = ""
    target_amount: float = 0
    saved_amount: float = 0
    start_date: OptionalApiDate = None
    target_date: ApiDate
    description: Optional[str] = ""
    monthly_contribution: Optional[float] = None
    contributions: List[Contribution] = Field(default_factory=list)

    @property
    def progress(self):
        if self.target_amount <= 0:
            return 0
        return min(100, _round_half_up(self.saved_amount / self.target_amount * 100))   # 🎯 0..100

    @property
    def is_completed(self):
        return self.progress >= 100

    @property
    def remaining_amount(self):
        return max(0, self.target_amount - self.saved_amount)

    @property
    def monthly_saving(self):
        if self.monthly_contribution and self.monthly_contribution > 0:
            return self.monthly_contribution     # ✅ user-chosen amount wins
        start = self.start_date or date.today()
        months = _months_between(start, self.target_date)       # Jan 31 → Mar 1 counts as 2
        if months <= 0:
            return self.target_amount            # ⚠️ target month already reached
        return max(0, _round_half_up((self.target_amount - self.saved_amount) / months))

    def days_remaining(self, today=None):
        """Days until the target date (negative once it has passed)."""
        return (self.target_date - (today or date.today())).days


class Achievement(ApiDocument):
    title: str = ""
    description: str = ""
    type: str = "milestone"                  # goal_completed | streak | milestone | first_contribution
    value: Optional[float] = None
    icon: Optional[str] = None
    earned_at: OptionalApiDate = None
    is_seen: bool = False


def group_achievements(achievements):
    """Split badges into the three sections of the achievements page."""
    groups = {"goals": [], "milestones": [], "other": []}    # 🏆 streaks + first contributions land in "other"
    for achievement in achievements:
        if achievement.type == "goal_completed":
            groups["goals"].append(achievement)
        elif achievement.type == "milestone":
            groups["milestones"].append(achievement)
        else:
            groups["other"].append(achievement)
    return groups


# ─────────────────────────────────────────────────────────────────────────────
# Summaries (dashboard + monthly breakdown)
# ─────────────────────────────────────────────────────────────────────────────
class MonthTotal(ApiModel):
    """One of the twelve rows of /expenses/summary/monthly."""

    month: int
    total: float = 0
    count: int = 0


class CategorySpend(ApiModel):
    """{_id: category, total} rows of /expenses/summary/category."""

    category: str = Field(default="", alias="_id")
    total: float = 0
    count: int = 0


class CategoryTotal(ApiModel):
    category: str = ""
    total: float = 0
    count: int = 0


class ExpenseMonthSummary(ApiModel):
    total_amount: float = 0
    total_count: int = 0
    category_breakdown: List[CategoryTotal] = Field(default_factory=list)
    average_amount: float = 0


class BillMonthSummary(ApiModel):
    total_amount: float = 0
    paid_amount: float = 0
    unpaid_amount: float = 0
    total_count: int = 0
    paid_count: int = 0
    unpaid_count: int = 0


class MonthlyExpenses(ApiModel):
    expenses: List[Expense] = Field(default_factory=list)
    summary: ExpenseMonthSummary = Field(default_factory=ExpenseMonthSummary)


class MonthlyBills(ApiModel):
    bills: List[Bill] = Field(default_factory=list)
    summary: BillMonthSummary = Field(default_factory=BillMonthSummary)


class Pagination(ApiModel):
    """Page info returned next to paginated lists."""

    page: int = 1
    total: int = 0
    pages: int = 1

    @property
    def has_previous(self):
        return self.page > 1

    @property
    def has_next(self):
        return self.page < self.pages


# ─────────────────────────────────────────────────────────────────────────────
# Financial health (dashboard panel; the API does the maths)
# ─────────────────────────────────────────────────────────────────────────────
class MetricChange(ApiModel):
    current: float = 0
    previous: float = 0
    change: float = 0                            # percent vs last month
    change_type: str = ""                        # increase | decrease


class MonthlyComparison(ApiModel):
    incomes: MetricChange = Field(default_factory=MetricChange)
    expenses: MetricChange = Field(default_factory=MetricChange)
    bills: MetricChange = Field(default_factory=MetricChange)
    payment_rate: MetricChange = Field(default_factory=MetricChange)


class HealthSuggestion(ApiModel):
    type: str = "info"                           # critical | warning | success | info
    title: str = ""
    description: str = ""
    impact: str = ""


class FinancialHealth(ApiModel):
    """
    /financial-health: this month's incomes minus expenses and bills
    (healthScore), a month-over-month comparison and tips.
    """

    health_score: float = 0
    monthly_comparison: MonthlyComparison = Field(default_factory=MonthlyComparison)
    suggestions: List[HealthSuggestion] = Field(default_factory=list)
    last_updated: Optional[str] = None

    @property
    def tone(self):
        if self.health_score > 0:
            return "surplus"
        if self.health_score == 0:
            return "even"
        return "deficit"

    @property
    def verdict(self):
        return {
            "surplus": ("Healthy Surplus!", "You're managing your money well."),
            "even": ("Breaking Even.", "Your income matches your expenses."),
            "deficit": ("Running a Deficit.", "You're spending more than you earn."),
        }[self.tone]
