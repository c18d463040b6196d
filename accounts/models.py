# accounts/models.py
# 🧱 The signed-in user as the API describes it, plus per-user preferences.
#    Nothing is stored locally: the user lives in the session (accounts/session.py).

from datetime import datetime
from urllib.parse import quote
from typing import Optional

from pydantic import AliasChoices, Field

from smartspend.dto import ApiModel

# ✅ Central list of currencies (code → label); used by forms & templates
CURRENCY_CHOICES = [
    ("Rs", "Rs Sri Lankan Rupee (Rs)"),
    ("USD", "$ United States Dollar (USD)"),
    ("EUR", "€ Euro (EUR)"),
    ("GBP", "£ British Pound (GBP)"),
    ("JPY", "¥ Japanese Yen (JPY)"),
    ("CAD", "C$ Canadian Dollar (CAD)"),
]

DEFAULT_CURRENCY = "USD"


class Preferences(ApiModel):
    currency: str = DEFAULT_CURRENCY


class User(ApiModel):
    """
    📄 The user record returned by /auth/me, /auth/login, /auth/verify-otp…
    - preferences.currency: how we display money
    """

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    email: str = ""
    avatar: Optional[str] = None
    preferences: Optional[Preferences] = None
    created_at: Optional[datetime] = None

    def __str__(self):
        return self.name or self.email

    @property
    def currency(self):
        if self.preferences and self.preferences.currency:
            return self.preferences.currency
        return DEFAULT_CURRENCY

    @property
    def avatar_url(self):
        """The stored avatar, or a generated initials image."""
        if self.avatar:
            # Google avatars carry a "=s96-c" size suffix
            return self.avatar.split("=")[0]
        return f"https://ui-avatars.com/api/?name={quote(self.name or 'User')}&background=6366f1&color=fff"

    @property
    def delete_confirmation(self):
        """Text the user must type to delete their profile."""
        return f"{self.name}/delete"


class ActivityStats(ApiModel):
    """Record counts from /auth/profile/stats."""

    bills: int = 0
    expenses: int = 0
    warranties: int = 0
    incomes: int = 0
    total: int = 0

    def clearable(self):
        """Record types that currently have entries (for 'clear records')."""
        return [name for name in ("bills", "expenses", "warranties", "incomes") if getattr(self, name) > 0]
