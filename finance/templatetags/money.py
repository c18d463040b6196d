# finance/templatetags/money.py
# 💷 Template helpers for amounts: {% load money %}
#    {{ amount|money:currency }}  → "USD 1,234.50"
#    {{ value|signed_money:currency }} → "+USD 20.00" / "-USD 5.00"
#    {{ part|percent_of:whole }} → 12.5

from django import template

from accounts.models import DEFAULT_CURRENCY

register = template.Library()


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@register.filter
def money(value, currency=None):
    """Currency code, a space, then the amount with thousands separators."""
    return f"{currency or DEFAULT_CURRENCY} {_to_float(value):,.2f}"


@register.filter
def signed_money(value, currency=None):
    amount = _to_float(value)
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{money(abs(amount), currency)}"


@register.filter
def percent_of(part, whole):
    """Share of `whole` in percent (one decimal), 0 when whole is 0."""
    whole = _to_float(whole)
    if not whole:
        return 0
    return round(_to_float(part) / whole * 100, 1)
