# tests/test_templatetags.py

from django.template import Context, Template

from finance.templatetags.money import money, percent_of, signed_money


def test_money():
    assert money(1234.5, "USD") == "USD 1,234.50"
    assert money("7", None) == "USD 7.00"
    assert money(None, "EUR") == "EUR 0.00"


def test_signed_money():
    assert signed_money(20, "GBP") == "+GBP 20.00"
    assert signed_money(-5, "GBP") == "-GBP 5.00"


def test_percent_of():
    assert percent_of(25, 200) == 12.5
    assert percent_of(25, 0) == 0


def test_filters_in_a_template():
    rendered = Template("{% load money %}{{ amount|money:currency }}").render(
        Context({"amount": 99.999, "currency": "JPY"})
    )
    assert rendered == "JPY 100.00"
