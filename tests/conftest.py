# tests/conftest.py
# Shared fixtures: API-shaped records and a client that is already signed in.

from datetime import date, timedelta

import pytest

from finance.models import BankAccount, Bill, Goal

USER = {
    "id": "u1",
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "avatar": None,
    "preferences": {"currency": "EUR"},
}


@pytest.fixture(autouse=True)
def _api_settings(settings):
    settings.SMARTSPEND_API_URL = "http://api.test/api"
    settings.GOOGLE_CLIENT_ID = "google-client-id"


@pytest.fixture
def signed_in_client(client):
    """Django test client with an API token and cached user in the session."""
    session = client.session
    session["api_token"] = "jwt-token"
    session["api_user"] = dict(USER)
    session.save()
    return client


@pytest.fixture
def account():
    return BankAccount.model_validate({
        "_id": "acc1",
        "bankName": "HSBC",
        "accountName": "Everyday",
        "accountType": "Checking",
        "initialBalance": 1000,
        "currentBalance": 1250,
    })


@pytest.fixture
def bill():
    return Bill.model_validate({
        "_id": "bill1",
        "name": "Electricity",
        "amount": 80,
        "dueDate": (date.today() + timedelta(days=2)).isoformat(),
        "reminderDate": date.today().isoformat(),
        "category": "Electricity",
        "isPaid": False,
        "bankAccount": "acc1",
    })


@pytest.fixture
def goal():
    return Goal.model_validate({
        "_id": "goal1",
        "name": "Holiday",
        "targetAmount": 1200,
        "savedAmount": 300,
        "startDate": "2025-01-01T00:00:00.000Z",
        "targetDate": (date.today() + timedelta(days=200)).isoformat(),
        "description": "Two weeks in Portugal",
    })
