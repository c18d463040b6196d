# tests/test_validators.py

import pytest
from django.core.exceptions import ValidationError

from accounts.validators import check_password_strength, validate_password_strength


@pytest.mark.parametrize("password, strength", [
    ("", "weak"),
    ("abc", "weak"),
    ("abcdefgh1", "medium"),
    ("Abcdefgh1", "medium"),
    ("Abcdefg1!", "strong"),
])
def test_strength_rating(password, strength):
    assert check_password_strength(password).strength == strength


def test_failing_rules_are_listed_in_order():
    result = check_password_strength("abc")
    assert result.errors == [
        "Password must be at least 8 characters long",
        "Password must contain at least one uppercase letter",
        "Password must contain at least one number",
        "Password must contain at least one special character (@$!%*?&)",
    ]
    assert not result.is_valid


def test_validator_raises_every_message():
    with pytest.raises(ValidationError) as excinfo:
        validate_password_strength("short")
    assert len(excinfo.value.messages) == 4

    validate_password_strength("Str0ng&Secure")              # no exception
