# accounts/validators.py
# 🔐 Password strength rules shared by the register and reset-password forms.

import re
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError

SPECIAL_CHARACTERS = "@$!%*?&"

# (test, message) in the order the messages are shown
_RULES = (
    (lambda p: len(p) >= 8, "Password must be at least 8 characters long"),
    (lambda p: re.search(r"[a-z]", p) is not None, "Password must contain at least one lowercase letter"),
    (lambda p: re.search(r"[A-Z]", p) is not None, "Password must contain at least one uppercase letter"),
    (lambda p: re.search(r"\d", p) is not None, "Password must contain at least one number"),
    (lambda p: re.search(r"[@$!%*?&]", p) is not None,
     f"Password must contain at least one special character ({SPECIAL_CHARACTERS})"),
)


@dataclass
class PasswordStrength:
    errors: list = field(default_factory=list)
    strength: str = "weak"                  # weak | medium | strong

    @property
    def is_valid(self):
        return not self.errors


def check_password_strength(password):
    """Return which rules fail and an overall weak/medium/strong rating."""
    password = password or ""
    errors = [message for test, message in _RULES if not test(password)]
    passed = len(_RULES) - len(errors)

    if passed == len(_RULES):
        strength = "strong"
    elif passed >= 3:
        strength = "medium"
    else:
        strength = "weak"
    return PasswordStrength(errors=errors, strength=strength)


def validate_password_strength(password):
    """Form-field validator: raise every failing rule at once."""
    result = check_password_strength(password)
    if not result.is_valid:
        raise ValidationError(result.errors)
