# accounts/context_processors.py

from .models import DEFAULT_CURRENCY
from .session import current_user


def api_user(request):
    """Expose the signed-in API user and their currency code to every template."""
    user = current_user(request)
    return {
        "api_user": user,
        "currency": user.currency if user else DEFAULT_CURRENCY,
    }
