# accounts/session.py
# ─────────────────────────────────────────────────────────────────────────────
# Session-backed sign-in.
#   The API issues a JWT; we keep it (and a cached copy of the user) in the
#   Django session. This module replaces django.contrib.auth for the client:
#     • sign_in / sign_out / current_user
#     • login_required decorator + LoginRequiredMixin for class-based views
# ─────────────────────────────────────────────────────────────────────────────

import logging
from functools import wraps
from urllib.parse import urlencode

from django.conf import settings
from django.shortcuts import redirect, resolve_url

from smartspend.client import TOKEN_SESSION_KEY

from .models import User

logger = logging.getLogger(__name__)

USER_SESSION_KEY = "api_user"


def sign_in(request, token, user_data):
    """Store the token + user under a new session key."""
    request.session.cycle_key()
    request.session[TOKEN_SESSION_KEY] = token
    store_user(request, user_data)
    logger.info("User %s signed in", request.session[USER_SESSION_KEY].get("email"))


def store_user(request, user_data):
    """Cache the API user record (dict or User) in the session."""
    if not isinstance(user_data, User):
        user_data = User.model_validate(user_data or {})
    request.session[USER_SESSION_KEY] = user_data.model_dump(mode="json")


def sign_out(request):
    """Forget the token and user (keeps nothing of the old session)."""
    request.session.flush()


def is_signed_in(request):
    return bool(getattr(request, "session", None) and request.session.get(TOKEN_SESSION_KEY))


def current_user(request):
    """Return the cached User (or None when signed out)."""
    if not is_signed_in(request):
        return None
    data = request.session.get(USER_SESSION_KEY) or {}
    if not data.get("id"):
        return None
    return User.model_validate(data)


def redirect_to_login(request):
    """Send the browser to the login page, remembering where it was going."""
    login_url = resolve_url(settings.LOGIN_URL)
    return redirect(f"{login_url}?{urlencode({'next': request.get_full_path()})}")


def login_required(view_func):
    """Function-view decorator: require an API token in the session."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not is_signed_in(request):
            return redirect_to_login(request)
        return view_func(request, *args, **kwargs)
    return _wrapped


class LoginRequiredMixin:
    """Class-based-view mixin mirroring django.contrib.auth's, for API sessions."""

    def dispatch(self, request, *args, **kwargs):
        if not is_signed_in(request):
            return redirect_to_login(request)
        return super().dispatch(request, *args, **kwargs)
