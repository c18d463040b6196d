# accounts/middleware.py
# 🔒 API failures that escape a view:
#    • 401 (expired/revoked token): sign the user out, back to the login page
#    • anything else: flash the message and fall back to the dashboard

import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, resolve_url

from smartspend.exceptions import ApiAuthenticationError, ApiError

from .session import is_signed_in, redirect_to_login, sign_out

logger = logging.getLogger(__name__)


class ApiSessionMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, ApiError):
            return None                                     # let Django handle everything else

        if isinstance(exception, ApiAuthenticationError):
            if is_signed_in(request):
                logger.info("API rejected the session token; signing out")
            sign_out(request)
            messages.warning(request, exception.message)
            return redirect_to_login(request)

        logger.warning("Unhandled API error on %s: %s (status=%s)", request.path, exception.message, exception.status)
        fallback = resolve_url(settings.LOGIN_REDIRECT_URL)
        if request.path == fallback:
            return None                                     # the dashboard itself failed: 500 page
        messages.error(request, exception.message)
        return redirect(fallback)
