# smartspend/client.py
# ─────────────────────────────────────────────────────────────────────────────
# Thin REST client for the SmartSpend API.
#   • One requests.Session per Django request (Bearer token from the session)
#   • JSON in / JSON out, multipart when files are sent
#   • Every non-2xx answer becomes an ApiError subclass (see exceptions.py)
# ─────────────────────────────────────────────────────────────────────────────

import logging

import requests
from django.conf import settings

from .exceptions import ApiNetworkError, error_for_status

logger = logging.getLogger(__name__)

# Session key holding the API bearer token (written by accounts.session)
TOKEN_SESSION_KEY = "api_token"


def _error_message(response):
    """Pull a human message out of an error response body."""
    try:
        payload = response.json()
    except ValueError:
        return None, None

    if not isinstance(payload, dict):
        return None, payload

    # express handlers use "message", some routes "msg" or "error",
    # express-validator sends {"errors": [{"msg": ...}, ...]}
    for key in ("message", "msg", "error"):
        if payload.get(key):
            return str(payload[key]), payload
    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return errors[0].get("msg"), payload
    return None, payload


class ApiClient:
    """Small wrapper around requests.Session bound to one API token."""

    def __init__(self, token=None, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or settings.SMARTSPEND_API_URL).rstrip("/")   # 🔗 e.g. http://localhost:5000/api
        self.timeout = timeout or settings.SMARTSPEND_API_TIMEOUT              # ⏱️ seconds
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"         # 🔐 JWT from login

    def url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method, path, **kwargs):
        """Send a request and return the decoded JSON body (or None)."""
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.request(method, self.url(path), **kwargs)
        except requests.RequestException as exc:
            logger.warning("API %s %s failed: %s", method, path, exc)
            raise ApiNetworkError() from exc                 # 🌐 DNS, refused, timeout…

        if not response.ok:
            message, payload = _error_message(response)
            logger.info("API %s %s -> %s (%s)", method, path, response.status_code, message)
            raise error_for_status(response.status_code, message, payload)   # 🚫 401 → ApiAuthenticationError, …

        if response.status_code == 204 or not response.content:
            return None                                      # ✅ empty success
        try:
            return response.json()
        except ValueError:
            # plain-text success bodies ("Bank account removed")
            return response.text

    def get(self, path, params=None):
        return self.request("GET", path, params=params)

    def post(self, path, json=None, **kwargs):
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path, json=None, **kwargs):
        return self.request("PUT", path, json=json, **kwargs)

    def patch(self, path, json=None):
        return self.request("PATCH", path, json=json)

    def delete(self, path, json=None, params=None):
        return self.request("DELETE", path, json=json, params=params)


def client_for(request):
    """Return an ApiClient carrying the signed-in user's token (if any)."""
    token = request.session.get(TOKEN_SESSION_KEY) if hasattr(request, "session") else None
    return ApiClient(token=token)
