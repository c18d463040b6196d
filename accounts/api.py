# accounts/api.py
# 🔌 Auth, profile and WebAuthn endpoints of the SmartSpend API.
#    Each function takes the Django request (for the session token) and
#    returns plain data or accounts.models objects. Errors propagate as ApiError.

from smartspend.client import ApiClient, client_for

from .models import ActivityStats, User


# ===== Sign-in / registration ================================================

def login(email, password):
    """POST /auth/login → (token, User)."""
    data = ApiClient().post("/auth/login", {"email": email, "password": password})
    return data["token"], User.model_validate(data["user"])


def register(name, email, password):
    """POST /auth/register; the API emails an OTP."""
    return ApiClient().post("/auth/register", {"name": name, "email": email, "password": password})


def verify_otp(email, otp):
    """POST /auth/verify-otp → (token, User)."""
    data = ApiClient().post("/auth/verify-otp", {"email": email, "otp": otp})
    return data["token"], User.model_validate(data["user"])


def resend_otp(email):
    return ApiClient().post("/auth/resend-otp", {"email": email})


def google_login(credential):
    """Exchange a Google ID token for an API session → (token, User)."""
    data = ApiClient().post("/auth/google", {"token": credential})
    return data["token"], User.model_validate(data["user"])


def is_google_user(email):
    data = ApiClient().post("/auth/check-google-user", {"email": email}) or {}
    return bool(data.get("isGoogleUser"))


def forgot_password(email):
    return ApiClient().post("/auth/forgot-password", {"email": email})


def reset_password(email, otp, password):
    return ApiClient().post("/auth/reset-password", {"email": email, "otp": otp, "password": password})


# ===== Profile ===============================================================

def get_me(request):
    return User.model_validate(client_for(request).get("/auth/me"))


def get_profile_stats(request):
    data = client_for(request).get("/auth/profile/stats") or {}
    return ActivityStats.model_validate(data.get("activity") or {})


def update_profile(request, name, email, avatar=None):
    """Multipart PUT /auth/profile (name, email and an optional avatar file)."""
    files = None
    if avatar is not None:
        avatar.seek(0)
        files = {"avatar": (avatar.name, avatar.read(), avatar.content_type)}
    data = client_for(request).request(
        "PUT", "/auth/profile", data={"name": name, "email": email}, files=files,
    )
    return User.model_validate(data["user"])


def remove_avatar(request):
    data = client_for(request).delete("/auth/profile/avatar")
    return User.model_validate(data["user"])


def update_currency(request, currency):
    """PUT /auth/currency → the new preferences dict."""
    data = client_for(request).put("/auth/currency", {"currency": currency})
    return data["user"]["preferences"]


def delete_profile(request):
    return client_for(request).delete("/auth/profile")


def clear_records(request, records):
    """DELETE /user/records for the chosen record types."""
    return client_for(request).delete("/user/records", json={"records": list(records)})


# ===== WebAuthn (fingerprint) ================================================

def webauthn_register_options(request):
    return client_for(request).get("/webauthn/register-options")


def webauthn_register(request, attestation):
    return client_for(request).post("/webauthn/register", attestation)


def webauthn_login_options(request):
    return client_for(request).get("/webauthn/login-options")


def webauthn_login(request, assertion):
    """POST /webauthn/login with the assertion (+ email) → raw response dict."""
    return client_for(request).post("/webauthn/login", assertion)
