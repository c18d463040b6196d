# accounts/views.py
# ─────────────────────────────────────────────────────────────────────────────
# ✅ Sign-in screens and the profile pages.
#    This file includes:
#      • Login / register (one page, two tabs) + OTP verification
#      • Forgot / reset password
#      • Google sign-in (ID-token POST) and WebAuthn (fingerprint) JSON glue
#      • Logout, profile (name/avatar/currency), delete profile, clear records
#      • Customize: record statistics
# ─────────────────────────────────────────────────────────────────────────────

import json
import logging

from django.conf import settings
from django.contrib import messages
from django.http import HttpResponseBadRequest, JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from smartspend.exceptions import ApiAuthenticationError, ApiError

from . import api
from .forms import (
    ClearRecordsForm,
    DeleteProfileForm,
    ForgotPasswordForm,
    LoginForm,
    OTPForm,
    ProfileForm,
    RegisterForm,
    ResetPasswordForm,
    WebAuthnLoginForm,
)
from .models import ActivityStats, Preferences
from .session import current_user, is_signed_in, login_required, sign_in, sign_out, store_user
from .validators import check_password_strength

logger = logging.getLogger(__name__)

OTP_EMAIL_SESSION_KEY = "otp_email"          # email waiting for sign-up verification
RESET_EMAIL_SESSION_KEY = "reset_email"      # email waiting for a password reset


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _auth_error_message(exc, fallback, bad_request=None):
    """Map an API failure to the text shown to the user."""
    if exc.status == 400:
        return exc.detail or bad_request or fallback
    if exc.is_server_error:
        return "Server error. Please try again later."
    return exc.detail or (exc.message if exc.status is None else fallback)


def _safe_next(request, default="finance:dashboard"):
    """Return the ?next= target when it points back at this site."""
    target = request.POST.get("next") or request.GET.get("next")
    if target and url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()},
                                                  require_https=request.is_secure()):
        return target
    return reverse(default)


def _json_body(request):
    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _finish_sign_in(request, token, user, message="Logged in successfully"):
    sign_in(request, token, user)
    messages.success(request, message)


# ─────────────────────────────────────────────────────────────────────────────
# 🔑 Login / Register
# ─────────────────────────────────────────────────────────────────────────────
def auth_page(request):
    """
    One page, two tabs ("login" and "register").
    Successful login lands on the dashboard; successful registration moves
    on to OTP verification.
    """
    if is_signed_in(request):
        return redirect("finance:dashboard")

    tab = request.POST.get("tab") or request.GET.get("tab") or "login"
    if tab not in ("login", "register"):
        tab = "login"

    login_form = LoginForm(prefix="login")
    register_form = RegisterForm(prefix="register")

    if request.method == "POST" and tab == "login":
        login_form = LoginForm(request.POST, prefix="login")
        if login_form.is_valid():
            try:
                token, user = api.login(login_form.cleaned_data["email"], login_form.cleaned_data["password"])
            except ApiError as exc:
                messages.error(request, _auth_error_message(exc, "Login failed", "Invalid email or password"))
            else:
                _finish_sign_in(request, token, user)
                return redirect(_safe_next(request))

    elif request.method == "POST":
        register_form = RegisterForm(request.POST, prefix="register")
        if register_form.is_valid():
            data = register_form.cleaned_data
            try:
                api.register(data["name"], data["email"], data["password"])
            except ApiError as exc:
                messages.error(request, _auth_error_message(exc, "Registration failed", "Invalid registration data"))
            else:
                request.session[OTP_EMAIL_SESSION_KEY] = data["email"]
                messages.success(request, "OTP sent to your email. Please verify to continue.")
                return redirect("accounts:verify_otp")

    password_strength = None
    if tab == "register" and register_form.is_bound:
        password_strength = check_password_strength(register_form.data.get("register-password", ""))

    return render(request, "registration/auth.html", {
        "tab": tab,
        "login_form": login_form,
        "register_form": register_form,
        "password_strength": password_strength,
        "next": request.POST.get("next") or request.GET.get("next", ""),
        "google_client_id": settings.GOOGLE_CLIENT_ID,
    })


def verify_otp(request):
    """Confirm the emailed one-time code and sign the new user in."""
    email = request.session.get(OTP_EMAIL_SESSION_KEY)
    if not email:
        messages.error(request, "Email not found. Please register again.")
        return redirect(f"{reverse('accounts:login')}?tab=register")

    form = OTPForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            token, user = api.verify_otp(email, form.cleaned_data["otp"])
        except ApiError as exc:
            form.add_error("otp", exc.detail or "An error occurred during OTP verification.")
        else:
            request.session.pop(OTP_EMAIL_SESSION_KEY, None)
            _finish_sign_in(request, token, user)
            return redirect("finance:dashboard")

    return render(request, "registration/verify_otp.html", {"form": form, "email": email})


@require_POST
def resend_otp(request):
    email = request.session.get(OTP_EMAIL_SESSION_KEY)
    if not email:
        messages.error(request, "Email not found. Please register again.")
        return redirect(f"{reverse('accounts:login')}?tab=register")
    try:
        api.resend_otp(email)
    except ApiError as exc:
        messages.error(request, exc.detail or "An error occurred while resending OTP.")
    else:
        messages.success(request, "A new OTP has been sent to your email.")
    return redirect("accounts:verify_otp")


# ─────────────────────────────────────────────────────────────────────────────
# 🔁 Forgot / reset password
# ─────────────────────────────────────────────────────────────────────────────
def forgot_password(request):
    form = ForgotPasswordForm(request.POST or None)
    google_account = False

    if request.method == "POST" and form.is_valid():
        email = form.cleaned_data["email"]
        try:
            if api.is_google_user(email):
                google_account = True                      # nothing to reset: sign in with Google
            else:
                api.forgot_password(email)
                request.session[RESET_EMAIL_SESSION_KEY] = email
                messages.success(request, "Password reset OTP sent to your email.")
                return redirect("accounts:reset_password")
        except ApiError as exc:
            form.add_error("email", exc.detail or "An error occurred.")

    return render(request, "registration/forgot_password.html", {
        "form": form,
        "google_account": google_account,
    })


def reset_password(request):
    email = request.session.get(RESET_EMAIL_SESSION_KEY)
    if not email:
        return redirect("accounts:forgot_password")

    form = ResetPasswordForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            api.reset_password(email, form.cleaned_data["otp"], form.cleaned_data["password"])
        except ApiError as exc:
            messages.error(request, exc.detail or "Failed to reset password")
        else:
            request.session.pop(RESET_EMAIL_SESSION_KEY, None)
            messages.success(request, "Password has been reset successfully.")
            return redirect("accounts:login")

    password_strength = None
    if form.is_bound:
        password_strength = check_password_strength(form.data.get("password", ""))

    return render(request, "registration/reset_password.html", {
        "form": form,
        "email": email,
        "password_strength": password_strength,
    })


@require_POST
def resend_reset_otp(request):
    email = request.session.get(RESET_EMAIL_SESSION_KEY)
    if not email:
        return redirect("accounts:forgot_password")
    try:
        api.forgot_password(email)
    except ApiError as exc:
        messages.error(request, exc.detail or "Failed to send OTP")
    else:
        messages.success(request, "Password reset OTP sent to your email.")
    return redirect("accounts:reset_password")


# ─────────────────────────────────────────────────────────────────────────────
# 🌐 Google sign-in
#   Google Identity Services posts the ID token ("credential") here, with a
#   g_csrf_token value that must equal the g_csrf_token cookie.
# ─────────────────────────────────────────────────────────────────────────────
@csrf_exempt
@require_POST
def google_login(request):
    posted = request.POST.get("g_csrf_token")
    cookie = request.COOKIES.get("g_csrf_token")
    if not posted or not cookie or posted != cookie:
        logger.warning("Google sign-in rejected: g_csrf_token mismatch")
        return HttpResponseBadRequest("Failed to verify double submit cookie.")

    credential = request.POST.get("credential")
    if not credential:
        return HttpResponseBadRequest("Missing Google credential.")

    try:
        token, user = api.google_login(credential)
    except ApiError as exc:
        messages.error(request, _auth_error_message(exc, "Google login failed", "Google authentication failed"))
        return redirect("accounts:login")

    _finish_sign_in(request, token, user)
    return redirect("finance:dashboard")


# ─────────────────────────────────────────────────────────────────────────────
# 👆 WebAuthn (fingerprint): JSON endpoints used by static/js/webauthn.js
# ─────────────────────────────────────────────────────────────────────────────
def _options_or_error(fetch, request, kind):
    """Fetch ceremony options from the API and make sure they carry a challenge."""
    try:
        options = fetch(request)
    except ApiError as exc:
        return JsonResponse({"message": exc.message}, status=exc.status or 502)
    if not options:
        return JsonResponse(
            {"message": f"Failed to get {kind} options from server. Please try again."}, status=502,
        )
    if not options.get("challenge"):
        return JsonResponse({"message": f"{kind.capitalize()} options are invalid. Please try again."}, status=502)
    return JsonResponse(options)


@require_GET
def webauthn_login_options(request):
    return _options_or_error(api.webauthn_login_options, request, "authentication")


@require_POST
def webauthn_login(request):
    assertion = _json_body(request)
    if not assertion:
        return JsonResponse({"message": "Invalid authentication request."}, status=400)
    email_form = WebAuthnLoginForm({"email": assertion.get("email")})
    if not email_form.is_valid():
        return JsonResponse({"message": "Please enter your email first"}, status=400)
    assertion["email"] = email_form.cleaned_data["email"]

    try:
        data = api.webauthn_login(request, assertion) or {}
    except ApiError as exc:
        if exc.status == 404:
            message = "User not found. Please check your email."
        else:
            message = exc.detail or "Fingerprint authentication failed. Please try again."
        return JsonResponse({"message": message}, status=exc.status or 502)

    if not data.get("token"):
        return JsonResponse({"message": data.get("message") or "Fingerprint authentication failed"}, status=400)

    _finish_sign_in(request, data["token"], data["user"], "Logged in successfully with fingerprint!")
    return JsonResponse({"success": True, "redirect": reverse("finance:dashboard")})


@login_required
@require_GET
def webauthn_register_options(request):
    return _options_or_error(api.webauthn_register_options, request, "registration")


@login_required
@require_POST
def webauthn_register(request):
    attestation = _json_body(request)
    if not attestation:
        return JsonResponse({"message": "Invalid registration request."}, status=400)

    try:
        data = api.webauthn_register(request, attestation) or {}
    except ApiError as exc:
        if exc.status == 404:
            message = "User not found. Please log in again."
        else:
            message = exc.detail or "Failed to enable fingerprint login. Please try again."
        return JsonResponse({"message": message}, status=exc.status or 502)

    if not data.get("success"):
        return JsonResponse({"message": data.get("message") or "Failed to enable fingerprint login"}, status=400)
    return JsonResponse({"success": True, "message": "Fingerprint login enabled successfully!"})


# ─────────────────────────────────────────────────────────────────────────────
# 🚪 Logout
# ─────────────────────────────────────────────────────────────────────────────
@require_POST                                  # ✅ only allow POST (no GET) for logout
def logout_view(request):
    sign_out(request)                          # ✅ clear session
    messages.success(request, "Signed out successfully")  # ✅ feedback
    return redirect("accounts:login")          # ✅ back to login page


# ─────────────────────────────────────────────────────────────────────────────
# 👤 Profile
# ─────────────────────────────────────────────────────────────────────────────
def _profile_stats(request):
    try:
        return api.get_profile_stats(request)
    except ApiAuthenticationError:
        raise                                    # 🔒 middleware signs out
    except ApiError as exc:
        logger.warning("Could not load profile stats: %s", exc.message)
        return ActivityStats()


def _render_profile(request, user, form=None, delete_form=None, clear_form=None, status=200):
    stats = _profile_stats(request)
    return render(request, "accounts/profile.html", {
        "profile_user": user,
        "form": form or ProfileForm(user=user),
        "delete_form": delete_form or DeleteProfileForm(user=user),
        "clear_form": clear_form or ClearRecordsForm(stats=stats),
        "stats": stats,
    }, status=status)


@login_required
def profile(request):
    """Show and save name, avatar and preferred currency."""
    if request.method != "POST":
        user = api.get_me(request)                       # refresh the cached user
        store_user(request, user)
        return _render_profile(request, user)

    user = current_user(request)
    form = ProfileForm(request.POST, request.FILES, user=user)
    if not form.is_valid():
        return _render_profile(request, user, form=form, status=400)

    if not form.has_changes:
        messages.info(request, "No changes to save.")
        return redirect("accounts:profile")

    data = form.cleaned_data
    try:
        if data.get("remove_avatar"):
            user = api.remove_avatar(request)
        if form.name_changed or data.get("avatar"):
            user = api.update_profile(request, data["name"], user.email, data.get("avatar"))
        if form.currency_changed:
            preferences = api.update_currency(request, data["currency"])
            user = user.model_copy(update={"preferences": Preferences.model_validate(preferences)})
    except ApiAuthenticationError:
        raise
    except ApiError as exc:
        logger.warning("Profile update failed: %s", exc.message)
        messages.error(request, "Failed to save changes. Please check your connection and try again.")
        return redirect("accounts:profile")

    store_user(request, user)
    messages.success(request, "Changes saved successfully!")
    return redirect("accounts:profile")


@login_required
@require_POST
def delete_profile(request):
    user = current_user(request)
    form = DeleteProfileForm(request.POST, user=user)
    if not form.is_valid():
        return _render_profile(request, user, delete_form=form, status=400)

    try:
        api.delete_profile(request)
    except ApiAuthenticationError:
        raise
    except ApiError as exc:
        logger.warning("Profile deletion failed: %s", exc.message)
        messages.error(request, "Failed to delete profile. Please try again.")
        return redirect("accounts:profile")

    logger.info("User %s deleted their profile", user.email)
    sign_out(request)
    messages.success(request, "Your profile has been deleted.")
    return redirect("accounts:login")


@login_required
@require_POST
def clear_records(request):
    user = current_user(request)
    form = ClearRecordsForm(request.POST, stats=_profile_stats(request))
    if not form.is_valid():
        return _render_profile(request, user, clear_form=form, status=400)

    try:
        api.clear_records(request, form.cleaned_data["records"])
    except ApiAuthenticationError:
        raise
    except ApiError:
        messages.error(request, "Failed to clear records. Please try again.")
    else:
        messages.success(request, "Selected records have been cleared.")
    return redirect("accounts:profile")


# ─────────────────────────────────────────────────────────────────────────────
# 📊 Customize: financial statistics
# ─────────────────────────────────────────────────────────────────────────────
@login_required
def customize(request):
    stats = _profile_stats(request)
    cards = [
        ("Incomes", stats.incomes, "from-emerald-500 to-green-600"),
        ("Bills", stats.bills, "from-blue-500 to-indigo-600"),
        ("Expenses", stats.expenses, "from-rose-500 to-red-600"),
        ("Warranties", stats.warranties, "from-amber-500 to-orange-600"),
    ]
    return render(request, "accounts/customize.html", {"stats": stats, "cards": cards})
