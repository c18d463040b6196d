# accounts/urls.py

from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    # ───────────── Sign-in ─────────────
    path("auth/", views.auth_page, name="login"),                       # ?tab=login | ?tab=register
    path("auth/verify-otp/", views.verify_otp, name="verify_otp"),
    path("auth/resend-otp/", views.resend_otp, name="resend_otp"),
    path("auth/forgot-password/", views.forgot_password, name="forgot_password"),
    path("auth/reset-password/", views.reset_password, name="reset_password"),
    path("auth/reset-password/resend/", views.resend_reset_otp, name="resend_reset_otp"),
    path("auth/google/", views.google_login, name="google_login"),       # ← Google Identity Services login_uri

    # ───────────── Fingerprint (WebAuthn, JSON) ─────────────
    path("auth/webauthn/login-options/", views.webauthn_login_options, name="webauthn_login_options"),
    path("auth/webauthn/login/", views.webauthn_login, name="webauthn_login"),
    path("auth/webauthn/register-options/", views.webauthn_register_options, name="webauthn_register_options"),
    path("auth/webauthn/register/", views.webauthn_register, name="webauthn_register"),

    # ✅ Logout: POST only, back to the login page
    path("logout/", views.logout_view, name="logout"),

    # ───────────── Profile ─────────────
    path("profile/", views.profile, name="profile"),
    path("profile/delete/", views.delete_profile, name="delete_profile"),
    path("profile/clear-records/", views.clear_records, name="clear_records"),
    path("customize/", views.customize, name="customize"),
]
