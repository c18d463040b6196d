# accounts/forms.py
# ✅ Forms for the auth screens and the profile page.
#    They only validate input; views send the cleaned data to the API.

from django import forms

from .models import CURRENCY_CHOICES, DEFAULT_CURRENCY
from .validators import validate_password_strength

ACCEPTED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")
MAX_AVATAR_SIZE = 5 * 1024 * 1024                    # 5MB
CLEAR_RECORDS_CONFIRMATION = "clear my records"


def _norm_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return (email or "").strip().lower()


class LoginForm(forms.Form):
    # 📧 email + password, posted to /auth/login
    email = forms.EmailField(widget=forms.EmailInput(attrs={"placeholder": "you@example.com", "autocomplete": "email"}))
    password = forms.CharField(widget=forms.PasswordInput(attrs={"autocomplete": "current-password"}))

    def clean_email(self):
        return _norm_email(self.cleaned_data.get("email"))   # 🧼 " Ada@X.com " → "ada@x.com"


class RegisterForm(forms.Form):
    """
    ✅ Our signup form:
       - name, email, password
       - password must pass every strength rule before we call the API
    """

    name = forms.CharField(max_length=50, widget=forms.TextInput(attrs={"placeholder": "Your name", "autocomplete": "name"}))
    email = forms.EmailField(
        label="Email",
        help_text="We'll send a one-time code to verify it.",          # ← clarity for users
        widget=forms.EmailInput(attrs={"placeholder": "you@example.com", "autocomplete": "email"}),
    )
    password = forms.CharField(
        validators=[validate_password_strength],           # ← every failing rule is listed at once
        widget=forms.PasswordInput(attrs={"autocomplete": "new-password"}),
    )

    def clean_name(self):
        # squash repeated whitespace: "  Jane   Doe " → "Jane Doe"
        name = " ".join((self.cleaned_data.get("name") or "").split())
        if not name:
            raise forms.ValidationError("Name is required.")
        return name

    def clean_email(self):
        return _norm_email(self.cleaned_data.get("email"))


class OTPForm(forms.Form):
    otp = forms.CharField(
        label="Verification code",
        min_length=4,
        max_length=8,
        widget=forms.TextInput(attrs={"inputmode": "numeric", "autocomplete": "one-time-code", "placeholder": "123456"}),
    )

    def clean_otp(self):
        otp = (self.cleaned_data.get("otp") or "").strip()
        # 🔢 codes are numeric; spaces around them are fine
        if not otp.isdigit():
            raise forms.ValidationError("The code contains digits only.")
        return otp


class ForgotPasswordForm(forms.Form):
    email = forms.EmailField(widget=forms.EmailInput(attrs={"placeholder": "you@example.com"}))

    def clean_email(self):
        return _norm_email(self.cleaned_data.get("email"))


class ResetPasswordForm(OTPForm):
    # ♻️ same code field as OTPForm, plus the new password
    password = forms.CharField(
        label="New password",
        validators=[validate_password_strength],
        widget=forms.PasswordInput(attrs={"autocomplete": "new-password"}),
    )


class WebAuthnLoginForm(forms.Form):
    """Email the fingerprint assertion is checked against."""
    email = forms.EmailField()

    def clean_email(self):
        return _norm_email(self.cleaned_data.get("email"))


class ProfileForm(forms.Form):
    """Name, avatar and preferred currency, saved together."""

    name = forms.CharField(max_length=50)
    currency = forms.ChoiceField(
        choices=CURRENCY_CHOICES,                          # ← e.g., USD, EUR, GBP…
        label="Preferred currency",
        help_text="Used to display totals, KPIs and charts.",
        initial=DEFAULT_CURRENCY,
    )
    avatar = forms.FileField(
        required=False,
        help_text="JPEG, PNG or WebP, max 5MB.",
        widget=forms.ClearableFileInput(attrs={"accept": ",".join(ACCEPTED_IMAGE_TYPES)}),
    )
    remove_avatar = forms.BooleanField(required=False, label="Remove current avatar")

    def __init__(self, *args, **kwargs):
        # Pull the signed-in user so we can tell what actually changed.
        self.user = kwargs.pop("user", None)
        if self.user is not None:
            kwargs.setdefault("initial", {"name": self.user.name, "currency": self.user.currency})
        super().__init__(*args, **kwargs)

    def clean_name(self):
        name = " ".join((self.cleaned_data.get("name") or "").split())
        if not name:
            raise forms.ValidationError("Name is required.")
        return name

    def clean_avatar(self):
        avatar = self.cleaned_data.get("avatar")
        if not avatar:
            return None
        # 🖼️ browser-reported type first, then the size cap
        if getattr(avatar, "content_type", None) not in ACCEPTED_IMAGE_TYPES:
            raise forms.ValidationError("Please select a valid image file (JPEG, PNG, or WebP)")
        if avatar.size > MAX_AVATAR_SIZE:
            raise forms.ValidationError(f"File too large: {avatar.size / 1024 / 1024:.1f}MB (max 5MB)")
        return avatar

    def clean(self):
        cleaned = super().clean()
        # 🚫 upload OR remove, not both
        if cleaned.get("avatar") and cleaned.get("remove_avatar"):
            self.add_error("remove_avatar", "Either upload a new avatar or remove the current one.")
        return cleaned

    # ---- what changed compared to the signed-in user ----
    @property
    def name_changed(self):
        return self.user is None or self.cleaned_data.get("name") != self.user.name

    @property
    def currency_changed(self):
        return self.user is None or self.cleaned_data.get("currency") != self.user.currency

    @property
    def has_changes(self):
        return bool(
            self.name_changed
            or self.currency_changed
            or self.cleaned_data.get("avatar")
            or self.cleaned_data.get("remove_avatar")
        )


class DeleteProfileForm(forms.Form):
    """The user must type '<name>/delete' exactly."""

    confirmation = forms.CharField(label="Confirmation")

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop("user")
        super().__init__(*args, **kwargs)
        self.fields["confirmation"].widget.attrs["placeholder"] = self.user.delete_confirmation   # 💡 show what to type

    def clean_confirmation(self):
        text = self.cleaned_data.get("confirmation") or ""
        if text != self.user.delete_confirmation:                 # ← exact match, case included
            raise forms.ValidationError(
                f"Please type '{self.user.delete_confirmation}' exactly to confirm deletion."
            )
        return text


class ClearRecordsForm(forms.Form):
    """Pick record types to wipe; only types with entries are offered."""

    records = forms.MultipleChoiceField(widget=forms.CheckboxSelectMultiple)
    confirmation = forms.CharField(widget=forms.TextInput(attrs={"placeholder": CLEAR_RECORDS_CONFIRMATION}))

    def __init__(self, *args, **kwargs):
        stats = kwargs.pop("stats")
        super().__init__(*args, **kwargs)
        self.fields["records"].choices = [
            (name, f"{name.title()} ({getattr(stats, name)})") for name in stats.clearable()   # e.g. "Bills (3)"
        ]

    def clean_confirmation(self):
        text = (self.cleaned_data.get("confirmation") or "").strip()
        if text != CLEAR_RECORDS_CONFIRMATION:
            raise forms.ValidationError(f"To confirm, please type '{CLEAR_RECORDS_CONFIRMATION}'.")
        return text
