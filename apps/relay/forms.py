"""
HTML forms for the account pages and device registration.
"""

from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.forms import AuthenticationForm, UserCreationForm

User = get_user_model()


def normalize_username(value) -> str:
    """Usernames are compared and stored trimmed and lower-cased."""
    return str(value or "").strip().lower()


class RegistrationForm(UserCreationForm):
    class Meta(UserCreationForm.Meta):
        model = User
        fields = ("username",)

    def clean_username(self):
        username = normalize_username(self.cleaned_data.get("username"))
        if not username:
            raise forms.ValidationError("Username is required.")
        if User.objects.filter(username__iexact=username).exists():
            raise forms.ValidationError("Username taken")
        return username


class LoginForm(AuthenticationForm):
    def clean_username(self):
        return normalize_username(self.cleaned_data.get("username"))


class DeviceForm(forms.Form):
    device_id = forms.CharField(max_length=64, label="Device ID")
    name = forms.CharField(max_length=100, required=False)
    place = forms.CharField(max_length=200, required=False)
    description = forms.CharField(widget=forms.Textarea, required=False)
    # Filled in by the browser's geolocation or the QR scan
    lat = forms.FloatField(required=False)
    lng = forms.FloatField(required=False)
