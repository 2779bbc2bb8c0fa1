"""
Forms for the 'accounts' application. Field checks only; credential rules
(email format, password strength, duplicates) belong to accounts.identity.
"""

# Django Imports
from django import forms


# ==============================================================================
# AUTH FORMS
# ==============================================================================

class SignInForm(forms.Form):
    email = forms.CharField(
        widget=forms.EmailInput(attrs={'placeholder': 'you@example.com'}),
        label="Email",
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={'placeholder': '••••••••'}),
        label="Password",
    )


class SignUpForm(SignInForm):
    """Sign-in fields plus the name shown on portfolios and chat messages."""
    display_name = forms.CharField(
        max_length=255,
        widget=forms.TextInput(attrs={'placeholder': 'John Doe'}),
        label="Full Name",
    )

    field_order = ['display_name', 'email', 'password']
