# Django Imports
from django import forms

# Local Imports
from skillfolio.errors import ValidationError
from skillfolio.validators import validate_document

from .models import Portfolio


# ==============================================================================
# PORTFOLIO FORMS
# ==============================================================================

class PortfolioForm(forms.ModelForm):
    """Upload form; the document goes to the object store, not a model field."""
    file = forms.FileField(
        label="Portfolio File",
        help_text="PDF, DOC or DOCX up to 5MB.",
        widget=forms.ClearableFileInput(attrs={'accept': '.pdf,.doc,.docx'}),
    )

    class Meta:
        model = Portfolio
        fields = ['title', 'category', 'description']

        widgets = {
            'title': forms.TextInput(attrs={'placeholder': 'Enter portfolio title'}),
            'description': forms.Textarea(attrs={
                'rows': 4,
                'placeholder': 'Describe your portfolio...',
            }),
        }

    def clean_file(self):
        uploaded = self.cleaned_data.get('file')
        try:
            return validate_document(uploaded)
        except ValidationError as e:
            raise forms.ValidationError(e.message)
