# Django Imports
from django import forms

# Local Imports
from skillfolio.errors import ValidationError
from skillfolio.validators import validate_document


class SubmissionForm(forms.Form):
    file = forms.FileField(
        label="Upload Your Submission",
        widget=forms.ClearableFileInput(attrs={'accept': '.pdf,.doc,.docx'}),
    )

    def clean_file(self):
        uploaded = self.cleaned_data.get('file')
        try:
            return validate_document(uploaded)
        except ValidationError as e:
            raise forms.ValidationError(e.message)
