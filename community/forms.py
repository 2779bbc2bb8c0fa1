# Django Imports
from django import forms

# Local Imports
from .services import clean_topics


# ==============================================================================
# COMMUNITY FORMS
# ==============================================================================

class CommunityForm(forms.Form):
    """Create a community. Topics are typed as a comma separated list."""
    name = forms.CharField(
        max_length=120,
        widget=forms.TextInput(attrs={'placeholder': 'e.g., Web Development'}),
        label="Community Name",
    )
    description = forms.CharField(
        widget=forms.Textarea(attrs={'rows': 3, 'placeholder': 'Describe your community...'}),
        label="Description",
    )
    topics = forms.CharField(
        widget=forms.TextInput(attrs={'placeholder': 'React, JavaScript, CSS'}),
        label="Topics",
        help_text="Separate topics with commas.",
    )

    def clean_topics(self):
        topics = clean_topics(self.cleaned_data.get('topics', '').split(','))
        if not topics:
            raise forms.ValidationError("At least one topic is required")
        return topics


class MessageForm(forms.Form):
    text = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'placeholder': 'Type a message...', 'autocomplete': 'off'}),
        label='',
    )
