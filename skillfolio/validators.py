import os

from django.conf import settings

from .errors import ValidationError

DOCUMENT_TYPES = {
    'application/pdf': '.pdf',
    'application/msword': '.doc',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document': '.docx',
}


def max_upload_bytes():
    return settings.SKILLFOLIO_MAX_UPLOAD_BYTES


def validate_document(uploaded_file):
    """
    Reject anything that is not a PDF or Word document, or that is larger
    than the upload limit. Runs before any store call.
    """
    if uploaded_file is None:
        raise ValidationError("Please choose a file to upload.")

    content_type = (getattr(uploaded_file, 'content_type', '') or '').split(';')[0].strip().lower()
    extension = os.path.splitext(uploaded_file.name or '')[1].lower()
    if content_type not in DOCUMENT_TYPES or extension not in DOCUMENT_TYPES.values():
        raise ValidationError("Please upload only PDF or DOC files.")

    limit = max_upload_bytes()
    if uploaded_file.size > limit:
        raise ValidationError(f"File size should be less than {limit // (1024 * 1024)}MB.")
    return uploaded_file
