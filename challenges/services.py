"""
Challenge submission.

Per user a challenge moves NotJoined -> Submitting -> Submitted. The document
is checked locally first, uploaded to the object store, and only then are the
participant set and the submission record written, as separate writes. The
submission record and the counter go together; each user only ever writes
their own record. A failure after the upload leaves the stored file without a
recorded submission until the user retries.
"""

import logging
import os

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils.text import get_valid_filename

from skillfolio import objectstore
from skillfolio.errors import NotFoundError, StoreError, ValidationError, store_errors
from skillfolio.validators import validate_document

from .models import Challenge, ChallengeSubmission

logger = logging.getLogger(__name__)


def get_challenge(challenge_id):
    try:
        return Challenge.objects.get(pk=challenge_id)
    except Challenge.DoesNotExist:
        raise NotFoundError("Challenge not found")


def upcoming_challenges(limit=5):
    return Challenge.objects.prefetch_related('participants').order_by('deadline')[:limit]


def create_challenge(user, title, description, deadline, prize_description='', rules=None):
    """The creator starts out as a participant with nothing submitted."""
    with store_errors("Failed to create challenge. Please try again."):
        challenge = Challenge.objects.create(
            title=title,
            description=description,
            deadline=deadline,
            prize_description=prize_description,
            rules=rules,
            created_by=user,
        )
        if user is not None:
            challenge.participants.add(user)
    return challenge


def submission_path(challenge, user, filename):
    filename = get_valid_filename(os.path.basename(filename))
    return f"challenge-submissions/{challenge.pk}/{user.pk}/{filename}"


def submit(challenge_id, user, uploaded_file):
    challenge = get_challenge(challenge_id)
    validate_document(uploaded_file)
    if challenge.has_submitted(user):
        raise ValidationError("You have already submitted to this challenge.")

    # The path belongs to this user, so a retry after a failed write replaces
    # the blob it left behind.
    stored = objectstore.upload(
        submission_path(challenge, user, uploaded_file.name),
        uploaded_file,
        content_type=getattr(uploaded_file, 'content_type', None),
        overwrite=True,
    )
    url = objectstore.get_public_url(stored)

    # The participant add and the submission record are independent writes.
    with store_errors("Failed to submit challenge. Please try again."):
        challenge.participants.add(user)
    try:
        with transaction.atomic():
            ChallengeSubmission.objects.create(challenge=challenge, user=user, url=url, storage_path=stored)
            Challenge.objects.filter(pk=challenge.pk).update(submission_count=F('submission_count') + 1)
    except IntegrityError:
        raise ValidationError("You have already submitted to this challenge.")
    except DatabaseError as exc:
        logger.error("Recording submission %s failed: %s", stored, exc)
        raise StoreError("Failed to submit challenge. Please try again.") from exc
    challenge.refresh_from_db()

    logger.info("User %s submitted %s to challenge %s", user.pk, stored, challenge.pk)
    return challenge
