from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.formats import date_format


# ==============================================================================
# CHALLENGE MODEL
# ==============================================================================

class Challenge(models.Model):
    """A time-boxed challenge members submit a document to."""
    title = models.CharField(max_length=200)
    description = models.TextField()
    deadline = models.DateTimeField()
    participants = models.ManyToManyField(settings.AUTH_USER_MODEL, related_name='challenges', blank=True)
    submission_count = models.PositiveIntegerField(default=0)
    prize_description = models.CharField(max_length=200, blank=True)
    rules = models.JSONField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='challenges_created',
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['deadline']
        verbose_name = "Challenge"
        verbose_name_plural = "Challenges"

    def __str__(self):
        return self.title

    def effective_rules(self):
        """Stored rules, or the house rules when the challenge has none."""
        if self.rules:
            return list(self.rules)
        return [
            "Submit your work in PDF or DOC format",
            "File size should not exceed 5MB",
            "Include a brief description of your approach",
            f"Submission deadline: {date_format(timezone.localtime(self.deadline), 'DATE_FORMAT')}",
            "One submission per participant",
        ]

    def has_participant(self, user):
        return any(p.pk == user.pk for p in self.participants.all())

    @property
    def submission_urls(self):
        """Maps str(user id) to the public URL of that user's submission."""
        return {str(s.user_id): s.url for s in self.submissions.all()}

    def has_submitted(self, user):
        return self.submissions.filter(user_id=user.pk).exists()


class ChallengeSubmission(models.Model):
    """One participant's document for a challenge. At most one per user."""
    challenge = models.ForeignKey(Challenge, on_delete=models.CASCADE, related_name='submissions')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='challenge_submissions')
    url = models.CharField(max_length=500)
    storage_path = models.CharField(max_length=500)
    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['submitted_at']
        constraints = [
            models.UniqueConstraint(fields=['challenge', 'user'], name='one_submission_per_user'),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.challenge_id}"
