# Django Imports
from django.conf import settings
from django.db import models
from django.utils import timezone


CATEGORY_CHOICES = [
    ('Web Development', 'Web Development'),
    ('Mobile Development', 'Mobile Development'),
    ('UI/UX Design', 'UI/UX Design'),
    ('Graphic Design', 'Graphic Design'),
    ('Data Science', 'Data Science'),
    ('Machine Learning', 'Machine Learning'),
    ('Other', 'Other'),
]


# ==============================================================================
# PORTFOLIO MODELS
# ==============================================================================

class Portfolio(models.Model):
    """
    An uploaded portfolio document. The file itself lives in the object store
    under ``storage_path``; ``file_url`` is its public address.
    """
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='portfolios'
    )
    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES)
    file_url = models.CharField(max_length=500)
    storage_path = models.CharField(max_length=500)
    file_name = models.CharField(max_length=255, blank=True)
    file_type = models.CharField(max_length=100, blank=True)
    like_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Portfolio"
        verbose_name_plural = "Portfolios"

    def __str__(self):
        return f"{self.title} by {self.owner}"


class PortfolioLike(models.Model):
    """Represents a 'like' from a user on a specific Portfolio."""
    portfolio = models.ForeignKey(Portfolio, on_delete=models.CASCADE, related_name='likes')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='portfolio_likes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        # Ensures a user can only like a portfolio once
        unique_together = ('portfolio', 'user')
        verbose_name = "Portfolio Like"
        verbose_name_plural = "Portfolio Likes"

    def __str__(self):
        return f"Like by {self.user} on {self.portfolio}"
