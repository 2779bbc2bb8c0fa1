# accounts/models.py

from django.conf import settings
from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models

# ==============================================================================
# CORE USER MODEL
# ==============================================================================

class User(AbstractUser):
    """Custom User model. Sign-up stores the email address as the username."""
    objects = UserManager()

    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=255, blank=True)
    bio = models.TextField(blank=True)
    skills = models.JSONField(default=list, blank=True)

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return self.email or self.username

    @property
    def public_name(self):
        """Name shown next to messages and portfolios."""
        return self.display_name or 'Anonymous'

# ==============================================================================
# CONNECTION MODEL
# ==============================================================================

class Connection(models.Model):
    """A request from one user to connect with another."""
    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='connections_made')
    connected_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='connections_received')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('user', 'connected_user')
        ordering = ['-created_at']
        verbose_name = "Connection"
        verbose_name_plural = "Connections"

    def __str__(self):
        return f"{self.user} → {self.connected_user} [{self.status}]"
