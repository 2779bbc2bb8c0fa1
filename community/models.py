from django.conf import settings
from django.db import models
from django.utils import timezone


# ==============================================================================
# COMMUNITY MODEL
# ==============================================================================

class Community(models.Model):
    """A topical community with a member set and its own chat room."""
    name = models.CharField(max_length=120)
    description = models.TextField()
    topics = models.JSONField(default=list, blank=True)
    icon = models.CharField(max_length=32, default='📚')
    rules = models.JSONField(null=True, blank=True)
    # Seeded communities have no creator, so nobody may delete them.
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='communities_created',
        null=True,
        blank=True,
    )
    members = models.ManyToManyField(settings.AUTH_USER_MODEL, related_name='communities', blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at']
        verbose_name = "Community"
        verbose_name_plural = "Communities"

    def __str__(self):
        return self.name

    def effective_rules(self):
        return list(self.rules or [])

    def is_member(self, user):
        return self.members.filter(pk=user.pk).exists()


# ==============================================================================
# CHAT MODELS
# ==============================================================================

class Message(models.Model):
    STATUS_SENT = 'sent'
    STATUS_DELIVERED = 'delivered'
    STATUS_READ = 'read'
    STATUS_CHOICES = [
        (STATUS_SENT, 'Sent'),
        (STATUS_DELIVERED, 'Delivered'),
        (STATUS_READ, 'Read'),
    ]

    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name='messages')
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='community_messages',
        null=True,
    )
    author_name = models.CharField(max_length=255, default='Anonymous')
    text = models.TextField()
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    delivery_status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_SENT)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.author_name}: {self.text[:50]}"


class PresenceRecord(models.Model):
    """Liveness of one member inside one community's chat."""
    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name='presence')
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='presence')
    display_name = models.CharField(max_length=255, default='Anonymous')
    online = models.BooleanField(default=False)
    last_seen_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = ('community', 'member')
        ordering = ['display_name']

    def __str__(self):
        state = "online" if self.online else "offline"
        return f"{self.display_name} in {self.community} [{state}]"
