import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from .models import PresenceRecord

logger = logging.getLogger(__name__)


def mark_online(community, user):
    record, _ = PresenceRecord.objects.update_or_create(
        community=community,
        member=user,
        defaults={
            'online': True,
            'last_seen_at': timezone.now(),
            'display_name': user.public_name,
        },
    )
    return record


def mark_offline(community_id, user_id):
    """Flip an existing record to offline. Records are never deleted."""
    return PresenceRecord.objects.filter(community_id=community_id, member_id=user_id).update(
        online=False,
        last_seen_at=timezone.now(),
    )


def mark_offline_everywhere(user_id):
    updated = PresenceRecord.objects.filter(member_id=user_id, online=True).update(
        online=False,
        last_seen_at=timezone.now(),
    )
    if updated:
        logger.info("Marked user %s offline in %d communities", user_id, updated)
    return updated


def heartbeat(community_id, user_id):
    return PresenceRecord.objects.filter(community_id=community_id, member_id=user_id).update(
        online=True,
        last_seen_at=timezone.now(),
    )


def online_roster(community_id, now=None):
    """Members flagged online whose last heartbeat is recent enough."""
    now = now or timezone.now()
    cutoff = now - timedelta(seconds=settings.SKILLFOLIO_PRESENCE_STALE_AFTER)
    return list(
        PresenceRecord.objects.filter(
            community_id=community_id,
            online=True,
            last_seen_at__gte=cutoff,
        )
    )


def serialize_presence(record):
    return {
        'member_id': record.member_id,
        'display_name': record.display_name,
        'online': record.online,
        'last_seen_at': record.last_seen_at.isoformat(),
    }
