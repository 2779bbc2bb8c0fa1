"""
Community operations. Every function takes the acting user explicitly; none of
them reach for request state.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction

from skillfolio.errors import NotFoundError, PermissionDeniedError, StoreError, ValidationError, store_errors

from .feed import serialize_message
from .models import Community, Message
from .presence import online_roster, serialize_presence

logger = logging.getLogger(__name__)


# ==============================================================================
# SUBSCRIPTION GROUPS
# ==============================================================================

def messages_group(community_id):
    return f"community_{community_id}_messages"


def presence_group(community_id):
    return f"community_{community_id}_presence"


def message_window(community_id, limit=None):
    """The newest ``limit`` messages, oldest first."""
    limit = limit or settings.SKILLFOLIO_CHAT_WINDOW
    with store_errors("Failed to load messages"):
        newest = list(Message.objects.filter(community_id=community_id).order_by('-created_at', '-id')[:limit])
    return [serialize_message(m) for m in reversed(newest)]


def presence_snapshot(community_id):
    return [serialize_presence(r) for r in online_roster(community_id)]


def publish_messages(community_id):
    """Redeliver the message window to everyone subscribed to the feed."""
    window = message_window(community_id)
    channel_layer = get_channel_layer()
    try:
        async_to_sync(channel_layer.group_send)(
            messages_group(community_id),
            {'type': 'feed.snapshot', 'messages': window},
        )
    except Exception as exc:
        logger.error("Publishing community %s messages failed: %s", community_id, exc)
        raise StoreError("Message saved but live delivery failed. Please refresh.") from exc


# ==============================================================================
# COMMUNITIES
# ==============================================================================

def get_community(community_id):
    try:
        return Community.objects.get(pk=community_id)
    except Community.DoesNotExist:
        raise NotFoundError("Community not found")


def clean_topics(topics):
    cleaned = []
    for topic in topics or []:
        topic = (topic or '').strip()
        if topic and topic not in cleaned:
            cleaned.append(topic)
    return cleaned


def create_community(user, name, description, topics, icon=None):
    name = (name or '').strip()
    description = (description or '').strip()
    topics = clean_topics(topics)
    if not name:
        raise ValidationError("Community name is required")
    if not description:
        raise ValidationError("Description is required")
    if not topics:
        raise ValidationError("At least one topic is required")

    with store_errors("Failed to create community. Please try again."), transaction.atomic():
        community = Community(name=name, description=description, topics=topics, created_by=user)
        if icon:
            community.icon = icon
        community.save()
        community.members.add(user)

    logger.info("User %s created community %s (%s)", user.pk, community.pk, community.name)
    return community


def join_or_enter(community_id, user):
    """
    Make ``user`` a member unless they already are. Returns the community and
    whether a membership write happened; the caller always moves on to chat.
    """
    community = get_community(community_id)
    if community.is_member(user):
        return community, False
    with store_errors("Failed to access community. Please try again."):
        community.members.add(user)
    logger.info("User %s joined community %s", user.pk, community.pk)
    return community, True


def delete_community(community_id, user):
    community = get_community(community_id)
    if community.created_by_id is None or community.created_by_id != user.pk:
        raise PermissionDeniedError("You can only delete communities you created")
    # Messages and presence records go with it (foreign key cascade).
    with store_errors("Failed to delete community. Please try again."):
        community.delete()
    logger.info("User %s deleted community %s", user.pk, community_id)


def list_communities():
    return Community.objects.prefetch_related('members').all()


# ==============================================================================
# CHAT
# ==============================================================================

def post_message(community, user, text):
    """Store a chat message. Blank text is rejected before any write."""
    text = (text or '').strip()
    if not text:
        raise ValidationError("Message cannot be empty.")
    with store_errors("Failed to send message"):
        return Message.objects.create(
            community=community,
            author=user,
            author_name=user.public_name,
            text=text,
            delivery_status=Message.STATUS_SENT,
        )
