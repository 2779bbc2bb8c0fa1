"""
Ordering and presentation of a community's message feed.

The feed shown to a member is the union of the subscribed message window and
any locally buffered messages that the server has not confirmed yet, sorted by
their resolved timestamp and broken up by day separators.
"""

from datetime import timedelta

from django.utils import timezone
from django.utils.dateparse import parse_datetime
from django.utils.formats import date_format

# Delivery ticks shown next to a member's own messages.
STATUS_ICONS = {
    'sent': '✓',
    'delivered': '✓✓',
    'read': '✓✓',
}
PENDING_ICON = '🕓'


def serialize_message(message):
    """Wire/template form of a stored message."""
    return {
        'id': message.pk,
        'text': message.text,
        'author_id': message.author_id,
        'author_name': message.author_name,
        'created_at': message.created_at.isoformat() if message.created_at else None,
        'delivery_status': message.delivery_status,
        'pending': False,
    }


def _as_datetime(value):
    if value is None or value == '':
        return None
    if isinstance(value, str):
        value = parse_datetime(value)
        if value is None:
            return None
    if timezone.is_naive(value):
        value = timezone.make_aware(value, timezone.get_default_timezone())
    return value


def resolve_timestamp(entry, now=None):
    """
    Server timestamp when it has resolved, otherwise the sender's wall clock
    (``client_created_at``), otherwise ``now``.
    """
    resolved = _as_datetime(entry.get('created_at'))
    if resolved is None:
        resolved = _as_datetime(entry.get('client_created_at'))
    if resolved is None:
        resolved = now or timezone.now()
    return resolved


def merge_feed(window, pending=(), now=None):
    """
    Merge confirmed and pending entries into ascending timestamp order.

    ``sorted`` is stable, so entries with equal timestamps keep the order in
    which they arrived (window first, then pending).
    """
    now = now or timezone.now()
    merged = list(window) + [dict(entry, pending=True) for entry in pending]
    return sorted(merged, key=lambda entry: resolve_timestamp(entry, now))


def day_label(moment, today, tz=None):
    day = timezone.localtime(moment, tz).date()
    if day == today:
        return 'Today'
    if day == today - timedelta(days=1):
        return 'Yesterday'
    return date_format(day, 'DATE_FORMAT')


def status_icon(entry):
    if entry.get('pending'):
        return PENDING_ICON
    return STATUS_ICONS.get(entry.get('delivery_status'), '')


def with_day_separators(entries, now=None, tz=None):
    """
    Interleave ``{'kind': 'day'}`` separators with ``{'kind': 'message'}``
    items, which also carry the local ``time`` and a delivery ``status_icon``.
    A separator precedes the first entry and every entry whose local calendar
    date differs from its predecessor's.
    """
    now = now or timezone.now()
    today = timezone.localtime(now, tz).date()
    items = []
    previous_day = None
    for entry in entries:
        moment = resolve_timestamp(entry, now)
        current_day = timezone.localtime(moment, tz).date()
        if current_day != previous_day:
            items.append({'kind': 'day', 'label': day_label(moment, today, tz)})
            previous_day = current_day
        items.append({
            'kind': 'message',
            'message': entry,
            'time': date_format(timezone.localtime(moment, tz), 'TIME_FORMAT'),
            'status_icon': status_icon(entry),
        })
    return items


def build_feed(window, pending=(), now=None, tz=None):
    now = now or timezone.now()
    return with_day_separators(merge_feed(window, pending, now), now, tz)
