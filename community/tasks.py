"""
Fire-and-forget writes that must outlive the websocket that started them.

A chat session may close while its last write is still running. Such writes
are detached from the consumer, finish on their own, and leave a line in a
bounded completion log for diagnostics.
"""

import asyncio
import logging
from collections import deque

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

_running = set()
_completed = deque(maxlen=settings.SKILLFOLIO_TASK_LOG_SIZE)


def detach(coro, label):
    task = asyncio.ensure_future(coro)
    task.skillfolio_label = label
    _running.add(task)
    task.add_done_callback(_record)
    return task


def _record(task):
    _running.discard(task)
    label = getattr(task, 'skillfolio_label', repr(task))
    if task.cancelled():
        outcome = 'cancelled'
    elif task.exception() is not None:
        outcome = f'failed: {task.exception()!r}'
        logger.warning("Detached task %s failed: %s", label, task.exception())
    else:
        outcome = 'done'
    _completed.append({'label': label, 'outcome': outcome, 'finished_at': timezone.now()})


def completion_log():
    return list(_completed)


async def drain():
    """Wait for every detached task that is still running."""
    while _running:
        await asyncio.gather(*list(_running), return_exceptions=True)
