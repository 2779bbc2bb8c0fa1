import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from . import presence, services
from .feed import build_feed
from .models import Community
from .tasks import detach

logger = logging.getLogger(__name__)

CLOSE_NOT_FOUND = 4404


class CommunityChatConsumer(AsyncWebsocketConsumer):
    """
    One member's chat session in one community.

    The session is two live subscriptions: the community's message feed group
    and its presence group. Both push full snapshots which are forwarded to
    the browser as ``messages`` and ``presence`` frames.
    """

    async def connect(self):
        self.community_id = self.scope['url_route']['kwargs']['community_id']
        self.user = self.scope['user']
        self.subscribed = False

        if self.user.is_anonymous:
            # Reject the connection if user is not authenticated
            await self.close()
            return

        community = await self.enter_community()
        if community is None:
            await self.close(code=CLOSE_NOT_FOUND)
            return

        self.messages_group = services.messages_group(self.community_id)
        self.presence_group = services.presence_group(self.community_id)
        await self.channel_layer.group_add(self.messages_group, self.channel_name)
        await self.channel_layer.group_add(self.presence_group, self.channel_name)
        self.subscribed = True

        await self.accept()

        try:
            window = await self.load_window()
        except Exception as e:
            logger.error("Loading messages for community %s failed: %s", self.community_id, e)
            await self.send_error('feed', 'Failed to load messages')
        else:
            await self.feed_snapshot({'messages': window})

        try:
            await self.publish_presence()
        except Exception as e:
            logger.error("Loading members for community %s failed: %s", self.community_id, e)
            await self.send_error('feed', 'Failed to load online members')

    async def disconnect(self, close_code):
        if not self.subscribed:
            return
        self.subscribed = False
        await self.channel_layer.group_discard(self.messages_group, self.channel_name)
        await self.channel_layer.group_discard(self.presence_group, self.channel_name)
        detach(self.leave(), label=f"presence-offline:{self.community_id}:{self.user.pk}")

    # Receive message from WebSocket
    async def receive(self, text_data=None, bytes_data=None):
        try:
            payload = json.loads(text_data or '')
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            await self.send_error('send', 'Malformed message')
            return

        kind = payload.get('type', 'message')
        if kind == 'heartbeat':
            await self.touch()
        elif kind == 'message':
            text = (payload.get('text') or '').strip()
            # Blank messages never reach the store.
            if text:
                detach(self.deliver(text), label=f"send:{self.community_id}:{self.user.pk}")
        else:
            await self.send_error('send', f'Unknown frame type: {kind}')

    async def deliver(self, text):
        try:
            await self.save_message(text)
        except Exception as e:
            logger.error("Sending to community %s failed: %s", self.community_id, e)
            if self.subscribed:
                await self.send_error('send', 'Failed to send message')
            return
        try:
            window = await self.load_window()
            await self.channel_layer.group_send(
                self.messages_group,
                {'type': 'feed.snapshot', 'messages': window},
            )
        except Exception as e:
            logger.error("Redelivering community %s messages failed: %s", self.community_id, e)
            if self.subscribed:
                await self.send_error('feed', 'Failed to load messages')

    async def leave(self):
        await database_sync_to_async(presence.mark_offline)(self.community_id, self.user.pk)
        await self.publish_presence()

    async def publish_presence(self):
        members = await database_sync_to_async(services.presence_snapshot)(self.community_id)
        await self.channel_layer.group_send(
            self.presence_group,
            {'type': 'presence.snapshot', 'members': members},
        )

    # Receive snapshots from the subscription groups
    async def feed_snapshot(self, event):
        messages = event['messages']
        await self.send(text_data=json.dumps({
            'type': 'messages',
            'messages': messages,
            'feed': build_feed(messages),
        }))

    async def presence_snapshot(self, event):
        await self.send(text_data=json.dumps({
            'type': 'presence',
            'members': event['members'],
        }))

    async def send_error(self, scope, message):
        await self.send(text_data=json.dumps({
            'type': 'error',
            'scope': scope,
            'message': message,
        }))

    @database_sync_to_async
    def enter_community(self):
        try:
            community = Community.objects.get(pk=self.community_id)
        except Community.DoesNotExist:
            return None
        presence.mark_online(community, self.user)
        return community

    @database_sync_to_async
    def load_window(self):
        return services.message_window(self.community_id)

    @database_sync_to_async
    def save_message(self, text):
        community = services.get_community(self.community_id)
        return services.post_message(community, self.user, text)

    @database_sync_to_async
    def touch(self):
        presence.heartbeat(self.community_id, self.user.pk)
