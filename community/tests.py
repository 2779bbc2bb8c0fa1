from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from channels.db import database_sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.contrib.messages import get_messages
from django.core.management import call_command
from django.urls import reverse
from django.utils.formats import date_format

from challenges.models import Challenge
from community import presence, services, tasks
from community.feed import build_feed, merge_feed, resolve_timestamp, with_day_separators
from community.models import Community, Message, PresenceRecord
from community.routing import websocket_urlpatterns
from skillfolio.errors import NotFoundError, PermissionDeniedError, StoreError, ValidationError

UTC = dt_timezone.utc
NOW = datetime(2026, 3, 10, 15, 0, tzinfo=UTC)

application = URLRouter(websocket_urlpatterns)


@pytest.fixture
def community(user):
    return services.create_community(user, 'Web Dev', 'Frontend and backend talk', ['React', 'CSS'])


# ==============================================================================
# FEED ORDERING
# ==============================================================================

class TestFeed:
    def entry(self, text, created_at=None, **extra):
        return dict({'text': text, 'created_at': created_at}, **extra)

    def test_merge_sorts_by_timestamp(self):
        window = [
            self.entry('second', (NOW - timedelta(minutes=1)).isoformat()),
            self.entry('first', (NOW - timedelta(minutes=5)).isoformat()),
        ]
        merged = merge_feed(window, now=NOW)
        assert [e['text'] for e in merged] == ['first', 'second']

    def test_equal_timestamps_keep_arrival_order(self):
        stamp = NOW.isoformat()
        window = [self.entry('a', stamp), self.entry('b', stamp)]
        pending = [self.entry('c', stamp)]
        merged = merge_feed(window, pending, now=NOW)
        assert [e['text'] for e in merged] == ['a', 'b', 'c']
        assert [e.get('pending') for e in merged] == [None, None, True]

    def test_pending_entry_falls_back_to_client_clock(self):
        entry = self.entry('mine', None, client_created_at=(NOW - timedelta(hours=1)).isoformat())
        assert resolve_timestamp(entry, now=NOW) == NOW - timedelta(hours=1)
        assert resolve_timestamp(self.entry('bare'), now=NOW) == NOW

    def test_day_separators(self):
        two_days_ago = NOW - timedelta(days=2)
        entries = [
            self.entry('old', two_days_ago.isoformat()),
            self.entry('yesterday', (NOW - timedelta(days=1)).isoformat()),
            self.entry('today 1', (NOW - timedelta(hours=2)).isoformat()),
            self.entry('today 2', (NOW - timedelta(hours=1)).isoformat()),
        ]
        items = with_day_separators(entries, now=NOW, tz=UTC)
        labels = [item['label'] for item in items if item['kind'] == 'day']
        assert labels == [date_format(two_days_ago.date(), 'DATE_FORMAT'), 'Yesterday', 'Today']
        assert [item['kind'] for item in items] == ['day', 'message', 'day', 'message', 'day', 'message', 'message']

    def test_empty_feed(self):
        assert build_feed([], now=NOW) == []

    def test_message_items_carry_time_and_status(self):
        window = [self.entry('stored', NOW.isoformat(), delivery_status='sent')]
        pending = [self.entry('waiting', None, client_created_at=NOW.isoformat())]
        items = [item for item in build_feed(window, pending, now=NOW, tz=UTC) if item['kind'] == 'message']
        assert [item['time'] for item in items] == [date_format(NOW, 'TIME_FORMAT')] * 2
        assert [item['status_icon'] for item in items] == ['✓', '🕓']


# ==============================================================================
# MEMBERSHIP
# ==============================================================================

@pytest.mark.django_db
class TestMembership:
    def test_create_makes_creator_a_member(self, user, community):
        assert community.created_by == user
        assert list(community.members.all()) == [user]
        assert community.topics == ['React', 'CSS']
        assert community.icon == '📚'
        assert community.effective_rules() == []

    @pytest.mark.parametrize('name, description, topics, message', [
        ('', 'desc', ['x'], "Community name is required"),
        ('Name', '  ', ['x'], "Description is required"),
        ('Name', 'desc', [' ', ''], "At least one topic is required"),
    ])
    def test_create_requires_fields(self, user, name, description, topics, message):
        with pytest.raises(ValidationError) as exc:
            services.create_community(user, name, description, topics)
        assert exc.value.message == message
        assert not Community.objects.exists()

    def test_join_is_idempotent(self, community, other_user):
        _, joined = services.join_or_enter(community.pk, other_user)
        _, joined_again = services.join_or_enter(community.pk, other_user)
        assert joined is True
        assert joined_again is False
        assert community.members.count() == 2

    def test_join_missing_community(self, user):
        with pytest.raises(NotFoundError):
            services.join_or_enter(999, user)

    def test_only_creator_may_delete(self, community, other_user):
        with pytest.raises(PermissionDeniedError):
            services.delete_community(community.pk, other_user)
        assert Community.objects.filter(pk=community.pk).exists()

    def test_seeded_community_cannot_be_deleted(self, user):
        seeded = Community.objects.create(name='Seeded', description='d', topics=['t'])
        with pytest.raises(PermissionDeniedError):
            services.delete_community(seeded.pk, user)

    def test_delete_removes_chat_history(self, user, community):
        services.post_message(community, user, 'hello')
        presence.mark_online(community, user)
        services.delete_community(community.pk, user)
        assert not Message.objects.exists()
        assert not PresenceRecord.objects.exists()


# ==============================================================================
# CHAT AND PRESENCE
# ==============================================================================

@pytest.mark.django_db
class TestChatServices:
    def test_blank_message_is_never_written(self, user, community):
        with pytest.raises(ValidationError):
            services.post_message(community, user, '   ')
        assert not Message.objects.exists()

    def test_message_window_is_oldest_first_and_bounded(self, settings, user, community):
        settings.SKILLFOLIO_CHAT_WINDOW = 3
        for i in range(5):
            services.post_message(community, user, f'message {i}')
        window = services.message_window(community.pk)
        assert [m['text'] for m in window] == ['message 2', 'message 3', 'message 4']
        assert all(m['author_name'] == 'Ada' and m['delivery_status'] == 'sent' for m in window)

    def test_stale_members_drop_off_the_roster(self, user, community):
        presence.mark_online(community, user)
        assert [r.member_id for r in presence.online_roster(community.pk)] == [user.pk]

        PresenceRecord.objects.update(last_seen_at=NOW - timedelta(hours=1))
        assert presence.online_roster(community.pk) == []

        presence.heartbeat(community.pk, user.pk)
        assert [r.member_id for r in presence.online_roster(community.pk)] == [user.pk]

    def test_sign_out_marks_member_offline(self, client, user, community):
        presence.mark_online(community, user)
        client.force_login(user)
        client.get(reverse('accounts:logout'))
        record = PresenceRecord.objects.get(community=community, member=user)
        assert record.online is False


# ==============================================================================
# PAGES
# ==============================================================================

@pytest.mark.django_db
class TestViews:
    def test_index_lists_communities(self, signed_in_client, community):
        response = signed_in_client.get(reverse('community:index'))
        assert response.status_code == 200
        assert b'Web Dev' in response.content
        [item] = response.context['communities']
        assert item['is_member'] and item['can_delete'] and item['member_count'] == 1

    def test_create_view(self, signed_in_client, user):
        response = signed_in_client.post(reverse('community:create'), {
            'name': 'Data Science',
            'description': 'Numbers',
            'topics': 'Pandas, , NumPy',
        })
        assert response.url == reverse('community:index')
        created = Community.objects.get(name='Data Science')
        assert created.topics == ['Pandas', 'NumPy']

    def test_join_redirects_to_chat(self, client, other_user, community):
        client.force_login(other_user)
        response = client.post(reverse('community:join', args=[community.pk]))
        assert response.url == reverse('community:chat', args=[community.pk])
        assert community.is_member(other_user)

    def test_chat_page_renders_feed(self, signed_in_client, user, community):
        services.post_message(community, user, 'first post')
        response = signed_in_client.get(reverse('community:chat', args=[community.pk]))
        assert response.status_code == 200
        kinds = [item['kind'] for item in response.context['feed']]
        assert kinds == ['day', 'message']
        assert b'first post' in response.content

    def test_chat_post_fallback(self, signed_in_client, community):
        url = reverse('community:chat', args=[community.pk])
        signed_in_client.post(url, {'text': '   '})
        assert not Message.objects.exists()
        signed_in_client.post(url, {'text': 'over http'})
        assert Message.objects.get().text == 'over http'

    def test_chat_page_shows_online_count(self, signed_in_client, user, community):
        presence.mark_online(community, user)
        response = signed_in_client.get(reverse('community:chat', args=[community.pk]))
        assert b'<span id="chat-online-count">1</span> online' in response.content

    def test_chat_post_with_broken_channel_layer_shows_banner(self, signed_in_client, community, monkeypatch):
        class BrokenLayer:
            async def group_send(self, group, message):
                raise ConnectionError('layer down')

        monkeypatch.setattr(services, 'get_channel_layer', BrokenLayer)
        response = signed_in_client.post(reverse('community:chat', args=[community.pk]), {'text': 'hello'})

        assert response.url == reverse('community:chat', args=[community.pk])
        assert Message.objects.get().text == 'hello'
        assert [str(m) for m in get_messages(response.wsgi_request)] == [
            "Message saved but live delivery failed. Please refresh.",
        ]

    def test_missing_chat_redirects(self, signed_in_client):
        response = signed_in_client.get(reverse('community:chat', args=[404]))
        assert response.url == reverse('community:index')


@pytest.mark.django_db
def test_seed_command_runs_once():
    call_command('seed_skillfolio')
    call_command('seed_skillfolio')
    assert Challenge.objects.count() == 2
    assert Community.objects.count() == 3
    assert not Community.objects.filter(created_by__isnull=False).exists()


# ==============================================================================
# LIVE CHAT SOCKET
# ==============================================================================

async def open_chat(user, community_id):
    communicator = WebsocketCommunicator(application, f'/ws/community/{community_id}/chat/')
    communicator.scope['user'] = user
    connected, code = await communicator.connect()
    return communicator, connected, code


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestChatSocket:
    async def test_anonymous_is_rejected(self):
        _, connected, _ = await open_chat(AnonymousUser(), 1)
        assert not connected

    async def test_missing_community_closes_with_not_found(self, user):
        _, connected, code = await open_chat(user, 999)
        assert not connected
        assert code == 4404

    async def test_connect_delivers_snapshots(self, user, community):
        await database_sync_to_async(services.post_message)(community, user, 'welcome')

        communicator, connected, _ = await open_chat(user, community.pk)
        assert connected

        frame = await communicator.receive_json_from(timeout=5)
        assert frame['type'] == 'messages'
        assert [m['text'] for m in frame['messages']] == ['welcome']
        assert [item['kind'] for item in frame['feed']] == ['day', 'message']

        frame = await communicator.receive_json_from(timeout=5)
        assert frame == {'type': 'presence', 'members': [
            {
                'member_id': user.pk,
                'display_name': 'Ada',
                'online': True,
                'last_seen_at': frame['members'][0]['last_seen_at'],
            },
        ]}

        await communicator.disconnect()
        await tasks.drain()

    async def test_message_fans_out_to_members(self, user, other_user, community):
        first, _, _ = await open_chat(user, community.pk)
        await first.receive_json_from(timeout=5)
        await first.receive_json_from(timeout=5)

        second, _, _ = await open_chat(other_user, community.pk)
        await second.receive_json_from(timeout=5)
        roster = await first.receive_json_from(timeout=5)
        assert {m['display_name'] for m in roster['members']} == {'Ada', 'Grace'}
        await second.receive_json_from(timeout=5)

        await second.send_json_to({'type': 'message', 'text': '  hi all  '})
        for communicator in (first, second):
            frame = await communicator.receive_json_from(timeout=5)
            assert frame['type'] == 'messages'
            assert frame['messages'][-1]['text'] == 'hi all'
            assert frame['messages'][-1]['author_name'] == 'Grace'

        await first.disconnect()
        await second.disconnect()
        await tasks.drain()

    async def test_blank_and_malformed_frames(self, user, community):
        communicator, _, _ = await open_chat(user, community.pk)
        await communicator.receive_json_from(timeout=5)
        await communicator.receive_json_from(timeout=5)

        await communicator.send_json_to({'type': 'message', 'text': '   '})
        assert await communicator.receive_nothing(timeout=0.5)
        assert not await database_sync_to_async(Message.objects.exists)()

        await communicator.send_to(text_data='[1, 2]')
        frame = await communicator.receive_json_from(timeout=5)
        assert frame == {'type': 'error', 'scope': 'send', 'message': 'Malformed message'}

        await communicator.send_json_to({'type': 'heartbeat'})
        assert await communicator.receive_nothing(timeout=0.5)

        await communicator.disconnect()
        await tasks.drain()

    async def test_disconnect_marks_member_offline(self, user, community):
        communicator, _, _ = await open_chat(user, community.pk)
        await communicator.receive_json_from(timeout=5)
        await communicator.receive_json_from(timeout=5)

        await communicator.disconnect()
        await tasks.drain()

        record = await database_sync_to_async(PresenceRecord.objects.get)(community=community, member=user)
        assert record.online is False
        assert tasks.completion_log()[-1]['outcome'] == 'done'


    async def test_window_failure_sends_feed_error(self, user, community, monkeypatch):
        def failing_window(community_id, limit=None):
            raise StoreError("Failed to load messages")

        monkeypatch.setattr(services, 'message_window', failing_window)
        communicator, connected, _ = await open_chat(user, community.pk)
        assert connected

        frame = await communicator.receive_json_from(timeout=5)
        assert frame == {'type': 'error', 'scope': 'feed', 'message': 'Failed to load messages'}
        frame = await communicator.receive_json_from(timeout=5)
        assert frame['type'] == 'presence'

        await communicator.disconnect()
        await tasks.drain()

    async def test_presence_failure_sends_feed_error(self, user, community, monkeypatch):
        def failing_snapshot(community_id):
            raise StoreError()

        monkeypatch.setattr(services, 'presence_snapshot', failing_snapshot)
        communicator, connected, _ = await open_chat(user, community.pk)
        assert connected

        frame = await communicator.receive_json_from(timeout=5)
        assert frame['type'] == 'messages'
        frame = await communicator.receive_json_from(timeout=5)
        assert frame == {'type': 'error', 'scope': 'feed', 'message': 'Failed to load online members'}

        await communicator.disconnect()
        await tasks.drain()

    async def test_send_failure_sends_send_error(self, user, community, monkeypatch):
        def failing_post(community, user, text):
            raise StoreError("Failed to send message")

        communicator, _, _ = await open_chat(user, community.pk)
        await communicator.receive_json_from(timeout=5)
        await communicator.receive_json_from(timeout=5)

        monkeypatch.setattr(services, 'post_message', failing_post)
        await communicator.send_json_to({'type': 'message', 'text': 'lost'})
        frame = await communicator.receive_json_from(timeout=5)
        assert frame == {'type': 'error', 'scope': 'send', 'message': 'Failed to send message'}
        assert not await database_sync_to_async(Message.objects.exists)()

        await communicator.disconnect()
        await tasks.drain()

    async def test_redelivery_failure_sends_feed_error(self, user, community, monkeypatch):
        def failing_window(community_id, limit=None):
            raise StoreError("Failed to load messages")

        communicator, _, _ = await open_chat(user, community.pk)
        await communicator.receive_json_from(timeout=5)
        await communicator.receive_json_from(timeout=5)

        monkeypatch.setattr(services, 'message_window', failing_window)
        await communicator.send_json_to({'type': 'message', 'text': 'saved anyway'})
        frame = await communicator.receive_json_from(timeout=5)
        assert frame == {'type': 'error', 'scope': 'feed', 'message': 'Failed to load messages'}
        stored = await database_sync_to_async(Message.objects.get)()
        assert stored.text == 'saved anyway'

        await communicator.disconnect()
        await tasks.drain()


@pytest.mark.asyncio
async def test_detached_failures_are_logged():
    async def boom():
        raise RuntimeError('store down')

    tasks.detach(boom(), label='boom')
    await tasks.drain()
    entry = tasks.completion_log()[-1]
    assert entry['label'] == 'boom'
    assert entry['outcome'].startswith('failed')
