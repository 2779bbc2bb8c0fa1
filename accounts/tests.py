import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.contrib.messages import get_messages
from django.urls import reverse

from accounts import identity
from accounts.models import Connection
from accounts.session import Session
from accounts.views import connect
from skillfolio.errors import AuthError, ValidationError


def banners(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


# ==============================================================================
# IDENTITY
# ==============================================================================

@pytest.mark.django_db
class TestIdentity:
    def test_sign_up_with_malformed_email(self):
        with pytest.raises(AuthError) as exc:
            identity.sign_up(None, 'not-an-email', 'secret-pass', 'Ada')
        assert exc.value.code == AuthError.INVALID_EMAIL
        assert exc.value.message == "Please enter a valid email address."

    def test_sign_up_with_short_password(self):
        with pytest.raises(AuthError) as exc:
            identity.sign_up(None, 'ada@example.com', 'abc', 'Ada')
        assert exc.value.code == AuthError.WEAK_PASSWORD
        assert not get_user_model().objects.exists()

    def test_sign_up_with_registered_email(self, user):
        with pytest.raises(AuthError) as exc:
            identity.sign_up(None, 'ADA@example.com', 'another-pass', 'Someone')
        assert exc.value.code == AuthError.EMAIL_IN_USE

    def test_sign_in_with_wrong_password(self, user):
        with pytest.raises(AuthError) as exc:
            identity.sign_in(None, 'ada@example.com', 'wrong-pass')
        assert exc.value.code == AuthError.WRONG_PASSWORD
        assert exc.value.message == "Invalid email or password."

    def test_observe_session_reports_sign_in_and_sign_out(self, client, user):
        seen = []
        unsubscribe = identity.observe_session(lambda current, previous: seen.append((current, previous)))
        try:
            client.post(reverse('accounts:auth'), {
                'mode': 'signin', 'email': 'ada@example.com', 'password': 'secret-pass',
            })
            client.get(reverse('accounts:logout'))
        finally:
            unsubscribe()

        session = Session(user_id=user.pk, email='ada@example.com', display_name='Ada')
        assert seen == [(None, None), (session, None), (None, session)]

    def test_observe_session_pushes_current_session_first(self, user):
        seen = []
        unsubscribe = identity.observe_session(lambda current, previous: seen.append((current, previous)), user=user)
        unsubscribe()
        assert seen == [(Session(user_id=user.pk, email='ada@example.com', display_name='Ada'), None)]

    def test_observe_session_pushes_none_for_anonymous(self):
        seen = []
        unsubscribe = identity.observe_session(lambda current, previous: seen.append((current, previous)), user=AnonymousUser())
        unsubscribe()
        assert seen == [(None, None)]

    def test_unsubscribed_observer_only_sees_the_first_push(self, client, user):
        seen = []
        unsubscribe = identity.observe_session(lambda current, previous: seen.append(current))
        unsubscribe()
        client.force_login(user)
        assert seen == [None]


# ==============================================================================
# AUTH PAGE
# ==============================================================================

@pytest.mark.django_db
class TestAuthView:
    def test_sign_up_creates_account_and_signs_in(self, client):
        response = client.post(reverse('accounts:auth'), {
            'mode': 'signup',
            'display_name': 'Ada Lovelace',
            'email': 'ada@example.com',
            'password': 'secret-pass',
        })
        assert response.status_code == 302
        assert response.url == reverse('portfolios:home')
        created = get_user_model().objects.get(email='ada@example.com')
        assert created.display_name == 'Ada Lovelace'
        assert int(client.session['_auth_user_id']) == created.pk

    def test_duplicate_sign_up_shows_banner(self, client, user):
        response = client.post(reverse('accounts:auth'), {
            'mode': 'signup',
            'display_name': 'Ada',
            'email': 'ada@example.com',
            'password': 'secret-pass',
        })
        assert response.status_code == 200
        assert "This email is already registered. Please sign in instead." in banners(response)

    def test_sign_in_redirects_home(self, client, user):
        response = client.post(reverse('accounts:auth'), {
            'mode': 'signin', 'email': 'ada@example.com', 'password': 'secret-pass',
        })
        assert response.status_code == 302
        assert response.url == reverse('portfolios:home')

    def test_wrong_password_shows_banner(self, client, user):
        response = client.post(reverse('accounts:auth'), {
            'mode': 'signin', 'email': 'ada@example.com', 'password': 'nope-nope',
        })
        assert response.status_code == 200
        assert "Invalid email or password." in banners(response)

    def test_signed_in_user_is_sent_home(self, signed_in_client):
        response = signed_in_client.get(reverse('accounts:auth'))
        assert response.status_code == 302
        assert response.url == reverse('portfolios:home')

    def test_logout_returns_to_auth(self, signed_in_client):
        response = signed_in_client.get(reverse('accounts:logout'))
        assert response.url == reverse('accounts:auth')
        assert '_auth_user_id' not in signed_in_client.session


# ==============================================================================
# ROUTING
# ==============================================================================

@pytest.mark.django_db
class TestRouting:
    @pytest.mark.parametrize('path', ['/', '/portfolios/', '/upload/', '/community/', '/analytics/'])
    def test_protected_pages_redirect_to_auth(self, client, path):
        response = client.get(path)
        assert response.status_code == 302
        assert response.url.startswith(reverse('accounts:auth'))

    def test_unknown_path_redirects_to_auth(self, signed_in_client):
        response = signed_in_client.get('/no/such/page/')
        assert response.status_code == 302
        assert response.url == reverse('accounts:auth')

    def test_known_path_without_slash_gets_one(self, client):
        response = client.get('/community?tab=chat')
        assert response.status_code == 302
        assert response.url == '/community/?tab=chat'


# ==============================================================================
# CONNECTIONS
# ==============================================================================

@pytest.mark.django_db
class TestConnect:
    def test_connect_is_idempotent(self, user, other_user):
        first, created = connect(user, other_user)
        again, created_again = connect(user, other_user)
        assert created and not created_again
        assert first.pk == again.pk
        assert first.status == Connection.STATUS_PENDING

    def test_cannot_connect_with_self(self, user):
        with pytest.raises(ValidationError):
            connect(user, user)

    def test_connect_view(self, signed_in_client, user, other_user):
        response = signed_in_client.post(reverse('accounts:connect', args=[other_user.pk]))
        assert response.url == reverse('community:index')
        assert Connection.objects.filter(user=user, connected_user=other_user).exists()
