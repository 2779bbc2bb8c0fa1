import os
from datetime import timedelta

import pytest
from django.conf import settings as django_settings
from django.contrib.messages import get_messages
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone

from challenges import services
from challenges.models import Challenge, ChallengeSubmission
from skillfolio import objectstore
from skillfolio.errors import NotFoundError, StoreError, ValidationError


@pytest.fixture
def challenge(db):
    return services.create_challenge(
        None,
        "Build a Portfolio Website",
        "Responsive and accessible",
        timezone.now() + timedelta(days=14),
        prize_description="Featured Spotlight",
    )


@pytest.fixture
def upload_calls(monkeypatch):
    calls = []
    real_upload = objectstore.upload

    def tracking_upload(path, content, content_type=None, storage=None, overwrite=False):
        calls.append(path)
        return real_upload(path, content, content_type=content_type, storage=storage, overwrite=overwrite)

    monkeypatch.setattr(objectstore, 'upload', tracking_upload)
    return calls


@pytest.mark.django_db
class TestSubmit:
    def test_pdf_submission_is_recorded(self, user, challenge, pdf_file, upload_calls):
        updated = services.submit(challenge.pk, user, pdf_file(size=2 * 1024 * 1024))

        assert upload_calls == [f"challenge-submissions/{challenge.pk}/{user.pk}/resume.pdf"]
        assert updated.has_participant(user)
        assert updated.submission_count == 1
        url = updated.submission_urls[str(user.pk)]
        assert url.startswith('/media/challenge-submissions/')
        assert os.path.exists(os.path.join(django_settings.MEDIA_ROOT, upload_calls[0]))

    def test_wrong_type_never_reaches_the_store(self, user, challenge, pdf_file, upload_calls):
        with pytest.raises(ValidationError) as exc:
            services.submit(challenge.pk, user, pdf_file(name='notes.txt', content_type='text/plain'))
        assert exc.value.message == "Please upload only PDF or DOC files."
        assert upload_calls == []

    def test_oversized_file_never_reaches_the_store(self, user, challenge, pdf_file, upload_calls):
        with pytest.raises(ValidationError) as exc:
            services.submit(challenge.pk, user, pdf_file(size=6 * 1024 * 1024))
        assert exc.value.message == "File size should be less than 5MB."
        assert upload_calls == []
        challenge.refresh_from_db()
        assert challenge.submission_count == 0

    def test_second_submission_is_rejected(self, user, challenge, pdf_file, upload_calls):
        services.submit(challenge.pk, user, pdf_file())
        with pytest.raises(ValidationError):
            services.submit(challenge.pk, user, pdf_file(name='again.pdf'))
        assert len(upload_calls) == 1
        challenge.refresh_from_db()
        assert challenge.submission_count == 1

    def test_submissions_from_different_users_are_counted(self, user, other_user, challenge, pdf_file):
        services.submit(challenge.pk, user, pdf_file())
        updated = services.submit(challenge.pk, other_user, pdf_file())
        assert updated.submission_count == 2
        assert set(updated.submission_urls) == {str(user.pk), str(other_user.pk)}

    def test_retry_after_failed_record_write(self, user, challenge, pdf_file, monkeypatch):
        with monkeypatch.context() as patched:
            def failing_create(**kwargs):
                raise DatabaseError("disk I/O error")

            patched.setattr(ChallengeSubmission.objects, 'create', failing_create)
            with pytest.raises(StoreError):
                services.submit(challenge.pk, user, pdf_file())

        challenge.refresh_from_db()
        assert challenge.submission_count == 0
        assert not challenge.has_submitted(user)

        updated = services.submit(challenge.pk, user, pdf_file())
        assert updated.submission_count == 1
        assert str(user.pk) in updated.submission_urls

    def test_interleaved_submissions_keep_both_urls(self, user, other_user, challenge, pdf_file, monkeypatch):
        real_url = objectstore.get_public_url
        interleaved = []

        def url_then_other_submission(path, storage=None):
            # The second user submits in full while the first is mid-flight.
            if not interleaved:
                interleaved.append(path)
                services.submit(challenge.pk, other_user, pdf_file(name='other.pdf'))
            return real_url(path, storage=storage)

        monkeypatch.setattr(objectstore, 'get_public_url', url_then_other_submission)
        updated = services.submit(challenge.pk, user, pdf_file())

        assert updated.submission_count == 2
        assert set(updated.submission_urls) == {str(user.pk), str(other_user.pk)}
        assert updated.submission_urls[str(other_user.pk)].endswith('other.pdf')

    def test_missing_challenge(self, user, pdf_file):
        with pytest.raises(NotFoundError):
            services.submit(404, user, pdf_file())


@pytest.mark.django_db
class TestChallenge:
    def test_creator_joins_without_submitting(self, user):
        challenge = services.create_challenge(user, "Logo", "Draw one", timezone.now() + timedelta(days=1))
        assert challenge.has_participant(user)
        assert not challenge.has_submitted(user)
        assert challenge.submission_count == 0

    def test_default_rules(self, challenge):
        rules = challenge.effective_rules()
        assert len(rules) == 5
        assert rules[3].startswith("Submission deadline: ")

    def test_stored_rules_win(self, challenge):
        challenge.rules = ["Be kind"]
        assert challenge.effective_rules() == ["Be kind"]

    def test_upcoming_is_ordered_by_deadline(self, challenge):
        sooner = services.create_challenge(None, "Sooner", "d", timezone.now() + timedelta(days=1))
        assert list(services.upcoming_challenges()) == [sooner, challenge]


@pytest.mark.django_db
class TestSubmitView:
    def test_anonymous_can_read_the_challenge(self, client, challenge):
        response = client.get(reverse('challenges:submit', args=[challenge.pk]))
        assert response.status_code == 200
        assert b'Build a Portfolio Website' in response.content
        assert response.context['already_submitted'] is False

    def test_anonymous_submission_goes_to_sign_in(self, client, challenge, pdf_file):
        response = client.post(reverse('challenges:submit', args=[challenge.pk]), {'file': pdf_file()})
        assert response.url == reverse('accounts:auth')
        assert "Please sign in to join challenges" in [str(m) for m in get_messages(response.wsgi_request)]

    def test_submission_through_the_page(self, signed_in_client, user, challenge, pdf_file):
        response = signed_in_client.post(reverse('challenges:submit', args=[challenge.pk]), {'file': pdf_file()})
        assert response.url == reverse('community:index')
        challenge.refresh_from_db()
        assert challenge.has_submitted(user)

    def test_invalid_file_shows_banner(self, signed_in_client, challenge, pdf_file):
        response = signed_in_client.post(
            reverse('challenges:submit', args=[challenge.pk]),
            {'file': pdf_file(name='photo.png', content_type='image/png')},
        )
        assert response.status_code == 200
        assert "Please upload only PDF or DOC files." in [str(m) for m in get_messages(response.wsgi_request)]
        assert Challenge.objects.get(pk=challenge.pk).submission_count == 0

    def test_missing_challenge_redirects(self, client, db):
        response = client.get(reverse('challenges:submit', args=[404]))
        assert response.url == reverse('community:index')
