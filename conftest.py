import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Keep uploaded documents out of the project tree."""
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    return settings.MEDIA_ROOT


@pytest.fixture
def make_user(db):
    def make(email='ada@example.com', password='secret-pass', display_name='Ada'):
        return get_user_model().objects.create_user(
            username=email,
            email=email,
            password=password,
            display_name=display_name,
        )
    return make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other_user(make_user):
    return make_user(email='grace@example.com', display_name='Grace')


@pytest.fixture
def signed_in_client(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def pdf_file():
    def make(size=1024, name='resume.pdf', content_type='application/pdf'):
        return SimpleUploadedFile(name, b'%PDF' + b'0' * (size - 4), content_type=content_type)
    return make
