import pytest
from django.core.files.storage import default_storage
from django.urls import reverse

from portfolios import services
from portfolios.models import Portfolio
from skillfolio.errors import PermissionDeniedError, StorageError, ValidationError


@pytest.fixture
def portfolio(user, pdf_file):
    return services.upload_portfolio(user, 'My Work', 'Selected projects', 'Web Development', pdf_file())


@pytest.mark.django_db
class TestUpload:
    def test_upload_stores_file_and_record(self, user, portfolio):
        assert portfolio.owner == user
        assert portfolio.storage_path.startswith(f'portfolios/{user.pk}/')
        assert portfolio.storage_path.endswith('.pdf')
        assert portfolio.file_url == '/media/' + portfolio.storage_path
        assert portfolio.file_name == 'resume.pdf'
        assert portfolio.file_type == 'application/pdf'
        assert (portfolio.like_count, portfolio.view_count) == (0, 0)
        assert default_storage.exists(portfolio.storage_path)

    @pytest.mark.parametrize('title, description, category', [
        ('', 'desc', 'Other'),
        ('Title', '', 'Other'),
        ('Title', 'desc', ''),
    ])
    def test_missing_fields(self, user, pdf_file, title, description, category):
        with pytest.raises(ValidationError) as exc:
            services.upload_portfolio(user, title, description, category, pdf_file())
        assert exc.value.message == "Please fill in all fields and upload a file"

    def test_unknown_category(self, user, pdf_file):
        with pytest.raises(ValidationError):
            services.upload_portfolio(user, 'Title', 'desc', 'Cooking', pdf_file())

    def test_word_documents_are_accepted(self, user, pdf_file):
        doc = pdf_file(name='cv.docx', content_type='application/vnd.openxmlformats-officedocument.wordprocessingml.document')
        portfolio = services.upload_portfolio(user, 'CV', 'desc', 'Other', doc)
        assert portfolio.storage_path.endswith('.docx')

    def test_store_failure_leaves_no_record(self, user, pdf_file, monkeypatch):
        def broken_save(name, content, max_length=None):
            raise OSError('disk full')

        monkeypatch.setattr(default_storage, 'save', broken_save)
        with pytest.raises(StorageError):
            services.upload_portfolio(user, 'Title', 'desc', 'Other', pdf_file())
        assert not Portfolio.objects.exists()


@pytest.mark.django_db
class TestPortfolioActions:
    def test_owner_deletes_file_and_record(self, user, portfolio):
        path = portfolio.storage_path
        services.delete_portfolio(portfolio.pk, user)
        assert not Portfolio.objects.exists()
        assert not default_storage.exists(path)

    def test_non_owner_cannot_delete(self, other_user, portfolio):
        with pytest.raises(PermissionDeniedError):
            services.delete_portfolio(portfolio.pk, other_user)
        assert Portfolio.objects.filter(pk=portfolio.pk).exists()

    def test_record_view_increments(self, portfolio):
        services.record_view(portfolio.pk)
        assert services.record_view(portfolio.pk).view_count == 2

    def test_like_toggles(self, other_user, portfolio):
        assert services.toggle_like(portfolio.pk, other_user) == (True, 1)
        assert services.toggle_like(portfolio.pk, other_user) == (False, 0)

    def test_featured_is_most_liked(self, user, other_user, portfolio, pdf_file):
        second = services.upload_portfolio(user, 'Other', 'desc', 'Other', pdf_file())
        services.toggle_like(second.pk, other_user)
        assert services.featured_portfolio() == second


@pytest.mark.django_db
class TestViews:
    def test_home_shows_portfolio_count(self, signed_in_client, portfolio):
        response = signed_in_client.get(reverse('portfolios:home'))
        assert response.status_code == 200
        assert response.context['portfolio_count'] == 1

    def test_list(self, signed_in_client, portfolio):
        response = signed_in_client.get(reverse('portfolios:list'))
        assert b'My Work' in response.content

    @pytest.mark.parametrize('name', ['portfolios:profile', 'portfolios:analytics', 'portfolios:upload'])
    def test_static_pages_render(self, signed_in_client, name):
        assert signed_in_client.get(reverse(name)).status_code == 200

    def test_upload_view(self, signed_in_client, user, pdf_file):
        response = signed_in_client.post(reverse('portfolios:upload'), {
            'title': 'Case Studies',
            'description': 'Three of them',
            'category': 'UI/UX Design',
            'file': pdf_file(),
        })
        assert response.url == reverse('portfolios:list')
        assert Portfolio.objects.get().title == 'Case Studies'

    def test_upload_view_rejects_wrong_type(self, signed_in_client, pdf_file):
        response = signed_in_client.post(reverse('portfolios:upload'), {
            'title': 'Pic',
            'description': 'A picture',
            'category': 'Other',
            'file': pdf_file(name='pic.png', content_type='image/png'),
        })
        assert response.status_code == 200
        assert not Portfolio.objects.exists()

    def test_open_counts_a_view(self, signed_in_client, portfolio):
        response = signed_in_client.get(reverse('portfolios:open', args=[portfolio.pk]))
        assert response.url == portfolio.file_url
        portfolio.refresh_from_db()
        assert portfolio.view_count == 1

    def test_like_endpoint(self, signed_in_client, portfolio):
        url = reverse('portfolios:like', args=[portfolio.pk])
        assert signed_in_client.get(url).status_code == 400
        assert signed_in_client.post(url).json() == {'success': True, 'liked': True, 'like_count': 1}

    def test_delete_view(self, client, other_user, portfolio):
        client.force_login(other_user)
        client.post(reverse('portfolios:delete', args=[portfolio.pk]))
        assert Portfolio.objects.filter(pk=portfolio.pk).exists()
