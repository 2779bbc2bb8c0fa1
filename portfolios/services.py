import logging
import os
import uuid

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from skillfolio import objectstore
from skillfolio.errors import NotFoundError, PermissionDeniedError, StoreError, ValidationError, store_errors
from skillfolio.validators import validate_document

from .models import CATEGORY_CHOICES, Portfolio, PortfolioLike

logger = logging.getLogger(__name__)

CATEGORIES = [value for value, _ in CATEGORY_CHOICES]


def get_portfolio(portfolio_id):
    try:
        return Portfolio.objects.select_related('owner').get(pk=portfolio_id)
    except Portfolio.DoesNotExist:
        raise NotFoundError("Portfolio not found")


def list_portfolios():
    return Portfolio.objects.select_related('owner').order_by('-created_at')


def featured_portfolio():
    """The most liked portfolio, if there is any."""
    return Portfolio.objects.select_related('owner').order_by('-like_count', '-created_at').first()


def portfolio_count(user):
    return Portfolio.objects.filter(owner=user).count()


def storage_path_for(user, filename, now=None):
    now = now or timezone.now()
    extension = os.path.splitext(filename)[1].lower()
    # Two uploads in the same millisecond must not share a path.
    return f"portfolios/{user.pk}/{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:8]}{extension}"


def upload_portfolio(user, title, description, category, uploaded_file):
    """
    Store the document, then record the portfolio. A failed record write
    leaves the stored file behind; it is logged, not cleaned up.
    """
    title = (title or '').strip()
    description = (description or '').strip()
    if not title or not description or not category or uploaded_file is None:
        raise ValidationError("Please fill in all fields and upload a file")
    if category not in CATEGORIES:
        raise ValidationError("Please select a valid category")
    validate_document(uploaded_file)

    content_type = getattr(uploaded_file, 'content_type', '') or ''
    stored = objectstore.upload(storage_path_for(user, uploaded_file.name), uploaded_file, content_type=content_type)
    url = objectstore.get_public_url(stored)

    try:
        with store_errors("Failed to upload portfolio. Please try again."):
            portfolio = Portfolio.objects.create(
                owner=user,
                title=title,
                description=description,
                category=category,
                file_url=url,
                storage_path=stored,
                file_name=os.path.basename(uploaded_file.name),
                file_type=content_type,
            )
    except StoreError:
        logger.warning("Portfolio record for %s was not saved; stored file is orphaned", stored)
        raise

    logger.info("User %s uploaded portfolio %s", user.pk, portfolio.pk)
    return portfolio


def record_view(portfolio_id):
    portfolio = get_portfolio(portfolio_id)
    with store_errors():
        Portfolio.objects.filter(pk=portfolio.pk).update(view_count=F('view_count') + 1)
    portfolio.refresh_from_db(fields=['view_count'])
    return portfolio


def toggle_like(portfolio_id, user):
    """Like or unlike; returns (liked, like_count)."""
    portfolio = get_portfolio(portfolio_id)
    with store_errors(), transaction.atomic():
        like, created = PortfolioLike.objects.get_or_create(portfolio=portfolio, user=user)
        if created:
            Portfolio.objects.filter(pk=portfolio.pk).update(like_count=F('like_count') + 1)
        else:
            like.delete()
            Portfolio.objects.filter(pk=portfolio.pk, like_count__gt=0).update(like_count=F('like_count') - 1)
    portfolio.refresh_from_db(fields=['like_count'])
    return created, portfolio.like_count


def delete_portfolio(portfolio_id, user):
    """
    Owner only. The stored file is removed first; if that fails the record is
    kept so the owner can retry.
    """
    portfolio = get_portfolio(portfolio_id)
    if portfolio.owner_id != user.pk:
        raise PermissionDeniedError("You can only delete your own portfolios")
    objectstore.remove(portfolio.storage_path)
    with store_errors("Failed to delete portfolio. Please try again."):
        portfolio.delete()
    logger.info("User %s deleted portfolio %s", user.pk, portfolio_id)
