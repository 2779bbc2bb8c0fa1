"""
Identity provider for SkillFolio.

All credential handling is delegated to ``django.contrib.auth``; this module
only translates its outcomes into ``AuthError`` codes and exposes session
changes to the rest of the project through ``observe_session``.
"""

import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from skillfolio.errors import AuthError

from .session import Session

logger = logging.getLogger(__name__)

User = get_user_model()


def _normalize_email(email):
    email = (email or '').strip().lower()
    try:
        validate_email(email)
    except DjangoValidationError:
        raise AuthError(AuthError.INVALID_EMAIL)
    return email


def sign_in(request, email, password):
    email = _normalize_email(email)
    user = authenticate(request, username=email, password=password)
    if user is None:
        logger.info("Rejected sign-in for %s", email)
        raise AuthError(AuthError.WRONG_PASSWORD)
    login(request, user)
    return Session.from_user(user)


def sign_up(request, email, password, display_name):
    email = _normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise AuthError(AuthError.EMAIL_IN_USE)

    candidate = User(username=email, email=email, display_name=(display_name or '').strip())
    try:
        validate_password(password, user=candidate)
    except DjangoValidationError as exc:
        raise AuthError(AuthError.WEAK_PASSWORD, " ".join(exc.messages))

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,  # Hashed automatically
                display_name=candidate.display_name,
            )
    except IntegrityError:
        raise AuthError(AuthError.EMAIL_IN_USE)

    logger.info("Created account %s", email)
    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    return Session.from_user(user)


def sign_out(request):
    logout(request)


def observe_session(callback, user=None):
    """
    Call ``callback(current, previous)`` with the current session right away
    (``None`` when ``user`` is missing or anonymous), then whenever a user
    signs in (``previous`` is None) or out (``current`` is None). Returns a
    function that stops the observation.
    """
    def on_login(sender, request, user, **kwargs):
        callback(Session.from_user(user), None)

    def on_logout(sender, request, user, **kwargs):
        # Logging out an anonymous request sends user=None.
        if user is not None:
            callback(None, Session.from_user(user))

    user_logged_in.connect(on_login, weak=False)
    user_logged_out.connect(on_logout, weak=False)

    current = Session.from_user(user) if user is not None and user.is_authenticated else None
    callback(current, None)

    def unsubscribe():
        user_logged_in.disconnect(on_login)
        user_logged_out.disconnect(on_logout)

    return unsubscribe
