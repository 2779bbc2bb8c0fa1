"""
Django settings for the skillfolio project.

Everything environment specific is read from environment variables so the same
module serves local development, the test suite and production
(see start_production.py).
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# ==============================================================================
# CORE
# ==============================================================================

SECRET_KEY = os.environ.get('SECRET_KEY', 'django-insecure-skillfolio-dev-key')
DEBUG = _env_bool('DEBUG', True)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get('ALLOWED_HOSTS', '*').split(',') if h.strip()]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'channels',
    'crispy_forms',
    'crispy_bootstrap5',

    # Local apps
    'accounts',
    'portfolios',
    'community',
    'challenges',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'skillfolio.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'portfolios.context_processors.portfolio_count',
            ],
        },
    },
]

WSGI_APPLICATION = 'skillfolio.wsgi.application'
ASGI_APPLICATION = 'skillfolio.asgi.application'

# ==============================================================================
# DATABASE & CHANNEL LAYER
# ==============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('DATABASE_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Live subscriptions are channel-layer groups. The in-memory layer only fans
# out inside one process; point this at a shared layer for multi-worker setups.
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels.layers.InMemoryChannelLayer',
    },
}

# ==============================================================================
# AUTHENTICATION
# ==============================================================================

AUTH_USER_MODEL = 'accounts.User'

LOGIN_URL = '/auth/'
LOGIN_REDIRECT_URL = '/'
LOGOUT_REDIRECT_URL = '/auth/'

AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {'min_length': 6},
    },
]

# ==============================================================================
# INTERNATIONALIZATION
# ==============================================================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

# ==============================================================================
# STATIC & MEDIA (object store)
# ==============================================================================

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STATICFILES_DIRS = [BASE_DIR / 'static']

MEDIA_URL = '/media/'
MEDIA_ROOT = os.environ.get('MEDIA_ROOT', str(BASE_DIR / 'media'))

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage'
        if not DEBUG else 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

# ==============================================================================
# FORMS
# ==============================================================================

CRISPY_ALLOWED_TEMPLATE_PACKS = 'bootstrap5'
CRISPY_TEMPLATE_PACK = 'bootstrap5'

# ==============================================================================
# SKILLFOLIO
# ==============================================================================

# Most recent messages delivered by a chat subscription.
SKILLFOLIO_CHAT_WINDOW = int(os.environ.get('SKILLFOLIO_CHAT_WINDOW', 100))
# Largest portfolio or challenge document accepted, in bytes.
SKILLFOLIO_MAX_UPLOAD_BYTES = int(os.environ.get('SKILLFOLIO_MAX_UPLOAD_BYTES', 5 * 1024 * 1024))
# Seconds without a heartbeat after which an "online" member is hidden from the roster.
SKILLFOLIO_PRESENCE_STALE_AFTER = int(os.environ.get('SKILLFOLIO_PRESENCE_STALE_AFTER', 120))
# Completed detached tasks kept for diagnostics.
SKILLFOLIO_TASK_LOG_SIZE = int(os.environ.get('SKILLFOLIO_TASK_LOG_SIZE', 200))

# ==============================================================================
# LOGGING
# ==============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'accounts': {'handlers': ['console'], 'level': os.environ.get('SKILLFOLIO_LOG_LEVEL', 'INFO'), 'propagate': False},
        'portfolios': {'handlers': ['console'], 'level': os.environ.get('SKILLFOLIO_LOG_LEVEL', 'INFO'), 'propagate': False},
        'community': {'handlers': ['console'], 'level': os.environ.get('SKILLFOLIO_LOG_LEVEL', 'INFO'), 'propagate': False},
        'challenges': {'handlers': ['console'], 'level': os.environ.get('SKILLFOLIO_LOG_LEVEL', 'INFO'), 'propagate': False},
        'skillfolio': {'handlers': ['console'], 'level': os.environ.get('SKILLFOLIO_LOG_LEVEL', 'INFO'), 'propagate': False},
    },
}
