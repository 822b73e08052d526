"""Test settings for the guesthouse booking service.

Used by pytest-django. Runs against an in-memory SQLite database, keeps
sent mail in memory and executes Celery tasks inline.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

GUESTHOUSE_ADMIN_EMAIL = 'admin@guesthouse.test'

PAYSTACK_SECRET_KEY = ''
PAYSTACK_PUBLIC_KEY = ''
PAYMENT_SANDBOX_MODE = True
