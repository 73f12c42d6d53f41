"""
Django development settings for contact_monitor project.

Local SQLite database, debug toolbar, verbose reminder logging.
"""

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1']

# SQLite ignores select_for_update(), so concurrent reminder runs are only
# serialized on PostgreSQL
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

INSTALLED_APPS += ['debug_toolbar']
MIDDLEWARE.insert(0, 'debug_toolbar.middleware.DebugToolbarMiddleware')
INTERNAL_IPS = ['127.0.0.1']

LOGGING['loggers']['apps']['level'] = config('LOG_LEVEL', default='DEBUG')
LOGGING['loggers']['django']['level'] = 'WARNING'
