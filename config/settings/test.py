"""
Django test settings for contact_monitor project.

In-memory SQLite, fast password hashing, synchronous django-q and quiet
application logging.
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

TIME_ZONE = 'Asia/Shanghai'
REMINDER_TIME_ZONE = TIME_ZONE
REMINDER_CRON = '0 1 * * *'
REMINDER_LOG_RETENTION_DAYS = 7
REMINDER_DEFAULT_URGENT_THRESHOLD = 10
REMINDER_DEFAULT_SUGGEST_THRESHOLD = 7
REMINDER_INCLUDE_ORPHANED_PERSONS = False

Q_CLUSTER = {
    'name': 'contact_monitor_test',
    'sync': True,
    'orm': 'default',
}

LOGGING['handlers'] = {'null': {'class': 'logging.NullHandler'}}
LOGGING['root']['handlers'] = ['null']
for _logger in LOGGING['loggers'].values():
    _logger['handlers'] = ['null']
