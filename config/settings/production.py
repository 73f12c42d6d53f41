"""
Django production settings for contact_monitor project.

PostgreSQL (required for the reminder run lock), HTTPS-only cookies and
rotating log files under BASE_DIR/logs.
"""

from .base import *
from decouple import Csv

DEBUG = False

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='', cast=Csv())
CSRF_TRUSTED_ORIGINS = config('CSRF_TRUSTED_ORIGINS', default='', cast=Csv())

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': config('DB_NAME'),
        'USER': config('DB_USER'),
        'PASSWORD': config('DB_PASSWORD'),
        'HOST': config('DB_HOST', default='localhost'),
        'PORT': config('DB_PORT', default='5432'),
        'CONN_MAX_AGE': config('DB_CONN_MAX_AGE', default=60, cast=int),
    }
}


# =============================================================================
# SECURITY
# =============================================================================
SECURE_SSL_REDIRECT = config('SECURE_SSL_REDIRECT', default=True, cast=bool)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_HSTS_SECONDS = config('SECURE_HSTS_SECONDS', default=31536000, cast=int)
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'


# =============================================================================
# LOGGING
# =============================================================================
LOG_DIR = config('LOG_DIR', default=str(BASE_DIR / 'logs'))

LOGGING['handlers'].update({
    'errors_file': {
        'level': 'ERROR',
        'class': 'logging.handlers.RotatingFileHandler',
        'filename': f'{LOG_DIR}/errors.log',
        'maxBytes': 10 * 1024 * 1024,
        'backupCount': 5,
        'formatter': 'verbose',
    },
    # One line per run start, commit, skip or rollback
    'reminders_file': {
        'level': 'INFO',
        'class': 'logging.handlers.TimedRotatingFileHandler',
        'filename': f'{LOG_DIR}/reminders.log',
        'when': 'midnight',
        'backupCount': 30,
        'formatter': 'verbose',
    },
})

LOGGING['loggers']['django']['handlers'] = ['console', 'errors_file']
LOGGING['loggers']['apps']['handlers'] = ['console', 'errors_file']
LOGGING['loggers']['apps.reminders'] = {
    'handlers': ['reminders_file'],
    'level': 'INFO',
    'propagate': True,
}
