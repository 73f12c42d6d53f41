"""
Django base settings for contact_monitor project.

Shared by development, production and test. Every value that differs
between deployments is read from the environment (or .env) through
python-decouple.
"""

from pathlib import Path
from decouple import config

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = config('SECRET_KEY', default='django-insecure-contact-monitor-dev-key')

DEBUG = config('DEBUG', default=False, cast=bool)


# =============================================================================
# APPLICATIONS
# =============================================================================
DJANGO_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS = [
    'django_filters',
    'django_q',
]

# Migration order: departments → accounts → personnel → reminders
LOCAL_APPS = [
    'apps.departments',
    'apps.accounts',
    'apps.personnel',
    'apps.reminders',
    'apps.reports',
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'
WSGI_APPLICATION = 'config.wsgi.application'

# Only the admin renders HTML; every other endpoint answers JSON
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]


# =============================================================================
# ACCOUNTS
# =============================================================================
AUTH_USER_MODEL = 'accounts.User'

# Liaisons sign in through the admin login page
LOGIN_URL = '/admin/login/'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
]

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.Argon2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
]


# =============================================================================
# LOCALE
# =============================================================================
LANGUAGE_CODE = config('LANGUAGE_CODE', default='en-us')
TIME_ZONE = config('TIME_ZONE', default='Asia/Shanghai')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# =============================================================================
# DJANGO-Q2 (runs the daily reminder schedule: python manage.py qcluster)
# =============================================================================
Q_CLUSTER = {
    'name': 'contact_monitor',
    'workers': config('Q_WORKERS', default=1, cast=int),
    'timeout': 900,
    'retry': 1200,
    'max_attempts': 1,
    # A missed day is picked up by the next run through the run ledger
    'catch_up': False,
    'save_limit': 100,
    'orm': 'default',
}


# =============================================================================
# REMINDER ENGINE
# =============================================================================
# Cron expression for the daily batch, evaluated by django-q2 in TIME_ZONE
REMINDER_CRON = config('REMINDER_CRON', default='0 1 * * *')

# Zone that decides what "today" is and how contact timestamps become dates
REMINDER_TIME_ZONE = config('REMINDER_TIME_ZONE', default=TIME_ZONE)

# Run-ledger rows older than this many days are pruned by each run
REMINDER_LOG_RETENTION_DAYS = config('REMINDER_LOG_RETENTION_DAYS', default=7, cast=int)

# Used for liaisons without a ReminderSettings row
REMINDER_DEFAULT_URGENT_THRESHOLD = config('REMINDER_DEFAULT_URGENT_THRESHOLD', default=10, cast=int)
REMINDER_DEFAULT_SUGGEST_THRESHOLD = config('REMINDER_DEFAULT_SUGGEST_THRESHOLD', default=7, cast=int)

# Treat persons without a department as never contacted instead of skipping them
REMINDER_INCLUDE_ORPHANED_PERSONS = config('REMINDER_INCLUDE_ORPHANED_PERSONS', default=False, cast=bool)


# =============================================================================
# LOGGING
# =============================================================================
# Project modules log under "apps.<app>.<module>"; environments add handlers
LOG_LEVEL = config('LOG_LEVEL', default='INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'django_q': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
