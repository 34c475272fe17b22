"""
Testing Settings

Settings for running tests.
"""

from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

JWT_SETTINGS = {
    'ALGORITHM': 'HS256',
    'VERIFYING_KEY': 'exam-service-test-signing-key-0123456789',
    'ISSUER': 'training-admin-platform',
}

EXAM_GENERATION = {
    **EXAM_GENERATION,
    'SELECTION_SEED': 1234,
}

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['apps']['level'] = 'WARNING'
