"""
Django settings for backend project.

Values come from the environment (or a .env file) through python-decouple.

For the full list of settings and their values, see
https://docs.djangoproject.com/en/4.2/ref/settings/
"""

from pathlib import Path

from decouple import config, Csv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = config('SECRET_KEY', default='django-insecure-dev-key-change-me')

DEBUG = config('DEBUG', default=False, cast=bool)

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,testserver', cast=Csv())


# Application definition

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "lessons",
    "favorites",
    "newsletter",
    "pages",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "backend.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "backend.wsgi.application"
ASGI_APPLICATION = "backend.asgi.application"


# Database
# SQLite unless DATABASE_ENGINE points somewhere else (e.g. django.db.backends.postgresql)

DATABASE_ENGINE = config('DATABASE_ENGINE', default='django.db.backends.sqlite3')

if DATABASE_ENGINE == 'django.db.backends.sqlite3':
    DATABASES = {
        "default": {
            "ENGINE": DATABASE_ENGINE,
            "NAME": config('DATABASE_NAME', default=str(BASE_DIR / "db.sqlite3")),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": DATABASE_ENGINE,
            "NAME": config('DATABASE_NAME'),
            "USER": config('DATABASE_USER', default=''),
            "PASSWORD": config('DATABASE_PASSWORD', default=''),
            "HOST": config('DATABASE_HOST', default='localhost'),
            "PORT": config('DATABASE_PORT', default='5432'),
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Cache (page content is served from here)

CACHES = {
    "default": {
        "BACKEND": config('CACHE_BACKEND', default='django.core.cache.backends.locmem.LocMemCache'),
        "LOCATION": config('CACHE_LOCATION', default='lessons-platform'),
    }
}

# None keeps page content cached until an admin saves the page
PAGE_CONTENT_CACHE_TIMEOUT = config('PAGE_CONTENT_CACHE_TIMEOUT', default=None, cast=lambda v: int(v) if v else None)


# Password validation

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]


# Django REST Framework

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
        "rest_framework.renderers.BrowsableAPIRenderer",
    ],
    "TEST_REQUEST_DEFAULT_FORMAT": "json",
}


# Internationalization

LANGUAGE_CODE = "cs"

TIME_ZONE = "Europe/Prague"

USE_I18N = True

USE_TZ = True


# Static files (CSS, JavaScript, Images)

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


# Lessons platform

FRONTEND_URL = config('FRONTEND_URL', default='http://localhost:3000')
ADMIN_URL = config('ADMIN_URL', default='http://localhost:8000')

# Short code regenerations allowed when a new lesson hits the unique constraint
LESSON_SHORT_ID_MAX_ATTEMPTS = config('LESSON_SHORT_ID_MAX_ATTEMPTS', default=5, cast=int)


# Logging

LOG_LEVEL = config('LOG_LEVEL', default='INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
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
        'lessons': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'favorites': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'newsletter': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'pages': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'slack_notifications': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
