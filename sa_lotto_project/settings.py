import os
from pathlib import Path
from dotenv import load_dotenv
import dj_database_url

load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

logs_dir = BASE_DIR / 'logs'
if not logs_dir.exists():
    logs_dir.mkdir(exist_ok=True)

SECRET_KEY = os.getenv('SECRET_KEY', 'django-insecure-default-key')
DEBUG = os.getenv('DEBUG', 'False') == 'True'

# Environment-specific configuration
ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')


def get_allowed_hosts():
    """Parse ALLOWED_HOSTS from environment variable"""
    hosts_env = (
        os.getenv('DJANGO_ALLOWED_HOSTS') or
        os.getenv('ALLOWED_HOSTS') or
        'za.pwedeh.com'
    )

    # Always include localhost for development
    hosts = ['127.0.0.1', 'localhost', 'testserver']

    for host in hosts_env.split(','):
        host = host.strip().rstrip('/')
        if host and host not in hosts:
            hosts.append(host)

    return hosts


ALLOWED_HOSTS = get_allowed_hosts()

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    'rest_framework',
    'corsheaders',

    # Local apps
    'results',
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    'whitenoise.middleware.WhiteNoiseMiddleware',
    "django.contrib.sessions.middleware.SessionMiddleware",
    'corsheaders.middleware.CorsMiddleware',
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# CORS settings for API
CORS_ALLOW_ALL_ORIGINS = DEBUG  # Only in development

PRODUCTION_CORS_ORIGINS = [
    "https://za.pwedeh.com",
]

DEVELOPMENT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5000",
]

if DEBUG:
    CORS_ALLOWED_ORIGINS = DEVELOPMENT_CORS_ORIGINS + PRODUCTION_CORS_ORIGINS
else:
    CORS_ALLOWED_ORIGINS = PRODUCTION_CORS_ORIGINS

CORS_ALLOW_CREDENTIALS = True

# REST Framework settings
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
    ],
}

ROOT_URLCONF = "sa_lotto_project.urls"

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

WSGI_APPLICATION = "sa_lotto_project.wsgi.application"

# Storage calls made by the scraper must not hang forever
DB_STATEMENT_TIMEOUT_MS = int(os.getenv('DB_STATEMENT_TIMEOUT_MS', '15000'))

# Database configuration
DATABASE_URL = os.getenv('DATABASE_URL')

if DATABASE_URL:
    DATABASES = {
        'default': dj_database_url.config(
            default=DATABASE_URL,
            conn_max_age=600,
            conn_health_checks=True,
        )
    }
elif os.getenv('DB_HOST'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.getenv('DB_NAME', 'lottery_db'),
            'USER': os.getenv('DB_USER', 'postgres'),
            'PASSWORD': os.getenv('DB_PASSWORD', ''),
            'HOST': os.getenv('DB_HOST', 'localhost'),
            'PORT': os.getenv('DB_PORT', '5432'),
            'CONN_MAX_AGE': 600,
            'OPTIONS': {
                'sslmode': os.getenv('DB_SSLMODE', 'disable'),
            },
        }
    }
else:
    # Local fallback (development and tests)
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

if DATABASES['default']['ENGINE'].endswith('postgresql'):
    DATABASES['default'].setdefault('OPTIONS', {})
    DATABASES['default']['OPTIONS']['options'] = f'-c statement_timeout={DB_STATEMENT_TIMEOUT_MS}'

# CACHING - Redis when available, in-process memory otherwise
REDIS_URL = os.getenv('REDIS_URL', None)

if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
                'CONNECTION_POOL_KWARGS': {
                    'max_connections': 20,
                    'retry_on_timeout': True,
                },
                'SERIALIZER': 'django_redis.serializers.json.JSONSerializer',
            },
            'KEY_PREFIX': 'sa_lotto',
            'TIMEOUT': 300,
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'sa-lotto-results',
            'TIMEOUT': 300,
        }
    }

# Session configuration
SESSION_ENGINE = 'django.contrib.sessions.backends.db'
SESSION_COOKIE_AGE = 7200  # 2 hours

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-za"
TIME_ZONE = "Africa/Johannesburg"
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

if DEBUG:
    STATICFILES_STORAGE = 'django.contrib.staticfiles.storage.StaticFilesStorage'
else:
    STATICFILES_STORAGE = 'whitenoise.storage.CompressedManifestStaticFilesStorage'

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Bearer token for the external cron endpoint (scheduler/tick/)
SCRAPER_API_TOKEN = os.getenv('SCRAPER_API_TOKEN')

# Scraper and scheduler settings
LOTTERY_SCRAPER = {
    'SOURCE_URL': os.getenv('SCRAPER_SOURCE_URL', 'https://www.africanlottery.net/'),
    'SOURCE_TIME_ZONE': 'Africa/Johannesburg',  # SAST
    'FETCH_RETRIES': int(os.getenv('SCRAPER_FETCH_RETRIES', '3')),
    'FETCH_RETRY_DELAY': float(os.getenv('SCRAPER_FETCH_RETRY_DELAY', '5')),  # seconds
    'REQUEST_TIMEOUT': int(os.getenv('SCRAPER_REQUEST_TIMEOUT', '30')),  # seconds
    'TICK_INTERVAL': int(os.getenv('SCRAPER_TICK_INTERVAL', '60')),  # seconds
    'RETRY_WINDOW_MINUTES': int(os.getenv('SCRAPER_RETRY_WINDOW_MINUTES', '60')),
    'RETRY_BACKOFF_MINUTES': int(os.getenv('SCRAPER_RETRY_BACKOFF_MINUTES', '5')),
    'SECTION_SIBLING_WINDOW': 15,
    'SECTION_SHORT_PARENT_CHARS': 600,
    'FALLBACK_TRAILING_CHARS': 500,
    'ON_DEMAND_WAIT_SECONDS': int(os.getenv('SCRAPER_ON_DEMAND_WAIT_SECONDS', '120')),
    'AUTOSTART': os.getenv('SCRAPER_AUTOSTART', 'False') == 'True',
}

# CDN purge (no-op unless all four values are set)
CLOUDFLARE = {
    'API_KEY': os.getenv('CF_API_KEY'),
    'ZONE_ID': os.getenv('CF_ZONE_ID'),
    'EMAIL': os.getenv('CF_EMAIL'),
    'BASE_URL': os.getenv('CF_BASE_URL'),
    'TIMEOUT': 10,
}

LOTTERY_SETTINGS = {
    'GAME_RESULTS_CACHE_TIMEOUT': 300,  # 5 minutes
    'GAME_RESULTS_LIMIT': 20,
}

# Environment-specific overrides
if ENVIRONMENT == 'production':
    CORS_ALLOW_ALL_ORIGINS = False
    SECURE_BROWSER_XSS_FILTER = True
    SECURE_CONTENT_TYPE_NOSNIFF = True
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_SECONDS = 31536000
    SECURE_SSL_REDIRECT = True
    SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# Logging configuration
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
        'file': {
            'level': 'INFO',
            'class': 'logging.handlers.TimedRotatingFileHandler',
            'filename': BASE_DIR / 'logs' / 'lottery_app.log',
            'when': 'midnight',
            'backupCount': 14,
            'formatter': 'verbose',
        },
        'error_file': {
            'level': 'ERROR',
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'errors.log',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'lottery_app': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': False,
        },
        'results': {
            'handlers': ['console', 'file', 'error_file'],
            'level': os.getenv('SCRAPER_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
        },
        'django.request': {
            'handlers': ['error_file'],
            'level': 'ERROR',
            'propagate': False,
        },
    },
}
