# backend/bconnect/settings.py
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-change-me")
DEBUG = _env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework.authtoken",
    "accounts",
    "core",
    "pricing",
    "articles",
    "tariffs",
    "quotes.apps.QuotesConfig",
    "robaws",
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

ROOT_URLCONF = "bconnect.urls"
WSGI_APPLICATION = "bconnect.wsgi.application"

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

# Postgres in deployed environments, sqlite for local/dev and tests
if os.environ.get("DB_ENGINE", "sqlite").lower() in ("postgres", "postgresql"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("DB_NAME", "bconnect"),
            "USER": os.environ.get("DB_USER", "bconnect"),
            "PASSWORD": os.environ.get("DB_PASSWORD", ""),
            "HOST": os.environ.get("DB_HOST", "localhost"),
            "PORT": os.environ.get("DB_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        }
    }

AUTH_USER_MODEL = "accounts.CustomUser"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "Europe/Brussels")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.TokenAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "COERCE_DECIMAL_TO_STRING": True,
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        **{
            app: {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False}
            for app in ("accounts", "core", "pricing", "articles", "tariffs", "quotes", "robaws")
        },
    },
}

# ---- Business configuration ----
QUOTATION = {
    "request_number_prefix": "QR",
    "default_currency": "EUR",
    "vat_rate": os.environ.get("QUOTATION_VAT_RATE", "21"),
    "default_margin": os.environ.get("QUOTATION_DEFAULT_MARGIN", "15"),
    # Role based profit margins (percent)
    "role_margins": {
        "RORO": 10,
        "POV": 12,
        "CONSIGNEE": 15,
        "FORWARDER": 8,
        "HOLLANDICO": 20,
        "INTERMEDIATE": 12,
        "EMBASSY": 15,
        "TRANSPORT COMPANY": 10,
        "SHIPPING LINE": 8,
        "OEM": 12,
        "BROKER": 10,
        "RENTAL": 15,
        "LUXURY CAR DEALER": 18,
        "CAR DEALER": 12,
        "BLACKLISTED": 25,
        "TOURIST": 15,
        "CONSTRUCTION COMPANY": 12,
        "MINING COMPANY": 12,
        "EXCEPTION": 20,
        "BUYER": 15,
        "SELLER": 15,
        "EXHIBITOR": 15,
    },
    "vat_codes": {
        "standard": "21% VF",
        "intra_eu": "intracommunautaire VF",
        "export": "vrijgesteld VF",
        "import": "vrijgesteld import VF",
        "reverse_charge": "medecontractant VF",
    },
    "vat_code_rates": {
        "21% VF": 21,
        "intracommunautaire VF": 0,
        "vrijgesteld VF": 0,
        "vrijgesteld import VF": 0,
        "medecontractant VF": 0,
    },
    "home_country": "BE",
    "eu_countries": [
        "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR", "DE", "GR", "HU", "IE",
        "IT", "LV", "LT", "LU", "MT", "NL", "PL", "PT", "RO", "SK", "SI", "ES", "SE",
    ],
    # Country name -> ISO-2, for ports stored without a country code
    "country_names": {
        "AUSTRIA": "AT", "BELGIUM": "BE", "BELGIE": "BE", "BELGIQUE": "BE", "BULGARIA": "BG",
        "CROATIA": "HR", "CYPRUS": "CY", "CZECH REPUBLIC": "CZ", "CZECHIA": "CZ", "DENMARK": "DK",
        "ESTONIA": "EE", "FINLAND": "FI", "FRANCE": "FR", "GERMANY": "DE", "DEUTSCHLAND": "DE",
        "GREECE": "GR", "HUNGARY": "HU", "IRELAND": "IE", "ITALY": "IT", "LATVIA": "LV",
        "LITHUANIA": "LT", "LUXEMBOURG": "LU", "MALTA": "MT", "NETHERLANDS": "NL",
        "THE NETHERLANDS": "NL", "NEDERLAND": "NL", "POLAND": "PL", "PORTUGAL": "PT", "ROMANIA": "RO",
        "SLOVAKIA": "SK", "SLOVENIA": "SI", "SPAIN": "ES", "SWEDEN": "SE",
        "UNITED KINGDOM": "GB", "NORWAY": "NO", "SWITZERLAND": "CH", "TURKEY": "TR", "UNITED STATES": "US",
        "CANADA": "CA", "NIGERIA": "NG", "BENIN": "BJ", "TOGO": "TG", "GHANA": "GH", "SENEGAL": "SN",
        "IVORY COAST": "CI", "COTE D'IVOIRE": "CI", "GUINEA": "GN", "CAMEROON": "CM", "GABON": "GA",
        "CONGO": "CG", "ANGOLA": "AO", "MAURITANIA": "MR", "MOROCCO": "MA", "TUNISIA": "TN",
        "ALGERIA": "DZ", "EGYPT": "EG", "KENYA": "KE", "TANZANIA": "TZ", "SOUTH AFRICA": "ZA",
        "UNITED ARAB EMIRATES": "AE", "SAUDI ARABIA": "SA", "JORDAN": "JO", "LEBANON": "LB",
        "AUSTRALIA": "AU", "NEW ZEALAND": "NZ", "CHINA": "CN", "JAPAN": "JP",
    },
    "service_types": [
        "RORO_IMPORT", "RORO_EXPORT", "FCL_IMPORT", "FCL_EXPORT", "FCL_CONSOL_EXPORT",
        "LCL_IMPORT", "LCL_EXPORT", "BB_IMPORT", "BB_EXPORT", "AIRFREIGHT_IMPORT",
        "AIRFREIGHT_EXPORT", "CROSSTRADE", "ROAD_TRANSPORT", "CUSTOMS", "PORT_FORWARDING", "OTHER",
    ],
    "known_carriers": [
        "GRIMALDI", "SALLAUM", "NMT", "MSC", "CMA CGM", "MAERSK", "HAPAG-LLOYD", "WALLENIUS WILHELMSEN",
    ],
}

ROBAWS = {
    "base_url": os.environ.get("ROBAWS_BASE_URL", "https://app.robaws.com"),
    "auth": os.environ.get("ROBAWS_AUTH", "token"),
    "api_key": os.environ.get("ROBAWS_API_KEY", ""),
    "username": os.environ.get("ROBAWS_USERNAME", ""),
    "password": os.environ.get("ROBAWS_PASSWORD", ""),
    "company_id": os.environ.get("ROBAWS_COMPANY_ID", ""),
    "timeout": int(os.environ.get("ROBAWS_TIMEOUT", 30)),
    "max_retries": int(os.environ.get("ROBAWS_MAX_RETRIES", 3)),
    "retry_delay_ms": int(os.environ.get("ROBAWS_RETRY_DELAY_MS", 1000)),
}
