"""Configuration : lue une fois depuis l'environnement."""
import os

# ── CMS ────────────────────────────────────────────────────────────────────────
STRAPI_API_URL  = os.getenv("STRAPI_API_URL") or os.getenv("NEXT_PUBLIC_STRAPI_URL", "")
SITE_IDENTIFIER = os.getenv("SITE_IDENTIFIER", "zweitmeinu-ng")
CMS_TIMEOUT     = float(os.getenv("CMS_TIMEOUT", "10"))

# ── Application ───────────────────────────────────────────────────────────────
APP_ENV     = os.getenv("APP_ENV", "development")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
LOG_LEVEL   = os.getenv("LOG_LEVEL", "INFO").upper()
SITE_URL    = os.getenv("SITE_URL", "https://zweitmein.ng")

# ── Rate limiting (fenêtre fixe) ──────────────────────────────────────────────
REDIS_URL            = os.getenv("REDIS_URL", "")
CONTACT_RATE_WINDOW  = int(os.getenv("CONTACT_MESSAGES_RATE_LIMIT_WINDOW", "60"))
CONTACT_RATE_MAX     = int(os.getenv("CONTACT_MESSAGES_RATE_LIMIT_MAX", "5"))
FAQ_VOTE_RATE_WINDOW = 60
FAQ_VOTE_RATE_MAX    = 10
FAQ_AUTOCOMPLETE_RATE_WINDOW = 10
FAQ_AUTOCOMPLETE_RATE_MAX    = 50

# ── CAPTCHA ───────────────────────────────────────────────────────────────────
CAPTCHA_ENABLED      = os.getenv("CAPTCHA_ENABLED", "false") == "true"
HCAPTCHA_SECRET_KEY  = os.getenv("HCAPTCHA_SECRET_KEY", "")
HCAPTCHA_SITE_KEY    = os.getenv("HCAPTCHA_SITE_KEY", "")
RECAPTCHA_SECRET_KEY = os.getenv("RECAPTCHA_SECRET_KEY", "")
RECAPTCHA_SITE_KEY   = os.getenv("RECAPTCHA_SITE_KEY") or os.getenv("NEXT_PUBLIC_RECAPTCHA_SITE_KEY", "")

# ── SMTP ──────────────────────────────────────────────────────────────────────
SMTP_HOST   = os.getenv("SMTP_HOST", "")
SMTP_PORT   = int(os.getenv("SMTP_PORT", "465"))
SMTP_SECURE = os.getenv("SMTP_SECURE", "true") == "true"
SMTP_USER   = os.getenv("SMTP_USER", "")
SMTP_PASS   = os.getenv("SMTP_PASS", "")
CONTACT_EMAIL_FROM   = os.getenv("CONTACT_EMAIL_FROM", "")
CONTACT_EMAIL_TO     = os.getenv("CONTACT_EMAIL_TO", "")
SEND_COPY_TO_SENDER  = os.getenv("CONTACT_SEND_COPY_TO_SENDER", "false") == "true"
ENABLE_EMAIL_IN_DEV  = os.getenv("ENABLE_EMAIL_IN_DEV", "false") == "true"

# ── Sentry ────────────────────────────────────────────────────────────────────
SENTRY_DSN = os.getenv("SENTRY_DSN") or os.getenv("NEXT_PUBLIC_SENTRY_DSN", "")

EMERGENCY_PHONE = os.getenv("EMERGENCY_PHONE", "+49 800 80 44 100")


def is_production() -> bool:
    return APP_ENV == "production"


def is_development() -> bool:
    return APP_ENV == "development"
