"""
Remontée d'erreurs (Sentry) : initialisée une fois au démarrage.

Les événements sont nettoyés avant envoi : chemins /home/<user>, variables de
frame liées au patient (patient/email/name) et fragments patient_id=/email=/name=
dans les messages d'exception. Sans SENTRY_DSN tout est no-op.
"""
import logging
import re

import sentry_sdk

from . import config

log = logging.getLogger(__name__)

_HOME_PATH   = re.compile(r"/home/[^/]+")
_PII_VAR     = re.compile(r"patient|email|name", re.IGNORECASE)
_PII_VALUES  = [
    (re.compile(r"patient_id=\w+", re.IGNORECASE), "patient_id=[redacted]"),
    (re.compile(r"email=[^&\s]+", re.IGNORECASE),  "email=[redacted]"),
    (re.compile(r"name=[^&\s]+", re.IGNORECASE),   "name=[redacted]"),
]

_initialized = False


def scrub_event(event: dict, hint=None) -> dict:
    """Hook before_send : retire les données personnelles de l'événement."""
    for exc in (event.get("exception") or {}).get("values") or []:
        for frame in (exc.get("stacktrace") or {}).get("frames") or []:
            if frame.get("filename"):
                frame["filename"] = _HOME_PATH.sub("/home/[user]", frame["filename"])
            frame_vars = frame.get("vars")
            if frame_vars:
                for key in list(frame_vars):
                    if _PII_VAR.search(key):
                        frame_vars[key] = "[redacted]"
        if exc.get("value"):
            value = exc["value"]
            for pattern, repl in _PII_VALUES:
                value = pattern.sub(repl, value)
            exc["value"] = value
    return event


def init_sentry() -> bool:
    """Initialise sentry_sdk si SENTRY_DSN est défini. Retourne True si actif."""
    global _initialized
    if not config.SENTRY_DSN:
        log.info("Sentry désactivé (SENTRY_DSN absent)")
        return False
    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.APP_ENV,
        release=config.APP_VERSION,
        sample_rate=0.1 if config.is_production() else 1.0,
        traces_sample_rate=0.05,
        send_default_pii=False,
        before_send=scrub_event,
    )
    _initialized = True
    log.info("Sentry initialisé (%s)", config.APP_ENV)
    return True


def report_exception(exc: BaseException, **context) -> None:
    """Capture une exception avec des tags de contexte (slug, section_id…)."""
    if not _initialized:
        return
    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            if value is not None:
                scope.set_tag(key, str(value))
        sentry_sdk.capture_exception(exc)
