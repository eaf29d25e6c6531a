"""
E-mails du formulaire de contact : notification admin + copie optionnelle à l'expéditeur.

Envoi SMTP (smtplib) : SSL implicite si SMTP_SECURE, sinon STARTTLS.
"""
import logging
import smtplib
from email.message import EmailMessage
from html import escape
from typing import Optional

from .. import config
from .validation import ContactFormData, URGENCY_LEVELS

log = logging.getLogger(__name__)

EMAIL_STYLES = """
body{font-family:Roboto,Arial,sans-serif;line-height:1.6;color:#1f2937;background:#f8fafc;margin:0}
.email-container{max-width:600px;margin:0 auto;background:#fff;border-radius:8px}
.email-header{background:#004166;color:#fff;padding:24px;text-align:center}
.email-body{padding:32px 24px}
.urgency-badge{display:inline-block;padding:8px 16px;border-radius:6px;color:#fff;margin-bottom:16px}
.field-label{font-weight:500;color:#004166;display:block}
.field-value{padding:12px;background:#f8fafc;border-left:3px solid #1278B3;margin-bottom:16px}
.message-content{white-space:pre-wrap}
.emergency-notice{background:#fef2f2;border:2px solid #dc2626;padding:16px;color:#991b1b;margin-bottom:24px}
.metadata{font-size:12px;color:#9ca3af;border-top:1px solid #e5e7eb;padding-top:16px}
"""

_PREFERRED_CONTACT = {"email": "E-Mail", "phone": "Telefon", "both": "E-Mail und Telefon"}


class EmailConfigError(Exception):
    """Configuration SMTP incomplète."""


def missing_smtp_settings() -> list:
    required = {
        "SMTP_HOST": config.SMTP_HOST,
        "SMTP_USER": config.SMTP_USER,
        "SMTP_PASS": config.SMTP_PASS,
        "CONTACT_EMAIL_FROM": config.CONTACT_EMAIL_FROM,
        "CONTACT_EMAIL_TO": config.CONTACT_EMAIL_TO,
    }
    return [name for name, value in required.items() if not value]


def should_send_email() -> bool:
    return not config.is_development() or config.ENABLE_EMAIL_IN_DEV


# ── Templates ────────────────────────────────────────────────────────────────

def _urgency_badge(urgency: str) -> str:
    level = next((u for u in URGENCY_LEVELS if u["value"] == urgency), None)
    if not level:
        return ""
    return f'<div class="urgency-badge" style="background-color:{level["color"]}">{escape(level["label"])}</div>'


def _field(label: str, value: str) -> str:
    return f'<span class="field-label">{label}</span><div class="field-value">{value}</div>'


def _wrap(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="de">
<head><meta charset="UTF-8"><title>{title}</title><style>{EMAIL_STYLES}</style></head>
<body>
  <div class="email-container">
    <div class="email-header"><h1>{title}</h1></div>
    <div class="email-body">{body}</div>
  </div>
</body>
</html>"""


def admin_notification(data: ContactFormData, metadata: Optional[dict] = None) -> tuple:
    """(subject, html) de la notification interne."""
    emergency = data.urgency == "emergency"
    subject = f"{'NOTFALL - ' if emergency else ''}[{data.urgency.upper()}] Kontaktanfrage: {data.subject}"

    parts = []
    if emergency:
        parts.append('<div class="emergency-notice"><strong>NOTFALL-KONTAKTANFRAGE</strong><br>'
                     'Diese Anfrage wurde als Notfall markiert und benötigt sofortige Aufmerksamkeit!</div>')
    parts.append(_urgency_badge(data.urgency))
    parts.append(_field("Betreff", f"<strong>{escape(data.subject)}</strong>"))
    parts.append(_field("Name", f"{escape(data.firstName)} {escape(data.lastName)}"))
    parts.append(_field("E-Mail", f'<a href="mailto:{escape(data.email)}">{escape(data.email)}</a>'))
    if data.phone:
        parts.append(_field("Telefon", f'<a href="tel:{escape(data.phone)}">{escape(data.phone)}</a>'))
    if data.specialty:
        parts.append(_field("Fachbereich", escape(data.specialty)))
    parts.append(_field("Bevorzugter Kontaktweg", _PREFERRED_CONTACT[data.preferredContact]))
    parts.append(_field("Nachricht", f'<div class="message-content">{escape(data.message)}</div>'))
    if data.newsletter:
        parts.append('<span class="field-label">Newsletter angemeldet</span>')
    if metadata:
        lines = "".join(f"{label}: {escape(str(metadata[key]))}<br>"
                        for key, label in (("timestamp", "Zeitstempel"), ("ipAddress", "IP-Adresse"),
                                           ("userAgent", "User-Agent"))
                        if metadata.get(key))
        parts.append(f'<div class="metadata"><strong>Metadaten:</strong><br>{lines}</div>')

    return subject, _wrap("Neue Kontaktanfrage", "\n".join(parts))


def user_confirmation(data: ContactFormData) -> tuple:
    """(subject, html) de l'accusé de réception envoyé à l'expéditeur."""
    subject = "Ihre Kontaktanfrage bei zweitmeinung.ng"
    if data.urgency == "emergency":
        notice = ('<div class="emergency-notice"><strong>NOTFALL-HINWEIS</strong><br>'
                  'Bei medizinischen Notfällen wenden Sie sich bitte umgehend an:<br>'
                  '<strong>Notruf: 112</strong><br><strong>Ärztlicher Bereitschaftsdienst: 116 117</strong></div>')
    else:
        notice = ('<p><strong>Bei dringenden medizinischen Fragen:</strong><br>'
                  'Notruf: <a href="tel:112">112</a><br>'
                  'Ärztlicher Bereitschaftsdienst: <a href="tel:116117">116 117</a></p>')

    body = "\n".join([
        f"<p>Sehr geehrte/r {escape(data.firstName)} {escape(data.lastName)},</p>",
        "<p>vielen Dank für Ihre Kontaktanfrage bei <strong>zweitmeinung.ng</strong>.</p>",
        "<p>Wir haben Ihre Nachricht erhalten und werden uns innerhalb von <strong>24 Stunden</strong> bei Ihnen melden.</p>",
        _urgency_badge(data.urgency),
        _field("Betreff", escape(data.subject)),
        _field("Ihre Nachricht", f'<div class="message-content">{escape(data.message)}</div>'),
        _field("Bevorzugter Kontaktweg", _PREFERRED_CONTACT[data.preferredContact]),
        notice,
    ])
    return subject, _wrap("Empfangsbestätigung", body)


# ── Envoi ────────────────────────────────────────────────────────────────────

def _message(to: str, subject: str, html: str, reply_to: Optional[str] = None,
             high_priority: bool = False) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = config.CONTACT_EMAIL_FROM
    msg["To"] = to
    msg["Subject"] = subject
    if reply_to:
        msg["Reply-To"] = reply_to
    if high_priority:
        msg["X-Priority"] = "1"
        msg["Importance"] = "high"
    msg.set_content("Diese Nachricht erfordert einen HTML-fähigen E-Mail-Client.")
    msg.add_alternative(html, subtype="html")
    return msg


def _smtp(timeout: int = 20) -> smtplib.SMTP:
    if config.SMTP_SECURE:
        return smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, timeout=timeout)
    smtp = smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=timeout)
    smtp.starttls()
    return smtp


def send_contact_emails(data: ContactFormData, metadata: Optional[dict] = None) -> None:
    """Envoie la notification admin (+ copie expéditeur si activée). Lève en cas d'échec."""
    missing = missing_smtp_settings()
    if missing:
        raise EmailConfigError(f"Configuration SMTP manquante : {', '.join(missing)}")

    subject, html = admin_notification(data, metadata)
    messages = [_message(config.CONTACT_EMAIL_TO, subject, html, reply_to=data.email,
                         high_priority=data.urgency == "emergency")]
    if config.SEND_COPY_TO_SENDER:
        subject, html = user_confirmation(data)
        messages.append(_message(data.email, subject, html))

    with _smtp() as smtp:
        smtp.login(config.SMTP_USER, config.SMTP_PASS)
        for msg in messages:
            smtp.send_message(msg)
    log.info("E-mails de contact envoyés : %d (urgence %s)", len(messages), data.urgency)
