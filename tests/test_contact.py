"""
Tests du formulaire de contact : validation, règles de champ, CAPTCHA, e-mails.
"""
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from zweitmeinung import config
from zweitmeinung.contact import captcha, mailer
from zweitmeinung.contact.validation import (
    ContactFormData,
    FieldValidation,
    FormFieldConfig,
    error_details,
    validation_rules,
)


def valid_form(**overrides):
    data = {
        "firstName": "Anna",
        "lastName": "Schmidt",
        "email": "anna.schmidt@example.de",
        "phone": "+49 176 1234567",
        "subject": "Zweitmeinung Herz-OP",
        "message": "Mir wurde ein Bypass empfohlen, ich hätte gern eine zweite Meinung.",
        "specialty": "kardiologie",
        "urgency": "medium",
        "preferredContact": "email",
        "consent": True,
    }
    data.update(overrides)
    return data


def messages(**overrides):
    with pytest.raises(ValidationError) as exc:
        ContactFormData.model_validate(valid_form(**overrides))
    return {d["field"]: d["message"] for d in error_details(exc.value)}


# ── ContactFormData ───────────────────────────────────────────────────────

class TestContactFormData:
    def test_valide(self):
        data = ContactFormData.model_validate(valid_form())
        assert data.firstName == "Anna"
        assert data.newsletter is False

    def test_espaces_supprimes(self):
        data = ContactFormData.model_validate(valid_form(firstName="  Anna  "))
        assert data.firstName == "Anna"

    def test_prenom_trop_court(self):
        assert messages(firstName="A") == {"firstName": "Vorname muss mindestens 2 Zeichen lang sein"}

    def test_nom_trop_long(self):
        assert messages(lastName="x" * 51) == {"lastName": "Maximal 50 Zeichen."}

    def test_email_invalide(self):
        assert messages(email="anna@") == {"email": "Ungültige E-Mail-Adresse"}

    def test_telephone_invalide(self):
        assert messages(phone="12345") == {"phone": "Ungültige Telefonnummer"}

    def test_telephone_optionnel(self):
        assert ContactFormData.model_validate(valid_form(phone="")).phone is None

    def test_message_trop_court(self):
        assert messages(message="Zu kurz") == {"message": "Nachricht muss mindestens 20 Zeichen lang sein"}

    def test_consentement_obligatoire(self):
        assert messages(consent=False) == {"consent": "Zustimmung zur Datenschutzerklärung ist erforderlich"}

    def test_urgence_inconnue(self):
        assert "urgency" in messages(urgency="sofort")

    def test_plusieurs_erreurs(self):
        errors = messages(firstName="A", subject="Hi")
        assert set(errors) == {"firstName", "subject"}

    def test_retour_ligne_refuse_dans_les_en_tetes(self):
        errors = messages(subject="Hallo\nBcc: evil@example.org")
        assert set(errors) == {"subject"}
        errors = messages(firstName="An\x00na")
        assert errors == {"firstName": "Enthält ungültige Zeichen (z. B. Zeilenumbrüche)."}

    def test_retour_ligne_accepte_dans_le_message(self):
        data = ContactFormData.model_validate(valid_form(message="Erste Zeile.\nZweite Zeile mit Details."))
        assert "\n" in data.message


# ── validation_rules ──────────────────────────────────────────────────────

class TestValidationRules:
    def test_aucune_regle(self):
        assert validation_rules(FormFieldConfig(name="notes", label="Notizen")) == {}

    def test_requis_seul(self):
        rules = validation_rules(FormFieldConfig(name="x", label="X", required=True))
        assert rules == {"required": "Dieses Feld ist erforderlich."}

    def test_toutes_les_regles(self):
        field = FormFieldConfig(name="plz", label="PLZ", required=True,
                                validation=FieldValidation(minLength=5, maxLength=5, pattern=r"^\d{5}$"))
        assert validation_rules(field) == {
            "required": "Dieses Feld ist erforderlich.",
            "minLength": {"value": 5, "message": "Mindestens 5 Zeichen."},
            "maxLength": {"value": 5, "message": "Maximal 5 Zeichen."},
            "pattern": {"value": r"^\d{5}$", "message": "Ungültiges Format."},
        }

    def test_longueur_zero_ignoree(self):
        field = FormFieldConfig(name="x", label="X", validation={"minLength": 0})
        assert validation_rules(field) == {}


# ── CAPTCHA ───────────────────────────────────────────────────────────────

class TestCaptcha:
    def test_hcaptcha_actif(self, monkeypatch):
        monkeypatch.setattr(config, "CAPTCHA_ENABLED", True)
        monkeypatch.setattr(config, "HCAPTCHA_SITE_KEY", "site-key")
        cfg = captcha.captcha_config()
        assert (cfg.enabled, cfg.provider, cfg.siteKey) == (True, "hcaptcha", "site-key")

    def test_recaptcha_par_defaut(self, monkeypatch):
        monkeypatch.setattr(config, "RECAPTCHA_SECRET_KEY", "")
        cfg = captcha.captcha_config()
        assert cfg.enabled is False
        assert cfg.provider == "recaptcha"

    def test_verification_sans_secret(self, monkeypatch):
        monkeypatch.setattr(config, "HCAPTCHA_SECRET_KEY", "")
        assert captcha.verify_hcaptcha("token") is False

    def test_verification_ok(self, monkeypatch):
        monkeypatch.setattr(config, "HCAPTCHA_SECRET_KEY", "secret")
        resp = MagicMock()
        resp.json.return_value = {"success": True}
        with patch("zweitmeinung.contact.captcha.requests.post", return_value=resp) as post:
            assert captcha.verify_hcaptcha("token") is True
        assert post.call_args.kwargs["data"] == {"secret": "secret", "response": "token"}

    def test_verification_erreur_reseau(self, monkeypatch):
        import requests
        monkeypatch.setattr(config, "HCAPTCHA_SECRET_KEY", "secret")
        with patch("zweitmeinung.contact.captcha.requests.post", side_effect=requests.Timeout("timeout")):
            assert captcha.verify_hcaptcha("token") is False


# ── E-mails ───────────────────────────────────────────────────────────────

class TestMailer:
    def test_notification_admin_echappee(self):
        data = ContactFormData.model_validate(valid_form(subject="<b>Dringend</b> bitte"))
        subject, html = mailer.admin_notification(data, {"timestamp": "2026-01-01T00:00:00Z"})
        assert subject == "[MEDIUM] Kontaktanfrage: <b>Dringend</b> bitte"
        assert "&lt;b&gt;Dringend&lt;/b&gt;" in html
        assert "Zeitstempel: 2026-01-01T00:00:00Z" in html

    def test_notification_urgence(self):
        data = ContactFormData.model_validate(valid_form(urgency="emergency"))
        subject, html = mailer.admin_notification(data)
        assert subject.startswith("NOTFALL - [EMERGENCY]")
        assert "NOTFALL-KONTAKTANFRAGE" in html

    def test_confirmation_utilisateur(self):
        data = ContactFormData.model_validate(valid_form())
        subject, html = mailer.user_confirmation(data)
        assert subject == "Ihre Kontaktanfrage bei zweitmeinung.ng"
        assert "Sehr geehrte/r Anna Schmidt" in html

    def test_pas_d_envoi_en_dev(self, monkeypatch):
        monkeypatch.setattr(config, "APP_ENV", "development")
        assert mailer.should_send_email() is False
        monkeypatch.setattr(config, "ENABLE_EMAIL_IN_DEV", True)
        assert mailer.should_send_email() is True

    def test_configuration_smtp_manquante(self, monkeypatch):
        monkeypatch.setattr(config, "SMTP_HOST", "")
        data = ContactFormData.model_validate(valid_form())
        with pytest.raises(mailer.EmailConfigError, match="SMTP_HOST"):
            mailer.send_contact_emails(data)

    def test_envoi_smtp(self, monkeypatch):
        for name, value in (("SMTP_HOST", "smtp.example.de"), ("SMTP_USER", "user"), ("SMTP_PASS", "pw"),
                            ("CONTACT_EMAIL_FROM", "noreply@example.de"), ("CONTACT_EMAIL_TO", "team@example.de"),
                            ("SEND_COPY_TO_SENDER", True)):
            monkeypatch.setattr(config, name, value)
        smtp = MagicMock()
        smtp.__enter__.return_value = smtp
        with patch("zweitmeinung.contact.mailer._smtp", return_value=smtp):
            mailer.send_contact_emails(ContactFormData.model_validate(valid_form()))
        smtp.login.assert_called_once_with("user", "pw")
        sent = [call.args[0] for call in smtp.send_message.call_args_list]
        assert [m["To"] for m in sent] == ["team@example.de", "anna.schmidt@example.de"]
        assert sent[0]["Reply-To"] == "anna.schmidt@example.de"
