"""
Tests de la remontée d'erreurs : nettoyage PII et no-op sans DSN.
"""
from unittest.mock import patch

from zweitmeinung import config, reporting


def make_event():
    return {"exception": {"values": [{
        "value": "lookup failed patient_id=4711 email=a@b.de name=Meier",
        "stacktrace": {"frames": [{
            "filename": "/home/deploy/app/zweitmeinung/cms/client.py",
            "vars": {"patient_name": "Meier", "user_email": "a@b.de", "slug": "home"},
        }]},
    }]}}


class TestScrubEvent:
    def test_chemins_et_variables(self):
        event = reporting.scrub_event(make_event())
        exc = event["exception"]["values"][0]
        frame = exc["stacktrace"]["frames"][0]
        assert frame["filename"] == "/home/[user]/app/zweitmeinung/cms/client.py"
        assert frame["vars"] == {"patient_name": "[redacted]", "user_email": "[redacted]", "slug": "home"}

    def test_valeur_exception(self):
        exc = reporting.scrub_event(make_event())["exception"]["values"][0]
        assert exc["value"] == "lookup failed patient_id=[redacted] email=[redacted] name=[redacted]"

    def test_evenement_sans_exception(self):
        assert reporting.scrub_event({"message": "hello"}) == {"message": "hello"}


class TestInitEtReport:
    def test_sans_dsn(self, monkeypatch):
        monkeypatch.setattr(config, "SENTRY_DSN", "")
        with patch("zweitmeinung.reporting.sentry_sdk.init") as init:
            assert reporting.init_sentry() is False
        init.assert_not_called()

    def test_avec_dsn(self, monkeypatch):
        monkeypatch.setattr(config, "SENTRY_DSN", "https://key@sentry.example.org/1")
        monkeypatch.setattr(config, "APP_ENV", "production")
        monkeypatch.setattr(reporting, "_initialized", False)
        with patch("zweitmeinung.reporting.sentry_sdk.init") as init:
            assert reporting.init_sentry() is True
        kwargs = init.call_args.kwargs
        assert kwargs["sample_rate"] == 0.1
        assert kwargs["send_default_pii"] is False
        assert kwargs["before_send"] is reporting.scrub_event

    def test_report_no_op(self, monkeypatch):
        monkeypatch.setattr(reporting, "_initialized", False)
        with patch("zweitmeinung.reporting.sentry_sdk.capture_exception") as capture:
            reporting.report_exception(RuntimeError("x"), slug="home")
        capture.assert_not_called()

    def test_report_avec_tags(self, monkeypatch):
        monkeypatch.setattr(reporting, "_initialized", True)
        with patch("zweitmeinung.reporting.sentry_sdk.new_scope") as new_scope, \
             patch("zweitmeinung.reporting.sentry_sdk.capture_exception") as capture:
            scope = new_scope.return_value.__enter__.return_value
            err = RuntimeError("x")
            reporting.report_exception(err, slug="home", section_id=3, component=None)
        scope.set_tag.assert_any_call("slug", "home")
        scope.set_tag.assert_any_call("section_id", "3")
        assert scope.set_tag.call_count == 2
        capture.assert_called_once_with(err)
