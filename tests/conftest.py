"""
Fixtures communes : CMS non configuré (aucun appel réseau), caches et
rate limiting remis à zéro entre chaque test.
"""
import pytest
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    from zweitmeinung import autocomplete, config
    from zweitmeinung.api.routes import api as api_routes
    from zweitmeinung.cms import faq, site_config
    from zweitmeinung.contact import rate_limit

    monkeypatch.setattr(config, "STRAPI_API_URL", "")
    monkeypatch.setattr(config, "REDIS_URL", "")
    monkeypatch.setattr(config, "SENTRY_DSN", "")
    monkeypatch.setattr(config, "APP_ENV", "development")
    monkeypatch.setattr(config, "CAPTCHA_ENABLED", False)
    monkeypatch.setattr(config, "ENABLE_EMAIL_IN_DEV", False)

    faq.clear_caches()
    autocomplete.clear_cache()
    site_config.clear_cache()
    rate_limit.reset_store()
    api_routes._VOTE_FALLBACK.clear()
    yield
    rate_limit.reset_store()


@pytest.fixture
def client():
    from zweitmeinung.api.main import app
    with TestClient(app) as c:
        yield c
