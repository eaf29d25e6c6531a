"""CAPTCHA : configuration exposée au front + vérification hCaptcha."""
import logging
from typing import Literal

import requests
from pydantic import BaseModel

from .. import config

log = logging.getLogger(__name__)

HCAPTCHA_VERIFY_URL = "https://hcaptcha.com/siteverify"


class CaptchaConfig(BaseModel):
    enabled: bool
    provider: Literal["hcaptcha", "recaptcha"]
    siteKey: str = ""


def captcha_config() -> CaptchaConfig:
    if config.CAPTCHA_ENABLED and config.HCAPTCHA_SITE_KEY:
        return CaptchaConfig(enabled=True, provider="hcaptcha", siteKey=config.HCAPTCHA_SITE_KEY)
    return CaptchaConfig(
        enabled=bool(config.RECAPTCHA_SECRET_KEY),
        provider="recaptcha",
        siteKey=config.RECAPTCHA_SITE_KEY,
    )


def verify_hcaptcha(token: str, timeout: int = 10) -> bool:
    """True si hCaptcha valide le token. Toute erreur → False."""
    if not config.HCAPTCHA_SECRET_KEY:
        log.error("HCAPTCHA_SECRET_KEY non configurée")
        return False
    try:
        r = requests.post(
            HCAPTCHA_VERIFY_URL,
            data={"secret": config.HCAPTCHA_SECRET_KEY, "response": token},
            timeout=timeout,
        )
        return r.json().get("success") is True
    except (requests.RequestException, ValueError) as e:
        log.error("Vérification CAPTCHA en échec : %s", e)
        return False
