"""
Client HTTP Strapi : GET/POST/PUT JSON + helpers populate/filters.

Toutes les erreurs de transport ou de décodage sont converties en CMSError ;
les appelants décident s'ils dégradent (liste vide, page 404) ou propagent.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .. import config

log = logging.getLogger(__name__)


class CMSError(Exception):
    """Erreur générique côté CMS."""


class CMSUnavailable(CMSError):
    """CMS injoignable (réseau, timeout, URL non configurée)."""


class CMSResponseError(CMSError):
    """Le CMS a répondu avec un statut HTTP d'erreur."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"API Error: {status_code} - {message}")
        self.status_code = status_code


class CMSPayloadError(CMSError):
    """Réponse illisible ou de structure inattendue."""


class StrapiClient:
    """
    Client minimal pour l'API REST Strapi.

    Usage:
        >>> client = StrapiClient()
        >>> client.get("/pages", {"filters[slug][$eq]": "home"})
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self._base_url = base_url
        self._timeout  = timeout
        self.session   = session or requests.Session()
        self.headers   = {"Content-Type": "application/json"}

    @property
    def base_url(self) -> str:
        return (self._base_url if self._base_url is not None else config.STRAPI_API_URL).rstrip("/")

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else config.CMS_TIMEOUT

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Any = None) -> Any:
        return self._request("POST", endpoint, json=body)

    def put(self, endpoint: str, body: Any = None) -> Any:
        return self._request("PUT", endpoint, json=body)

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        if not self.base_url:
            raise CMSUnavailable("STRAPI_API_URL non configuré")
        url = f"{self.base_url}{endpoint}"
        try:
            r = self.session.request(method, url, headers=self.headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log.error("Strapi %s %s injoignable : %s", method, endpoint, e)
            raise CMSUnavailable(str(e)) from e

        if not r.ok:
            log.error("Strapi %s %s → %s %s", method, endpoint, r.status_code, r.reason)
            raise CMSResponseError(r.status_code, r.reason or "")

        try:
            return r.json()
        except ValueError as e:
            log.error("Strapi %s %s : JSON invalide", method, endpoint)
            raise CMSPayloadError(f"JSON invalide depuis {endpoint}") from e

    @staticmethod
    def build_populate_params(fields: List[str]) -> Dict[str, str]:
        """["sections", "seo"] → {"populate[0]": "sections", "populate[1]": "seo"}"""
        return {f"populate[{i}]": field for i, field in enumerate(fields)}

    @staticmethod
    def build_filters(**filters: Any) -> Dict[str, Any]:
        """slug="home" → {"filters[slug][$eq]": "home"}"""
        return {f"filters[{key}][$eq]": value for key, value in filters.items()}


def response_data(payload: Any) -> Any:
    """Extrait `data` d'une réponse Strapi {data, meta}."""
    if not isinstance(payload, dict) or "data" not in payload:
        raise CMSPayloadError("Réponse Strapi sans champ 'data'")
    return payload["data"]


def response_items(payload: Any, endpoint: str) -> List[Any]:
    """`data` d'une réponse de collection : liste (vide si null), CMSPayloadError sinon."""
    items = response_data(payload)
    if items is None:
        return []
    if not isinstance(items, list):
        raise CMSPayloadError(f"{endpoint} : liste attendue")
    return items


strapi_client = StrapiClient()
