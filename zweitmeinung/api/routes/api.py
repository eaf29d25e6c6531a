"""
API JSON : santé, métriques, configuration du site, contact, votes, recherche et auto-complétion FAQ.
"""
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictBool, StrictInt, ValidationError
from redis.exceptions import RedisError

from ... import autocomplete, config
from ...cms import faq as cms_faq
from ...cms import submissions
from ...cms.client import CMSError, CMSResponseError, StrapiClient
from ...cms.schemas import PerformanceMetricPayload
from ...cms.site_config import get_cached_site_config
from ...contact import captcha, mailer
from ...contact.rate_limit import autocomplete_limiter, client_ip, contact_limiter, faq_vote_limiter, get_store
from ...contact.validation import ContactFormData, error_details
from ...reporting import report_exception
from ...sections.registry import tags as section_tags

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["API"])

_STARTED = time.monotonic()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _too_many(retry_after: int, error: str, **extra) -> JSONResponse:
    return JSONResponse({"error": error, "retryAfter": retry_after, **extra},
                        status_code=429, headers={"Retry-After": str(retry_after)})


async def _json_object(request: Request) -> Optional[dict]:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


# ── Santé ────────────────────────────────────────────────────────────────────

def _check_cms() -> str:
    try:
        StrapiClient(timeout=5).get("/pages", {"pagination[pageSize]": "1"})
    except CMSResponseError:
        return "error"
    except CMSError:
        return "unavailable"
    return "connected"


@router.get("/health")
async def health():
    started = time.monotonic()
    payload = {
        "status": "healthy",
        "timestamp": _now(),
        "version": config.APP_VERSION,
        "environment": config.APP_ENV,
        "uptime": round(time.monotonic() - _STARTED, 3),
        "strapi": await asyncio.to_thread(_check_cms),
        "sectionTypes": section_tags(),
        "faqCache": cms_faq.cache_stats(),
    }

    if config.REDIS_URL:
        try:
            payload["redis"] = "connected" if await get_store().ping() else "unavailable"
        except (RedisError, OSError) as e:
            log.warning("Redis ping en échec : %s", e)
            payload["redis"] = "unavailable"

    if payload["strapi"] == "unavailable":
        payload["status"] = "unhealthy"
    elif payload["strapi"] == "error" or payload.get("redis") == "unavailable":
        payload["status"] = "degraded"

    elapsed = f"{round((time.monotonic() - started) * 1000)}ms"
    payload["responseTime"] = elapsed
    return JSONResponse(
        payload,
        status_code=503 if payload["status"] == "unhealthy" else 200,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate", "X-Response-Time": elapsed},
    )


# ── Métriques de performance ─────────────────────────────────────────────────

@router.post("/performance-metrics", status_code=201)
async def performance_metrics(request: Request):
    body = await _json_object(request)
    if body is None:
        return JSONResponse({"error": "Invalid request body"}, status_code=400)
    try:
        metric = PerformanceMetricPayload.model_validate({
            **body,
            "userAgent": request.headers.get("user-agent"),
            "timestamp": _now(),
        })
    except ValidationError as e:
        return JSONResponse({"error": "Invalid metric", "details": error_details(e)}, status_code=400)

    try:
        response = await asyncio.to_thread(submissions.record_performance_metric, metric)
    except CMSError as e:
        log.error("Enregistrement de métrique en échec : %s", e)
        return JSONResponse({"error": "Failed to record performance metric"}, status_code=500)
    return JSONResponse((response or {}).get("data"), status_code=201)


# ── Configuration du site ────────────────────────────────────────────────────

@router.get("/site-config")
async def site_config():
    site = await asyncio.to_thread(get_cached_site_config)
    if site is None:
        return JSONResponse({"error": "Site configuration not found"}, status_code=404)
    return {"success": True, "data": site.model_dump(exclude_none=True)}


# ── Contact ──────────────────────────────────────────────────────────────────

@router.get("/contact-messages/captcha-config")
def captcha_config():
    return {"success": True, "data": captcha.captcha_config().model_dump()}


@router.post("/contact-messages", status_code=201)
async def contact_messages(request: Request):
    ip = client_ip(request.headers)
    limit = await contact_limiter.hit(ip)
    if not limit.allowed:
        return _too_many(limit.retry_after, "Too many requests")

    body = await _json_object(request)
    if body is None:
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    payload = {
        **body,
        "submittedAt": _now(),
        "ipAddress": ip if ip != "unknown" else None,
        "userAgent": request.headers.get("user-agent"),
    }
    try:
        response = await asyncio.to_thread(submissions.submit_contact_message, payload)
    except CMSError as e:
        log.error("Envoi du message de contact au CMS en échec : %s", e)
        return JSONResponse({"error": "Failed to submit contact message"}, status_code=500)
    return JSONResponse((response or {}).get("data"), status_code=201)


@router.post("/contact")
async def contact(request: Request):
    ip = client_ip(request.headers)
    limit = await contact_limiter.hit(ip)
    if not limit.allowed:
        return _too_many(limit.retry_after, "Zu viele Anfragen. Bitte versuchen Sie es später erneut.")

    body = await _json_object(request)
    if body is None:
        return JSONResponse({"error": "Ungültige Formulardaten."}, status_code=400)

    if config.CAPTCHA_ENABLED:
        token = body.get("captchaToken")
        if not token:
            return JSONResponse({"error": "CAPTCHA-Token fehlt."}, status_code=400)
        if not await asyncio.to_thread(captcha.verify_hcaptcha, token):
            log.warning("Vérification CAPTCHA refusée")
            return JSONResponse(
                {"error": "CAPTCHA-Verifizierung fehlgeschlagen. Bitte versuchen Sie es erneut."},
                status_code=400,
            )

    try:
        data = ContactFormData.model_validate(body)
    except ValidationError as e:
        log.warning("Formulaire de contact invalide : %d erreur(s)", e.error_count())
        return JSONResponse({"error": "Ungültige Formulardaten.", "details": error_details(e)}, status_code=400)

    metadata = {"ipAddress": ip, "userAgent": request.headers.get("user-agent"), "timestamp": _now()}
    if mailer.should_send_email():
        try:
            await asyncio.to_thread(mailer.send_contact_emails, data, metadata)
        except (mailer.EmailConfigError, OSError) as e:
            log.error("Envoi des e-mails de contact en échec : %s", e)
            report_exception(e, urgency=data.urgency)
            return JSONResponse(
                {"error": "E-Mail konnte nicht gesendet werden. Bitte versuchen Sie es später erneut."},
                status_code=500,
            )
    else:
        log.info("[DEV] Formulaire de contact reçu, e-mail non envoyé")

    log.info("Contact reçu : urgence=%s fachbereich=%s à %s", data.urgency, data.specialty, metadata["timestamp"])
    return {
        "success": True,
        "message": "Ihre Nachricht wurde erfolgreich gesendet. Wir melden uns in Kürze bei Ihnen.",
    }


# ── Votes FAQ ────────────────────────────────────────────────────────────────

class VoteRequest(BaseModel):
    faqId: StrictInt = Field(gt=0)
    isHelpful: StrictBool


# Compteurs locaux quand la mise à jour CMS échoue, les plus anciens évincés au-delà du plafond
VOTE_FALLBACK_MAX = 1000
_VOTE_FALLBACK: Dict[int, Dict[str, int]] = {}


def _store_vote_fallback(faq_id: int, is_helpful: bool, current: Optional[dict]) -> Dict[str, int]:
    counts = _VOTE_FALLBACK.get(faq_id) or {
        "helpfulCount": (current or {}).get("helpfulCount", 0),
        "notHelpfulCount": (current or {}).get("notHelpfulCount", 0),
    }
    key = "helpfulCount" if is_helpful else "notHelpfulCount"
    counts = {**counts, key: counts[key] + 1}
    _VOTE_FALLBACK.pop(faq_id, None)
    while len(_VOTE_FALLBACK) >= VOTE_FALLBACK_MAX:
        del _VOTE_FALLBACK[next(iter(_VOTE_FALLBACK))]
    _VOTE_FALLBACK[faq_id] = counts
    return counts


@router.post("/faq/vote")
async def faq_vote(request: Request):
    ip = client_ip(request.headers)
    limit = await faq_vote_limiter.hit(ip)
    if not limit.allowed:
        return _too_many(limit.retry_after, "Rate limit exceeded", success=False,
                         message="Zu viele Abstimmungen. Bitte versuchen Sie es in einer Minute erneut.")

    body = await _json_object(request)
    try:
        vote = VoteRequest.model_validate(body if body is not None else {})
    except ValidationError as e:
        field = str(e.errors()[0]["loc"][0]) if e.errors() and e.errors()[0]["loc"] else ""
        error = "Invalid FAQ ID" if field == "faqId" else "Invalid vote value"
        return JSONResponse({"success": False, "error": error,
                             "message": "Ungültige Anfrage. Bitte versuchen Sie es erneut."}, status_code=400)

    try:
        current = await asyncio.to_thread(submissions.get_faq_votes, vote.faqId)
    except CMSError as e:
        log.warning("FAQ %s : lecture CMS en échec (%s), compteurs locaux", vote.faqId, e)
        counts = _store_vote_fallback(vote.faqId, vote.isHelpful, None)
    else:
        if current is None:
            return JSONResponse({"success": False, "error": "FAQ not found",
                                 "message": "Die angegebene FAQ wurde nicht gefunden."}, status_code=404)
        key = "helpfulCount" if vote.isHelpful else "notHelpfulCount"
        counts = {**current, key: current[key] + 1}
        saved = await asyncio.to_thread(submissions.update_faq_votes, vote.faqId,
                                        counts["helpfulCount"], counts["notHelpfulCount"])
        if not saved:
            log.warning("FAQ %s : mise à jour CMS en échec, compteurs locaux", vote.faqId)
            counts = _store_vote_fallback(vote.faqId, vote.isHelpful, current)

    return {
        "success": True,
        "data": {"faqId": vote.faqId, **counts, "userVote": vote.isHelpful},
        "message": "Vielen Dank für Ihr Feedback!",
    }


@router.get("/faq/vote")
async def faq_vote_stats(faqId: Optional[str] = None):
    if not faqId:
        return JSONResponse({"success": False, "error": "FAQ ID is required"}, status_code=400)
    try:
        faq_id = int(faqId)
    except ValueError:
        faq_id = 0
    if faq_id <= 0:
        return JSONResponse({"success": False, "error": "Invalid FAQ ID"}, status_code=400)

    counts = {"helpfulCount": 0, "notHelpfulCount": 0}
    try:
        current = await asyncio.to_thread(submissions.get_faq_votes, faq_id)
        if current:
            counts = current
    except CMSError as e:
        log.warning("FAQ %s : lecture CMS en échec (%s)", faq_id, e)
        counts = _VOTE_FALLBACK.get(faq_id, counts)
    return {"success": True, "data": {"faqId": faq_id, **counts, "userVote": None}}


# ── Recherche FAQ ────────────────────────────────────────────────────────────

@router.get("/faq/search")
async def faq_search(q: str = "", limit: int = 20):
    term = q.strip()
    if len(term) < 2:
        return {"success": True, "data": []}
    faqs = await asyncio.to_thread(cms_faq.search_faqs, term, max(1, min(limit, 50)))
    return {"success": True, "data": [f.model_dump(exclude_none=True) for f in faqs]}


# ── Auto-complétion FAQ ──────────────────────────────────────────────────────

@router.get("/faq/autocomplete")
async def faq_autocomplete(request: Request, q: str = "", limit: int = 10):
    started = time.monotonic()
    term = q.strip()
    empty = {"suggestions": [], "searchTerm": term, "totalSuggestions": 0}

    limit_result = await autocomplete_limiter.hit(client_ip(request.headers))
    if not limit_result.allowed:
        return JSONResponse({**empty, "searchTerm": "", "processingTime": 0}, status_code=429,
                            headers={"Retry-After": str(limit_result.retry_after)})

    result = empty
    if len(term) >= 2:
        result = await asyncio.to_thread(autocomplete.suggest, term, max(1, min(limit, 50)))
    return {**result, "processingTime": round((time.monotonic() - started) * 1000)}
