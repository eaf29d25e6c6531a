"""
ZWEITMEINUNG : FastAPI app
Démarrer : uvicorn zweitmeinung.api.main:app --reload --port 3000
"""
import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import config
from ..cms.site_config import get_cached_site_config
from ..reporting import init_sentry, report_exception
from ..sections.document import render_error_page, render_not_found

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="Zweitmeinung.ng : medizinische Zweitmeinung", version=config.APP_VERSION, docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=[config.SITE_URL], allow_methods=["GET", "POST"], allow_headers=["*"])


@app.on_event("startup")
def startup():
    init_sentry()
    if not config.STRAPI_API_URL:
        log.warning("STRAPI_API_URL absent, toutes les pages CMS répondront 404")
    log.info("Zweitmeinung %s démarré (%s)", config.APP_VERSION, config.APP_ENV)


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api/")


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    if _wants_json(request):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)
    if exc.status_code == 404:
        site = await asyncio.to_thread(get_cached_site_config)
        return HTMLResponse(render_not_found(site), status_code=404)
    return HTMLResponse(str(exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception("Erreur non gérée sur %s", request.url.path)
    report_exception(exc, path=request.url.path)
    if _wants_json(request):
        return JSONResponse({"error": "Internal server error"}, status_code=500)
    return HTMLResponse(render_error_page(), status_code=500)


# ── Routers ───────────────────────────────────────────────────────────────────
from .routes.api   import router as api_router    # noqa: E402
from .routes.pages import router as pages_router  # noqa: E402

app.include_router(api_router)
app.include_router(pages_router)
