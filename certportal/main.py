import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# ✅ Import All API Routes
from certportal.api.routes import auth, dashboard, eligibility, health, me, students, templates
from certportal.api.routes.lookups import colleges_router, companies_router, courses_router
from certportal.core import config
from certportal.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Versioned endpoints report failures as {"error": "..."} instead of {"detail": ...}
VERSIONED_PREFIX = "/v1/"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    if config.RUN_MIGRATIONS:
        from certportal.db.migrate import run_migrations
        run_migrations()
    else:
        from certportal.db.init_db import init_db
        init_db()
    logger.info(f"Certificate Portal API {config.API_VERSION} started")
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Certificate Portal", version=config.API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ ERROR BODIES FOR /v1
# ============================================

def _error_text(detail) -> str:
    if isinstance(detail, dict):
        return str(detail.get("message") or detail)
    if isinstance(detail, list):
        return "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', []))}: {err.get('msg')}" for err in detail
        )
    return str(detail)


@app.exception_handler(StarletteHTTPException)
async def versioned_http_exception_handler(request: Request, exc: StarletteHTTPException):
    if request.url.path.startswith(VERSIONED_PREFIX):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": _error_text(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def versioned_validation_exception_handler(request: Request, exc: RequestValidationError):
    if request.url.path.startswith(VERSIONED_PREFIX):
        return JSONResponse(status_code=422, content={"error": _error_text(exc.errors())})
    return await request_validation_exception_handler(request, exc)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(students.router)
app.include_router(eligibility.router)
app.include_router(courses_router)
app.include_router(colleges_router)
app.include_router(companies_router)
app.include_router(templates.router)
app.include_router(me.router)


@app.get("/")
def root():
    return {"status": "Certificate Portal API running"}
