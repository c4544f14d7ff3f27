# src/app.py
import logging
from pathlib import Path
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.staticfiles import StaticFiles
from fastapi.openapi.utils import get_openapi

from config.settings import APP_ENV, CORS_ORIGINS, LOG_LEVEL, UPLOAD_DIR, VHIEM_DEV_CREATE_SCHEMA
from config.db import engine
from model.base import Base
from model import load_all_models
from routes.user import router as user_router
from routes.profiles import profile
from routes.followers import router as followers_router
from routes.social.routes import router as social_router
from routes.media import router as media_router
from src.social.errors import SocialError

load_all_models()

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

API_TITLE = "Vhiem API"
API_VERSION = "1.0.0"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

app = FastAPI(title=API_TITLE, version=API_VERSION)
logger.info("%s starting (%s)", API_TITLE, APP_ENV)

# Profile and post photos stored by LocalFileStorage
uploads_dir = Path(UPLOAD_DIR)
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(title=API_TITLE, version=API_VERSION, routes=app.routes)
    # Bearer tokens are issued by the identity provider, not by this service
    schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schemes["BearerAuth"] = {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = schema
    return schema


app.openapi = custom_openapi

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

app.include_router(user_router, tags=["Users"])
app.include_router(profile.router, prefix="/v1/profiles", tags=["Profiles"])
app.include_router(followers_router)  # /v1/followers
app.include_router(social_router)  # /v1/social
app.include_router(media_router)  # /v1/media


# --- Error responses: always {"code", "message"} ---
def _error(status_code: int, code: str, message, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message, **extra})


def _log_failure(request: Request, status_code: int, what: str, detail) -> None:
    level = logging.WARNING if status_code < 500 else logging.ERROR
    logger.log(level, "%s (%s) on %s %s: %s", what, status_code, request.method, request.url.path, detail)


@app.exception_handler(SocialError)
async def social_exception_handler(request: Request, exc: SocialError):
    _log_failure(request, exc.status_code, type(exc).__name__, exc.message)
    return _error(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    _log_failure(request, 422, "Validation error", exc.errors())
    return _error(422, "validation_error", "Invalid request", errors=jsonable_encoder(exc.errors()))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    _log_failure(request, exc.status_code, "HTTPException", exc.detail)
    return _error(exc.status_code, "http_error", exc.detail)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.on_event("startup")
def _startup():
    # Alembic owns the schema; create_all is a local-development shortcut
    if VHIEM_DEV_CREATE_SCHEMA:
        Base.metadata.create_all(engine)
        logger.info("Schema ensured with create_all (VHIEM_DEV_CREATE_SCHEMA=1)")


@app.get("/health")
def health():
    return {"ok": True}
