from contextlib import asynccontextmanager
from fastapi import FastAPI
import os

from temple_api.core.db import db_health, init_db

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if os.getenv("DB_AUTO_CREATE", "1") not in ("0", "false", "no", "off"):
        init_db()
    yield


app = FastAPI(title="Temple Office API", version=APP_VERSION, lifespan=lifespan)

# === OBSERVABILITY FOUNDATIONS ===
# Contract locks:
# - /health keys: status, version, db, last_error_summary
# - X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
# - Error envelope keys: error, message, request_id, details
import uuid
from typing import Any, Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from temple_api.core.errors import ConfigurationError, PersistenceError
from temple_api.core.logs import emit

_last_error: Optional[str] = None


def _err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int):
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": details,
        }),
        headers=headers,
    )


@app.middleware("http")
async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp,'status_code',None)}", rid, __name__)
    return resp


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = getattr(request.state, "request_id", None)
    # services raise detail={"error": ..., "message": ...}; routers raise plain strings
    if isinstance(exc.detail, dict):
        d = exc.detail
        return _err_envelope(
            str(d.get("error", "http_error")),
            str(d.get("message", "")),
            rid,
            d.get("details", {"status_code": exc.status_code}),
            exc.status_code,
        )
    return _err_envelope("http_error", str(exc.detail), rid, {"status_code": exc.status_code}, exc.status_code)


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("validation_error", "request validation failed", rid, exc.errors(), 422)


@app.exception_handler(ConfigurationError)
async def _config_exc_handler(request: Request, exc: ConfigurationError):
    global _last_error
    rid = getattr(request.state, "request_id", None)
    _last_error = f"{exc.error}: {exc}"
    emit("error", "app.configuration_error", str(exc), rid, __name__)
    return _err_envelope(exc.error, str(exc), rid, {}, 409)


@app.exception_handler(PersistenceError)
async def _persistence_exc_handler(request: Request, exc: PersistenceError):
    global _last_error
    rid = getattr(request.state, "request_id", None)
    _last_error = f"{exc.error}: {exc}"
    emit("error", "app.persistence_error", str(exc), rid, __name__, retryable=exc.retryable)
    return _err_envelope(exc.error, str(exc), rid, {"retryable": exc.retryable, **exc.details}, 503)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    global _last_error
    rid = getattr(request.state, "request_id", None)
    _last_error = f"internal_error: {type(exc).__name__}"
    return _err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)
# === END OBSERVABILITY FOUNDATIONS ===


from temple_api.modules.deceased.router import router as deceased_router
from temple_api.modules.memorial.router import router as memorial_router
from temple_api.modules.memorial_rules.router import router as memorial_rules_router

app.include_router(memorial_rules_router)
app.include_router(deceased_router)
app.include_router(memorial_router)


@app.get("/health")
def health():
    db = db_health()
    return {
        "status": "ok" if db.get("status") == "ok" else "degraded",
        "version": os.getenv("APP_VERSION", APP_VERSION),
        "db": db,
        "last_error_summary": _last_error,
    }
