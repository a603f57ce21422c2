import time
import uuid
import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import ConfigurationError, build_error
from routes import check, i18n, system
from routes.common import get_renderer, get_settings

# -----------------------------
# Load env
# -----------------------------
load_dotenv()
settings = get_settings()

# -----------------------------
# Logging (structured-ish)
# -----------------------------
logger = logging.getLogger("tbb-check")
logger.setLevel(settings.log_level)
handler = logging.StreamHandler()
handler.setLevel(settings.log_level)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "msg": record.getMessage(),
        }
        # extras
        for k in ("request_id", "path", "status", "latency_ms", "template_dir"):
            if hasattr(record, k):
                payload[k] = getattr(record, k)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


handler.setFormatter(JsonFormatter())
logger.handlers = [handler]


# -----------------------------
# Startup: locale catalog + templates
# -----------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        get_renderer().warm()
    except ConfigurationError:
        # broken deployment; let the server abort startup
        logger.critical("startup_configuration_error", exc_info=True)
        raise
    yield


# -----------------------------
# App
# -----------------------------
app = FastAPI(
    title="TBB Check",
    description="Tells visitors whether their browser looks like Tor Browser",
    version=system.SERVICE_VERSION,
    lifespan=lifespan,
)

# -----------------------------
# CORS
# -----------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.allowed_origins != ["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


# -----------------------------
# Middleware: request_id + logging
# -----------------------------
@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    start = time.time()

    # attach to request state
    request.state.request_id = request_id

    try:
        response = await call_next(request)
    except Exception:
        latency_ms = int((time.time() - start) * 1000)
        logger.error(
            "unhandled_exception",
            exc_info=True,
            extra={"request_id": request_id, "path": request.url.path, "status": 500, "latency_ms": latency_ms},
        )
        error = build_error(500, "Internal server error.")
        response = JSONResponse(
            status_code=500,
            content={"detail": error.message, "request_id": request_id, "error": error.to_response()},
        )
    else:
        latency_ms = int((time.time() - start) * 1000)
        # no query string or headers in the log line
        logger.info(
            "request",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "status": response.status_code,
                "latency_ms": latency_ms,
            },
        )

    response.headers["X-Request-Id"] = request_id
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# -----------------------------
# Exception handler: HTTPException
# -----------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = getattr(request.state, "request_id", None)
    logger.warning(
        "http_exception",
        extra={"request_id": request_id, "path": request.url.path, "status": exc.status_code},
    )
    error = build_error(exc.status_code, str(exc.detail))
    payload = {"detail": exc.detail, "error": error.to_response()}
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


# -----------------------------
# Routes
# -----------------------------
app.include_router(system.router)
app.include_router(i18n.router)
app.include_router(check.router)
