from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as dist_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from insights.api.main import api_router
from insights.core.errors import ContractViolation
from insights.core.logging import configure_logging, get_logger
from insights.core.settings import settings

try:
    APP_VERSION = dist_version("booking-insights")
except PackageNotFoundError:
    APP_VERSION = "0.1.0-dev"

configure_logging(json=settings.LOG_JSON, level=settings.LOG_LEVEL)

app = FastAPI(title="booking-insights", debug=settings.DEBUG, version=APP_VERSION)

# --- CORS
allowed_origins = []
for host in settings.ALLOWED_HOSTS.split(","):
    _host = host.strip()
    if not _host:
        continue
    # aceita tanto com quanto sem protocolo
    if _host.startswith("http"):
        allowed_origins.append(_host)
    else:
        allowed_origins.append(f"http://{_host}")
        allowed_origins.append(f"https://{_host}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=(allowed_origins or ["*"]) if settings.DEBUG else allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(ContractViolation)
async def contract_violation(request: Request, exc: ContractViolation):
    get_logger().warning(
        "request.contract_violation", path=request.url.path, error=str(exc)
    )
    return JSONResponse({"detail": str(exc)}, status_code=422)


@app.exception_handler(404)
async def not_found(_, __):
    return JSONResponse({"detail": "Not Found"}, status_code=404)


# --- Endpoints
@app.get("/healthz", tags=["ops"])
def healthz():
    get_logger().info("health.check")
    return {"status": "ok", "env": settings.APP_ENV, "version": APP_VERSION}


@app.get("/version", tags=["ops"])
def version():
    return {"version": APP_VERSION, "env": settings.APP_ENV, "debug": settings.DEBUG}
