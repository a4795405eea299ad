import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from achievement_api.config import settings
from achievement_api.exceptions import error_body
from achievement_api.live_clients import LiveClientRegistry
from achievement_api.log import get_logger
from achievement_api.router import (
    categories_router,
    achievements_router,
    rewards_router,
    progress_router,
    events_router,
    stats_router,
    health_router,
)
from achievement_api.router.background.heartbeat_task import run_heartbeat

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    live_clients = LiveClientRegistry()
    app.state.live_clients = live_clients

    log.info("Starting SSE heartbeat task...")
    heartbeat = asyncio.create_task(run_heartbeat(live_clients, settings.SSE_HEARTBEAT_INTERVAL))

    yield

    heartbeat.cancel()
    await asyncio.gather(heartbeat, return_exceptions=True)
    live_clients.close_all()


app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version=settings.API_VERSION,
    description="Achievement tracking: categories, achievements, rewards and user progress with real-time updates over SSE.",
    docs_url="/api-docs",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Cache-Control"],
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


app.include_router(categories_router, prefix="/categories", tags=["Categories"])
app.include_router(achievements_router, prefix="/achievements", tags=["Achievements"])
app.include_router(rewards_router, prefix="/rewards", tags=["Rewards"])
app.include_router(progress_router, prefix="/progress", tags=["Progress"])
app.include_router(events_router, prefix="/api", tags=["Events"])
app.include_router(stats_router, prefix="/api", tags=["Stats"])
app.include_router(health_router, prefix="/health", tags=["Health"])


######################
### Error envelope ###
######################
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    extra = getattr(exc, "extra", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.detail, extra)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("; ".join(messages) or "Invalid request"),
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    log.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body(str(exc)))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body(str(exc)))


#####################
### Root Endpoint ###
#####################
@app.get("/")
def read_root():
    return {"service": settings.PROJECT_NAME, "environment": settings.ENV, "version": settings.API_VERSION, "docs": "/api-docs"}
