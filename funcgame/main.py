from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from funcgame.api.router import api_router
from funcgame.config import cors_origins_from_env, load_settings
from funcgame.errors import ServiceError
from funcgame.store import open_store

logger = logging.getLogger(__name__)

app = FastAPI(title="funcgame server")


@app.on_event("startup")
async def _startup_open_store() -> None:
    # Fail fast: a missing SUPABASE_URL / SUPABASE_ANON_KEY aborts startup (ConfigError).
    settings = load_settings()
    app.state.settings = settings
    app.state.store = await open_store(settings)


@app.on_event("shutdown")
async def _shutdown_close_store() -> None:
    store = getattr(app.state, "store", None)
    if store is None:
        return
    app.state.store = None
    await store.aclose()


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_from_env(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------------
# Error -> HTTP mapping (the only place status codes for failures are chosen)
# -------------------------------------------------------------------------

@app.exception_handler(ServiceError)
async def _service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc") or () if p != "body")
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message, "details": errors})


@app.exception_handler(Exception)
async def _unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(api_router)
