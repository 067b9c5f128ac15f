import time
import logging
from dotenv import load_dotenv

# Load environment variables from .env file before anything else
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from wipshare.core.config import settings
from wipshare.core.logging import setup_logging, request_id_ctx
from wipshare.core.errors import WipShareError, RequestValidationFailed
from wipshare.core.validation import error_details
from wipshare.core.db import init_models
from wipshare.api.router import api_router
from wipshare.platform.provider_registry import ProviderRegistry


setup_logging()
app = FastAPI(title=settings.APP_NAME)
logger = logging.getLogger(__name__)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = (time.time() - start_time) * 1000
    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {process_time:.2f}ms"
    )
    return response

# registered last so it runs first and the request id is set for the logging middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id", "-")
    token = request_id_ctx.set(rid)
    try:
        return await call_next(request)
    finally:
        request_id_ctx.reset(token)

@app.exception_handler(WipShareError)
async def wipshare_error_handler(request: Request, exc: WipShareError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} for request {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=RequestValidationFailed(error_details(exc)).to_body())

@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error for request {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"error": "Duplicate entry", "message": "The resource already exists"},
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": "An internal server error occurred."},
    )


@app.on_event("startup")
async def on_startup():
    await init_models()
    app.state.providers = ProviderRegistry(settings).start()

@app.on_event("shutdown")
async def on_shutdown():
    providers = getattr(app.state, "providers", None)
    if providers:
        providers.close()


app.include_router(api_router, prefix=settings.API_PREFIX)
