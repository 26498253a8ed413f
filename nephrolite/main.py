import asyncio
import logging
import time
import uuid
from dotenv import load_dotenv

# Load environment variables from .env file before anything else
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from nephrolite.core.config import settings
from nephrolite.core.logging import setup_logging, request_id_ctx
from nephrolite.core.errors import AppError
from nephrolite.core.db import init_models
from nephrolite.api.router import api_router
from nephrolite.modules.backups.service import run_backup_scheduler

setup_logging()
app = FastAPI(title=settings.APP_NAME)
logger = logging.getLogger(__name__)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = (time.time() - start_time) * 1000
    formatted_process_time = f"{process_time:.2f}ms"

    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {formatted_process_time}"
    )

    return response

# registered last so it wraps the request logger
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or uuid.uuid4().hex
    token = request_id_ctx.set(rid)
    try:
        response = await call_next(request)
    finally:
        request_id_ctx.reset(token)
    response.headers["X-Request-ID"] = rid
    return response

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"code": "internal", "message": "An internal server error occurred.", "details": {}},
    )

@app.on_event("startup")
async def on_startup():
    await init_models()
    if settings.BACKUP_SCHEDULE_ENABLED:
        app.state.backup_task = asyncio.create_task(run_backup_scheduler())

@app.on_event("shutdown")
async def on_shutdown():
    task = getattr(app.state, "backup_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


app.include_router(api_router, prefix=settings.API_PREFIX)
