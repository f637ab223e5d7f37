from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from loguru import logger
import uuid
from tubeblog.core.config import settings
from tubeblog.core.exceptions import AppException, app_exception_handler
from tubeblog.api.dependencies import build_services
from tubeblog.api.endpoints import router as api_router
from tubeblog.core.logging import setup_logging

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
    app.state.services = await build_services(settings)
    logger.info("🚀 Application startup")
    yield
    await app.state.services.aclose()
    logger.info("🛑 Application shutdown")

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = str(uuid.uuid4())
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

app.add_exception_handler(AppException, app_exception_handler)

app.include_router(api_router, prefix="/api")

@app.get("/")
async def root():
    return {
        "message": f"{settings.PROJECT_NAME} API Server is running",
        "status": "ok",
    }

@app.get("/health")
async def health_check():
    return {"status": "ok", "project": settings.PROJECT_NAME}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tubeblog.main:app", host="0.0.0.0", port=3005, reload=True)
