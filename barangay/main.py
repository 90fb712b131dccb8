# barangay/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from concurrent.futures import ThreadPoolExecutor
import logging
import os

from barangay.config.database import close_db, init_db
from barangay.config.settings import settings
from barangay.delivery.api import certificates, designer, documents, residents, users
from barangay.domain.session import SessionStore
from barangay.domain.template_service import TemplateService

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    max_workers = min(4, os.cpu_count() or 1)
    app.state.executor = ThreadPoolExecutor(max_workers=max_workers)
    await init_db()
    app.state.sessions = SessionStore(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        ttl_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    app.state.template_service = TemplateService(executor=app.state.executor)
    logger.info(f"'{settings.PROJECT_NAME}' started (mode: {settings.ENVIRONMENT}).")
    logger.info(f"Render ThreadPoolExecutor created with {max_workers} workers.")
    yield
    logger.info("Shutting down ThreadPoolExecutor...")
    app.state.executor.shutdown(wait=True)
    await close_db()
    logger.info("Service stopped.")

app = FastAPI(
    title="Barangay Records Service",
    description="Residents, staff accounts, certificate templates and certificate printing",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (users, residents, documents, designer, certificates):
    app.include_router(module.router, prefix=settings.API_V1_STR)

@app.get("/")
async def root():
    return {"message": "Barangay API is running", "version": "1.0.0", "status": "ok"}

@app.get("/health")
async def health_check():
    return {"status": "ok", "service": settings.PROJECT_NAME, "sessions": len(getattr(app.state, "sessions", ()))}
