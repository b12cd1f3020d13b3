import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from showing_desk.api.v1.router import api_router
from showing_desk.core.config import settings
from showing_desk.core.deps import get_store
from showing_desk.core.seed import seed_demo_appointments

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup: load demo appointments into the session store
    seed_demo_appointments(get_store())
    yield


app = FastAPI(
    title="Showing Desk API",
    description="Viewing appointment workflow for rental property managers",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "service": "showing-desk", "version": "0.1.0", "env": settings.APP_ENV}
