"""Certification engine FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from certengine.api.certifications import router as certifications_router
from certengine.api.health import router as health_router
from certengine.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Certification Lifecycle Engine",
    description="Monthly positional-rating certification audits with an append-only audit trail",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(certifications_router, prefix="/v1", tags=["Certifications"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "certengine", "version": "0.1.0", "docs": "/docs"}
