"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from owner_resolution.api import owners
from owner_resolution.config import CORS_ORIGINS

app = FastAPI(
    title="Owner Resolution Engine",
    description="Structured, deduplicated owners and ownership timelines from county owner strings",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(owners.router, prefix="/api/owners", tags=["Owners"])


@app.get("/api/health")
async def health():
    return {"status": "operational", "service": "Owner Resolution Engine"}
