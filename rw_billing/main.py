"""
FastAPI application entry point.
Mounts the single router. Loads env vars.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from project root, regardless of where the app is started from
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from rw_billing.core.config import settings

logging.basicConfig(level=settings.LOG_LEVEL)

from rw_billing.router import router

app = FastAPI(title="RW Billing Navigator", docs_url=settings.DOCS_URL, redoc_url=None)

# CORS must be added before routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api", tags=["Eligibility"])


@app.get("/")
def read_root():
    return {"message": "RW Billing Navigator is running"}
