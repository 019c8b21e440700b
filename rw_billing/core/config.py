import os
from typing import Optional


def docs_url_for(env: str) -> Optional[str]:
    """Interactive API docs are served in every environment except prod."""
    return None if env.lower() == "prod" else "/docs"


class Settings:
    ENV = os.getenv("ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DOCS_URL = docs_url_for(ENV)
    # Comma-separated; defaults to the Vite dev server
    ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")
        if origin.strip()
    ]


settings = Settings()
