"""
Runtime configuration

Values come from the environment, with a local .env file loaded first.
"""

import os
from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    database_url: str = "sqlite:///./data/restaurant.db"
    port: int = 4000
    live_url: str = ""
    api_base: str = "/api"
    static_dir: str = "./public"
    seed_demo: bool = True
    log_level: str = "INFO"


def load_settings() -> Settings:
    live_url = os.getenv("LIVE_URL") or os.getenv("RENDER_EXTERNAL_URL") or ""
    api_base = os.getenv("API_BASE") or (f"{live_url.rstrip('/')}/api" if live_url else "/api")
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./data/restaurant.db"),
        port=int(os.getenv("PORT", 4000)),
        live_url=live_url,
        api_base=api_base,
        static_dir=os.getenv("STATIC_DIR", "./public"),
        seed_demo=_flag(os.getenv("SEED_DEMO", "true")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
