"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Herizon"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Tracking service addresses (ordered by trust) ---
    server_url: str = ""  # optional primary; falls back to render_url when unset
    render_url: str = "https://Herizon.onrender.com/"
    local_url: str = "http://localhost:3000/"

    # --- Clerk ---
    clerk_jwks_url: str = "https://api.clerk.com/v1/jwks"

    # --- SOS alert relays ---
    alert_relay_urls: list[str] = [
        "https://formspree.io/f/mjkooylp",
        "https://formspree.io/f/mzzvveon",
        "https://formspree.io/f/meozzadj",
    ]
    alert_timeout_ms: int = 10_000

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def primary_url(self) -> str:
        return self.server_url or self.render_url


@lru_cache
def get_settings() -> Settings:
    return Settings()
