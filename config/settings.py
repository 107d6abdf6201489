"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Auth tokens ───────────────────────────────────────────────────────
    jwt_secret: str = "change-me-jwt-secret-key"   # HMAC secret for auth tokens
    jwt_algorithm: str = "HS256"
    jwt_expiry_seconds: int = 360000               # 100 hours
    auth_header: str = "x-auth-token"              # raw token, no "Bearer" prefix

    # ── Passwords ─────────────────────────────────────────────────────────
    bcrypt_rounds: int = 10

    # ── Database ─────────────────────────────────────────────────────────
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "devconnector"
    mongo_timeout_ms: int = 5000

    # ── GitHub ───────────────────────────────────────────────────────────
    github_client_id: str = ""
    github_client_secret: str = ""
    github_api_url: str = "https://api.github.com"
    github_repo_count: int = 5

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
