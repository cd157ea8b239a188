"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Jobber (GraphQL) ────────────────────────────────────────────────
    jobber_oauth_access_token: str = ""
    jobber_api_base: str = "https://api.getjobber.com/api"
    jobber_graphql_version: str = "2025-01-20"   # sent as X-JOBBER-GRAPHQL-VERSION

    # ── Reform (document extraction) ────────────────────────────────────
    reform_api_key: str = ""
    reform_api_base: str = "https://api.reformhq.com/v1/api"
    reform_upload_dir: str = "/tmp"   # local documents must live under here

    # ── HTTP ─────────────────────────────────────────────────────────────
    http_timeout: float = 30.0
    default_max_items: int = 100   # cap used by paginated actions

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
