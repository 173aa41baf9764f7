"""Client settings with environment variable support."""

import os
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Backend connection settings."""
    api_base_url: str = Field("http://localhost:5000/api", description="Backend REST base URL")
    http_timeout_seconds: float = Field(10.0, gt=0, description="Per-request timeout")
    auth_header: str = Field("x-auth-token", description="Header carrying the session token")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from PETCONNECT_* environment variables."""
        return cls(
            api_base_url=os.environ.get("PETCONNECT_API_BASE_URL", "http://localhost:5000/api").rstrip("/"),
            http_timeout_seconds=float(os.environ.get("PETCONNECT_HTTP_TIMEOUT_SECONDS", "10")),
            auth_header=os.environ.get("PETCONNECT_AUTH_HEADER", "x-auth-token"),
        )
