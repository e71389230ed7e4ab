"""Auth and storage settings for the scoreboard service."""

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # HMAC secret shared with the auth gateway -- required, no default.
    # The application fails to start if AUTH_GATEWAY_SECRET is not set.
    gateway_secret: str = Field(min_length=1)

    # SQLite database file path
    database_path: str = "backend/storage.db"
