from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from SELFDEPLOY_* environment variables.

    Command-line flags take precedence over these values; the settings only
    supply defaults for things the CLI does not expose.
    """

    model_config = SettingsConfigDict(
        env_prefix="SELFDEPLOY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Git
    git_binary: str = "git"
    clone_depth: int = 1
    # Seconds; None means a clone may block indefinitely.
    clone_timeout: Optional[float] = None
    clone_prefix: str = "selfdeploy_repo."

    @field_validator("clone_depth")
    @classmethod
    def depth_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("clone_depth must be at least 1")
        return v

    # Logging
    debug: bool = False
    log_json: bool = False


def get_settings() -> Settings:
    return Settings()
