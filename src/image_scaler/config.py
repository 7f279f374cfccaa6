"""Service settings and logging setup.

Settings come from ``VS_*`` environment variables (``PORT`` for the listen
port) with code defaults as the fallback. Shells build one instance at
start-up and pass it down; core functions never read the environment.
"""

import sys
from functools import lru_cache

from loguru import logger
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__

APP_NAME = "VS-Image-Scaler"


class ScalerSettings(BaseSettings):
    """Frozen configuration for one scaler process.

    Attributes:
        base_url: Origin that asset paths are appended to.
        auth_token: Static credential forwarded to the origin as ``VS-Auth``.
        logging: Verbose logging switch (``VS_LOGGING=true``).
        fetch_timeout: Seconds allowed for the origin fetch.
        max_source_bytes: Size ceiling for source images.
        host: Listen address for the persistent server.
        port: Listen port for the persistent server.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="VS_",
        case_sensitive=False,
        populate_by_name=True,
    )

    base_url: str = "https://www.visitscotland.com"
    auth_token: str = Field(
        default="vsAuth",
        validation_alias=AliasChoices("VS_AUTH", "VS_AUTH_TOKEN"),
    )
    logging: bool = False
    fetch_timeout: float = Field(default=5.0, gt=0)
    max_source_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    host: str = "0.0.0.0"
    port: int = Field(default=3000, validation_alias=AliasChoices("PORT", "VS_PORT"))

    @property
    def user_agent(self) -> str:
        return f"{APP_NAME}/{__version__}"

    def asset_url(self, asset_path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{asset_path.lstrip('/')}"


@lru_cache()
def get_settings() -> ScalerSettings:
    """Return a cached ScalerSettings instance so it is only parsed once."""
    return ScalerSettings()


def configure_logging(settings: ScalerSettings) -> None:
    """Route loguru output to stderr.

    Verbose mode emits DEBUG and above with timestamps, otherwise only
    errors are written.
    """
    logger.remove()
    if settings.logging:
        _ = logger.add(
            sys.stderr,
            level="DEBUG",
            format="[{time:YYYY-MM-DDTHH:mm:ss.SSS[Z]!UTC}] {level} {message}",
        )
    else:
        _ = logger.add(sys.stderr, level="ERROR", format="{level} {message}")
