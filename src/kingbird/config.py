"""Client configuration loaded from arguments or the environment."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseSettings):
    """
    Settings for talking to the JSON/HTTP backend.

    Values can be passed as keyword arguments or read from `KINGBIRD_*`
    environment variables (`KINGBIRD_URL`, `KINGBIRD_TIMEOUT`, ...).

    Examples
    --------
        >>> config = ClientConfig(url="http://localhost:8888")
        >>> config.url
        'http://localhost:8888'
    """

    model_config = SettingsConfigDict(env_prefix="KINGBIRD_", frozen=True)

    url: str = "http://localhost:8888"
    headers: dict[str, str] = {}
    # Seconds; None disables the transport timeout
    timeout: float | None = None

    @field_validator("url")
    @classmethod
    def normalise_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Backend url must be http(s), got {value!r}")
        return value.rstrip("/")
