"""Runtime settings, read from ``AUTHGATE_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from authgate.auth.verifier import DEFAULT_TIMEOUT, DEFAULT_VERIFY_URL

ENV_PREFIX = "AUTHGATE_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Service configuration.

    Attributes:
        verify_url: Identity provider endpoint used to verify tokens.
        verify_timeout: Timeout in seconds for each verification request.
        database_url: SQLAlchemy URL of the orders database.
        host: Address the HTTP server binds to.
        port: Port the HTTP server listens on.
        log_level: Level for the ``authgate`` logger and uvicorn.
    """

    verify_url: str = DEFAULT_VERIFY_URL
    verify_timeout: float = DEFAULT_TIMEOUT
    database_url: str = "sqlite:///orders.db"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.verify_url:
            raise ValueError("verify_url must not be empty")
        if self.verify_timeout <= 0:
            raise ValueError(f"verify_timeout must be positive, got {self.verify_timeout}")
        if not self.database_url:
            raise ValueError("database_url must not be empty")
        if not self.host:
            raise ValueError("host must not be empty")
        if self.port < 1 or self.port > 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level!r}. Valid: {list(LOG_LEVELS)}")
        object.__setattr__(self, "log_level", self.log_level.upper())

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``AUTHGATE_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        for field_name in ("verify_url", "database_url", "host", "log_level"):
            value = env.get(ENV_PREFIX + field_name.upper())
            if value:
                kwargs[field_name] = value

        timeout = env.get(ENV_PREFIX + "VERIFY_TIMEOUT")
        if timeout:
            try:
                kwargs["verify_timeout"] = float(timeout)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}VERIFY_TIMEOUT must be a number, got {timeout!r}") from None

        port = env.get(ENV_PREFIX + "PORT")
        if port:
            try:
                kwargs["port"] = int(port)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {port!r}") from None

        return cls(**kwargs)  # type: ignore[arg-type]
