"""
Configuration module for the AWIS client.

Environment variables are read once, here, and turned into a type-safe
configuration object that is passed explicitly to the services.
"""
import os
from dataclasses import dataclass
from typing import Any, Optional

TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_REGION = "us-west-1"
DEFAULT_ENDPOINT = "https://awis.amazonaws.com/api"
DEFAULT_TIMEOUT = 30.0


@dataclass
class Config:
    """Type-safe configuration object with validated environment variables."""

    access_key: str = ""
    secret_key: str = ""
    session_token: Optional[str] = None
    region: str = DEFAULT_REGION
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create Config instance from environment variables.

        Missing credentials are not an error here; the request executor
        reports them when a call is made.

        Raises:
            ValueError: If LOG_LEVEL or AWIS_TIMEOUT is invalid.
        """
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_log_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_log_levels}, got: {log_level}"
            )

        raw_timeout = os.environ.get("AWIS_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(
                f"AWIS_TIMEOUT must be a number of seconds, got: {raw_timeout}"
            )
        if timeout <= 0:
            raise ValueError(
                f"AWIS_TIMEOUT must be positive, got: {raw_timeout}"
            )

        return cls(
            access_key=os.environ.get("AWS_ACCESS_KEY_ID", ""),
            secret_key=os.environ.get("AWS_SECRET_ACCESS_KEY", ""),
            session_token=os.environ.get("AWS_SESSION_TOKEN") or None,
            region=os.environ.get("AWS_REGION") or DEFAULT_REGION,
            endpoint=os.environ.get("AWIS_ENDPOINT") or DEFAULT_ENDPOINT,
            timeout=timeout,
            verbose=is_truthy(os.environ.get("AWIS_VERBOSE", "")),
            log_level=log_level,
        )


def is_truthy(value: Any) -> bool:
    """
    Interpret a flag from the environment or a Lambda event.

    Strings count as true only for "1", "true", "yes" or "on" (any case);
    other values use their boolean value.
    """
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return bool(value)


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config: The validated configuration object

    Raises:
        ValueError: If environment variables are invalid.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_secret_key(key: str, secret: str) -> None:
    """
    Store AWS credentials in the process environment.

    The cached configuration is dropped so the next get_config() call
    picks the new values up.

    Args:
        key: AWS Access Key ID
        secret: AWS Secret Access Key
    """
    global _config
    os.environ["AWS_ACCESS_KEY_ID"] = key
    os.environ["AWS_SECRET_ACCESS_KEY"] = secret
    _config = None
