import logging
import sys
from dataclasses import dataclass, field
from typing import List

from heatloss.core.environment import get_env_bool, get_env_int, get_env_list, load_environment
from heatloss.services.error_types import ConfigurationError

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]


@dataclass(frozen=True)
class Settings:
    debug: bool = False
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    # Default for the calculate endpoint's ?strict flag
    strict_validation: bool = False
    # 1 calculates rooms sequentially
    max_workers: int = 1
    host: str = "0.0.0.0"
    port: int = 8000


def get_settings() -> Settings:
    """Read settings from the environment (.env files included)"""
    load_environment()
    settings = Settings(
        debug=get_env_bool("HEATLOSS_DEBUG", False),
        cors_origins=get_env_list("HEATLOSS_CORS_ORIGINS", default=list(DEFAULT_CORS_ORIGINS)),
        strict_validation=get_env_bool("HEATLOSS_STRICT_VALIDATION", False),
        max_workers=get_env_int("HEATLOSS_MAX_WORKERS", 1),
        host=get_env_list("HEATLOSS_HOST", default=["0.0.0.0"])[0],
        port=get_env_int("HEATLOSS_PORT", 8000),
    )

    if settings.max_workers < 1:
        raise ConfigurationError(
            "HEATLOSS_MAX_WORKERS must be at least 1",
            {"max_workers": settings.max_workers},
        )
    if not 0 < settings.port < 65536:
        raise ConfigurationError("HEATLOSS_PORT must be a valid TCP port", {"port": settings.port})

    return settings


# Logging configuration
def setup_logging(debug: bool = False):
    """Configure application logging"""
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    logger = logging.getLogger('heatloss')
    logger.setLevel(log_level)

    # Suppress noisy third-party loggers
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    return logger
