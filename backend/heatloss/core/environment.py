"""Environment handling for the heat loss service.

`.env` holds the committed base settings and `.env.local` the per-machine
overrides; the later file wins. Variables already exported by the host are
overridden by both.

Only `heatloss.app.config` reads the environment. The calculation core takes
everything it needs as arguments.
"""

import os
import logging
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENV_FILES = (".env", ".env.local")
_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def load_environment(env_dir: Optional[Union[str, Path]] = None) -> List[str]:
    """Load the .env files found in `env_dir` (default: working directory).

    Returns:
        Names of the files that were loaded, in load order
    """
    base = Path(env_dir) if env_dir is not None else Path.cwd()

    loaded = []
    for name in ENV_FILES:
        path = base / name
        if path.exists():
            load_dotenv(path, override=True)
            loaded.append(name)

    if loaded:
        logger.info(f"Environment loaded from: {', '.join(loaded)}")
    else:
        logger.debug(f"No .env files in {base}")
    return loaded


def get_env_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key, "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def _get_env_number(key: str, default: T, convert: Callable[[str], T]) -> T:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw)
    except ValueError:
        logger.warning(f"Invalid value {raw!r} for {key}, using default: {default}")
        return default


def get_env_int(key: str, default: int = 0) -> int:
    return _get_env_number(key, default, int)


def get_env_float(key: str, default: float = 0.0) -> float:
    return _get_env_number(key, default, float)


def get_env_list(key: str, separator: str = ",", default: Optional[list] = None) -> list:
    """Split a separated variable into stripped, non-empty items.

    Args:
        key: Environment variable name
        separator: Item separator
        default: Returned when the variable is unset or blank
    """
    value = os.getenv(key, "")
    if not value.strip():
        return [] if default is None else default
    return [item.strip() for item in value.split(separator) if item.strip()]
