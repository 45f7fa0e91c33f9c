import math
import os
import re
from typing import Mapping, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ACCOUNT_ALIAS = "invoices"
DEFAULT_HTTP_TIMEOUT = 90.0  # seconds

DEFAULTS = {
    "KEY_VAULT_URL": "https://kv-fintrack-dev.vault.azure.net",
    "STORAGE_ACCOUNT_URL": "https://safintrackdev.blob.core.windows.net/",
    "STORAGE_CONTAINER_NAME": "raw",
    "ACCOUNT_ALIASES": DEFAULT_ACCOUNT_ALIAS,
    "FIO_API_URL": "https://fioapi.fio.cz",
}

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    key_vault_url: str
    storage_account_url: str
    storage_container_name: str
    account_aliases: Tuple[str, ...] = Field(min_length=1)
    http_client_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)
    fio_api_url: str = DEFAULTS["FIO_API_URL"]
    debug: bool = False


def parse_account_aliases(raw: Optional[str], sep: str = ",") -> Tuple[str, ...]:
    """Split, trim and drop blanks. Order and duplicates are kept as configured."""
    aliases = tuple(a.strip() for a in (raw or "").split(sep) if a.strip())
    if not aliases:
        return (DEFAULT_ACCOUNT_ALIAS,)
    return aliases


def parse_duration(raw: str) -> float:
    """
    Parse a duration into seconds.

    Accepts Go-style strings ("90s", "2m", "1m30s", "500ms") as used by the
    deployment manifests, or a bare number of seconds ("90").
    """
    value = raw.strip()
    if not value:
        raise ValueError("empty duration")
    try:
        return float(value)
    except ValueError:
        pass

    pos = 0
    total = 0.0
    for m in _DURATION_PART.finditer(value):
        if m.start() != pos:
            break
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    if pos == 0 or pos != len(value):
        raise ValueError(f"invalid duration {raw!r}")
    return total


def _env_or_default(environ: Mapping[str, str], key: str) -> str:
    value = environ.get(key)
    if value:
        return value
    default = DEFAULTS[key]
    logger.warning(f"{key} not set, using default: {default}")
    return default


def _env_timeout(environ: Mapping[str, str], key: str = "HTTP_CLIENT_TIMEOUT") -> float:
    value = environ.get(key)
    if not value:
        return DEFAULT_HTTP_TIMEOUT
    try:
        parsed = parse_duration(value)
    except ValueError:
        parsed = 0.0
    if not math.isfinite(parsed) or parsed <= 0:
        logger.warning(f"{key} has invalid duration {value!r}, using default: {DEFAULT_HTTP_TIMEOUT}s")
        return DEFAULT_HTTP_TIMEOUT
    return parsed


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    env = os.environ if environ is None else environ
    return Config(
        key_vault_url=_env_or_default(env, "KEY_VAULT_URL"),
        storage_account_url=_env_or_default(env, "STORAGE_ACCOUNT_URL"),
        storage_container_name=_env_or_default(env, "STORAGE_CONTAINER_NAME"),
        account_aliases=parse_account_aliases(_env_or_default(env, "ACCOUNT_ALIASES")),
        http_client_timeout=_env_timeout(env),
        fio_api_url=env.get("FIO_API_URL") or DEFAULTS["FIO_API_URL"],
        debug=bool(env.get("DEBUG")),
    )


_cached_config: Optional[Config] = None


def reset_config() -> None:
    """Drop the cached config (tests only)."""
    global _cached_config
    _cached_config = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config
