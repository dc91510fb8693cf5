"""
Runtime configuration for the Short Link service
================================================

Reads environment variables (only here) and exposes an immutable `Settings`
object. The application factory receives it explicitly; avoid reading env vars
anywhere else.

Required
--------
- ALLOWED_DOMAINS : comma separated list of redirect target domains
- MONGO_URI       : MongoDB connection string
- MONGO_DB        : database name

Optional
--------
- LOG_LEVEL       : logging level name (default "INFO")
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .manager.domains import AllowList

# -------- Fixed service constants --------
SHORT_LINK_LENGTH = 8
FALLBACK_URL = "https://farcaster.vote"
PORT = 8080
COLLECTION_NAME = "urls"
MAX_CONNECTING = 100

# Per-operation store timeouts (seconds)
CONNECT_TIMEOUT = 10.0
PING_TIMEOUT = 5.0
INDEX_TIMEOUT = 10.0
WRITE_TIMEOUT = 5.0
READ_TIMEOUT = 5.0

REQUIRED_VARS = ("ALLOWED_DOMAINS", "MONGO_URI", "MONGO_DB")


class ConfigError(ValueError):
    """Raised when required configuration is missing."""


@dataclass(frozen=True)
class Settings:
    allowed_domains: AllowList
    mongo_uri: str
    mongo_db: str
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the process environment (or an explicit mapping).

        Raises:
            ConfigError: If any of ALLOWED_DOMAINS, MONGO_URI or MONGO_DB is unset or empty,
                or LOG_LEVEL is not a logging level name.
        """
        env = os.environ if environ is None else environ
        if any(not env.get(name) for name in REQUIRED_VARS):
            raise ConfigError(
                "Environment variables not set, please set ALLOWED_DOMAINS, MONGO_URI and MONGO_DB"
            )
        log_level = env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Unknown LOG_LEVEL: {log_level!r}")
        return cls(
            allowed_domains=AllowList.from_csv(env["ALLOWED_DOMAINS"]),
            mongo_uri=env["MONGO_URI"],
            mongo_db=env["MONGO_DB"],
            log_level=log_level,
        )
