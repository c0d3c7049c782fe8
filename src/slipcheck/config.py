"""Process configuration read from the environment."""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from slipcheck.domain.errors import ConfigurationError
from slipcheck.gateway.slip2go import DEFAULT_API_URL

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def parse_receiver_names(raw: Optional[str]) -> list[dict[str, str]]:
    """Parse receiver name conditions from JSON.

    Accepts a single object or a list of objects, e.g.
    ``{"accountNameTH": "...", "accountNameEN": "..."}``.

    Raises:
        ConfigurationError: If the value is not valid JSON of that shape
    """
    if not raw or not raw.strip():
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in SLIP2GO_RECEIVER_NAMES: {e}")
    if isinstance(parsed, dict):
        parsed = [parsed]
    if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
        raise ConfigurationError("SLIP2GO_RECEIVER_NAMES must be an object or a list of objects")
    return parsed


@dataclass(frozen=True)
class AppConfig:
    """Settings that belong to the deployment rather than to the donation policy."""

    database_path: Optional[str] = None
    database_url: Optional[str] = None
    slip2go_api_key: Optional[str] = None
    slip2go_api_url: str = DEFAULT_API_URL
    receiver_names: list[dict[str, str]] = field(default_factory=list)
    auth_url: Optional[str] = None
    auth_api_key: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            database_path=env.get("SLIPCHECK_DB_PATH") or None,
            database_url=env.get("SLIPCHECK_DATABASE_URL") or None,
            slip2go_api_key=env.get("SLIP2GO_API_KEY") or None,
            slip2go_api_url=env.get("SLIP2GO_API_URL") or DEFAULT_API_URL,
            receiver_names=parse_receiver_names(env.get("SLIP2GO_RECEIVER_NAMES")),
            auth_url=env.get("SLIPCHECK_AUTH_URL") or None,
            auth_api_key=env.get("SLIPCHECK_AUTH_API_KEY") or None,
            log_level=(env.get("SLIPCHECK_LOG_LEVEL") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for CLI and server processes."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # Keep werkzeug's per-request lines out of the way
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
