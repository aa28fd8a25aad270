"""Settings — layered configuration for the command pipeline.

Values are merged in this order, later sources winning::

    defaults -> profile (CC_ENV) -> .commandcenter/config.json -> .env -> environment
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from commandcenter.config import DEFAULT_REGION, PRICING_BATCH_SIZE

logger = logging.getLogger(__name__)

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "CC_ENV": {"default": "development", "description": "Environment profile"},
    "CC_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "CC_STORE_DB": {"default": ":memory:", "description": "Record store database path"},
    "CC_ACTION_LOG_DB": {"default": "action_log.db", "description": "Action log database path"},
    "CC_DEFAULT_REGION": {"default": DEFAULT_REGION, "description": "Region for new projects"},
    "CC_PRICING_URL": {"default": "", "description": "Price lookup endpoint"},
    "CC_PRICING_API_KEY": {"default": "", "description": "Price lookup API key (secret)"},
    "CC_PRICING_BATCH_SIZE": {
        "default": str(PRICING_BATCH_SIZE),
        "description": "Descriptions per price lookup request",
    },
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "CC_ENV": "development",
        "CC_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "CC_ENV": "production",
        "CC_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "CC_ENV": "testing",
        "CC_LOG_LEVEL": "DEBUG",
        "CC_STORE_DB": ":memory:",
        "CC_ACTION_LOG_DB": ":memory:",
    },
}


class Settings(BaseModel):
    """Resolved configuration values."""

    env: str = "development"
    log_level: str = "INFO"
    store_db: str = ":memory:"
    action_log_db: str = ":memory:"
    default_region: str = DEFAULT_REGION
    pricing_url: str = ""
    pricing_api_key: str = ""
    pricing_batch_size: int = PRICING_BATCH_SIZE


def generate_env_template(project_path: str | Path) -> Path:
    """Create .env.example with all config keys and return its path."""
    root = Path(project_path)
    env_path = root / ".env.example"

    lines = ["# Command Center configuration", "# Copy to .env and fill in values", ""]
    for key, info in _CONFIG_KEYS.items():
        lines.append(f"# {info['description']}")
        lines.append(f"{key}={info['default']}")
        lines.append("")

    env_path.write_text("\n".join(lines), encoding="utf-8")
    return env_path


def load_raw_config(project_path: str | Path = ".") -> dict[str, str]:
    """Return the merged flat key/value configuration."""
    root = Path(project_path)
    config: dict[str, str] = {}

    # 1. Defaults
    for key, info in _CONFIG_KEYS.items():
        config[key] = str(info["default"])

    # 2. Profile overrides
    env_name = os.environ.get("CC_ENV", config["CC_ENV"])
    config.update(_PROFILES.get(env_name, {}))

    # 3. .commandcenter/config.json
    config_json = root / ".commandcenter" / "config.json"
    if config_json.is_file():
        try:
            data = json.loads(config_json.read_text(encoding="utf-8"))
            for k, v in data.items():
                config[k] = str(v)
        except (json.JSONDecodeError, OSError):
            logger.debug("Could not read config.json", exc_info=True)

    # 4. .env file
    env_file = root / ".env"
    if env_file.is_file():
        try:
            for line in env_file.read_text(encoding="utf-8").splitlines():
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" in line:
                    k, v = line.split("=", 1)
                    config[k.strip()] = v.strip()
        except OSError:
            logger.debug("Could not read .env", exc_info=True)

    # 5. Environment variables override all
    for key in _CONFIG_KEYS:
        env_val = os.environ.get(key)
        if env_val is not None:
            config[key] = env_val

    return config


def load_config(project_path: str | Path = ".") -> Settings:
    """Load merged configuration as a :class:`Settings` instance."""
    raw = load_raw_config(project_path)

    try:
        batch_size = int(raw["CC_PRICING_BATCH_SIZE"])
    except ValueError:
        logger.warning(
            "Invalid CC_PRICING_BATCH_SIZE %r, using %d",
            raw["CC_PRICING_BATCH_SIZE"], PRICING_BATCH_SIZE,
        )
        batch_size = PRICING_BATCH_SIZE

    return Settings(
        env=raw["CC_ENV"],
        log_level=raw["CC_LOG_LEVEL"].upper(),
        store_db=raw["CC_STORE_DB"],
        action_log_db=raw["CC_ACTION_LOG_DB"],
        default_region=raw["CC_DEFAULT_REGION"],
        pricing_url=raw["CC_PRICING_URL"],
        pricing_api_key=raw["CC_PRICING_API_KEY"],
        pricing_batch_size=max(batch_size, 1),
    )


def apply_log_level(settings: Settings) -> None:
    """Set the package logger level; handlers are left to the application."""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger("commandcenter").setLevel(level)
