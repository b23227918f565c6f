import json
import logging
import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

Environment = Enum("Environment", ["local", "dev", "int", "prod"])

CONFIG_FILE_NAME = "rentable.json"


@dataclass(frozen=True)
class LedgerConfig:
    name: str = "RentableNFTs"
    symbol: str = "RNFT"
    allow_owner_override_of_active_renter: bool = True
    clear_user_on_transfer: bool = True

    @classmethod
    def from_dict(cls, values: dict) -> "LedgerConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"unknown config keys {sorted(unknown)}")
        return cls(**values)


def current_env() -> Environment:
    return Environment[os.environ.get("ENV", "local")]


def config_path(env: Environment) -> Path:
    return Path.cwd() / "configs" / env.name / CONFIG_FILE_NAME


def load_config(env: Environment | None = None, path: Path | str | None = None) -> LedgerConfig:
    env = env or current_env()
    config_file = Path(path) if path else config_path(env)
    if not config_file.exists():
        logger.warning("no config found at %s, using defaults", config_file)
        return LedgerConfig()
    with open(config_file, "r") as f:
        config = json.load(f)
    logger.info("loaded %s config from %s", env.name, config_file)
    return LedgerConfig.from_dict(config.get("ledger", {}))
