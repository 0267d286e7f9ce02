"""
TokenCraft configuration

Describes one ledger instance:
- token metadata (name / symbol / decimals)
- the owner identity
- service settings for the HTTP API (env name, CORS origins, Redis audit sink)

Sources, later wins:
    1) defaults below
    2) YAML file (argument or TCRAFT_CONFIG)
    3) environment overrides

Example YAML:

    token:
      name: TokenCraft
      symbol: TCRAFT
      decimals: 8
    owner: deployer
    service:
      env_name: dev
      allow_origins: "*"
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ledger.token import TokenMetadata


class ConfigError(ValueError):
    pass


@dataclass
class TokenConfig:
    name: str = "TokenCraft"
    symbol: str = "TCRAFT"
    decimals: int = 8
    owner: str = "deployer"
    env_name: str = "prod"
    redis_url: str = ""
    allow_origins: str = "*"
    max_memo_bytes: int = 34

    def metadata(self) -> TokenMetadata:
        return TokenMetadata(name=self.name, symbol=self.symbol, decimals=self.decimals)

    def validate(self) -> "TokenConfig":
        if not self.name.strip():
            raise ConfigError("token name must not be empty")
        if not self.symbol.strip():
            raise ConfigError("token symbol must not be empty")
        if not self.owner.strip():
            raise ConfigError("owner identity must not be empty")
        if not 0 <= self.decimals <= 18:
            raise ConfigError(f"decimals must be within 0..18, got {self.decimals}")
        if self.max_memo_bytes < 0:
            raise ConfigError("max_memo_bytes must be >= 0")
        return self


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found at {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def _as_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{field_name} must be an integer, got {value!r}") from None


def load_config(path: Optional[Union[str, Path]] = None) -> TokenConfig:
    cfg = TokenConfig()

    path = path or os.getenv("TCRAFT_CONFIG", "").strip() or None
    if path:
        data = _load_yaml(Path(path))
        token = data.get("token") or {}
        service = data.get("service") or {}
        cfg.name = str(token.get("name", cfg.name))
        cfg.symbol = str(token.get("symbol", cfg.symbol))
        cfg.decimals = _as_int(token.get("decimals", cfg.decimals), "token.decimals")
        cfg.max_memo_bytes = _as_int(token.get("max_memo_bytes", cfg.max_memo_bytes), "token.max_memo_bytes")
        cfg.owner = str(data.get("owner", cfg.owner))
        cfg.env_name = str(service.get("env_name", cfg.env_name))
        cfg.redis_url = str(service.get("redis_url", cfg.redis_url) or "")
        cfg.allow_origins = str(service.get("allow_origins", cfg.allow_origins))

    cfg.name = os.getenv("TCRAFT_NAME", cfg.name)
    cfg.symbol = os.getenv("TCRAFT_SYMBOL", cfg.symbol)
    if os.getenv("TCRAFT_DECIMALS"):
        cfg.decimals = _as_int(os.getenv("TCRAFT_DECIMALS"), "TCRAFT_DECIMALS")
    cfg.owner = os.getenv("TCRAFT_OWNER", cfg.owner)
    cfg.env_name = os.getenv("ENV_NAME", cfg.env_name)
    cfg.redis_url = os.getenv("REDIS_URL", cfg.redis_url).strip()
    cfg.allow_origins = os.getenv("ALLOW_ORIGINS", cfg.allow_origins)

    return cfg.validate()
