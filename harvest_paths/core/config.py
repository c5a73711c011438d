from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from harvest_paths.core.constants.base import MAX_UINT256, ZERO_ADDRESS

_CONFIG_ENV_KEYS = ("HARVEST_PATHS_CONFIG_PATH", "HARVEST_PATHS_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"


def _find_project_root(start: Path) -> Path | None:
    cur = start.resolve()
    for parent in [cur, *cur.parents]:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


def _project_root() -> Path | None:
    return _find_project_root(Path.cwd()) or _find_project_root(Path(__file__).parent)


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()

    env_path = next(
        (os.getenv(k, "").strip() for k in _CONFIG_ENV_KEYS if os.getenv(k)), ""
    )
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_absolute():
            return p
        root = _project_root()
        return (root / p) if root else p

    root = _project_root()
    return (root / _DEFAULT_CONFIG_FILENAME) if root else Path(_DEFAULT_CONFIG_FILENAME)


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    try:
        return json.loads(cfg_path.read_text())
    except json.JSONDecodeError:
        return {}


CONFIG: dict[str, Any] = load_config_json()


def set_config(config: dict[str, Any]) -> None:
    """Replace the global CONFIG dict in-place.

    This allows code that imported CONFIG at module import time to see updates.
    """
    CONFIG.clear()
    CONFIG.update(config)


def load_config(
    path: str | Path | None = None, *, require_exists: bool = False
) -> None:
    """Load config from disk into the global CONFIG dict."""
    set_config(load_config_json(path, require_exists=require_exists))


def set_rpc_urls(rpc_urls):
    if "strategy" not in CONFIG:
        CONFIG["strategy"] = {}
    CONFIG["strategy"]["rpc_urls"] = rpc_urls


def get_rpc_urls() -> dict[str, Any]:
    return CONFIG.get("strategy", {}).get("rpc_urls", {})


def _optional_address(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == ZERO_ADDRESS:
        return None
    if not is_address(text):
        raise ValueError(f"invalid address: {value!r}")
    return to_checksum_address(text)


def _required_address(value: Any) -> str:
    address = _optional_address(value)
    if address is None:
        raise ValueError("address is required")
    return address


class StrategyParams(BaseModel):
    """Immutable wiring for one strategy instance.

    Built once at construction. ``incentives_controller`` and ``reward_token``
    are ``None`` when the yield source pays no incentives; a zero address in
    raw config is normalised to ``None`` here.
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int
    asset: str
    silo: str
    share_token: str
    auction: str
    strategy_address: str
    management: str
    incentives_controller: str | None = None
    reward_token: str | None = None
    keepers: tuple[str, ...] = ()
    emergency_admin: str | None = None
    deposit_limit: int = Field(default=MAX_UINT256, ge=0)

    @field_validator(
        "asset", "silo", "share_token", "auction", "strategy_address", "management",
        mode="before",
    )
    @classmethod
    def _checksum_required(cls, value: Any) -> str:
        return _required_address(value)

    @field_validator(
        "incentives_controller", "reward_token", "emergency_admin", mode="before"
    )
    @classmethod
    def _checksum_optional(cls, value: Any) -> str | None:
        return _optional_address(value)

    @field_validator("keepers", mode="before")
    @classmethod
    def _checksum_keepers(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(_required_address(v) for v in value)

    @model_validator(mode="after")
    def _check_wiring(self) -> StrategyParams:
        if (self.incentives_controller is None) != (self.reward_token is None):
            raise ValueError(
                "incentives_controller and reward_token must be configured together"
            )
        if self.reward_token is not None and self.reward_token == self.asset:
            raise ValueError("reward_token must differ from asset")
        return self

    @classmethod
    def from_config(cls, config: dict[str, Any] | None = None) -> StrategyParams:
        """Build params from the ``strategy`` section of a config dict.

        Falls back to the global CONFIG when ``config`` is omitted.
        """
        cfg = CONFIG if config is None else config
        section = dict(cfg.get("strategy") or {})
        wallet = section.pop("strategy_wallet", None) or cfg.get("strategy_wallet")
        if isinstance(wallet, dict):
            section.setdefault("strategy_address", wallet.get("address"))
        section.pop("rpc_urls", None)
        return cls(**section)
