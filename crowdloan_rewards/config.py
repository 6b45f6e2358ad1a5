from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .reporting import ReportNames
from .rewards import RewardPolicy

RPC_URL_ENV_VAR = "CROWDLOAN_RPC_URL"


@dataclass(slots=True)
class CrowdloanConfig:
    """Settings for one reconciliation run."""

    rpc_url: str = "wss://rpc.polkadot.io"
    para_id: int = 3370
    end_block: int = 20549306
    aggregator_address: str = "13YMK2eeopZtUNpeHnJ1Ws2HqMQG6Ts9PGCZYGyFbSYoZfcm"
    canonical_prefix: int = 0
    contributors_prefix: int = 6
    contributors_file: str = "bifrost_contributors"
    output_dir: str = "."
    contributions_file: str = "contributions.txt"
    rewards_file: str = "rewards.txt"
    summary_file: str = "crowdloan.md"
    address_map_file: str = "bifrost_to_polkadot.md"
    source_decimals: int = 10
    target_decimals: int = 18
    reward_multiplier: int = 100
    page_size: int = 1000
    progress_every: int = 500
    request_timeout: float = 30
    child_key: Optional[str] = None

    @property
    def policy(self) -> RewardPolicy:
        return RewardPolicy(self.source_decimals, self.target_decimals, self.reward_multiplier)

    @property
    def report_names(self) -> ReportNames:
        return ReportNames(self.contributions_file, self.rewards_file, self.summary_file)


def _check_keys(values: Mapping[str, Any], source: str) -> None:
    known = {f.name for f in fields(CrowdloanConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {source}: {', '.join(unknown)}")


POSITIVE_FIELDS = ("page_size", "progress_every", "request_timeout")


def _check_values(config: CrowdloanConfig) -> None:
    for name in POSITIVE_FIELDS:
        value = getattr(config, name)
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")


def load_config(
    path: Optional[str | Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> CrowdloanConfig:
    """
    Build the run configuration.

    Precedence, lowest first: built-in defaults, the YAML file at ``path``,
    the ``CROWDLOAN_RPC_URL`` environment variable, then ``overrides``
    (entries set to ``None`` are ignored).
    """
    config = CrowdloanConfig()

    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        _check_keys(data, str(path))
        config = replace(config, **data)

    env_url = os.environ.get(RPC_URL_ENV_VAR)
    if env_url:
        config = replace(config, rpc_url=env_url)

    if overrides:
        explicit: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
        _check_keys(explicit, "overrides")
        config = replace(config, **explicit)

    _check_values(config)
    return config
