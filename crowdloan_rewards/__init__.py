"""
Crowdloan contribution reconciliation and reward computation.

The package is split into small, single-purpose modules that the
``compute_rewards.py`` and ``map_bifrost_addresses.py`` scripts compose:
address normalization, chain access, contribution fetching, merging,
reward computation and reporting.
"""

from . import address, config, fetch, merge, reporting, rewards, storage
from .errors import (
    BlockNotFoundError,
    CrowdloanError,
    DecodeError,
    FundNotFoundError,
    IntegrityError,
    MissingContributionError,
    ParseError,
    RpcError,
)
from .models import PipelineResult, RPCResponse

__all__ = [
    "address",
    "config",
    "fetch",
    "merge",
    "reporting",
    "rewards",
    "storage",
    "BlockNotFoundError",
    "CrowdloanError",
    "DecodeError",
    "FundNotFoundError",
    "IntegrityError",
    "MissingContributionError",
    "ParseError",
    "PipelineResult",
    "RPCResponse",
    "RpcError",
]
