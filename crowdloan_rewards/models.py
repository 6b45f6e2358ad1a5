from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Canonical address -> amount in the token's smallest unit, in insertion order.
Contributions = Dict[str, int]
Rewards = Dict[str, int]


@dataclass(slots=True)
class RPCResponse:
    """Representation of a JSON-RPC response."""

    jsonrpc: str
    result: Any
    id: Any
    error: Optional[Dict[str, Any]] = None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "RPCResponse":
        return RPCResponse(
            jsonrpc=data.get("jsonrpc"),
            result=data.get("result"),
            id=data.get("id"),
            error=data.get("error"),
        )

    def is_error(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class PipelineResult:
    """Outcome of a full reconciliation run."""

    block_hash: str
    onchain_total: int
    aggregator_amount: int
    offchain_total: int
    contributions: Contributions
    rewards: Rewards

    @property
    def merged_total(self) -> int:
        return sum(self.contributions.values())

    @property
    def rewards_total(self) -> int:
        return sum(self.rewards.values())
