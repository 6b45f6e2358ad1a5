from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .models import Rewards


@dataclass(frozen=True, slots=True)
class RewardPolicy:
    """Exchange terms between the contributed token and the reward token."""

    source_decimals: int = 10
    target_decimals: int = 18
    multiplier: int = 100

    def __post_init__(self) -> None:
        if self.target_decimals < self.source_decimals:
            raise ValueError(
                f"Reward token decimals ({self.target_decimals}) must not be lower "
                f"than contribution decimals ({self.source_decimals})"
            )
        if self.multiplier < 0:
            raise ValueError(f"Reward multiplier must be non-negative, got {self.multiplier}")

    @property
    def decimal_ratio(self) -> int:
        return 10 ** (self.target_decimals - self.source_decimals)

    def reward_for(self, amount: int) -> int:
        return amount * self.decimal_ratio * self.multiplier


def compute_rewards(contributions: Mapping[str, int], policy: RewardPolicy) -> Rewards:
    """
    Map each contributor to its reward, preserving the contributions' order.
    """
    return {address: policy.reward_for(amount) for address, amount in contributions.items()}


def move_decimal_point(amount: int, places: int) -> str:
    """
    Render ``amount`` smallest units as a decimal string with ``places`` decimals.

    Trailing fractional zeros are trimmed and whole amounts have no point:
    ``move_decimal_point(12345000000, 10) == "1.2345"``.
    """
    if places <= 0:
        return str(amount * 10 ** -places)
    digits = str(amount).rjust(places + 1, "0")
    integer_part, fraction = digits[:-places], digits[-places:].rstrip("0")
    return f"{integer_part}.{fraction}" if fraction else integer_part
