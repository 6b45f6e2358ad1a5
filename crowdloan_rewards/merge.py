from __future__ import annotations

import logging
from typing import Mapping

from .errors import IntegrityError
from .models import Contributions

logger = logging.getLogger(__name__)


def total_amount(contributions: Mapping[str, int]) -> int:
    return sum(contributions.values(), 0)


def merge_contributions(
    onchain: Mapping[str, int],
    offchain: Mapping[str, int],
    aggregator: str,
) -> Contributions:
    """
    Replace the aggregator's on-chain entry with its per-contributor breakdown.

    ``aggregator`` is the account whose on-chain contribution is the pooled
    total of the ``offchain`` entries. Its entry is dropped and ``offchain``
    is added on top of the remaining on-chain contributions, summing amounts
    for addresses present in both. Neither input is modified.
    """
    if aggregator not in onchain:
        raise IntegrityError(
            f"Aggregate entry {aggregator} missing from on-chain contributions; "
            "merge would silently double-report"
        )

    aggregator_amount = onchain[aggregator]
    merged: Contributions = {
        address: amount for address, amount in onchain.items() if address != aggregator
    }
    for address, amount in offchain.items():
        merged[address] = merged.get(address, 0) + amount

    expected = total_amount(onchain) - aggregator_amount + total_amount(offchain)
    actual = total_amount(merged)
    if actual != expected:
        raise IntegrityError(
            f"Merged total {actual} does not match expected {expected} "
            f"(on-chain {total_amount(onchain)} - aggregator {aggregator_amount} "
            f"+ off-chain {total_amount(offchain)})"
        )

    logger.debug(
        "Merged %d on-chain and %d off-chain entries into %d",
        len(onchain), len(offchain), len(merged),
    )
    return merged
