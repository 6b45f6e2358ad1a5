from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .address import encode_address, normalize_address
from .errors import MissingContributionError, ParseError
from .models import Contributions
from .rpc import ChainClient
from .storage import crowdloan_child_key, decode_balance, from_hex

logger = logging.getLogger(__name__)

AMOUNT_PATTERN = re.compile(r"^\d+(\.\d+)?$")


def resolve_child_key(client: ChainClient, para_id: int, at: str) -> str:
    """
    Derive the crowdloan child trie key of ``para_id`` from its fund info at ``at``.
    """
    fund_index = client.get_fund_index(para_id, at)
    logger.info("Crowdloan fund for para %d has fund index %d", para_id, fund_index)
    return crowdloan_child_key(fund_index)


def fetch_onchain_contributions(
    client: ChainClient,
    para_id: int,
    end_block: int,
    prefix: int = 0,
    page_size: int = 1000,
    child_key: Optional[str] = None,
    progress_every: int = 500,
) -> Tuple[str, Contributions]:
    """
    Read every contribution to ``para_id``'s crowdloan as of ``end_block``.

    Returns the pinned block hash and the contributions keyed by address
    under ``prefix``, in trie enumeration order.
    """
    block_hash = client.get_block_hash(end_block)
    logger.info("Crowdloan end block: %d with hash: %s", end_block, block_hash)

    if child_key is None:
        child_key = resolve_child_key(client, para_id, block_hash)
    logger.debug("Using child trie key %s", child_key)

    keys = client.get_child_keys(child_key, block_hash, page_size=page_size)
    logger.info("Contributors fetched: %d", len(keys))
    logger.info("Getting the contributions for each contributor... (it may take a while)")

    contributions: Contributions = {}
    for index, key in enumerate(keys, start=1):
        value = client.get_child_storage(child_key, key, block_hash)
        if value is None:
            raise MissingContributionError(key)
        address = encode_address(key, prefix)
        contributions[address] = contributions.get(address, 0) + decode_balance(from_hex(value))
        if progress_every and index % progress_every == 0:
            logger.info("  Processed %d/%d contributors...", index, len(keys))

    return block_hash, contributions


def parse_amount(text: str, decimals: int = 10) -> int:
    """
    Convert a human decimal string (``"12.5"``) into smallest units.

    Digits beyond ``decimals`` are rounded half away from zero.
    """
    if not AMOUNT_PATTERN.match(text):
        raise ValueError(f"not a decimal amount: {text!r}")
    with localcontext() as ctx:
        ctx.prec = len(text) + decimals + 1
        scaled = Decimal(text).scaleb(decimals)
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def iter_contributor_lines(path: str | Path) -> Iterator[Tuple[int, str, str]]:
    """
    Yield ``(line_number, address, amount)`` for each non-blank line.
    """
    source = Path(path)
    with source.open("r", encoding="utf-8") as fh:
        for line_number, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            address, sep, amount = line.partition(",")
            if not sep:
                raise ParseError(str(source), line_number, "missing ',' separator")
            address, amount = address.strip(), amount.strip()
            if not address:
                raise ParseError(str(source), line_number, "missing address")
            yield line_number, address, amount


def parse_contributors_file(
    path: str | Path,
    source_prefix: int = 6,
    target_prefix: int = 0,
    decimals: int = 10,
) -> Contributions:
    """
    Load off-chain contributions, re-keyed by address under ``target_prefix``.

    Lines for the same public key are summed.
    """
    contributions: Contributions = {}
    for line_number, raw_address, amount_text in iter_contributor_lines(path):
        try:
            amount = parse_amount(amount_text, decimals)
        except ValueError as exc:
            raise ParseError(str(path), line_number, str(exc)) from exc
        address = normalize_address(raw_address, source_prefix, target_prefix)
        contributions[address] = contributions.get(address, 0) + amount
    return contributions
