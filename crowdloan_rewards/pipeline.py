from __future__ import annotations

import logging

from .address import normalize_address
from .config import CrowdloanConfig
from .fetch import fetch_onchain_contributions, parse_contributors_file
from .merge import merge_contributions, total_amount
from .models import PipelineResult
from .reporting import write_reports
from .rewards import compute_rewards
from .rpc import ChainClient

logger = logging.getLogger(__name__)


def run_pipeline(config: CrowdloanConfig, client: ChainClient) -> PipelineResult:
    """
    Fetch, reconcile and reward crowdloan contributions, then write the reports.

    Nothing is written unless every stage succeeded.
    """
    policy = config.policy
    aggregator = normalize_address(config.aggregator_address, None, config.canonical_prefix)

    block_hash, onchain = fetch_onchain_contributions(
        client,
        config.para_id,
        config.end_block,
        prefix=config.canonical_prefix,
        page_size=config.page_size,
        child_key=config.child_key,
        progress_every=config.progress_every,
    )
    onchain_total = total_amount(onchain)
    logger.info("Total contribution: %d in DOT units", onchain_total)
    aggregator_amount = onchain.get(aggregator)
    logger.info("Sovereign account of Bifrost contribution: %s in DOT units", aggregator_amount)

    offchain = parse_contributors_file(
        config.contributors_file,
        source_prefix=config.contributors_prefix,
        target_prefix=config.canonical_prefix,
        decimals=policy.source_decimals,
    )
    offchain_total = total_amount(offchain)
    logger.info(
        "Bifrost contributions from file %s: %d for a total of %d DOT units",
        config.contributors_file, len(offchain), offchain_total,
    )

    merged = merge_contributions(onchain, offchain, aggregator)
    logger.info("Polkadot contributions + Bifrost contributions: %d", len(merged))
    logger.info("Total contributions (Polkadot + Bifrost): %d DOT units", total_amount(merged))

    rewards = compute_rewards(merged, policy)
    logger.info("Total LAOS rewards: %d LAOS units", total_amount(rewards))

    written = write_reports(merged, rewards, policy, config.output_dir, config.report_names)
    for kind, path in written.items():
        logger.info("%s saved to %s", kind.upper(), path)

    return PipelineResult(
        block_hash=block_hash,
        onchain_total=onchain_total,
        aggregator_amount=aggregator_amount,
        offchain_total=offchain_total,
        contributions=merged,
        rewards=rewards,
    )
