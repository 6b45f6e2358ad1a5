import argparse
import logging
import sys
from typing import List, Optional

import requests
from substrateinterface.exceptions import SubstrateRequestException
from websocket import WebSocketException

from crowdloan_rewards.config import load_config
from crowdloan_rewards.errors import CrowdloanError
from crowdloan_rewards.pipeline import run_pipeline
from crowdloan_rewards.rpc import ChainClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconcile crowdloan contributions and compute LAOS rewards.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", help="YAML file with run settings.")
    parser.add_argument("--rpc-url", help="Relay chain HTTP RPC endpoint.")
    parser.add_argument("--para-id", type=int, help="Parachain whose crowdloan is reconciled.")
    parser.add_argument("--end-block", type=int, help="Block height at which the crowdloan closed.")
    parser.add_argument("--contributors-file", help="Off-chain 'address,amount' contributions file.")
    parser.add_argument("--output-dir", help="Directory the reports are written to.")
    parser.add_argument("--child-key", help="Use this child trie key instead of deriving it.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(args.log_level.upper())

    try:
        config = load_config(
            args.config,
            {
                "rpc_url": args.rpc_url,
                "para_id": args.para_id,
                "end_block": args.end_block,
                "contributors_file": args.contributors_file,
                "output_dir": args.output_dir,
                "child_key": args.child_key,
            },
        )
    except (OSError, ValueError, TypeError) as e:
        logging.critical(f"Failed to load configuration: {e}")
        return 1

    client = None
    try:
        client = ChainClient(config.rpc_url, timeout=config.request_timeout)
        result = run_pipeline(config, client)
    except (
        CrowdloanError,
        SubstrateRequestException,
        WebSocketException,
        requests.RequestException,
        OSError,
        ValueError,
    ):
        logging.exception("Crowdloan rewards run failed")
        return 1
    finally:
        if client is not None:
            client.close()

    logging.info("***************************************************************")
    logging.info(
        "----> %d rewards totalling %d LAOS units saved to %s <----",
        len(result.rewards), result.rewards_total, config.output_dir,
    )
    logging.info("***************************************************************")
    return 0


if __name__ == "__main__":
    sys.exit(main())
