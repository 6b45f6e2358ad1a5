import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from crowdloan_rewards.address import normalize_address
from crowdloan_rewards.config import load_config
from crowdloan_rewards.errors import CrowdloanError
from crowdloan_rewards.fetch import iter_contributor_lines
from crowdloan_rewards.reporting import format_address_map, write_lines


def build_address_map(path, source_prefix: int, target_prefix: int) -> dict:
    """
    Map each distinct contributor address in ``path`` to its canonical form.
    """
    mapping = {}
    for _, raw_address, _ in iter_contributor_lines(path):
        mapping[raw_address] = normalize_address(raw_address, source_prefix, target_prefix)
    return mapping


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    parser = argparse.ArgumentParser(
        description="Map Bifrost contributor addresses to their Polkadot encoding.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", help="YAML file with run settings.")
    parser.add_argument("--contributors-file", help="Off-chain 'address,amount' contributions file.")
    parser.add_argument("--output", type=Path, help="Markdown file to write the mapping to.")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, {"contributors_file": args.contributors_file})
        output = args.output or Path(config.output_dir) / config.address_map_file
        logging.info("Parsing Bifrost contributions and creating map to Polkadot addresses...")
        mapping = build_address_map(
            config.contributors_file, config.contributors_prefix, config.canonical_prefix
        )
        write_lines(output, format_address_map(mapping.items()))
    except (CrowdloanError, OSError, ValueError):
        logging.exception("Address mapping failed")
        return 1

    logging.info("...%s has been generated with %d entries.", output, len(mapping))
    return 0


if __name__ == "__main__":
    sys.exit(main())
