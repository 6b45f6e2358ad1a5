from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple

from .rewards import RewardPolicy, move_decimal_point

logger = logging.getLogger(__name__)

SUMMARY_HEADER = "| Contributor Address | DOT contributed | Entitled LAOS Rewards |"
SUMMARY_DIVIDER = "|----------|----------|-------------|"
ADDRESS_MAP_HEADER = "| Bifrost Address | Polkadot Address |"
ADDRESS_MAP_DIVIDER = "|----------|-------------|"


@dataclass(slots=True)
class ReportNames:
    contributions: str = "contributions.txt"
    rewards: str = "rewards.txt"
    summary: str = "crowdloan.md"


def format_mapping_lines(mapping: Mapping[str, int]) -> List[str]:
    return [f"|{address}|{amount}|" for address, amount in mapping.items()]


def format_summary(
    contributions: Mapping[str, int],
    rewards: Mapping[str, int],
    policy: RewardPolicy,
) -> List[str]:
    """
    Build the human readable markdown table of contributions and rewards.
    """
    lines = [SUMMARY_HEADER, SUMMARY_DIVIDER]
    for address, amount in contributions.items():
        contributed = move_decimal_point(amount, policy.source_decimals)
        reward = move_decimal_point(rewards[address], policy.target_decimals)
        lines.append(f"|{address}|{contributed}|{reward}")
    return lines


def format_address_map(pairs: Iterable[Tuple[str, str]]) -> List[str]:
    lines = [ADDRESS_MAP_HEADER, ADDRESS_MAP_DIVIDER]
    lines.extend(f"|{source}|{canonical}|" for source, canonical in pairs)
    return lines


def write_lines(path: str | Path, lines: List[str]) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as fh:
        fh.write("\n".join(lines))
    return output


def write_reports(
    contributions: Mapping[str, int],
    rewards: Mapping[str, int],
    policy: RewardPolicy,
    output_dir: str | Path,
    names: ReportNames | None = None,
) -> Dict[str, Path]:
    """
    Write the contributions, rewards and summary artifacts to ``output_dir``.
    """
    names = names or ReportNames()
    base = Path(output_dir)
    written: Dict[str, Path] = {}

    written["contributions"] = write_lines(base / names.contributions, format_mapping_lines(contributions))
    logger.info("%s has been generated with %d entries.", names.contributions, len(contributions))

    written["summary"] = write_lines(base / names.summary, format_summary(contributions, rewards, policy))
    logger.info("%s has been generated with %d entries.", names.summary, len(contributions))

    written["rewards"] = write_lines(base / names.rewards, format_mapping_lines(rewards))
    logger.info("%s has been generated with %d entries.", names.rewards, len(rewards))

    return written
