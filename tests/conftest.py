from typing import Dict, List

import pytest

from crowdloan_rewards.address import encode_address
from crowdloan_rewards.errors import BlockNotFoundError, FundNotFoundError
from crowdloan_rewards.storage import crowdloan_child_key, to_hex

ALICE_PUBLIC_KEY = "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"
END_BLOCK = 20549306
PARA_ID = 3370
FUND_INDEX = 71
BLOCK_HASH = "0x" + "ab" * 32


def public_key(seed: int) -> bytes:
    return bytes([seed]) * 32


def encode_contribution(amount: int, memo: bytes = b"") -> str:
    return to_hex(amount.to_bytes(16, "little") + bytes([len(memo) << 2]) + memo)


class FakeChainClient:
    """In-memory stand-in for ChainClient pinned to one block."""

    def __init__(self, contributions: Dict[bytes, int], fund_index: int = FUND_INDEX):
        self.blocks = {END_BLOCK: BLOCK_HASH}
        self.funds = {PARA_ID: fund_index}
        self.child_key = crowdloan_child_key(fund_index)
        self.child_storage = {
            to_hex(key): encode_contribution(amount) for key, amount in contributions.items()
        }
        self.reads: List[str] = []
        self.closed = False

    def get_block_hash(self, height):
        if height not in self.blocks:
            raise BlockNotFoundError(height)
        return self.blocks[height]

    def get_fund_index(self, para_id, at):
        self.reads.append(at)
        if para_id not in self.funds:
            raise FundNotFoundError(para_id, at)
        return self.funds[para_id]

    def get_child_keys(self, child_key, at, page_size=1000):
        self.reads.append(at)
        if child_key != self.child_key:
            return []
        return list(self.child_storage)

    def get_child_storage(self, child_key, key, at):
        self.reads.append(at)
        return self.child_storage.get(key)

    def close(self):
        self.closed = True


@pytest.fixture
def keys():
    return {name: public_key(seed) for seed, name in enumerate(["A", "AGG", "X", "Y"], start=1)}


@pytest.fixture
def polkadot(keys):
    return {name: encode_address(key, 0) for name, key in keys.items()}


@pytest.fixture
def bifrost(keys):
    return {name: encode_address(key, 6) for name, key in keys.items()}


@pytest.fixture
def fake_client(keys):
    return FakeChainClient({keys["A"]: 1000_0000000000, keys["AGG"]: 300_0000000000})


@pytest.fixture
def contributors_file(tmp_path, bifrost):
    path = tmp_path / "bifrost_contributors"
    path.write_text(f"{bifrost['X']},100\n{bifrost['Y']},200\n", encoding="utf-8")
    return path
