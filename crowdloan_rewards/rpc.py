from __future__ import annotations

import logging
from typing import Any, List, Optional

from substrateinterface import SubstrateInterface
from substrateinterface.exceptions import SubstrateRequestException

from .errors import BlockNotFoundError, DecodeError, FundNotFoundError, RpcError
from .models import RPCResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class ChainClient:
    """
    Read-only relay chain access on top of ``SubstrateInterface``.

    Calls are issued one at a time; there is no retry. State reads take an
    explicit block hash so a run can pin every read to one snapshot.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        substrate: Optional[SubstrateInterface] = None,
    ):
        self.url = url
        self.substrate = substrate or SubstrateInterface(url=url, ws_options={"timeout": timeout})

    def __enter__(self) -> "ChainClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.substrate.close()

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        logger.debug("RPC %s %s", method, params or [])
        try:
            data = self.substrate.rpc_request(method, params or [])
        except SubstrateRequestException as exc:
            raise RpcError(method, exc) from exc
        response = RPCResponse.from_dict(data)
        if response.is_error():
            raise RpcError(method, response.error)
        return response.result

    def get_block_hash(self, height: int) -> str:
        block_hash = self.call("chain_getBlockHash", [height])
        if not block_hash:
            raise BlockNotFoundError(height)
        return block_hash

    def get_fund_index(self, para_id: int, at: str) -> int:
        """
        Return the ``fund_index`` of ``para_id``'s crowdloan fund at block ``at``.
        """
        try:
            fund = self.substrate.query("Crowdloan", "Funds", [para_id], block_hash=at)
        except SubstrateRequestException as exc:
            raise RpcError("Crowdloan.Funds", exc) from exc
        info = fund.value if fund is not None else None
        if info is None:
            raise FundNotFoundError(para_id, at)
        # Older runtimes named the field trie_index.
        index = info.get("fund_index", info.get("trie_index"))
        if index is None:
            raise DecodeError(f"FundInfo for para {para_id} has no fund index: {info}")
        return int(index)

    def get_child_keys(self, child_key: str, at: str, page_size: int = 1000) -> List[str]:
        """
        Enumerate every key of a child trie, paging through ``childstate_getKeysPaged``.
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        keys: List[str] = []
        start_key = None
        while True:
            page = self.call(
                "childstate_getKeysPaged", [child_key, "0x", page_size, start_key, at]
            ) or []
            keys.extend(page)
            if len(page) < page_size:
                return keys
            start_key = page[-1]

    def get_child_storage(self, child_key: str, key: str, at: str) -> Optional[str]:
        return self.call("childstate_getStorage", [child_key, key, at])
