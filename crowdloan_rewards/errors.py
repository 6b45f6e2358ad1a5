"""
Exception hierarchy for the crowdloan rewards pipeline.

Every stage lets these propagate; only the command-line entry points turn
them into a non-zero exit status.
"""


class CrowdloanError(Exception):
    """Base exception for the crowdloan rewards pipeline."""
    pass


class DecodeError(CrowdloanError):
    """An address or SCALE value could not be decoded."""
    pass


class BlockNotFoundError(CrowdloanError):
    """The requested block height is unknown to the node."""

    def __init__(self, height: int):
        super().__init__(f"Block #{height} not found (pruned or not yet produced)")
        self.height = height


class FundNotFoundError(CrowdloanError):
    """No crowdloan fund is registered for the parachain at the pinned block."""

    def __init__(self, para_id: int, block_hash: str):
        super().__init__(f"No crowdloan fund for para {para_id} at {block_hash}")
        self.para_id = para_id
        self.block_hash = block_hash


class MissingContributionError(CrowdloanError):
    """An enumerated contributor key has no stored contribution."""

    def __init__(self, key: str):
        super().__init__(f"No contribution amount found for key: {key}")
        self.key = key


class ParseError(CrowdloanError):
    """A line of the off-chain contributors file is malformed."""

    def __init__(self, source: str, line_number: int, reason: str):
        super().__init__(f"{source}:{line_number}: {reason}")
        self.source = source
        self.line_number = line_number
        self.reason = reason


class IntegrityError(CrowdloanError):
    """Merged contributions would double- or under-report amounts."""
    pass


class RpcError(CrowdloanError):
    """The node answered a JSON-RPC call with an error object."""

    def __init__(self, method: str, error):
        super().__init__(f"RPC error from {method}: {error}")
        self.method = method
        self.error = error
