import pytest

from conftest import BLOCK_HASH, END_BLOCK, PARA_ID, FakeChainClient
from crowdloan_rewards.errors import (
    BlockNotFoundError,
    DecodeError,
    FundNotFoundError,
    MissingContributionError,
    ParseError,
)
from crowdloan_rewards.fetch import (
    fetch_onchain_contributions,
    parse_amount,
    parse_contributors_file,
)


class TestOnchain:

    def test_fetches_all_contributions(self, fake_client, polkadot):
        block_hash, contributions = fetch_onchain_contributions(fake_client, PARA_ID, END_BLOCK)
        assert block_hash == BLOCK_HASH
        assert contributions == {polkadot["A"]: 1000_0000000000, polkadot["AGG"]: 300_0000000000}
        assert list(contributions) == [polkadot["A"], polkadot["AGG"]]

    def test_every_read_pinned_to_end_block(self, fake_client):
        fetch_onchain_contributions(fake_client, PARA_ID, END_BLOCK)
        assert fake_client.reads
        assert set(fake_client.reads) == {BLOCK_HASH}

    def test_unknown_block(self, fake_client):
        with pytest.raises(BlockNotFoundError):
            fetch_onchain_contributions(fake_client, PARA_ID, END_BLOCK + 1)

    def test_unknown_fund(self, fake_client):
        with pytest.raises(FundNotFoundError):
            fetch_onchain_contributions(fake_client, PARA_ID + 1, END_BLOCK)

    def test_child_key_override_skips_fund_lookup(self, keys, polkadot):
        client = FakeChainClient({keys["A"]: 5}, fund_index=9)
        client.funds.clear()
        _, contributions = fetch_onchain_contributions(
            client, PARA_ID, END_BLOCK, child_key=client.child_key
        )
        assert contributions == {polkadot["A"]: 5}

    def test_missing_value_is_fatal(self, fake_client):
        fake_client.child_storage[next(iter(fake_client.child_storage))] = None
        with pytest.raises(MissingContributionError):
            fetch_onchain_contributions(fake_client, PARA_ID, END_BLOCK)

    def test_prefix_controls_encoding(self, fake_client, bifrost):
        _, contributions = fetch_onchain_contributions(fake_client, PARA_ID, END_BLOCK, prefix=6)
        assert bifrost["A"] in contributions


class TestParseAmount:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("5", 5 * 10**10),
            ("12.5", 125 * 10**9),
            ("0.0000000001", 1),
            ("1.2345", 12345000000),
            ("0.1", 10**9),
        ],
    )
    def test_exact_conversion(self, text, expected):
        assert parse_amount(text) == expected

    def test_excess_precision_rounds_half_up(self):
        assert parse_amount("0.00000000005") == 1
        assert parse_amount("0.00000000004") == 0

    def test_large_amount_is_exact(self):
        text = "123456789012345678.9876543210"
        assert parse_amount(text) == 1234567890123456789876543210

    @pytest.mark.parametrize("text", ["", "abc", "-1", "1e3", "1.", ".5", "1,5", "NaN"])
    def test_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)


class TestContributorsFile:

    def test_parses_and_normalizes(self, contributors_file, polkadot):
        assert parse_contributors_file(contributors_file) == {
            polkadot["X"]: 100_0000000000,
            polkadot["Y"]: 200_0000000000,
        }

    def test_duplicate_lines_are_summed(self, tmp_path, bifrost, polkadot):
        path = tmp_path / "contributors"
        path.write_text(f"{bifrost['X']},1.5\n\n{bifrost['X']},2.25\n", encoding="utf-8")
        assert parse_contributors_file(path) == {polkadot["X"]: 375 * 10**8}

    def test_missing_comma(self, tmp_path, bifrost):
        path = tmp_path / "contributors"
        path.write_text(f"{bifrost['X']},1\n{bifrost['Y']} 2\n", encoding="utf-8")
        with pytest.raises(ParseError) as excinfo:
            parse_contributors_file(path)
        assert excinfo.value.line_number == 2

    def test_non_numeric_amount(self, tmp_path, bifrost):
        path = tmp_path / "contributors"
        path.write_text(f"{bifrost['X']},lots\n", encoding="utf-8")
        with pytest.raises(ParseError, match="lots"):
            parse_contributors_file(path)

    def test_address_under_wrong_prefix(self, tmp_path, polkadot):
        path = tmp_path / "contributors"
        path.write_text(f"{polkadot['X']},1\n", encoding="utf-8")
        with pytest.raises(DecodeError):
            parse_contributors_file(path, source_prefix=6)
