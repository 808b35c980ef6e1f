"""
tests/test_chain_client.py — Web3ChainClient Tests
===================================================
Contract calls are mocked; no RPC endpoint is needed.
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest
from web3 import Web3
from web3.exceptions import ContractLogicError

from nftgate.chain.client import Web3ChainClient, checksum_address, parse_staker_info
from nftgate.core.models import StakerInfo
from nftgate.errors import ChainUnreachable, ContractReverted, InvalidAddress

NFT = "0x485242262f1e367144fe432ba858f9ef6f491334"
STAKING = "0xdDbcC239527Dedd5E0c761042ef02A7951cEC315"
HOLDER = "0x00000000219ab540356cbb839cbe05303d7705fa"


@pytest.fixture
def contracts():
    return {"nft": MagicMock(name="nft"), "staking": MagicMock(name="staking")}


@pytest.fixture
def chain_client(contracts) -> Web3ChainClient:
    w3 = MagicMock()
    w3.eth.contract.side_effect = [contracts["nft"], contracts["staking"]]
    return Web3ChainClient("http://rpc.invalid", NFT, STAKING, web3=w3)


class TestAddressHandling:
    def test_checksums_valid_address(self):
        assert checksum_address(HOLDER) == Web3.to_checksum_address(HOLDER)

    @pytest.mark.parametrize("bad", ["", "0x123", "not-an-address", "0xZZ000000219ab540356cbb839cbe05303d7705fa"])
    def test_rejects_malformed(self, bad):
        with pytest.raises(InvalidAddress):
            checksum_address(bad)

    def test_invalid_address_never_hits_rpc(self, chain_client, contracts):
        with pytest.raises(InvalidAddress):
            asyncio.run(chain_client.get_nft_balance("0x123"))
        contracts["nft"].functions.balanceOf.assert_not_called()


class TestCalls:
    def test_balance_is_native_int(self, chain_client, contracts):
        contracts["nft"].functions.balanceOf.return_value.call.return_value = 3
        assert asyncio.run(chain_client.get_nft_balance(HOLDER)) == 3
        contracts["nft"].functions.balanceOf.assert_called_once_with(
            Web3.to_checksum_address(HOLDER)
        )

    def test_staker_info_parsed(self, chain_client, contracts):
        contracts["staking"].functions.getStakerInfo.return_value.call.return_value = (
            [7, 8], 1500, 2, True,
        )
        info = asyncio.run(chain_client.get_staker_info(HOLDER))
        assert info == StakerInfo(staked_token_ids=(7, 8), total_points=1500, tier=2, is_minter=True)

    def test_parse_staker_info_empty(self):
        assert parse_staker_info([[], 0, 0, False]) == StakerInfo()


class TestErrorMapping:
    def test_revert(self, chain_client, contracts):
        contracts["nft"].functions.balanceOf.return_value.call.side_effect = (
            ContractLogicError("execution reverted")
        )
        with pytest.raises(ContractReverted) as excinfo:
            asyncio.run(chain_client.get_nft_balance(HOLDER))
        assert isinstance(excinfo.value.__cause__, ContractLogicError)

    def test_unreachable(self, chain_client, contracts):
        contracts["staking"].functions.getStakerInfo.return_value.call.side_effect = (
            ConnectionError("connection refused")
        )
        with pytest.raises(ChainUnreachable):
            asyncio.run(chain_client.get_staker_info(HOLDER))
