"""
nftgate.chain.client — On-Chain Holdings Lookup
================================================

The chain query capability used by the verification workflow:

- ``get_nft_balance(address)`` → directly held token count (ERC-721
  ``balanceOf``).
- ``get_staker_info(address)`` → :class:`StakerInfo` from the staking
  contract's ``getStakerInfo``.

:class:`Web3ChainClient` is backed by a synchronous ``web3.Web3`` over an
HTTP provider.  Each contract call is shipped to a worker thread with
``asyncio.to_thread`` so the API event loop never blocks on the RPC.

Failures are distinct:

- malformed address  → :class:`InvalidAddress`
- contract revert    → :class:`ContractReverted`
- transport failure  → :class:`ChainUnreachable`
- anything else web3 → :class:`ChainQueryFailed`
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol, TypeVar

from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from nftgate.chain.abi import NFT_ABI, STAKING_ABI
from nftgate.constants import DEFAULT_CHAIN_TIMEOUT_SECONDS
from nftgate.core.models import StakerInfo
from nftgate.errors import (
    ChainQueryFailed,
    ChainUnreachable,
    ContractReverted,
    InvalidAddress,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChainQuery(Protocol):
    """Capability interface the verification workflow depends on."""

    async def get_nft_balance(self, address: str) -> int: ...

    async def get_staker_info(self, address: str) -> StakerInfo: ...

    async def is_connected(self) -> bool: ...


def checksum_address(address: str) -> str:
    """Validate *address* and return its EIP-55 checksum form."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidAddress(str(address))
    return Web3.to_checksum_address(address)


def parse_staker_info(raw) -> StakerInfo:
    """Normalize the ``getStakerInfo`` return tuple to native Python types."""
    staked, points, tier, is_minter = raw
    return StakerInfo(
        staked_token_ids=tuple(int(token_id) for token_id in staked),
        total_points=int(points),
        tier=int(tier),
        is_minter=bool(is_minter),
    )


class Web3ChainClient:
    """:class:`ChainQuery` implementation over a JSON-RPC endpoint."""

    def __init__(
        self,
        rpc_url: str,
        nft_address: str,
        staking_address: str,
        *,
        timeout: float = DEFAULT_CHAIN_TIMEOUT_SECONDS,
        web3: Web3 | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.w3 = web3 or Web3(
            Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout})
        )
        self.nft_contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(nft_address), abi=NFT_ABI,
        )
        self.staking_contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(staking_address), abi=STAKING_ABI,
        )

    async def get_nft_balance(self, address: str) -> int:
        owner = checksum_address(address)
        balance = await self._call(
            "balanceOf", self.nft_contract.functions.balanceOf(owner).call,
        )
        return int(balance)

    async def get_staker_info(self, address: str) -> StakerInfo:
        staker = checksum_address(address)
        raw = await self._call(
            "getStakerInfo", self.staking_contract.functions.getStakerInfo(staker).call,
        )
        return parse_staker_info(raw)

    async def is_connected(self) -> bool:
        try:
            return bool(await asyncio.to_thread(self.w3.is_connected))
        except Exception:
            logger.warning("RPC connectivity check failed for %s", self.rpc_url, exc_info=True)
            return False

    async def _call(self, name: str, fn: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(fn)
        except ContractLogicError as exc:
            logger.warning("%s reverted: %s", name, exc)
            raise ContractReverted(str(exc)) from exc
        except OSError as exc:
            # requests' ConnectionError / Timeout are OSError subclasses.
            logger.warning("%s failed, RPC unreachable: %s", name, exc)
            raise ChainUnreachable(str(exc)) from exc
        except (Web3Exception, ValueError) as exc:
            logger.warning("%s failed: %s", name, exc)
            raise ChainQueryFailed(reason=str(exc)) from exc
