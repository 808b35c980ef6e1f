"""
nftgate.chain.abi — Contract ABI fragments
===========================================

Only the view functions the verifier calls.  Kept as Python literals so no
JSON files need to ship with the package.
"""

from __future__ import annotations

NFT_ABI: list[dict] = [
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

STAKING_ABI: list[dict] = [
    {
        "inputs": [{"name": "_staker", "type": "address"}],
        "name": "getStakerInfo",
        "outputs": [
            {"name": "stakedTokens", "type": "uint256[]"},
            {"name": "totalPoints", "type": "uint256"},
            {"name": "tier", "type": "uint256"},
            {"name": "isMinter", "type": "bool"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]
